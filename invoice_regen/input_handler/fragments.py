"""
Fragment Stream Data Classes.

This module defines the data structure handed from text extraction to
the anchor extractor: ordered rows of ordered, non-empty text fragments.

Author: Invoice Tooling Team
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional


@dataclass
class FragmentStream:
    """
    Ordered rows of text fragments extracted from one document.

    Fragment order is significant both across and within rows and is
    never changed once the stream is built. Empty fragments are dropped
    on construction.

    Attributes:
        rows: List of rows, each a list of fragment strings.
        source: Optional name of the originating document.

    Example:
        >>> stream = FragmentStream.from_rows([["Invoice", "PAID", "Bill to:"]])
        >>> len(stream)
        1
        >>> stream.fragment_count
        3
    """
    rows: List[List[str]] = field(default_factory=list)
    source: Optional[str] = None

    def __post_init__(self):
        self.rows = [[f for f in row if f] for row in self.rows]

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Iterable[str]],
        source: Optional[str] = None
    ) -> 'FragmentStream':
        """Build a stream from any iterable of fragment iterables."""
        return cls(rows=[list(row) for row in rows], source=source)

    @property
    def fragment_count(self) -> int:
        """Total number of fragments across all rows."""
        return sum(len(row) for row in self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[List[str]]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return (
            f"FragmentStream(source={self.source!r}, "
            f"rows={len(self.rows)}, fragments={self.fragment_count})"
        )
