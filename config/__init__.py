"""
Configuration Module for the Invoice Regeneration System.

This module provides centralized configuration management using YAML files.
Anchor literals, VAT tables, currency formatting and paths are all
controlled through settings.yaml and loaded once per process.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from invoice_regen.utils.exceptions import ConfigurationError


class ConfigurationManager:
    """
    Centralized configuration management for the invoice regeneration system.

    This class handles loading and providing access to all configuration
    parameters defined in settings.yaml. The loaded configuration is treated
    as read-only after startup.

    Attributes:
        config_path (Path): Path to the configuration file.
        config (Dict): Loaded configuration dictionary.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("anchors.bill_to")
        'Bill to:'
        >>> config.get("currency.symbol")
        '€'
    """

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}
    _derived: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        """
        Singleton pattern to ensure only one configuration instance exists.

        Args:
            config_path: Optional path to configuration file.

        Returns:
            ConfigurationManager instance.
        """
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Optional path to configuration file.
                        Defaults to config/settings.yaml.
        """
        if self._initialized:
            return

        if config_path is None:
            self.config_path = Path(__file__).parent / "settings.yaml"
        else:
            self.config_path = Path(config_path)

        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        """
        Load configuration from YAML file.

        Raises:
            ConfigurationError: If the file is missing or not valid YAML.
        """
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}",
                {"path": str(self.config_path)}
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid configuration file: {self.config_path}",
                {"path": str(self.config_path), "reason": str(e)}
            ) from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self.config_path}",
                {"path": str(self.config_path)}
            )

        self._config = loaded
        self._derived = {}
        self._resolve_paths()

    def _resolve_paths(self) -> None:
        """
        Resolve relative paths in configuration to absolute paths.
        Uses the current working directory as base, like the batch driver.
        """
        base = Path.cwd()

        if 'paths' in self._config:
            for key, value in self._config['paths'].items():
                if value and not Path(value).is_absolute():
                    self._config['paths'][key] = str(base / value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "vat.default_country").
            default: Default value if key doesn't exist.

        Returns:
            Configuration value or default.

        Example:
            >>> config.get("currency.precision")
            2
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_all(self) -> Dict[str, Any]:
        """
        Get the complete configuration dictionary.

        Returns:
            Complete configuration dictionary.
        """
        return self._config.copy()

    def cached(self, name: str, factory: Callable[[], Any]) -> Any:
        """
        Return an object built from the configuration, building it once.

        Built objects are dropped on reload and on reset, so they never
        outlive the configuration they were read from.

        Args:
            name: Cache key.
            factory: Zero-argument builder called on first use.

        Returns:
            The cached object.
        """
        if name not in self._derived:
            self._derived[name] = factory()
        return self._derived[name]

    def clear_cache(self) -> None:
        """Drop objects built by cached()."""
        self._derived = {}

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    @classmethod
    def reset(cls) -> None:
        """
        Reset the singleton instance.
        Useful for testing or switching configuration files.
        """
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get configuration values.

    Args:
        key: Configuration key in dot notation.
        default: Default value if key doesn't exist.

    Returns:
        Configuration value or default.
    """
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config']
