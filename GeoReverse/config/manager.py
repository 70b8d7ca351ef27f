"""
Configuration manager for GeoReverse.

This module implements the ConfigManager class that provides a centralized
configuration system with support for hierarchical keys, deep merging, and
loading from files.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union, List

import yaml

from GeoReverse.config.defaults import DEFAULT_CONFIG
from GeoReverse.config.schema import validate_config
from GeoReverse.config.utils import deep_merge
from GeoReverse.utils.logging import get_logger

CONFIG_FILENAME = 'georeverse.yml'

class ConfigManager:
    """
    Configuration manager for GeoReverse.

    Implements a singleton pattern to ensure only one configuration
    instance exists across the application.

    Features:
    - Hierarchical key access (e.g., "data.min_population")
    - Deep merging of configuration dictionaries
    - Loading from YAML or JSON files
    - Configuration validation

    Attributes:
        _instance (ConfigManager): The singleton instance
        _config (Dict[str, Any]): The configuration dictionary
        logger: The logger instance
    """
    _instance = None

    def __new__(cls) -> 'ConfigManager':
        """
        Implement singleton pattern to ensure only one configuration manager exists.

        Returns:
            ConfigManager: The singleton instance of the ConfigManager.
        """
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Reset the configuration to the default values."""
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self.logger = get_logger(__name__)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key (str): Hierarchical key using dot notation (e.g., "data.snapshot_file")
            default (Any, optional): Default value to return if key is not found. Defaults to None.

        Returns:
            Any: The configuration value if found, otherwise the default value.

        Examples:
            >>> config = get_config()
            >>> threshold = config.get("data.min_population", 0)
            >>> api_port = config.get("api.port", 5000)
        """
        if not key:
            return default

        value = self._config
        for part in key.split('.'):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value using dot notation.

        Creates intermediate dictionaries if they don't exist.

        Args:
            key (str): Hierarchical key using dot notation (e.g., "data.min_population")
            value (Any): Value to set
        """
        if not key:
            return

        parts = key.split('.')
        config = self._config

        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def get_data_location(self) -> Optional[str]:
        """
        Get the configured data directory.

        Returns:
            Optional[str]: The configured directory or None to use the default lookup
        """
        return self.get("data.directory")

    def get_min_population(self) -> int:
        """Get the population threshold applied to the spatial index."""
        return self.get("data.min_population", 0)

    def get_source_urls(self) -> Dict[str, str]:
        """
        Get the URLs of the raw GeoNames reference files.

        Returns:
            Dict[str, str]: Mapping with keys cities, state_codes and county_codes
        """
        return {
            "cities": self.get("data.cities_url"),
            "state_codes": self.get("data.state_codes_url"),
            "county_codes": self.get("data.county_codes_url"),
        }

    def find_config_file(self) -> Optional[Path]:
        """
        Find the configuration file in standard locations.

        Searches in the following order:
        1. Current working directory: ./georeverse.yml
        2. User's home directory: ~/.georeverse/georeverse.yml
        3. Package directory: [package_path]/data/georeverse.yml

        Returns:
            Optional[Path]: Path to the configuration file if found, None otherwise
        """
        search_locations = [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / '.georeverse' / CONFIG_FILENAME,
            Path(__file__).parent.parent / 'data' / CONFIG_FILENAME
        ]

        for path in search_locations:
            if path.is_file():
                self.logger.debug(f"Found configuration file at: {path}")
                return path

        self.logger.debug("No configuration file found in standard locations")
        return None

    def load_config(self) -> bool:
        """
        Load configuration from the first available standard location.

        If no file is found, or the file is invalid, the current
        configuration is left untouched.

        Returns:
            bool: True if a configuration file was found and loaded, False otherwise
        """
        config_path = self.find_config_file()

        if not config_path:
            self.logger.debug("No configuration file found, using defaults")
            return False

        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Failed to load configuration file {config_path}: {e}")
            return False

        errors = validate_config(config)
        if errors:
            self.logger.warning(f"Configuration validation errors in {config_path}: {errors}")
            return False

        self._config = deep_merge(copy.deepcopy(DEFAULT_CONFIG), config)
        self.logger.info(f"Loaded configuration from {config_path}")
        return True

    def load_from_file(self, path: Union[str, Path]) -> Dict[str, List[str]]:
        """
        Load configuration from a specific YAML or JSON file.

        The file is merged over the current configuration only when it
        validates cleanly.

        Args:
            path (Union[str, Path]): Path to the configuration file

        Returns:
            Dict[str, List[str]]: Dictionary of validation errors, if any

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file extension is not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        if path.suffix.lower() in ('.yaml', '.yml'):
            with open(path, 'r') as f:
                config = yaml.safe_load(f) or {}
        elif path.suffix.lower() == '.json':
            with open(path, 'r') as f:
                config = json.load(f)
        else:
            raise ValueError(f"Unsupported configuration file format: {path.suffix}")

        errors = validate_config(config)

        if not errors:
            self._config = deep_merge(self._config, config)

        return errors

    def get_all(self) -> Dict[str, Any]:
        """
        Get a copy of the entire configuration dictionary.

        Returns:
            Dict[str, Any]: The entire configuration dictionary
        """
        return copy.deepcopy(self._config)


def get_config() -> ConfigManager:
    """
    Get the singleton ConfigManager instance.

    Returns:
        ConfigManager: The singleton ConfigManager instance

    Examples:
        >>> from GeoReverse.config import get_config
        >>> get_config().get("data.snapshot_file")
        'geocode.gz'
    """
    return ConfigManager()
