"""
GeoReverse Configuration System.

This package provides a centralized configuration system for GeoReverse with
support for hierarchical keys, deep merging, and validation.

Usage:
    from GeoReverse.config import get_config

    # Get a configuration value
    threshold = get_config().get("data.min_population")

    # Set a configuration value
    get_config().set("logging.level", "debug")

    # Load configuration from standard locations
    get_config().load_config()
"""

from GeoReverse.config.manager import ConfigManager, get_config
from GeoReverse.config.schema import validate_config
from GeoReverse.config.utils import deep_merge

__all__ = ["ConfigManager", "get_config", "validate_config", "deep_merge"]
