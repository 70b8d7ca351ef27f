"""
Default configuration values for GeoReverse.

This module defines the default configuration settings used when no custom
configuration is provided. These values serve as fallbacks and define the
base configuration structure.

Default configuration values can be overridden by:
1. Configuration files (georeverse.yml)
2. Programmatic configuration via the ConfigManager
"""

from typing import Dict, Any

GEONAMES_DUMP_URL = "http://download.geonames.org/export/dump"

# Default data configuration
DATA_DEFAULTS: Dict[str, Any] = {
    # Directory holding the snapshot (null = GEOREVERSE_DATA_DIR, ~/.georeverse/data or package dir)
    "directory": None,
    # Snapshot file name, relative to the data directory unless absolute
    "snapshot_file": "geocode.gz",
    # Country code/name CSV (null = the copy shipped with the package)
    "country_file": None,
    # Drop cities below this population from the index (0 = keep everything)
    "min_population": 0,
    # GeoNames city archive and the member to extract from it
    "cities_url": f"{GEONAMES_DUMP_URL}/cities1000.zip",
    "cities_member": "cities1000.txt",
    # GeoNames admin1 (state) and admin2 (county) code tables
    "state_codes_url": f"{GEONAMES_DUMP_URL}/admin1CodesASCII.txt",
    "county_codes_url": f"{GEONAMES_DUMP_URL}/admin2Codes.txt",
    # Socket timeout in seconds for each download
    "download_timeout": 60
}

# Default logging configuration
LOGGING_DEFAULTS: Dict[str, Any] = {
    # Logging level: 'debug', 'info', 'warning', 'error', 'critical'
    "level": "info",
    # Logging format: 'json', 'text'
    "format": "text",
    # Log file path (null = log to stderr)
    "file": None
}

# Default API configuration
API_DEFAULTS: Dict[str, Any] = {
    # Host to bind the API server to
    "host": "0.0.0.0",
    # Port to run the API server on
    "port": 5000,
    # Enable debug mode for development
    "debug": False
}

# Complete default configuration structure
DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "data": DATA_DEFAULTS,
    "logging": LOGGING_DEFAULTS,
    "api": API_DEFAULTS
}
