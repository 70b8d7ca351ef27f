"""
GeoReverse - Offline reverse geocoding of coordinates to the nearest city.

This module answers "which city is nearest to (latitude, longitude)?" from the
GeoNames cities dataset, annotated with country, state and county names.

Key Components:
- GeocodeService: Builds (or restores) the city records and serves queries
- SpatialIndex: 2-D k-d tree used for nearest-neighbour lookup
- API Server: REST API for reverse geocoding over HTTP
- CLI: Command-line interface for queries and snapshot management

Usage Examples:
    # Basic usage with GeocodeService
    from GeoReverse import GeocodeService
    with GeocodeService(min_population=1000) as service:
        city = service.query(48.8566, 2.3522)[0]

    # Starting the API server
    from GeoReverse import start_server
    start_server(host='localhost', port=8080)

    # Setting the log level
    from GeoReverse import set_log_level
    set_log_level('debug')
"""

# Import configuration system first
from GeoReverse.config import get_config

# Import and configure logging early
from GeoReverse.utils.logging import get_logger, set_log_level, set_service_version

__version__ = '1.0.0'

set_service_version(__version__)

# Get a logger for the main package
logger = get_logger(__name__)

def initialize_config() -> bool:
    """
    Initialize the GeoReverse configuration system.

    This function searches for a configuration file in standard locations
    and loads it if found. If not found, defaults are used.

    Returns:
        bool: True if a config file was found and loaded, False if using defaults
    """
    logger.debug("Initializing configuration system")
    return get_config().load_config()

# Imported after logging is configured
from GeoReverse.data.models import LocationRecord
from GeoReverse.spatial import SpatialIndex
from GeoReverse.services.geocode_service import GeocodeService
from GeoReverse.api.server import start_server

__all__ = [
    'GeocodeService',
    'LocationRecord',
    'SpatialIndex',
    'start_server',
    'initialize_config',
    'set_log_level',
    'get_config',
]
