"""
Services layer for GeoReverse.

This package contains service classes shared by the CLI and API layers.
"""

from GeoReverse.services.geocode_service import GeocodeService

__all__ = ['GeocodeService']
