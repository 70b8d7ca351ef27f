"""
Spatial indexing for GeoReverse.
"""

from GeoReverse.spatial.kdtree import SpatialIndex

__all__ = ['SpatialIndex']
