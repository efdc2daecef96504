"""
Point-in-polygon region selection.
"""

from .errors import GeoSelectError, InvalidRegionCollection, MalformedGeometry
from .models import Point, Region
from .providers import GeometryProvider, ShapelyProvider, STRtreeProvider, get_provider
from .selector import locate_points, select_regions, select_regions_gdf, validate_regions

__all__ = [
    'GeoSelectError',
    'InvalidRegionCollection',
    'MalformedGeometry',
    'Point',
    'Region',
    'GeometryProvider',
    'ShapelyProvider',
    'STRtreeProvider',
    'get_provider',
    'locate_points',
    'select_regions',
    'select_regions_gdf',
    'validate_regions',
]
