"""
Brute-force provider: every region is tested in input order.
"""

from functools import lru_cache
from typing import Sequence, Tuple

from shapely.geometry import Polygon
from shapely.prepared import PreparedGeometry, prep

from geoselect.models import Coordinate, Point
from geoselect.providers.base import GeometryProvider


@lru_cache(maxsize=4096)
def _prepared_polygon(boundary: Tuple[Coordinate, ...]) -> PreparedGeometry:
    return prep(Polygon(boundary))


class ShapelyProvider(GeometryProvider):
    """Tests each region with a prepared shapely polygon."""

    name = "shapely"

    def contains(self, boundary: Sequence[Coordinate], point: Point) -> bool:
        polygon = _prepared_polygon(tuple(map(tuple, boundary)))
        return polygon.covers(point.geometry)
