"""
Spatial geometry provider interface.

The selector only ever asks a provider three things: whether a boundary
contains a point, which region (if any) contains a point, and what value a
region holds for an attribute. Backends differ only in how they find
candidate regions.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from geoselect.models import AttributeValue, Coordinate, Point, Region


class GeometryProvider(ABC):
    """Deterministic point-in-polygon backend.

    Points lying on a boundary are contained by it. When a point lies on an
    edge shared by several regions, `locate` returns the first of them in the
    order the regions were given.
    """

    name: str = "base"

    @abstractmethod
    def contains(self, boundary: Sequence[Coordinate], point: Point) -> bool:
        """Return True if the polygon described by `boundary` covers `point`."""

    def locate(self, regions: Sequence[Region], point: Point) -> Optional[Region]:
        """Return the first region containing `point`, or None."""
        for region in regions:
            if self.contains(region.boundary, point):
                return region
        return None

    def locate_many(self, regions: Sequence[Region], points: Sequence[Point]) -> List[Optional[Region]]:
        """Locate every point. The result is aligned with `points`."""
        return [self.locate(regions, point) for point in points]

    def attribute(self, region: Region, key: str) -> AttributeValue:
        return region.attribute(key)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
