"""
Spatially indexed provider built on shapely's STRtree.
"""

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np
import shapely
from shapely import STRtree

from geoselect.models import Coordinate, Point, Region
from geoselect.providers.base import GeometryProvider

logger = logging.getLogger(__name__)


class STRtreeProvider(GeometryProvider):
    """Finds candidate regions with an R-tree before the exact test.

    One index is kept for the most recently queried region collection and is
    rebuilt when a different collection is passed.
    """

    name = "strtree"

    def __init__(self):
        self._key: Optional[Tuple] = None
        self._tree: Optional[STRtree] = None

    def contains(self, boundary: Sequence[Coordinate], point: Point) -> bool:
        return bool(shapely.covers(shapely.polygons(list(boundary)), point.geometry))

    def _index(self, regions: Sequence[Region]) -> STRtree:
        key = tuple((region.identifier, region.boundary) for region in regions)
        if key != self._key:
            logger.debug(f"Building STRtree over {len(regions)} regions")
            self._tree = STRtree([region.polygon for region in regions])
            self._key = key
        return self._tree

    def locate(self, regions: Sequence[Region], point: Point) -> Optional[Region]:
        return self.locate_many(regions, [point])[0]

    def locate_many(self, regions: Sequence[Region], points: Sequence[Point]) -> List[Optional[Region]]:
        if len(points) == 0 or len(regions) == 0:
            return [None] * len(points)

        tree = self._index(regions)
        geoms = shapely.points([(point.x, point.y) for point in points])
        point_idx, region_idx = tree.query(geoms, predicate="covered_by")

        # Lowest region index wins so shared edges resolve to the first region
        first = np.full(len(points), len(regions), dtype=np.int64)
        np.minimum.at(first, point_idx, region_idx)

        return [regions[i] if i < len(regions) else None for i in first]
