"""
Random sample points inside regions and a per-region "sampled" flag.
"""

import logging
from typing import List, Optional, Sequence

import geopandas as gpd

from geoselect.models import Point, Region
from geoselect.providers import GeometryProvider
from geoselect.selector import locate_points

logger = logging.getLogger(__name__)


def sample_points(
    regions: Sequence[Region],
    n_points: int,
    seed: Optional[int] = None,
) -> List[Point]:
    """
    Draw `n_points` uniformly distributed points inside each region.

    Args:
        regions: Regions to sample from.
        n_points: Number of points per region.
        seed: Seed for the random generator.

    Returns:
        Points grouped by region in input order, labelled '<identifier>_<i>'.
    """
    if n_points < 0:
        raise ValueError(f"n_points must be non-negative, got {n_points}")
    if n_points == 0 or len(regions) == 0:
        return []

    polygons = gpd.GeoSeries([region.polygon for region in regions])
    samples = polygons.sample_points(size=n_points, rng=seed).explode(index_parts=False)
    logger.debug(f"Sampled {len(samples)} points from {len(regions)} regions")

    points = []
    counters = {}
    for position, geom in samples.items():
        identifier = regions[position].identifier
        i = counters.get(identifier, 0)
        counters[identifier] = i + 1
        points.append(Point(x=geom.x, y=geom.y, label=f"{identifier}_{i}"))
    return points


def flag_sampled(
    regions: Sequence[Region],
    points: Sequence[Point],
    key: str = "sampled",
    provider: Optional[GeometryProvider] = None,
) -> List[Region]:
    """
    Mark each region with whether any point falls inside it.

    Returns:
        New regions, in input order, with `key` set to 1 for regions holding at
        least one point and 0 otherwise.
    """
    matched = set(locate_points(regions, points, provider=provider))
    return [
        region.with_attributes(**{key: int(region.identifier in matched)})
        for region in regions
    ]
