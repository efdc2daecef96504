"""
Region selection: which regions contain at least one query point.
"""

from typing import List, Optional, Sequence

import geopandas as gpd
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from geoselect.errors import InvalidRegionCollection, MalformedGeometry
from geoselect.models import Point, Region
from geoselect.providers import GeometryProvider, ShapelyProvider

MIN_VERTICES = 3


def validate_regions(regions: Optional[Sequence[Region]]) -> None:
    """
    Check a region collection before selection.

    Raises:
        InvalidRegionCollection: regions is None, empty or has duplicate identifiers.
        MalformedGeometry: a boundary has fewer than 3 distinct vertices.
    """
    if regions is None or len(regions) == 0:
        raise InvalidRegionCollection("Region collection is empty.")

    seen = set()
    for region in regions:
        if region.identifier in seen:
            raise InvalidRegionCollection(f"Duplicate region identifier: {region.identifier!r}")
        seen.add(region.identifier)
        if region.n_distinct_vertices < MIN_VERTICES:
            raise MalformedGeometry(region.identifier, region.n_distinct_vertices)


def locate_points(
    regions: Sequence[Region],
    points: Sequence[Point],
    provider: Optional[GeometryProvider] = None,
) -> List[Optional[str]]:
    """
    Find the containing region of each point.

    Args:
        regions: Non-empty regions with unique identifiers.
        points: Query points.
        provider: Geometry backend. Defaults to ShapelyProvider.

    Returns:
        The identifier of the containing region for each point, or None when
        the point is outside every region. Aligned with `points`.
    """
    validate_regions(regions)
    provider = provider or ShapelyProvider()
    regions = list(regions)
    located = provider.locate_many(regions, list(points))
    return [region.identifier if region is not None else None for region in located]


def select_regions(
    regions: Sequence[Region],
    points: Sequence[Point],
    provider: Optional[GeometryProvider] = None,
) -> List[Region]:
    """
    Select the regions that contain at least one of `points`.

    The result keeps the input order of `regions` and holds each region at
    most once. An empty point set, or points outside every region, gives an
    empty list.

    Args:
        regions: Non-empty regions with unique identifiers.
        points: Query points, may be empty.
        provider: Geometry backend. Defaults to ShapelyProvider.

    Returns:
        The matched regions, in input order.
    """
    matched = set(locate_points(regions, points, provider=provider))
    matched.discard(None)
    return [region for region in regions if region.identifier in matched]


def _min_distinct_vertices(geom: BaseGeometry) -> int:
    if isinstance(geom, Polygon):
        return len(set(geom.exterior.coords))
    if isinstance(geom, MultiPolygon):
        return min(_min_distinct_vertices(part) for part in geom.geoms)
    return 0


def select_regions_gdf(
    regions: gpd.GeoDataFrame,
    points: gpd.GeoDataFrame,
    id_column: str,
) -> gpd.GeoDataFrame:
    """
    Select the rows of `regions` whose geometry contains at least one point.

    Same rules as `select_regions`: boundary points count as inside, a point on
    a shared edge belongs to the earlier row, and rows keep their input order.
    Points are reprojected to the regions' CRS when the two differ.

    Args:
        regions: Polygon GeoDataFrame.
        points: Point GeoDataFrame.
        id_column: Column holding unique region identifiers.

    Returns:
        The matching subset of `regions`.
    """
    if regions is None or regions.empty:
        raise InvalidRegionCollection("Region collection is empty.")
    if id_column not in regions.columns:
        raise ValueError(f"Column {id_column!r} not found in regions. Available: {list(regions.columns)}")
    if regions[id_column].duplicated().any():
        duplicates = regions.loc[regions[id_column].duplicated(), id_column].tolist()
        raise InvalidRegionCollection(f"Duplicate region identifiers: {duplicates}")

    for identifier, geom in zip(regions[id_column], regions.geometry):
        n_vertices = _min_distinct_vertices(geom)
        if n_vertices < MIN_VERTICES:
            raise MalformedGeometry(identifier, n_vertices)

    if points is None or points.empty:
        return regions.iloc[0:0]

    if points.crs is not None and regions.crs is not None and points.crs != regions.crs:
        points = points.to_crs(regions.crs)

    tree = regions.sindex
    point_idx, region_idx = tree.query(points.geometry.values, predicate="covered_by")
    if len(point_idx) == 0:
        return regions.iloc[0:0]

    # First region (by position) per point
    first_per_point = {}
    for p, r in zip(point_idx.tolist(), region_idx.tolist()):
        if p not in first_per_point or r < first_per_point[p]:
            first_per_point[p] = r

    matched = sorted(set(first_per_point.values()))
    return regions.iloc[matched]
