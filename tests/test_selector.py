import pytest
import geopandas as gpd
from shapely.geometry import box, Point as ShapelyPoint, Polygon

from geoselect import (
    InvalidRegionCollection,
    MalformedGeometry,
    Point,
    Region,
    ShapelyProvider,
    STRtreeProvider,
    locate_points,
    select_regions,
    select_regions_gdf,
)


@pytest.fixture(params=[ShapelyProvider, STRtreeProvider], ids=["shapely", "strtree"])
def provider(request):
    return request.param()


@pytest.fixture
def squares() -> list:
    """Two unit-2 squares with a gap between them."""
    return [
        Region(identifier="R1", name="West", boundary=[(0, 0), (2, 0), (2, 2), (0, 2)]),
        Region(identifier="R2", name="East", boundary=[(3, 0), (5, 0), (5, 2), (3, 2)]),
    ]


@pytest.fixture
def quadrants() -> list:
    """Four quadrants of a 10x10 square, listed top left, top right, bottom left, bottom right."""
    polygons = [box(0, 5, 5, 10), box(5, 5, 10, 10), box(0, 0, 5, 5), box(5, 0, 10, 5)]
    return [
        Region(
            identifier=f"region_{i}",
            name=f"Quadrant {i}",
            boundary=list(polygon.exterior.coords),
        )
        for i, polygon in enumerate(polygons)
    ]


def test_both_squares_selected(squares, provider):
    points = [Point(x=1, y=1), Point(x=4, y=1), Point(x=10, y=10)]
    selected = select_regions(squares, points, provider=provider)
    assert [region.identifier for region in selected] == ["R1", "R2"]


def test_no_match_is_empty(squares, provider):
    assert select_regions(squares, [Point(x=10, y=10)], provider=provider) == []


def test_no_points_is_empty(squares, provider):
    assert select_regions(squares, [], provider=provider) == []


def test_default_provider(squares):
    selected = select_regions(squares, [Point(x=4, y=1)])
    assert selected == [squares[1]]


def test_deduplication(squares, provider):
    points = [Point(x=0.5, y=0.5), Point(x=1.5, y=1.5), Point(x=1, y=1)]
    selected = select_regions(squares, points, provider=provider)
    assert selected == [squares[0]]


def test_order_follows_regions_not_points(quadrants, provider):
    # Points listed bottom right first
    points = [Point(x=7, y=2), Point(x=2, y=7)]
    selected = select_regions(quadrants, points, provider=provider)
    assert [region.identifier for region in selected] == ["region_0", "region_3"]


def test_idempotent(quadrants, provider):
    points = [Point(x=7, y=2), Point(x=2, y=7), Point(x=20, y=20)]
    first = select_regions(quadrants, points, provider=provider)
    second = select_regions(quadrants, points, provider=provider)
    assert first == second


def test_adding_point_in_unmatched_region(quadrants, provider):
    points = [Point(x=2, y=7)]
    before = select_regions(quadrants, points, provider=provider)
    after = select_regions(quadrants, points + [Point(x=7, y=7)], provider=provider)

    assert [region.identifier for region in before] == ["region_0"]
    assert [region.identifier for region in after] == ["region_0", "region_1"]


def test_point_on_outer_boundary_is_contained(squares, provider):
    selected = select_regions(squares, [Point(x=0, y=1)], provider=provider)
    assert selected == [squares[0]]


def test_shared_edge_goes_to_first_region(quadrants, provider):
    # (5, 7) lies on the edge between region_0 and region_1
    assert locate_points(quadrants, [Point(x=5, y=7)], provider=provider) == ["region_0"]
    # Reversing the input order flips the winner
    reversed_regions = list(reversed(quadrants))
    assert locate_points(reversed_regions, [Point(x=5, y=7)], provider=provider) == ["region_1"]


def test_shared_corner_selects_one_region(quadrants, provider):
    selected = select_regions(quadrants, [Point(x=5, y=5)], provider=provider)
    assert [region.identifier for region in selected] == ["region_0"]


def test_locate_points_aligned_with_points(squares, provider):
    points = [Point(x=10, y=10), Point(x=4, y=1), Point(x=1, y=1)]
    assert locate_points(squares, points, provider=provider) == [None, "R2", "R1"]


def test_concave_region(provider):
    # U shape: the notch between the arms is outside
    u_shape = Region(
        identifier="U",
        name="U",
        boundary=[(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)],
    )
    points = [Point(x=1.5, y=2), Point(x=0.5, y=2)]
    assert locate_points([u_shape], points, provider=provider) == [None, "U"]


def test_inputs_not_modified(squares):
    points = [Point(x=1, y=1)]
    regions = list(squares)
    select_regions(regions, points)
    assert regions == squares
    assert points == [Point(x=1, y=1)]


@pytest.mark.parametrize("regions", [None, []])
def test_empty_regions_raise(regions):
    with pytest.raises(InvalidRegionCollection):
        select_regions(regions, [Point(x=1, y=1)])


def test_duplicate_identifiers_raise(squares):
    duplicate = Region(identifier="R1", name="Again", boundary=[(6, 0), (8, 0), (8, 2)])
    with pytest.raises(InvalidRegionCollection, match="R1"):
        select_regions(squares + [duplicate], [Point(x=1, y=1)])


@pytest.mark.parametrize(
    "boundary",
    [
        [(0, 0), (1, 1)],
        [(0, 0), (1, 1), (0, 0)],
        [(0, 0), (1, 1), (1, 1), (0, 0)],
    ],
)
def test_malformed_geometry_raises(squares, boundary):
    degenerate = Region(identifier="bad", name="Bad", boundary=boundary)
    with pytest.raises(MalformedGeometry) as excinfo:
        select_regions(squares + [degenerate], [Point(x=1, y=1)])
    assert excinfo.value.identifier == "bad"


def test_malformed_geometry_raises_with_no_points():
    degenerate = Region(identifier="bad", name="Bad", boundary=[(0, 0), (1, 1)])
    with pytest.raises(MalformedGeometry):
        select_regions([degenerate], [])


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        select_regions([], [])


@pytest.fixture
def regions_gdf() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        data={"region_id": ["R1", "R2", "R3"]},
        geometry=[box(0, 0, 2, 2), box(3, 0, 5, 2), box(2, 0, 3, 2)],
        crs="EPSG:27700",
    )


def test_select_regions_gdf(regions_gdf):
    points = gpd.GeoDataFrame(
        geometry=[ShapelyPoint(4, 1), ShapelyPoint(1, 1), ShapelyPoint(1.5, 1.5), ShapelyPoint(10, 10)],
        crs="EPSG:27700",
    )
    selected = select_regions_gdf(regions_gdf, points, id_column="region_id")
    assert selected["region_id"].tolist() == ["R1", "R2"]
    assert selected.crs == regions_gdf.crs


def test_select_regions_gdf_shared_edge(regions_gdf):
    # x=2 is shared by R1 and R3
    points = gpd.GeoDataFrame(geometry=[ShapelyPoint(2, 1)], crs="EPSG:27700")
    selected = select_regions_gdf(regions_gdf, points, id_column="region_id")
    assert selected["region_id"].tolist() == ["R1"]


def test_select_regions_gdf_reprojects_points(regions_gdf):
    points = gpd.GeoDataFrame(geometry=[ShapelyPoint(1, 1)], crs="EPSG:27700").to_crs("EPSG:4326")
    selected = select_regions_gdf(regions_gdf, points, id_column="region_id")
    assert selected["region_id"].tolist() == ["R1"]


def test_select_regions_gdf_no_points(regions_gdf):
    points = gpd.GeoDataFrame(geometry=[], crs="EPSG:27700")
    selected = select_regions_gdf(regions_gdf, points, id_column="region_id")
    assert selected.empty
    assert list(selected.columns) == list(regions_gdf.columns)


def test_select_regions_gdf_matches_region_api(regions_gdf):
    regions = [
        Region(identifier=identifier, name=identifier, boundary=list(geom.exterior.coords))
        for identifier, geom in zip(regions_gdf["region_id"], regions_gdf.geometry)
    ]
    coords = [(0.5, 0.5), (2, 1), (4.9, 1.9), (7, 7)]
    points_gdf = gpd.GeoDataFrame(geometry=[ShapelyPoint(c) for c in coords], crs="EPSG:27700")

    from_gdf = select_regions_gdf(regions_gdf, points_gdf, id_column="region_id")
    from_regions = select_regions(regions, [Point(x=x, y=y) for x, y in coords])
    assert from_gdf["region_id"].tolist() == [region.identifier for region in from_regions]


def test_select_regions_gdf_errors(regions_gdf):
    points = gpd.GeoDataFrame(geometry=[ShapelyPoint(1, 1)], crs="EPSG:27700")

    with pytest.raises(InvalidRegionCollection):
        select_regions_gdf(regions_gdf.iloc[0:0], points, id_column="region_id")

    with pytest.raises(ValueError, match="not_a_column"):
        select_regions_gdf(regions_gdf, points, id_column="not_a_column")

    duplicated = regions_gdf.assign(region_id=["R1", "R1", "R3"])
    with pytest.raises(InvalidRegionCollection):
        select_regions_gdf(duplicated, points, id_column="region_id")

    degenerate = gpd.GeoDataFrame(
        data={"region_id": ["bad"]},
        geometry=[Polygon([(0, 0), (1, 1), (1, 1), (0, 0)])],
        crs="EPSG:27700",
    )
    with pytest.raises(MalformedGeometry):
        select_regions_gdf(degenerate, points, id_column="region_id")
