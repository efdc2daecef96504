"""
Build region and point collections from files and GeoDataFrames.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry import MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry

from geoselect.models import AttributeValue, Point, Region

logger = logging.getLogger(__name__)

ID_SEPARATOR = "_"
TABULAR_SUFFIXES = {".csv", ".parquet"}


def _to_scalar(value) -> Optional[AttributeValue]:
    """Convert a pandas/numpy cell to an int, float or str. Missing or non-scalar values give None."""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, str)):
        if isinstance(value, float) and np.isnan(value):
            return None
        return value
    return None


def _exterior(geom: BaseGeometry, identifier: str) -> Tuple[Tuple[float, float], ...]:
    if isinstance(geom, MultiPolygon):
        parts = list(geom.geoms)
        if len(parts) > 1:
            logger.warning(
                f"Region {identifier} has {len(parts)} parts, keeping the largest"
            )
        geom = max(parts, key=lambda part: part.area)
    if not isinstance(geom, Polygon):
        raise ValueError(f"Region {identifier} has geometry type {geom.geom_type}, expected a polygon")
    return tuple((float(x), float(y)) for x, y, *_ in geom.exterior.coords)


def make_identifier(values: Iterable, sep: str = ID_SEPARATOR) -> str:
    """Join attribute values into an identifier, e.g. ('Bayern', 'Oberbayern') -> 'Bayern_Oberbayern'."""
    return sep.join(str(value) for value in values)


def _check_columns(df: pd.DataFrame, columns: Iterable[str], what: str) -> None:
    missing = [column for column in columns if column is not None and column not in df.columns]
    if missing:
        raise ValueError(f"Columns {missing} not found in {what}. Available: {list(df.columns)}")


def regions_from_gdf(
    gdf: gpd.GeoDataFrame,
    id_columns: Union[str, Sequence[str]],
    name_column: Optional[str] = None,
) -> List[Region]:
    """
    Convert a polygon GeoDataFrame into Regions.

    Args:
        gdf: Polygon GeoDataFrame.
        id_columns: Column, or columns joined with '_', forming the identifier.
        name_column: Column holding the display name. Defaults to the identifier.

    Returns:
        Regions in row order. Other scalar columns become attributes.
    """
    if isinstance(id_columns, str):
        id_columns = [id_columns]
    _check_columns(gdf, [*id_columns, name_column], "regions")

    geometry_column = gdf.geometry.name
    attribute_columns = [column for column in gdf.columns if column != geometry_column]

    regions = []
    for _, row in gdf.iterrows():
        identifier = make_identifier(row[column] for column in id_columns)
        name = str(row[name_column]) if name_column is not None else identifier
        attributes: Dict[str, AttributeValue] = {}
        for column in attribute_columns:
            value = _to_scalar(row[column])
            if value is not None:
                attributes[str(column)] = value
        regions.append(
            Region(
                identifier=identifier,
                name=name,
                boundary=_exterior(row[geometry_column], identifier),
                attributes=attributes,
            )
        )
    return regions


def load_regions(
    source: Union[str, Path],
    id_columns: Union[str, Sequence[str]],
    name_column: Optional[str] = None,
    target_crs: Optional[Union[str, int]] = None,
    layer: Optional[str] = None,
) -> List[Region]:
    """
    Load regions from any vector file geopandas can read.

    Args:
        source: Path to a shapefile, GeoPackage, GeoJSON etc.
        id_columns: Column(s) forming the identifier.
        name_column: Column holding the display name.
        target_crs: Reproject to this CRS before building regions.
        layer: Layer name for multi-layer sources.

    Returns:
        List of Regions in file order.
    """
    gdf = read_regions_file(source, target_crs=target_crs, layer=layer)
    return regions_from_gdf(gdf, id_columns=id_columns, name_column=name_column)


def read_regions_file(
    source: Union[str, Path],
    target_crs: Optional[Union[str, int]] = None,
    layer: Optional[str] = None,
) -> gpd.GeoDataFrame:
    """Read a region vector file, reprojecting to `target_crs` when given. The CRS is kept on the frame."""
    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"Regions file not found at: {source}")

    gdf = gpd.read_file(source, layer=layer) if layer is not None else gpd.read_file(source)
    if target_crs is not None and gdf.crs != target_crs:
        gdf = gdf.to_crs(target_crs)
    logger.info(f"Loaded {len(gdf)} regions from {source}")
    return gdf


def points_from_coords(
    coords: Iterable[Tuple[float, float]],
    labels: Optional[Sequence[Optional[str]]] = None,
) -> List[Point]:
    """Build Points from literal (x, y) pairs."""
    coords = list(coords)
    if labels is not None and len(labels) != len(coords):
        raise ValueError(f"Got {len(labels)} labels for {len(coords)} points")
    labels = labels if labels is not None else [None] * len(coords)
    return [Point(x=x, y=y, label=label) for (x, y), label in zip(coords, labels)]


def points_from_gdf(gdf: gpd.GeoDataFrame, label_column: Optional[str] = None) -> List[Point]:
    """Convert a point GeoDataFrame into Points. Non-point geometries raise ValueError."""
    _check_columns(gdf, [label_column], "points")
    if not (gdf.geom_type == "Point").all():
        raise ValueError(f"Expected point geometries, got {sorted(gdf.geom_type.unique())}")
    labels = None
    if label_column is not None:
        labels = [None if pd.isna(label) else str(label) for label in gdf[label_column]]
    return points_from_coords(zip(gdf.geometry.x, gdf.geometry.y), labels=labels)


def load_points(
    source: Union[str, Path],
    x_column: str = "x",
    y_column: str = "y",
    label_column: Optional[str] = None,
    crs: Optional[Union[str, int]] = None,
    target_crs: Optional[Union[str, int]] = None,
) -> List[Point]:
    """
    Load query points from a CSV/Parquet table or a vector file.

    Tables need `x_column` and `y_column`. `crs` declares the CRS of tabular
    coordinates and is required for reprojection with `target_crs`.
    """
    gdf = read_points_file(source, x_column=x_column, y_column=y_column, crs=crs)
    if target_crs is not None and gdf.crs != target_crs:
        if gdf.crs is None:
            raise ValueError(f"Cannot reproject points from {source} without a source CRS")
        gdf = gdf.to_crs(target_crs)
    return points_from_gdf(gdf, label_column=label_column)


def read_points_file(
    source: Union[str, Path],
    x_column: str = "x",
    y_column: str = "y",
    crs: Optional[Union[str, int]] = None,
) -> gpd.GeoDataFrame:
    """Read points from a CSV/Parquet table or a vector file into a GeoDataFrame, without reprojecting."""
    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"Points file not found at: {source}")

    if source.suffix.lower() in TABULAR_SUFFIXES:
        df = pd.read_csv(source) if source.suffix.lower() == ".csv" else pd.read_parquet(source)
        _check_columns(df, [x_column, y_column], "points")
        gdf = gpd.GeoDataFrame(
            df, geometry=gpd.points_from_xy(df[x_column], df[y_column]), crs=crs
        )
    else:
        gdf = gpd.read_file(source)

    logger.info(f"Loaded {len(gdf)} points from {source}")
    return gdf


def regions_to_gdf(regions: Sequence[Region], crs: Optional[Union[str, int]] = None) -> gpd.GeoDataFrame:
    """Convert Regions back to a GeoDataFrame with identifier, name, attribute and geometry columns."""
    records = [
        {**region.attributes, "identifier": region.identifier, "name": region.name}
        for region in regions
    ]
    return gpd.GeoDataFrame(
        pd.DataFrame.from_records(records),
        geometry=[region.polygon for region in regions],
        crs=crs,
    )
