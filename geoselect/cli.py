# Command Line Interface for geoselect
import logging
from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from geoselect.errors import GeoSelectError
from geoselect.io import (
    points_from_gdf,
    read_points_file,
    read_regions_file,
    regions_from_gdf,
    regions_to_gdf,
)
from geoselect.providers import get_provider
from geoselect.selector import locate_points, select_regions
from geoselect.utils.io import load_config
from geoselect.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="geoselect",
    help="Select the regions that contain query points",
    add_completion=False,
)

RegionsOption = Annotated[
    Path,
    typer.Option(
        "--regions",
        help="Vector file with region polygons (shapefile, GeoPackage, GeoJSON).",
        exists=True, readable=True, resolve_path=True,
    ),
]
PointsOption = Annotated[
    Path,
    typer.Option(
        "--points",
        help="Query points: CSV/Parquet with coordinate columns, or a point vector file.",
        exists=True, readable=True, resolve_path=True,
    ),
]
IdColumnOption = Annotated[
    Optional[List[str]],
    typer.Option(
        "--id-column",
        help="Column forming the region identifier. Repeat for multi-level codes.",
    ),
]
NameColumnOption = Annotated[Optional[str], typer.Option(help="Column with region display names.")]
XColumnOption = Annotated[Optional[str], typer.Option(help="Point x (longitude) column.")]
YColumnOption = Annotated[Optional[str], typer.Option(help="Point y (latitude) column.")]
LabelColumnOption = Annotated[Optional[str], typer.Option(help="Point label column.")]
IndexedOption = Annotated[
    Optional[bool],
    typer.Option("--indexed/--brute-force", help="Use the STRtree spatial index."),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="YAML config file. Defaults to config/default.yaml if present."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]


def _load_inputs(
    regions_path: Path,
    points_path: Path,
    config: dict,
    id_columns: Optional[List[str]],
    name_column: Optional[str],
    x_column: Optional[str],
    y_column: Optional[str],
    label_column: Optional[str],
):
    """Load regions and points in a common CRS. Returns (regions, points, crs)."""
    region_config = config["regions"]
    point_config = config["points"]

    regions_gdf = read_regions_file(regions_path, target_crs=config["crs"])
    regions = regions_from_gdf(
        regions_gdf,
        id_columns=id_columns or region_config["id_columns"],
        name_column=name_column or region_config["name_column"],
    )
    crs = regions_gdf.crs

    points_gdf = read_points_file(
        points_path,
        x_column=x_column or point_config["x_column"],
        y_column=y_column or point_config["y_column"],
        crs=point_config["crs"],
    )
    # Points without a CRS are taken to be in the regions' CRS
    if crs is not None and points_gdf.crs is not None and points_gdf.crs != crs:
        logger.info(f"Reprojecting points from {points_gdf.crs} to {crs}")
        points_gdf = points_gdf.to_crs(crs)
    points = points_from_gdf(points_gdf, label_column=label_column or point_config["label_column"])
    return regions, points, crs


def _provider(config: dict, indexed: Optional[bool]):
    if indexed is None:
        return get_provider(config["provider"])
    return get_provider("strtree" if indexed else "shapely")


@app.command()
def select(
    regions_path: RegionsOption,
    points_path: PointsOption,
    id_column: IdColumnOption = None,
    name_column: NameColumnOption = None,
    x_column: XColumnOption = None,
    y_column: YColumnOption = None,
    label_column: LabelColumnOption = None,
    indexed: IndexedOption = None,
    output_path: Annotated[
        Optional[Path],
        typer.Option("--output", help="Write the selected regions to this vector file.", resolve_path=True),
    ] = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Print the identifiers of the regions holding at least one query point,
    in region order, and optionally write them to a file.
    """
    setup_logging(verbose=verbose)
    try:
        config = load_config(config_path)
        regions, points, crs = _load_inputs(
            regions_path, points_path, config,
            id_column, name_column, x_column, y_column, label_column,
        )
        provider = _provider(config, indexed)
        selected = select_regions(regions, points, provider=provider)
    except (GeoSelectError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    logger.info(f"{len(selected)} of {len(regions)} regions hold at least one of {len(points)} points")
    for region in selected:
        typer.echo(region.identifier)

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        regions_to_gdf(selected, crs=crs).to_file(output_path)
        logger.info(f"Selected regions written to {output_path}")


@app.command()
def locate(
    regions_path: RegionsOption,
    points_path: PointsOption,
    id_column: IdColumnOption = None,
    name_column: NameColumnOption = None,
    x_column: XColumnOption = None,
    y_column: YColumnOption = None,
    label_column: LabelColumnOption = None,
    indexed: IndexedOption = None,
    config_path: ConfigOption = None,
    verbose: VerboseOption = False,
) -> None:
    """
    Print one line per point: its label (or index) and the identifier of the
    region containing it, '-' when outside every region.
    """
    setup_logging(verbose=verbose)
    try:
        config = load_config(config_path)
        regions, points, crs = _load_inputs(
            regions_path, points_path, config,
            id_column, name_column, x_column, y_column, label_column,
        )
        located = locate_points(regions, points, provider=_provider(config, indexed))
    except (GeoSelectError, ValueError, FileNotFoundError) as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    for i, (point, identifier) in enumerate(zip(points, located)):
        label = point.label if point.label is not None else str(i)
        typer.echo(f"{label}\t{identifier if identifier is not None else '-'}")


if __name__ == "__main__":
    app()
