"""
Exceptions raised by region selection.
"""


class GeoSelectError(Exception):
    """Base class for geoselect errors."""


class InvalidRegionCollection(GeoSelectError, ValueError):
    """The region collection is missing, empty or has duplicate identifiers."""


class MalformedGeometry(GeoSelectError, ValueError):
    """A region boundary has fewer than 3 distinct vertices."""

    def __init__(self, identifier, n_vertices: int):
        self.identifier = identifier
        self.n_vertices = n_vertices
        super().__init__(
            f"Region {identifier!r} has {n_vertices} distinct vertices, at least 3 are required."
        )
