"""
Region and point records.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_serializer,
    field_validator,
)
from shapely.geometry import Point as ShapelyPoint
from shapely.geometry import Polygon

AttributeValue = Union[StrictInt, StrictFloat, StrictStr]
Coordinate = Tuple[float, float]


class Point(BaseModel):
    """A query location. x is longitude, y is latitude."""

    x: float
    y: float
    label: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def geometry(self) -> ShapelyPoint:
        return ShapelyPoint(self.x, self.y)


class Region(BaseModel):
    """A named polygon with scalar attributes.

    Attributes:
        identifier: Unique key within a collection, e.g. a two-level administrative code.
        name: Display name.
        boundary: Ordered vertices, implicitly closed. A repeated closing vertex is dropped.
        attributes: Read-only mapping of attribute name to int, float or str.
    """

    identifier: str
    name: str
    boundary: Tuple[Coordinate, ...]
    attributes: Mapping[str, AttributeValue] = Field(default_factory=dict, validate_default=True)

    model_config = ConfigDict(frozen=True)

    @field_validator("boundary")
    @classmethod
    def drop_closing_vertex(cls, boundary: Tuple[Coordinate, ...]) -> Tuple[Coordinate, ...]:
        if len(boundary) > 1 and boundary[0] == boundary[-1]:
            return boundary[:-1]
        return boundary

    @field_validator("attributes", mode="before")
    @classmethod
    def bools_to_int(cls, attributes: Any) -> Any:
        if not isinstance(attributes, Mapping):
            return attributes
        return {
            key: int(value) if isinstance(value, bool) else value
            for key, value in attributes.items()
        }

    @field_validator("attributes")
    @classmethod
    def freeze_attributes(cls, attributes: Mapping[str, AttributeValue]) -> Mapping[str, AttributeValue]:
        return MappingProxyType(dict(attributes))

    @field_serializer("attributes")
    def serialize_attributes(self, attributes: Mapping[str, AttributeValue]) -> Dict[str, AttributeValue]:
        return dict(attributes)

    @property
    def n_distinct_vertices(self) -> int:
        return len(set(self.boundary))

    @property
    def polygon(self) -> Polygon:
        return Polygon(self.boundary)

    def attribute(self, key: str) -> AttributeValue:
        """Return the attribute value for `key`, raising KeyError if it is not set."""
        try:
            return self.attributes[key]
        except KeyError:
            raise KeyError(f"Region {self.identifier!r} has no attribute {key!r}") from None

    def with_attributes(self, **values: AttributeValue) -> "Region":
        """Return a copy of the region with `values` merged into its attributes."""
        merged = {**self.attributes, **values}
        return Region(
            identifier=self.identifier,
            name=self.name,
            boundary=self.boundary,
            attributes=merged,
        )

    def __hash__(self) -> int:
        return hash((self.identifier, self.boundary))
