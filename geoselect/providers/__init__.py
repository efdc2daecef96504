"""
Spatial geometry providers.
"""

from .base import GeometryProvider
from .shapely_provider import ShapelyProvider
from .strtree_provider import STRtreeProvider

PROVIDERS = {
    ShapelyProvider.name: ShapelyProvider,
    STRtreeProvider.name: STRtreeProvider,
}


def get_provider(name: str) -> GeometryProvider:
    """Instantiate a provider by name ('shapely' or 'strtree')."""
    try:
        return PROVIDERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown provider: {name}. Choose one of {sorted(PROVIDERS)}"
        ) from None


__all__ = [
    'GeometryProvider',
    'ShapelyProvider',
    'STRtreeProvider',
    'PROVIDERS',
    'get_provider',
]
