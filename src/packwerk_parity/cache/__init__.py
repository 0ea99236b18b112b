"""Cache collaborators - naming scheme, unit discovery and generation."""

from .layout import ArtifactLocations, CacheLayout
from .producer import CacheGenerationError, CacheProducer
from .units import discover_units

__all__ = [
    "ArtifactLocations",
    "CacheLayout",
    "CacheGenerationError",
    "CacheProducer",
    "discover_units",
]
