# biome_renderer/__init__.py

# This file makes the 'biome_renderer' directory a Python package.
# We also use it to define the public API of the package.

from .renderer import RenderContext, lookup_biome, resolve_version
from .session import BiomeSession
from .world_model import NoiseWorldModel, WorldModel, UNDEFINED_BIOME

__all__ = [
    "RenderContext",
    "lookup_biome",
    "resolve_version",
    "BiomeSession",
    "NoiseWorldModel",
    "WorldModel",
    "UNDEFINED_BIOME",
]
