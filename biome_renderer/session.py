# biome_renderer/session.py

"""
================================================================================
BIOME SESSION
================================================================================
A stateful generator session: initialise once for a game version, seed it,
then issue area and point queries against the same world model.

Every query made before `init` answers with a documented sentinel instead of
raising: -1 for biome ids, "" for names, None for arrays, and a silent no-op
for `set_seed`.
================================================================================
"""
import logging

import numpy as np

from . import config as DEFAULTS
from . import palette
from . import sampler
from . import versions
from .world_model import LARGE_BIOMES, UNDEFINED_BIOME, NoiseWorldModel, join_seed

HEIGHTMAP_SCALE = 4


class BiomeSession:
    """Single world model bound to one version, seed and dimension at a time."""
    def __init__(self, config: dict = None, logger: logging.Logger = None, world_factory=NoiseWorldModel):
        self.logger = logger or logging.getLogger(__name__)
        self.settings = dict(config or {})
        self.world = world_factory()
        self.variant = versions.MC_UNDEF
        self.seed = None
        self.dimension = DEFAULTS.DEFAULT_DIMENSION
        self.initialized = False

    def init(self, major: int, minor: int, patch: int, large_biomes: bool = False):
        self.variant = versions.parse_version(major, minor, patch)
        self.world.initialize(self.variant, LARGE_BIOMES if large_biomes else 0)
        self.initialized = True
        self.logger.info(
            f"Session initialized for {major}.{minor}.{patch} -> variant "
            f"{versions.variant_name(self.variant)} (large_biomes={large_biomes})."
        )

    def set_seed(self, seed_lo: int, seed_hi: int, dimension: int = DEFAULTS.DEFAULT_DIMENSION):
        if not self.initialized:
            return
        self.seed = join_seed(seed_lo, seed_hi)
        self.dimension = dimension
        self.world.set_seed(self.seed, dimension)

    def gen_biomes(self, block_x: int, block_z: int, width: int, height: int, scale: int, y_level: int) -> np.ndarray | None:
        """
        Biome ids for a width x height area sampled every `scale` blocks.
        The origin is block_x / scale truncated toward zero, in scaled units.
        Returns a (height, width) int32 array.
        """
        if not self.initialized or width <= 0 or height <= 0 or scale <= 0:
            return None
        origin_x = int(block_x / scale)
        origin_z = int(block_z / scale)
        wx = (origin_x + np.arange(width, dtype=np.int64)) * scale
        wz = (origin_z + np.arange(height, dtype=np.int64)) * scale
        wx_grid, wz_grid = np.meshgrid(wx, wz)
        return sampler.query_biomes(self.world, scale, wx_grid, y_level, wz_grid)

    def gen_heightmap(self, quart_x: int, quart_z: int, width: int, height: int) -> np.ndarray | None:
        """
        Approximate surface heights at 1:4 scale. Returns a (height, width)
        float32 array, or None before `init`.
        """
        if not self.initialized or width <= 0 or height <= 0:
            return None
        wx = (quart_x + np.arange(width, dtype=np.int64)) * HEIGHTMAP_SCALE
        wz = (quart_z + np.arange(height, dtype=np.int64)) * HEIGHTMAP_SCALE
        wx_grid, wz_grid = np.meshgrid(wx, wz)
        heights = sampler.estimate_surface_heights(self.world, self.variant, wx_grid, wz_grid, self.settings)
        return heights.astype(np.float32)

    def get_biome_at(self, block_x: int, block_z: int, y_level: int) -> int:
        if not self.initialized:
            return UNDEFINED_BIOME
        return self.world.biome_at(1, block_x, y_level, block_z)

    def biome_to_str(self, biome_id: int) -> str:
        if not self.initialized:
            return ""
        return palette.biome_to_str(biome_id)

    def get_variant(self) -> int:
        return self.variant
