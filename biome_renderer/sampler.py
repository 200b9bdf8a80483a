# biome_renderer/sampler.py

"""
================================================================================
SURFACE SAMPLER
================================================================================
Builds the padded sampling grid that the compositor reads: biome ids (and
optionally surface heights) for the requested rectangle plus a one-cell ring
around it, so every output pixel has four neighbours for hillshading.

Data Contract:
---------------
- Inputs: a seeded world model, the top-left block coordinate (x, z), the
  output width/height in pixels, the scale (blocks per pixel, > 0), a y-level
  and whether heights are wanted.
- Outputs: a PaddedGrid whose arrays are (height + 2, width + 2), row-major.
  Cell (row j, column i) samples block (x - scale + i*scale, z - scale + j*scale).
- Side Effects: None beyond world model queries.
- Invariants: padding is always exactly one ring. Sentinel ids returned by
  the world model pass through unchanged.
================================================================================
"""
import logging
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from . import versions
from .world_model import UNDEFINED_BIOME

logger = logging.getLogger(__name__)


@dataclass
class PaddedGrid:
    """Biome ids and optional surface heights for the padded sample area."""
    biomes: np.ndarray
    heights: np.ndarray | None = None

    @property
    def width(self) -> int:
        "Interior width in pixels."
        return self.biomes.shape[1] - 2

    @property
    def height(self) -> int:
        return self.biomes.shape[0] - 2


def padded_coordinates(x: int, z: int, width: int, height: int, scale: int) -> tuple[np.ndarray, np.ndarray]:
    """Returns the block coordinates of every padded cell as two 2D arrays."""
    wx = (x - scale) + np.arange(width + 2, dtype=np.int64) * scale
    wz = (z - scale) + np.arange(height + 2, dtype=np.int64) * scale
    return np.meshgrid(wx, wz)


def query_biomes(world, scale: int, xs: np.ndarray, y: int, zs: np.ndarray) -> np.ndarray:
    """
    Queries the world model for every (xs, y, zs) point. Uses the model's
    vectorised `biomes_at` when it has one, and `biome_at` otherwise.
    """
    batch = getattr(world, "biomes_at", None)
    if callable(batch):
        return np.asarray(batch(scale, xs, y, zs), dtype=np.int32).reshape(np.shape(xs))

    flat_x = np.ravel(xs)
    flat_z = np.ravel(zs)
    result = np.empty(flat_x.shape, dtype=np.int32)
    for k in range(flat_x.shape[0]):
        result[k] = world.biome_at(scale, int(flat_x[k]), y, int(flat_z[k]))
    return result.reshape(np.shape(xs))


def probe_surface_heights(world, xs: np.ndarray, zs: np.ndarray,
                          ceiling: int = DEFAULTS.BUILD_CEILING,
                          floor: int = DEFAULTS.BUILD_FLOOR,
                          step: int = DEFAULTS.SURFACE_PROBE_STEP,
                          probe_scale: int = DEFAULTS.SURFACE_PROBE_SCALE) -> np.ndarray:
    """
    Estimates surface heights by scanning y downward from `ceiling` in steps of
    `step`, never below `floor`. The first y with a defined biome is taken as
    the surface. Columns with no defined biome keep `ceiling`.

    This is a coarse, resolution-limited approximation: it does not see
    overhangs or caves, and it can only return values on the probe lattice.
    """
    heights = np.full(np.shape(xs), ceiling, dtype=np.int32)
    unresolved = np.ones(np.shape(xs), dtype=bool)

    for test_y in range(ceiling, floor - 1, -step):
        if not unresolved.any():
            break
        biomes = query_biomes(world, probe_scale, xs[unresolved], test_y, zs[unresolved])
        defined = biomes != UNDEFINED_BIOME
        hits = np.flatnonzero(unresolved)[defined]
        heights.flat[hits] = test_y
        unresolved.flat[hits] = False
    return heights


def probe_surface_height(world, x: int, z: int, **kwargs) -> int:
    """Single-column form of `probe_surface_heights`."""
    return int(probe_surface_heights(world, np.array([x]), np.array([z]), **kwargs)[0])


def estimate_surface_heights(world, variant: int, xs: np.ndarray, zs: np.ndarray, settings: dict = None) -> np.ndarray:
    """
    Surface heights for every (xs, zs) column, by the best available method:
      1. the world model's direct `surface_heights_at` accessor;
      2. the downward biome probe, for variants with 3D biomes;
      3. a fixed reference height, for variants without them.
    """
    settings = settings or {}
    accessor = getattr(world, "surface_heights_at", None)
    if callable(accessor):
        direct = accessor(xs, zs)
        if direct is not None:
            return np.asarray(direct).astype(np.int32).reshape(np.shape(xs))

    if versions.supports_3d_biomes(variant):
        return probe_surface_heights(
            world, xs, zs,
            ceiling=settings.get('build_ceiling', DEFAULTS.BUILD_CEILING),
            floor=settings.get('build_floor', DEFAULTS.BUILD_FLOOR),
            step=settings.get('probe_step', DEFAULTS.SURFACE_PROBE_STEP),
            probe_scale=settings.get('probe_scale', DEFAULTS.SURFACE_PROBE_SCALE),
        )

    fallback = settings.get('fallback_surface_height', DEFAULTS.FALLBACK_SURFACE_HEIGHT)
    return np.full(np.shape(xs), fallback, dtype=np.int32)


def sample_padded_grid(world, x: int, z: int, width: int, height: int, scale: int,
                       y_level: int, with_heights: bool, variant: int,
                       settings: dict = None) -> PaddedGrid:
    """Samples the (height + 2) x (width + 2) grid around the requested rectangle."""
    wx_grid, wz_grid = padded_coordinates(x, z, width, height, scale)
    biomes = query_biomes(world, scale, wx_grid, y_level, wz_grid)

    heights = None
    if with_heights:
        heights = estimate_surface_heights(world, variant, wx_grid, wz_grid, settings)

    logger.debug(
        f"Sampled padded grid {width + 2}x{height + 2} at ({x}, {z}), scale {scale}, "
        f"heights={'yes' if with_heights else 'no'}."
    )
    return PaddedGrid(biomes=biomes, heights=heights)
