# biome_renderer/compositor.py

"""
================================================================================
COMPOSITOR
================================================================================
Turns a padded sample grid into RGBA8888 pixels: the interior biome ids are
masked to 0-255 and looked up in the palette, optionally multiplied by the
hillshade light, truncated to 8 bits and written with alpha 255.

Data Contract:
---------------
- Inputs: a PaddedGrid, a (256, 3) uint8 palette, a shade mode, the scale,
  and a writable (height, width, 4) uint8 target.
- Outputs: the target, fully overwritten.
- Invariants: every pixel of the width x height region is written exactly
  once; alpha is always 255. With shading off, RGB equals the raw palette
  color. Shaded channels are clipped to [0, 255] before truncation.
================================================================================
"""
import numpy as np

from . import hillshade
from . import palette
from .sampler import PaddedGrid

OPAQUE = 255


def shade_colors(colors: np.ndarray, light: np.ndarray) -> np.ndarray:
    """Multiplies each RGB channel by the light and truncates to uint8."""
    lit = colors.astype(np.float32) * light[..., np.newaxis]
    return np.clip(lit, 0, 255).astype(np.uint8)


def composite(grid: PaddedGrid, biome_lut: np.ndarray, shade_mode: int, scale: int, target: np.ndarray) -> np.ndarray:
    """
    Writes the grid's interior into `target` as RGBA. Any shade mode above
    SHADE_NONE applies hillshade from the grid heights, and SHADE_STEPPED
    adds the alternating band darkening. Returns `target`.
    """
    interior = grid.biomes[1:-1, 1:-1]
    colors = palette.get_biome_color_array(interior, biome_lut)

    if shade_mode > hillshade.SHADE_NONE and grid.heights is not None:
        light = hillshade.light_grid(grid.heights, scale, stepped=shade_mode == hillshade.SHADE_STEPPED)
        colors = shade_colors(colors, light)

    target[..., :3] = colors
    target[..., 3] = OPAQUE
    return target
