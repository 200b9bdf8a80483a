# biome_renderer/hillshade.py

"""
================================================================================
HILLSHADE CALCULATOR
================================================================================
Per-pixel lighting from a local height gradient. A 4-point discrete gradient
approximates directional relief; dividing by the scale keeps the perceived
shading intensity independent of sampling resolution.

    d0    = north + west
    d1    = east + south
    light = clamp(1 + (d1 - d0) * 0.25 / scale, 0.5, 1.5)

Stepped mode additionally multiplies by 0.95 wherever floor(h / 16) is even,
h being the centre cell's own height, producing 16-block elevation bands.

Arithmetic is carried out in float32 so results match the single-precision
reference exactly.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS

# --- Shade Modes ---
SHADE_NONE = 0
SHADE_SIMPLE = 1
SHADE_STEPPED = 2

SHADE_MODE_NAMES = {
    "none": SHADE_NONE,
    "simple": SHADE_SIMPLE,
    "stepped": SHADE_STEPPED,
}

_LIGHT_MIN = np.float32(DEFAULTS.LIGHT_MIN)
_LIGHT_MAX = np.float32(DEFAULTS.LIGHT_MAX)
_GRADIENT_WEIGHT = np.float32(DEFAULTS.LIGHT_GRADIENT_WEIGHT)
_BAND_DARKEN = np.float32(DEFAULTS.STEPPED_BAND_DARKEN)


def calculate_hillshade(h_north: int, h_south: int, h_east: int, h_west: int, scale: float) -> float:
    """Returns the clamped light multiplier for one pixel."""
    d0 = np.float32(h_north + h_west)
    d1 = np.float32(h_east + h_south)
    mul = _GRADIENT_WEIGHT / np.float32(scale)
    light = np.float32(1.0) + (d1 - d0) * mul
    return float(min(max(light, _LIGHT_MIN), _LIGHT_MAX))


def is_dark_band(height) -> np.ndarray:
    "True where floor(height / 16) is even."
    return np.floor_divide(height, DEFAULTS.STEPPED_BAND_HEIGHT) % 2 == 0


def apply_stepped(light, center_height):
    """Darkens the light multiplier on even 16-block bands."""
    light = np.asarray(light, dtype=np.float32)
    return np.where(is_dark_band(center_height), light * _BAND_DARKEN, light).astype(np.float32)


def light_grid(heights: np.ndarray, scale: float, stepped: bool = False) -> np.ndarray:
    """
    Computes the light multiplier for every interior cell of a padded height
    grid of shape (h + 2, w + 2). Returns a float32 array of shape (h, w).
    """
    heights = np.asarray(heights, dtype=np.int64)
    h_north = heights[:-2, 1:-1]
    h_south = heights[2:, 1:-1]
    h_east = heights[1:-1, 2:]
    h_west = heights[1:-1, :-2]

    d0 = (h_north + h_west).astype(np.float32)
    d1 = (h_east + h_south).astype(np.float32)
    mul = _GRADIENT_WEIGHT / np.float32(scale)
    light = np.clip(np.float32(1.0) + (d1 - d0) * mul, _LIGHT_MIN, _LIGHT_MAX).astype(np.float32)

    if stepped:
        light = apply_stepped(light, heights[1:-1, 1:-1])
    return light
