# biome_renderer/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides 2D Perlin noise evaluated at arbitrary, unordered sample
points. It backs the reference world model and is designed to be a pure,
stateless utility.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled NumPy permutation table (int array of length 512).
    - x, y: flat (1D) NumPy float arrays of sample coordinates.
    - octaves, persistence, lacunarity: Standard noise parameters.
- Outputs:
    - A flat NumPy array of noise values (roughly in the range [-1, 1]).
- Side Effects: None.
- Invariants: len(output) == len(x) == len(y). The same table and
  coordinates always give the same values.
================================================================================
"""

import numpy as np
from numba import njit

# Pre-defined gradient vectors for performance.
_GRADIENT_VECTORS = np.array([[1, 1], [-1, 1], [1, -1], [-1, -1], [1, 0], [-1, 0], [0, 1], [0, -1]])


def make_permutation_table(seed: int, layer_offset: int) -> np.ndarray:
    """
    Builds a doubled 256-entry permutation table for one noise layer.
    Any 64-bit seed, including negative ones, maps to a distinct table.
    """
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng([seed & 0xFFFFFFFFFFFFFFFF, layer_offset])
    rng.shuffle(p)
    return np.concatenate([p, p])


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _gradient(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS[h % 8]
    return g[0] * x + g[1] * y


@njit
def perlin_noise_points(p, x, y, octaves=1, persistence=0.5, lacunarity=2.0):
    """
    Generate fractal 2D Perlin noise at each (x[k], y[k]) sample point.
    The result is normalised by the total octave amplitude.
    """
    n = x.shape[0]
    total_noise = np.zeros(n)

    max_amplitude = 0.0
    amplitude = 1.0
    for _ in range(octaves):
        max_amplitude += amplitude
        amplitude *= persistence

    for k in range(n):
        noise_val = 0.0
        amplitude = 1.0
        frequency = 1.0

        for _ in range(octaves):
            x_sample = x[k] * frequency
            y_sample = y[k] * frequency

            xi = int(np.floor(x_sample))
            yi = int(np.floor(y_sample))

            xf = x_sample - xi
            yf = y_sample - yi

            u = _fade(xf)
            v = _fade(yf)

            px0 = xi % 256
            px1 = (px0 + 1) % 256
            py0 = yi % 256
            py1 = (py0 + 1) % 256

            idx00 = p[p[px0] + py0]
            idx01 = p[p[px0] + py1]
            idx10 = p[p[px1] + py0]
            idx11 = p[p[px1] + py1]

            g00 = _gradient(idx00, xf, yf)
            g01 = _gradient(idx01, xf, yf - 1)
            g10 = _gradient(idx10, xf - 1, yf)
            g11 = _gradient(idx11, xf - 1, yf - 1)

            x1 = _lerp(g00, g10, u)
            x2 = _lerp(g01, g11, u)
            noise_val += _lerp(x1, x2, v) * amplitude

            amplitude *= persistence
            frequency *= lacunarity

        total_noise[k] = noise_val / max_amplitude

    return total_noise


def sample_layer(p: np.ndarray, x: np.ndarray, z: np.ndarray, feature_scale: float,
                 octaves: int, persistence: float, lacunarity: float) -> np.ndarray:
    """Evaluates one noise layer at block coordinates, keeping the input shape."""
    xs = np.ascontiguousarray(np.ravel(x), dtype=np.float64) / feature_scale
    zs = np.ascontiguousarray(np.ravel(z), dtype=np.float64) / feature_scale
    values = perlin_noise_points(p, xs, zs, octaves, persistence, lacunarity)
    return values.reshape(np.shape(x))
