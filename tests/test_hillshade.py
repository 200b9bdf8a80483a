import numpy as np

from biome_renderer import hillshade


def test_flat_terrain_is_neutral():
    assert hillshade.calculate_hillshade(64, 64, 64, 64, 1) == 1.0


def test_gradient_formula():
    # d0 = north + west = 60 + 60, d1 = east + south = 62 + 62
    light = hillshade.calculate_hillshade(60, 62, 62, 60, 4)
    assert light == np.float32(1.0) + np.float32(4) * (np.float32(0.25) / np.float32(4))


def test_multiplier_is_clamped():
    assert hillshade.calculate_hillshade(0, 300, 300, 0, 1) == 1.5
    assert hillshade.calculate_hillshade(300, 0, 0, 300, 1) == 0.5
    rng = np.random.default_rng(7)
    for n, s, e, w in rng.integers(-64, 320, size=(200, 4)):
        for scale in (1, 4, 16, 64):
            light = hillshade.calculate_hillshade(int(n), int(s), int(e), int(w), scale)
            assert 0.5 <= light <= 1.5


def test_larger_scale_softens_shading():
    steep = hillshade.calculate_hillshade(60, 64, 64, 60, 1)
    soft = hillshade.calculate_hillshade(60, 64, 64, 60, 16)
    assert steep > soft > 1.0


def test_light_grid_matches_scalar_function():
    rng = np.random.default_rng(3)
    heights = rng.integers(0, 200, size=(6, 7))
    light = hillshade.light_grid(heights, 4)
    assert light.shape == (4, 5)
    assert light.dtype == np.float32
    for j in range(4):
        for i in range(5):
            expected = hillshade.calculate_hillshade(
                int(heights[j, i + 1]), int(heights[j + 2, i + 1]),
                int(heights[j + 1, i + 2]), int(heights[j + 1, i]), 4
            )
            assert light[j, i] == np.float32(expected)


def test_stepped_darkens_even_bands_only():
    heights = np.full((3, 3), 40)  # floor(40 / 16) = 2, even
    assert hillshade.light_grid(heights, 1, stepped=True)[0, 0] == np.float32(0.95)
    heights = np.full((3, 3), 20)  # floor(20 / 16) = 1, odd
    assert hillshade.light_grid(heights, 1, stepped=True)[0, 0] == np.float32(1.0)


def test_band_uses_floor_division_for_negative_heights():
    # floor(-1 / 16) = -1 (odd), floor(-17 / 16) = -2 (even)
    assert not hillshade.is_dark_band(-1)
    assert hillshade.is_dark_band(-17)
