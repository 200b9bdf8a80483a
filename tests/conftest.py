import numpy as np
import pytest

from biome_renderer.world_model import UNDEFINED_BIOME


class ConstantWorld:
    """Returns the same biome everywhere; has no height accessor."""
    def __init__(self, biome_id: int = 1):
        self.biome_id = biome_id
        self.calls = []
        self.init_calls = 0

    def initialize(self, variant, flags):
        self.variant = variant
        self.init_calls += 1

    def set_seed(self, seed, dimension):
        self.seed = seed

    def biome_at(self, scale, x, y, z):
        self.calls.append((scale, x, y, z))
        return self.biome_id


class CeilingWorld(ConstantWorld):
    """Undefined above `ceiling`, `biome_id` at or below it."""
    def __init__(self, ceiling: int = 100, biome_id: int = 1):
        super().__init__(biome_id)
        self.ceiling = ceiling

    def biome_at(self, scale, x, y, z):
        self.calls.append((scale, x, y, z))
        return self.biome_id if y <= self.ceiling else UNDEFINED_BIOME


class HeightFieldWorld(ConstantWorld):
    """Biome id is x mod 7; surface height comes from a function of (x, z)."""
    def __init__(self, height_fn):
        super().__init__()
        self.height_fn = height_fn

    def biome_at(self, scale, x, y, z):
        return x % 7

    def biomes_at(self, scale, xs, y, zs):
        return np.asarray(xs) % 7

    def surface_heights_at(self, xs, zs):
        return self.height_fn(np.asarray(xs), np.asarray(zs))


@pytest.fixture
def constant_world():
    return ConstantWorld()
