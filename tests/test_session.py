import numpy as np

from biome_renderer import palette, versions
from biome_renderer.session import BiomeSession
from biome_renderer.world_model import UNDEFINED_BIOME, NoiseWorldModel
from conftest import CeilingWorld, ConstantWorld


def test_queries_before_init_return_sentinels():
    session = BiomeSession()
    session.set_seed(1, 0, 0)
    assert session.seed is None
    assert session.get_biome_at(0, 0, 64) == UNDEFINED_BIOME
    assert session.biome_to_str(palette.BIOME_PLAINS) == ""
    assert session.gen_biomes(0, 0, 4, 4, 1, 64) is None
    assert session.gen_heightmap(0, 0, 4, 4) is None
    assert session.get_variant() == versions.MC_UNDEF


def test_init_resolves_version():
    session = BiomeSession()
    session.init(1, 21, 4)
    assert session.get_variant() == versions.MC_1_21_WD
    assert session.biome_to_str(palette.BIOME_PLAINS) == "plains"


def test_gen_biomes_origin_truncates_toward_zero():
    world = ConstantWorld()
    session = BiomeSession(world_factory=lambda: world)
    session.init(1, 21, 4)
    session.set_seed(0, 0)
    biomes = session.gen_biomes(-7, 9, 3, 2, 4, 64)
    assert biomes.shape == (2, 3)
    xs = sorted({call[1] for call in world.calls})
    zs = sorted({call[3] for call in world.calls})
    # -7 / 4 -> -1, 9 / 4 -> 2
    assert xs == [-4, 0, 4]
    assert zs == [8, 12]


def test_gen_biomes_matches_point_queries():
    session = BiomeSession()
    session.init(1, 20, 6)
    session.set_seed(42, 0, 0)
    grid = session.gen_biomes(0, 0, 5, 5, 1, 64)
    for j in range(5):
        for i in range(5):
            assert grid[j, i] == session.get_biome_at(i, j, 64)


def test_gen_heightmap_uses_quart_coordinates():
    session = BiomeSession()
    session.init(1, 21, 4)
    session.set_seed(42, 0, 0)
    heights = session.gen_heightmap(10, -3, 4, 2)
    assert heights.shape == (2, 4)
    assert heights.dtype == np.float32

    world = NoiseWorldModel()
    world.initialize(versions.MC_1_21_WD, 0)
    world.set_seed(42, 0)
    expected = world.surface_heights_at(np.array([40, 44, 48, 52]), np.array([-12] * 4))
    np.testing.assert_array_equal(heights[0], expected.astype(np.float32))


def test_gen_heightmap_falls_back_to_probe():
    session = BiomeSession(world_factory=lambda: CeilingWorld(ceiling=100))
    session.init(1, 19, 4)
    session.set_seed(0, 0)
    assert (session.gen_heightmap(0, 0, 2, 2) == 99).all()


def test_set_seed_changes_results():
    session = BiomeSession()
    session.init(1, 21, 4)
    session.set_seed(1, 0)
    first = session.gen_biomes(0, 0, 16, 16, 64, 64)
    session.set_seed(2, 0)
    assert not np.array_equal(first, session.gen_biomes(0, 0, 16, 16, 64, 64))
