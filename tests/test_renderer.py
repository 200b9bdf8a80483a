import logging

import numpy as np
import pytest

from biome_renderer import hillshade, palette, versions
from biome_renderer.renderer import RenderContext, lookup_biome, resolve_version
from biome_renderer.world_model import NoiseWorldModel, split_seed
from conftest import ConstantWorld, HeightFieldWorld


def render_bytes(context, *args):
    size = context.render(*args)
    return size, bytes(context.get_buffer()[:size])


def test_constant_world_scenario():
    context = RenderContext(world_factory=lambda: ConstantWorld(1))
    size = context.render(0, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, hillshade.SHADE_NONE, 64)
    assert size == 16
    plains = tuple(context.biome_lut[1])
    image = context.image()
    for py in range(2):
        for px in range(2):
            assert tuple(image[py, px]) == plains + (255,)


@pytest.mark.parametrize("width,height,scale", [(1, 1, 1), (7, 3, 4), (16, 9, 64)])
@pytest.mark.parametrize("shade_mode", [0, 1, 2])
def test_byte_count_and_alpha(width, height, scale, shade_mode):
    context = RenderContext()
    size, data = render_bytes(context, 42, 0, -300, 200, width, height, scale, versions.MC_NEWEST, shade_mode, 64)
    assert size == width * height * 4
    assert all(b == 255 for b in data[3::4])


def test_unshaded_output_is_raw_palette():
    context = RenderContext()
    seed_lo, seed_hi = split_seed(123456789)
    context.render(seed_lo, seed_hi, 0, 0, 12, 8, 16, versions.MC_1_20, hillshade.SHADE_NONE, 64)

    world = NoiseWorldModel()
    world.initialize(versions.MC_1_20, 0)
    world.set_seed(123456789, 0)
    image = context.image()
    for py in range(8):
        for px in range(12):
            biome = world.biome_at(16, px * 16, 64, py * 16)
            assert tuple(image[py, px, :3]) == palette.lookup_color(context.biome_lut, biome)


def test_render_is_idempotent():
    context = RenderContext()
    args = (99, 7, 1000, -2000, 20, 15, 4, versions.MC_1_21, hillshade.SHADE_STEPPED, 64)
    _, first = render_bytes(context, *args)
    _, second = render_bytes(context, *args)
    assert first == second
    _, fresh = render_bytes(RenderContext(), *args)
    assert first == fresh


def test_stepped_is_darker_or_equal_than_simple():
    world_factory = lambda: HeightFieldWorld(lambda xs, zs: (xs * 3 + zs) % 90)
    context = RenderContext(world_factory=world_factory)
    args = (0, 0, 0, 0, 10, 10, 1, versions.MC_NEWEST)
    context.render(*args, hillshade.SHADE_SIMPLE, 64)
    simple = context.image().copy()
    context.render(*args, hillshade.SHADE_STEPPED, 64)
    stepped = context.image().copy()

    xs = np.arange(10)[np.newaxis, :]
    zs = np.arange(10)[:, np.newaxis]
    even_band = ((xs * 3 + zs) % 90 // 16) % 2 == 0
    assert (stepped[even_band][:, :3] <= simple[even_band][:, :3]).all()
    np.testing.assert_array_equal(stepped[~even_band], simple[~even_band])


def test_buffer_growth_is_monotonic():
    context = RenderContext(world_factory=ConstantWorld)
    context.render(0, 0, 0, 0, 32, 32, 1, versions.MC_NEWEST, 0, 64)
    big = context.buffer.capacity
    context.render(0, 0, 0, 0, 4, 4, 1, versions.MC_NEWEST, 0, 64)
    assert context.buffer.capacity == big
    assert context.buffer.reallocations == 1
    context.render(0, 0, 0, 0, 64, 40, 1, versions.MC_NEWEST, 0, 64)
    assert context.buffer.capacity >= 64 * 40 * 4
    assert context.image().shape == (40, 64, 4)


def test_invalid_requests_return_zero_and_keep_buffer():
    context = RenderContext(world_factory=ConstantWorld)
    assert context.render(0, 0, 0, 0, 0, 5, 1, versions.MC_NEWEST, 0, 64) == 0
    assert context.get_buffer() is None
    context.render(0, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, 0, 64)
    assert context.render(0, 0, 0, 0, 2, 2, 0, versions.MC_NEWEST, 0, 64) == 0
    assert context.render(0, 0, 0, 0, 2, -1, 1, versions.MC_NEWEST, 0, 64) == 0
    assert context.buffer.capacity == 16


def test_allocation_failure_returns_zero(monkeypatch):
    context = RenderContext(world_factory=ConstantWorld)
    monkeypatch.setattr(context.buffer, "reserve", lambda nbytes: False)
    assert context.render(0, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, 0, 64) == 0
    assert context.image() is None


def test_world_is_only_rebound_when_configuration_changes():
    worlds = []

    def factory():
        worlds.append(ConstantWorld())
        return worlds[-1]

    context = RenderContext(world_factory=factory)
    context.render(1, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, 0, 64)
    context.render(1, 0, 8, 8, 2, 2, 1, versions.MC_NEWEST, 0, 64)
    assert len(worlds) == 1 and worlds[0].init_calls == 1
    context.render(2, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, 0, 64)
    assert worlds[0].init_calls == 2
    assert worlds[0].seed == 2


def test_unknown_variant_uses_latest():
    context = RenderContext(world_factory=ConstantWorld)
    context.render(0, 0, 0, 0, 1, 1, 1, 999, 0, 64)
    assert context.world.variant == versions.MC_NEWEST


def test_seed_halves_are_joined_as_signed_64_bit():
    context = RenderContext(world_factory=ConstantWorld)
    context.render(0xFFFFFFFF, 0xFFFFFFFF, 0, 0, 1, 1, 1, versions.MC_NEWEST, 0, 64)
    assert context.world.seed == -1


def test_lookup_biome_uses_a_throwaway_model():
    created = []

    def factory():
        created.append(ConstantWorld(palette.BIOME_DESERT))
        return created[-1]

    assert lookup_biome(0, 0, 5, 64, 5, 1, versions.MC_NEWEST, world_factory=factory) == palette.BIOME_DESERT
    assert lookup_biome(0, 0, 5, 64, 5, 1, versions.MC_NEWEST, world_factory=factory) == palette.BIOME_DESERT
    assert len(created) == 2


def test_lookup_biome_matches_render_context():
    context = RenderContext()
    context.render(5, 0, 64, 64, 1, 1, 1, versions.MC_1_19, 0, 64)
    rendered = tuple(context.image()[0, 0, :3])
    biome = lookup_biome(5, 0, 64, 64, 64, 1, versions.MC_1_19)
    assert rendered == palette.lookup_color(context.biome_lut, biome)


def test_resolve_version():
    assert resolve_version("1.21.4") == versions.MC_1_21_WD
    assert resolve_version("1_19_2") == versions.MC_1_19_2


def test_oversized_render_returns_zero():
    context = RenderContext(world_factory=ConstantWorld)
    size = 2**31 - 1
    assert context.render(0, 0, 0, 0, size, size, 1, versions.MC_NEWEST, 0, 64) == 0
    assert context.image() is None


class FailingWorld(ConstantWorld):
    def biome_at(self, scale, x, y, z):
        raise RuntimeError("generator crashed")


def test_world_model_errors_do_not_escape_render():
    context = RenderContext(world_factory=FailingWorld)
    assert context.render(0, 0, 0, 0, 2, 2, 1, versions.MC_NEWEST, 0, 64) == 0
    assert context.image() is None


def test_unknown_variant_warning_is_logged_once(caplog):
    context = RenderContext(world_factory=ConstantWorld)
    with caplog.at_level(logging.WARNING):
        for tile_x in range(3):
            context.render(0, 0, tile_x * 16, 0, 2, 2, 1, 999, 0, 64)
    warnings = [r for r in caplog.records if "Unknown variant" in r.getMessage()]
    assert len(warnings) == 1
