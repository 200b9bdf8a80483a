import json

import numpy as np
from PIL import Image

import bake_map
from biome_renderer.renderer import RenderContext


def read_rgba(path):
    with Image.open(path) as img:
        return np.array(img.convert('RGBA'))


def test_save_image_tiers_are_lossless(tmp_path):
    uniform = np.zeros((8, 8, 4), dtype=np.uint8)
    uniform[...] = (10, 20, 30, 255)
    assert bake_map.save_image(uniform, str(tmp_path), "uniform") == 'uniform'
    np.testing.assert_array_equal(read_rgba(tmp_path / "uniform.png"), uniform)

    few = uniform.copy()
    few[::2, ::3, :3] = (200, 100, 0)
    assert bake_map.save_image(few, str(tmp_path), "few") == 'palettized'
    np.testing.assert_array_equal(read_rgba(tmp_path / "few.png"), few)

    rng = np.random.default_rng(0)
    many = rng.integers(0, 256, size=(32, 32, 4), dtype=np.uint8)
    many[..., 3] = 255
    assert bake_map.save_image(many, str(tmp_path), "many") == 'full'
    np.testing.assert_array_equal(read_rgba(tmp_path / "many.png"), many)


def test_resolve_parameters_precedence():
    params = bake_map.resolve_parameters({'seed': 5, 'scale': 16}, {'seed': 9, 'scale': None})
    assert params['seed'] == 9
    assert params['scale'] == 16
    assert params['shade'] == bake_map.DEFAULT_RENDER_PARAMETERS['shade']


def test_render_region_returns_a_copy():
    context = RenderContext()
    params = bake_map.resolve_parameters({}, {'seed': 3, 'scale': 16, 'shade': 'stepped'})
    first = bake_map.render_region(context, params, 0, 0, 8, 6)
    assert first.shape == (6, 8, 4)
    bake_map.render_region(context, params, 5000, 5000, 8, 6)
    np.testing.assert_array_equal(first, bake_map.render_region(RenderContext(), params, 0, 0, 8, 6))


def test_main_writes_region_png(tmp_path):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        'render_parameters': {'seed': 7, 'version': '1.20.6', 'width': 16, 'height': 12, 'scale': 8},
        'context': {'palette': 'soft'},
    }))
    output = tmp_path / "out" / "map.png"
    assert bake_map.main(["--config", str(config_path), "--shade", "none", "--output", str(output)]) == 0

    image = read_rgba(output)
    assert image.shape == (12, 16, 4)
    context = RenderContext(config={'palette': 'soft'})
    params = bake_map.resolve_parameters({'seed': 7, 'version': '1.20.6', 'scale': 8, 'shade': 'none'}, {})
    np.testing.assert_array_equal(image, bake_map.render_region(context, params, 0, 0, 16, 12))


def test_main_rejects_missing_config(tmp_path):
    assert bake_map.main(["--config", str(tmp_path / "missing.json")]) == 1


def test_bake_tiles_writes_manifest(tmp_path):
    params = bake_map.resolve_parameters({}, {'seed': 1, 'scale': 256, 'shade': 'simple'})
    logger = bake_map.logging.getLogger("test")
    manifest = bake_map.bake_tiles(params, {}, str(tmp_path), 2, 1, logger, num_workers=1)

    assert set(manifest['tile_map']) == {"0,0", "1,0"}
    on_disk = json.loads((tmp_path / "manifest.json").read_text())
    assert on_disk == manifest
    for file_hash in manifest['tile_map'].values():
        tile = read_rgba(tmp_path / "tiles" / f"{file_hash}.png")
        assert tile.shape == (256, 256, 4)
