# bake_map.py

"""
================================================================================
OFFLINE MAP BAKER SCRIPT
================================================================================
This script is a command-line tool for rendering biome maps to PNG files.

It runs in one of two modes:
    - region: render a single rectangle to one image.
    - tiles:  render a grid of fixed-size tiles in parallel worker processes,
              deduplicate identical tiles by content hash and write a
              manifest.json that maps tile coordinates to image files.

Every worker process owns its own RenderContext; contexts are never shared.

Usage:
    python bake_map.py --seed 42 --version 1.21.4 --width 512 --height 512 --shade simple
    python bake_map.py --config path/to/config.json --tiles-x 4 --tiles-z 4
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import hashlib
import collections
import multiprocessing

import numpy as np
from PIL import Image
from tqdm import tqdm

from biome_renderer import config as DEFAULTS
from biome_renderer import hillshade
from biome_renderer.renderer import RenderContext, build_settings, resolve_version
from biome_renderer.world_model import split_seed

# --- Default Render Parameters ---
DEFAULT_RENDER_PARAMETERS = {
    'seed': DEFAULTS.DEFAULT_SEED,
    'version': "1.21",
    'x': 0,
    'z': 0,
    'width': 512,
    'height': 512,
    'scale': 4,
    'shade': "simple",
    'y_level': DEFAULTS.DEFAULT_Y_LEVEL,
}


# --- Helper for Tiered Image Compression ---
def save_image(rgba: np.ndarray, directory: str, file_name: str) -> str:
    """
    Saves an RGBA image using a tiered, lossless compression strategy with Pillow.
    Returns the compression tier that was used.
    """
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{file_name}.png")

    # Alpha is always opaque, so palettized tiers only keep RGB.
    rgb = np.ascontiguousarray(rgba[..., :3])
    palette_colors, indices = np.unique(rgb.reshape(-1, 3), axis=0, return_inverse=True)

    # Tiers 1 and 2: uniform or low color count images become palettized.
    # The palette is built from the exact colors, so nothing is lost.
    if len(palette_colors) <= 256:
        img = Image.frombytes('P', (rgb.shape[1], rgb.shape[0]), indices.astype(np.uint8).tobytes())
        img.putpalette(palette_colors.astype(np.uint8).tobytes())
        img.save(file_path, 'PNG')
        return 'uniform' if len(palette_colors) == 1 else 'palettized'

    # Tier 3: Fallback for high-color images.
    Image.fromarray(np.ascontiguousarray(rgba)).save(file_path, 'PNG')
    return 'full'


def resolve_parameters(file_params: dict, cli_overrides: dict) -> dict:
    """Merges defaults, config-file values and command-line values, in that order."""
    params = dict(DEFAULT_RENDER_PARAMETERS)
    params.update(file_params)
    params.update({k: v for k, v in cli_overrides.items() if v is not None})
    return params


def render_region(context: RenderContext, params: dict, x: int, z: int, width: int, height: int) -> np.ndarray | None:
    """Renders one rectangle and returns a copy of its pixels."""
    seed_lo, seed_hi = split_seed(params['seed'])
    size = context.render(
        seed_lo, seed_hi, x, z, width, height,
        params['scale'],
        resolve_version(str(params['version'])),
        hillshade.SHADE_MODE_NAMES[params['shade']],
        params['y_level'],
    )
    if size == 0:
        return None
    return context.image().copy()


# --- Global variables for worker processes ---
worker_context = None
worker_params = {}
worker_tile_dir = ""


def init_worker(params, context_config, tile_dir):
    """Initializes the per-process render context."""
    global worker_context, worker_params, worker_tile_dir

    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    worker_context = RenderContext(config=context_config, logger=worker_logger)
    worker_params = params
    worker_tile_dir = tile_dir


def process_tile(coords):
    """
    Renders and SAVES a single tile. Returns only minimal metadata.
    """
    tx, tz = coords
    tile_blocks = DEFAULTS.TILE_SIZE * worker_params['scale']
    x = worker_params['x'] + tx * tile_blocks
    z = worker_params['z'] + tz * tile_blocks

    rgba = render_region(worker_context, worker_params, x, z, DEFAULTS.TILE_SIZE, DEFAULTS.TILE_SIZE)
    if rgba is None:
        return {'tx': tx, 'tz': tz, 'hash': None, 'compression': None}

    file_hash = hashlib.md5(rgba.tobytes()).hexdigest()
    file_path = os.path.join(worker_tile_dir, f"{file_hash}.png")
    compression = 'existing' if os.path.exists(file_path) else save_image(rgba, worker_tile_dir, file_hash)
    return {'tx': tx, 'tz': tz, 'hash': file_hash, 'compression': compression}


# --- Main Baking Functions ---
def bake_region(params: dict, context_config: dict, output_path: str, logger: logging.Logger) -> bool:
    context = RenderContext(config=context_config, logger=logger)
    rgba = render_region(context, params, params['x'], params['z'], params['width'], params['height'])
    if rgba is None:
        logger.error("Render failed; no image written.")
        return False

    directory, file_name = os.path.split(os.path.abspath(output_path))
    compression = save_image(rgba, directory, os.path.splitext(file_name)[0])
    logger.info(f"Saved {params['width']}x{params['height']} map to '{output_path}' ({compression}).")
    return True


def bake_tiles(params: dict, context_config: dict, output_dir: str, tiles_x: int, tiles_z: int,
               logger: logging.Logger, num_workers: int = None) -> dict:
    """
    Renders a tiles_x by tiles_z grid of tiles starting at (x, z) and writes
    them plus manifest.json into `output_dir`. Returns the manifest.
    """
    tile_dir = os.path.join(output_dir, "tiles")
    os.makedirs(tile_dir, exist_ok=True)

    tasks = [(tx, tz) for tz in range(tiles_z) for tx in range(tiles_x)]
    total_tiles = len(tasks)
    if num_workers is None:
        num_workers = max(1, multiprocessing.cpu_count() - 1)
    num_workers = min(num_workers, total_tiles)
    logger.info(f"Starting parallel bake of {tiles_x}x{tiles_z} tiles with {num_workers} worker processes...")

    tile_map = {}
    saved_hashes = set()
    compression_stats = collections.Counter()
    start_time = time.perf_counter()

    init_args = (params, context_config, tile_dir)
    with multiprocessing.Pool(processes=num_workers, initializer=init_worker, initargs=init_args) as pool:
        results_iterator = pool.imap_unordered(process_tile, tasks)

        for result in tqdm(results_iterator, total=total_tiles, desc="Baking Tiles"):
            if result['hash'] is None:
                logger.warning(f"Tile ({result['tx']}, {result['tz']}) failed to render.")
                continue
            tile_map[f"{result['tx']},{result['tz']}"] = result['hash']
            if result['hash'] not in saved_hashes:
                saved_hashes.add(result['hash'])
                compression_stats[result['compression']] += 1

    manifest = {
        'seed': params['seed'],
        'version': str(params['version']),
        'origin': [params['x'], params['z']],
        'scale': params['scale'],
        'shade': params['shade'],
        'y_level': params['y_level'],
        'tile_size_pixels': DEFAULTS.TILE_SIZE,
        'tile_dimensions': [tiles_x, tiles_z],
        'tile_map': tile_map,
    }
    with open(os.path.join(output_dir, "manifest.json"), 'w') as f:
        json.dump(manifest, f, indent=2)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(
        f"  - {total_tiles} total -> {len(saved_hashes)} unique tiles saved "
        f"({compression_stats['uniform']} uniform, {compression_stats['palettized']} palettized, "
        f"{compression_stats['full']} full)"
    )
    return manifest


def load_config(config_path: str, logger: logging.Logger) -> dict | None:
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Offline biome map baker.")
    parser.add_argument("--config", type=str, help="Path to a JSON configuration file.")
    parser.add_argument("--seed", type=int, help="64-bit world seed.")
    parser.add_argument("--version", type=str, help="Game version, e.g. 1.21.4 or 1_20_6.")
    parser.add_argument("--x", type=int, help="Top-left X block coordinate.")
    parser.add_argument("--z", type=int, help="Top-left Z block coordinate.")
    parser.add_argument("--width", type=int, help="Image width in pixels (region mode).")
    parser.add_argument("--height", type=int, help="Image height in pixels (region mode).")
    parser.add_argument("--scale", type=int, help="Blocks per pixel.")
    parser.add_argument("--shade", choices=sorted(hillshade.SHADE_MODE_NAMES), help="Hillshade mode.")
    parser.add_argument("--y-level", dest="y_level", type=int, help="Y level for 3D biomes.")
    parser.add_argument("--tiles-x", type=int, default=0, help="Number of tile columns (enables tile mode).")
    parser.add_argument("--tiles-z", type=int, default=0, help="Number of tile rows (enables tile mode).")
    parser.add_argument("--workers", type=int, help="Worker processes for tile mode.")
    parser.add_argument("--output", type=str, default="biome_map.png",
                        help="Output PNG (region mode) or directory (tile mode).")
    return parser


def main(argv=None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")
    args = build_parser().parse_args(argv)

    config = {}
    if args.config:
        config = load_config(args.config, logger)
        if config is None:
            return 1

    cli_overrides = {
        'seed': args.seed, 'version': args.version, 'x': args.x, 'z': args.z,
        'width': args.width, 'height': args.height, 'scale': args.scale,
        'shade': args.shade, 'y_level': args.y_level,
    }
    params = resolve_parameters(config.get('render_parameters', {}), cli_overrides)
    context_config = build_settings(config.get('context', {}))

    if args.tiles_x > 0 and args.tiles_z > 0:
        bake_tiles(params, context_config, args.output, args.tiles_x, args.tiles_z, logger, args.workers)
        return 0
    return 0 if bake_region(params, context_config, args.output, logger) else 1


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
