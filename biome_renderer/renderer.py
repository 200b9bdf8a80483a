# biome_renderer/renderer.py

"""
================================================================================
RENDER CONTEXT
================================================================================
This module provides the user-facing `RenderContext`, the primary interface
for turning a rectangle of a seeded world into an RGBA8888 raster.

A context owns one world model binding and one grow-only pixel buffer. It is
single-owner and single-writer: callers that render concurrently must each
hold their own context.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): overrides for the defaults in `config.py`.
    - logger: an optional logging object for runtime messages.
    - world_factory: a callable returning a fresh, uninitialised world model.
- Outputs (from `render`): the number of bytes written, width * height * 4, or
  0 when the request was rejected or memory could not be allocated. The image
  itself is read through `get_buffer()` or `image()`.
- Side Effects: re-initialises the bound world model whenever the variant,
  seed, dimension or flags change; grows the pixel buffer when needed.
- Invariants: identical arguments give byte-identical output. No exception
  escapes `render`; every failure maps to a return value of 0.
================================================================================
"""
import logging

import numpy as np

from . import config as DEFAULTS
from . import compositor
from . import hillshade
from . import palette
from . import sampler
from . import versions
from .buffer import PixelBuffer
from .world_model import LARGE_BIOMES, NoiseWorldModel, join_seed


def build_settings(user_config: dict) -> dict:
    """Consolidates user overrides with the internal defaults."""
    return {
        'palette': user_config.get('palette', DEFAULTS.DEFAULT_PALETTE),
        'dimension': user_config.get('dimension', DEFAULTS.DEFAULT_DIMENSION),
        'large_biomes': user_config.get('large_biomes', DEFAULTS.DEFAULT_LARGE_BIOMES),
        'build_ceiling': user_config.get('build_ceiling', DEFAULTS.BUILD_CEILING),
        'build_floor': user_config.get('build_floor', DEFAULTS.BUILD_FLOOR),
        'probe_step': user_config.get('probe_step', DEFAULTS.SURFACE_PROBE_STEP),
        'probe_scale': user_config.get('probe_scale', DEFAULTS.SURFACE_PROBE_SCALE),
        'fallback_surface_height': user_config.get('fallback_surface_height', DEFAULTS.FALLBACK_SURFACE_HEIGHT),
    }


class RenderContext:
    """
    Owns the world model binding and the output buffer used by `render`.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None, world_factory=NoiseWorldModel):
        """
        Initializes the render context.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            world_factory (callable): Builds a fresh world model instance.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}
        self.settings = build_settings(self.user_config)
        self.world_factory = world_factory

        self.biome_lut = palette.create_biome_color_lut(self.settings['palette'])
        self.buffer = PixelBuffer(self.logger)
        self.world = None
        self._binding = None
        self.width = 0
        self.height = 0

        self.logger.info(
            f"RenderContext initialized (palette={self.settings['palette']}, "
            f"dimension={self.settings['dimension']})."
        )

    @property
    def flags(self) -> int:
        return LARGE_BIOMES if self.settings['large_biomes'] else 0

    def bind_world(self, variant: int, seed: int):
        """
        Returns a world model set up for (variant, seed). The existing model is
        reused when nothing changed; otherwise it is re-initialised and every
        earlier result becomes stale. Unknown variants bind as the latest one.
        """
        known_variant = versions.normalize_variant(variant)
        binding = (known_variant, seed, self.settings['dimension'], self.flags)
        if self.world is None:
            self.world = self.world_factory()
        if binding != self._binding:
            if known_variant != variant:
                self.logger.warning(f"Unknown variant {variant}; using the latest known variant.")
            self.world.initialize(known_variant, self.flags)
            self.world.set_seed(seed, self.settings['dimension'])
            self._binding = binding
            self.logger.debug(f"World model bound to variant {versions.variant_name(variant)}, seed {seed}.")
        return self.world

    def render(self, seed_lo: int, seed_hi: int, x: int, z: int, width: int, height: int,
               scale: int, variant: int, shade_mode: int, y_level: int) -> int:
        """
        Renders the world rectangle whose top-left block is (x, z) into the
        managed buffer as RGBA8888, row-major, top to bottom.

        Returns:
            int: width * height * 4 on success, 0 otherwise.
        """
        if width <= 0 or height <= 0 or scale <= 0:
            self.logger.warning(f"Rejected render request: width={width}, height={height}, scale={scale}.")
            return 0

        img_size = width * height * DEFAULTS.BYTES_PER_PIXEL
        self.width = self.height = 0
        if not self.buffer.reserve(img_size):
            return 0

        try:
            world = self.bind_world(variant, join_seed(seed_lo, seed_hi))
            grid = sampler.sample_padded_grid(
                world, x, z, width, height, scale, y_level,
                with_heights=shade_mode > hillshade.SHADE_NONE,
                variant=versions.normalize_variant(variant),
                settings=self.settings,
            )
            compositor.composite(grid, self.biome_lut, shade_mode, scale, self.buffer.pixels(width, height))
        except MemoryError:
            self.logger.error(f"Failed to allocate the sample grid for a {width}x{height} render.")
            return 0
        except Exception as e:
            self.logger.error(f"Render of {width}x{height} at ({x}, {z}) failed: {e}", exc_info=True)
            return 0

        self.width, self.height = width, height
        self.logger.debug(f"Rendered {width}x{height} at ({x}, {z}) scale {scale}, shade mode {shade_mode}.")
        return img_size

    def get_buffer(self) -> memoryview | None:
        """
        The current output buffer, or None if nothing could be allocated.
        Only the first width * height * 4 bytes belong to the last render.
        """
        return self.buffer.view()

    def image(self) -> np.ndarray | None:
        """The last rendered image as a (height, width, 4) uint8 view."""
        if self.width == 0 or self.buffer.view() is None:
            return None
        return self.buffer.pixels(self.width, self.height)


def lookup_biome(seed_lo: int, seed_hi: int, x: int, y: int, z: int, scale: int, variant: int,
                 world_factory=NoiseWorldModel, dimension: int = DEFAULTS.DEFAULT_DIMENSION) -> int:
    """
    Looks up one biome with a throwaway world model. Nothing is shared with
    any RenderContext.
    """
    world = world_factory()
    world.initialize(versions.normalize_variant(variant), 0)
    world.set_seed(join_seed(seed_lo, seed_hi), dimension)
    return world.biome_at(scale, x, y, z)


def resolve_version(version_str: str) -> int:
    """Version string -> generation-variant tag."""
    return versions.resolve_version_string(version_str)
