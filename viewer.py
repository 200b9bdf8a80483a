# viewer.py

"""
================================================================================
INTERACTIVE BIOME MAP VIEWER
================================================================================
Renders tiles on demand through a RenderContext and displays them with Pygame.

Controls:
    W/A/S/D      pan
    Mouse wheel  zoom (cycles through the scales in config.VIEWER_SCALES)
    H            cycle shade mode (none -> simple -> stepped)
    Up/Down      raise/lower the y-level by 16 blocks
    Esc          quit

Usage:
    python viewer.py --seed 42 --version 1.21.4
================================================================================
"""
import argparse
import logging
import math
import sys

import pygame

from biome_renderer import config as DEFAULTS
from biome_renderer import hillshade
from biome_renderer.renderer import RenderContext, resolve_version
from biome_renderer.world_model import split_seed

# --- Application Constants ---
PAN_SPEED_PIXELS = 15
Y_LEVEL_STEP = 16
MAX_CACHED_TILES = 512
SHADE_CYCLE = (hillshade.SHADE_NONE, hillshade.SHADE_SIMPLE, hillshade.SHADE_STEPPED)


class Camera:
    """A simple camera for the viewer that tracks a block position and scale."""
    def __init__(self, screen_width, screen_height, scale_index=1):
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.scale_index = scale_index
        # Block coordinate at the centre of the screen.
        self.x = 0.0
        self.z = 0.0

    @property
    def scale(self) -> int:
        return DEFAULTS.VIEWER_SCALES[self.scale_index]

    def block_to_screen(self, block_x, block_z):
        screen_x = (block_x - self.x) / self.scale + self.screen_width / 2
        screen_y = (block_z - self.z) / self.scale + self.screen_height / 2
        return screen_x, screen_y

    def screen_to_block(self, screen_x, screen_y):
        block_x = (screen_x - self.screen_width / 2) * self.scale + self.x
        block_z = (screen_y - self.screen_height / 2) * self.scale + self.z
        return block_x, block_z

    def pan(self, dx, dy):
        # Panning speed is in screen pixels, independent of scale.
        self.x += dx * self.scale
        self.z += dy * self.scale

    def zoom_in(self):
        self.scale_index = max(0, self.scale_index - 1)

    def zoom_out(self):
        self.scale_index = min(len(DEFAULTS.VIEWER_SCALES) - 1, self.scale_index + 1)


class TileCache:
    """Renders tiles through a RenderContext and keeps the results as surfaces."""
    def __init__(self, context: RenderContext, seed: int, variant: int):
        self.context = context
        self.seed_lo, self.seed_hi = split_seed(seed)
        self.variant = variant
        self.logger = logging.getLogger(__name__)
        self._tiles = {}

    def get_tile_surface(self, tx: int, tz: int, scale: int, shade_mode: int, y_level: int) -> pygame.Surface | None:
        key = (tx, tz, scale, shade_mode, y_level)
        if key in self._tiles:
            return self._tiles[key]

        tile_blocks = DEFAULTS.TILE_SIZE * scale
        size = self.context.render(
            self.seed_lo, self.seed_hi, tx * tile_blocks, tz * tile_blocks,
            DEFAULTS.TILE_SIZE, DEFAULTS.TILE_SIZE, scale, self.variant, shade_mode, y_level
        )
        if size == 0:
            self.logger.error(f"Failed to render tile ({tx}, {tz}) at scale {scale}.")
            return None

        # The buffer is reused by the next render, so copy the bytes out.
        pixels = bytes(self.context.get_buffer()[:size])
        surface = pygame.image.frombuffer(pixels, (DEFAULTS.TILE_SIZE, DEFAULTS.TILE_SIZE), 'RGBA').convert()
        if len(self._tiles) >= MAX_CACHED_TILES:
            self._tiles.clear()
        self._tiles[key] = surface
        return surface


class ViewerApp:
    """The main application class for the biome map viewer."""
    def __init__(self, seed: int, variant: int, y_level: int, context_config: dict = None):
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
        self.logger = logging.getLogger(__name__)

        self.logger.info("Initializing Pygame...")
        pygame.init()

        self.screen_width = 1280
        self.screen_height = 720
        self.screen = pygame.display.set_mode((self.screen_width, self.screen_height))
        pygame.display.set_caption("Biome Map Viewer")

        self.clock = pygame.time.Clock()
        self.is_running = True

        self.camera = Camera(self.screen_width, self.screen_height)
        self.tiles = TileCache(RenderContext(config=context_config, logger=self.logger), seed, variant)
        self.shade_index = 1
        self.y_level = y_level

    @property
    def shade_mode(self) -> int:
        return SHADE_CYCLE[self.shade_index]

    def run(self):
        """The main application loop."""
        while self.is_running:
            self.handle_events()
            self.update()
            self.draw()
            self.clock.tick(60)

        self.logger.info("Exiting viewer.")
        pygame.quit()

    def handle_events(self):
        """Processes user input and other events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.is_running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.is_running = False
                elif event.key == pygame.K_h:
                    self.shade_index = (self.shade_index + 1) % len(SHADE_CYCLE)
                    self.logger.info(f"Shade mode switched to {self.shade_mode}.")
                elif event.key == pygame.K_UP:
                    self.y_level = min(DEFAULTS.BUILD_CEILING, self.y_level + Y_LEVEL_STEP)
                elif event.key == pygame.K_DOWN:
                    self.y_level = max(DEFAULTS.BUILD_FLOOR, self.y_level - Y_LEVEL_STEP)
            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    self.camera.zoom_in()
                elif event.y < 0:
                    self.camera.zoom_out()

    def update(self):
        """Handles continuous input like key presses for panning."""
        keys = pygame.key.get_pressed()
        if keys[pygame.K_w]:
            self.camera.pan(0, -PAN_SPEED_PIXELS)
        if keys[pygame.K_s]:
            self.camera.pan(0, PAN_SPEED_PIXELS)
        if keys[pygame.K_a]:
            self.camera.pan(-PAN_SPEED_PIXELS, 0)
        if keys[pygame.K_d]:
            self.camera.pan(PAN_SPEED_PIXELS, 0)

    def draw(self):
        """Handles all rendering for the application."""
        self.screen.fill((10, 10, 20))

        scale = self.camera.scale
        tile_blocks = DEFAULTS.TILE_SIZE * scale
        top_left_x, top_left_z = self.camera.screen_to_block(0, 0)

        start_tx = math.floor(top_left_x / tile_blocks)
        start_tz = math.floor(top_left_z / tile_blocks)
        end_tx = start_tx + math.ceil(self.screen_width / DEFAULTS.TILE_SIZE) + 1
        end_tz = start_tz + math.ceil(self.screen_height / DEFAULTS.TILE_SIZE) + 1

        rendered_tiles = 0
        for tz in range(start_tz, end_tz):
            for tx in range(start_tx, end_tx):
                surface = self.tiles.get_tile_surface(tx, tz, scale, self.shade_mode, self.y_level)
                if surface:
                    screen_pos = self.camera.block_to_screen(tx * tile_blocks, tz * tile_blocks)
                    self.screen.blit(surface, screen_pos)
                    rendered_tiles += 1

        pygame.display.set_caption(
            f"Biome Map Viewer | {rendered_tiles} tiles | Scale 1:{scale} | "
            f"Shade {self.shade_mode} | Y {self.y_level}"
        )
        pygame.display.flip()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Interactive biome map viewer.")
    parser.add_argument("--seed", type=int, default=DEFAULTS.DEFAULT_SEED, help="64-bit world seed.")
    parser.add_argument("--version", type=str, default="1.21", help="Game version, e.g. 1.21.4.")
    parser.add_argument("--y-level", dest="y_level", type=int, default=DEFAULTS.DEFAULT_Y_LEVEL)
    parser.add_argument("--dimension", type=int, default=DEFAULTS.DEFAULT_DIMENSION,
                        help="0 = Overworld, -1 = Nether, 1 = End.")
    args = parser.parse_args()

    app = ViewerApp(
        seed=args.seed,
        variant=resolve_version(args.version),
        y_level=args.y_level,
        context_config={'dimension': args.dimension},
    )
    app.run()
    sys.exit()
