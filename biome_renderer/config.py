# biome_renderer/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the biome
renderer. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC MAP VIEW.
Instead, pass a configuration dictionary to the RenderContext instance.
================================================================================
"""

# --- World Model Defaults ---
DEFAULT_SEED = 0
DEFAULT_DIMENSION = 0 # 0 = Overworld, -1 = Nether, 1 = End
DEFAULT_LARGE_BIOMES = False
DEFAULT_Y_LEVEL = 64

# --- Build Limits (blocks) ---
# The vertical range the surface probe is allowed to scan.
BUILD_CEILING = 319
BUILD_FLOOR = -64
SEA_LEVEL = 63

# --- Surface Height Estimation ---
# The probe walks down from BUILD_CEILING in fixed steps and stops at the first
# y with a defined biome. The stride is a heuristic: it does not see overhangs
# or caves and is kept as a coarse approximation.
SURFACE_PROBE_STEP = 4
# Biome scale used by each probe query (1 = block resolution).
SURFACE_PROBE_SCALE = 1
# Reference height used for variants without 3D biome support.
FALLBACK_SURFACE_HEIGHT = 64

# --- Hillshade ---
LIGHT_MIN = 0.5
LIGHT_MAX = 1.5
LIGHT_GRADIENT_WEIGHT = 0.25
# Stepped shading darkens every other band of this many blocks.
STEPPED_BAND_HEIGHT = 16
STEPPED_BAND_DARKEN = 0.95

# --- Palette ---
DEFAULT_PALETTE = "mcseedmap"
DEFAULT_BIOME_COLOR = (128, 128, 128)
PALETTE_SIZE = 256

# --- Rendering & Tiles ---
BYTES_PER_PIXEL = 4 # RGBA8888
TILE_SIZE = 256
VIEWER_SCALES = (1, 4, 16, 64, 256)

# --- Reference World Model Feature Scales (blocks) ---
# A larger number means a larger feature.
ELEVATION_FEATURE_SCALE_BLOCKS = 1536.0
ELEVATION_NOISE_OCTAVES = 5
CLIMATE_FEATURE_SCALE_BLOCKS = 2048.0
CLIMATE_NOISE_OCTAVES = 3
RIVER_FEATURE_SCALE_BLOCKS = 1024.0
RIVER_NOISE_OCTAVES = 2
NOISE_PERSISTENCE = 0.5
NOISE_LACUNARITY = 2.0
# Vertical swing of the reference terrain around sea level, in blocks.
TERRAIN_AMPLITUDE_BLOCKS = 160.0
# Feature size multiplier applied when the large-biomes flag is set.
LARGE_BIOMES_FACTOR = 4.0
# Radius of the central End island, in blocks.
END_CENTRAL_ISLAND_RADIUS = 1024

# Offsets used to derive independent noise layers from the master seed.
ELEVATION_SEED_OFFSET = 54321
TEMPERATURE_SEED_OFFSET = 12347
HUMIDITY_SEED_OFFSET = 98761
RIVER_SEED_OFFSET = 25391
