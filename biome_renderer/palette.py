# biome_renderer/palette.py

"""
================================================================================
BIOME PALETTES
================================================================================
This module contains the biome id constants, the id -> name table and the
color tables used to turn a grid of biome ids into RGB colors.

It is designed to be a pure, stateless utility with no dependencies on Pygame,
allowing it to be used by both the interactive viewer and the offline
baker script.

Data Contract:
---------------
- Inputs: a palette style name ("mcseedmap" or "soft").
- Outputs: a (256, 3) uint8 lookup table indexed by `biome_id & 0xFF`.
- Invariants: a lookup never fails. Ids >= 256 and negative ids (including the
  undefined-biome sentinel -1) wrap through the 0xFF mask and still resolve
  to some color. The wraparound is intentional; do not replace it with a
  bounds check.
================================================================================
"""
import numpy as np
from . import config as DEFAULTS

BIOME_ID_MASK = 0xFF

# --- Biome ID Constants ---
BIOME_OCEAN = 0
BIOME_PLAINS = 1
BIOME_DESERT = 2
BIOME_WINDSWEPT_HILLS = 3
BIOME_FOREST = 4
BIOME_TAIGA = 5
BIOME_SWAMP = 6
BIOME_RIVER = 7
BIOME_NETHER_WASTES = 8
BIOME_THE_END = 9
BIOME_FROZEN_OCEAN = 10
BIOME_FROZEN_RIVER = 11
BIOME_SNOWY_PLAINS = 12
BIOME_SNOWY_MOUNTAINS = 13
BIOME_MUSHROOM_FIELDS = 14
BIOME_BEACH = 16
BIOME_JUNGLE = 21
BIOME_SPARSE_JUNGLE = 23
BIOME_DEEP_OCEAN = 24
BIOME_STONY_SHORE = 25
BIOME_SNOWY_BEACH = 26
BIOME_BIRCH_FOREST = 27
BIOME_DARK_FOREST = 29
BIOME_SNOWY_TAIGA = 30
BIOME_OLD_GROWTH_PINE_TAIGA = 32
BIOME_WINDSWEPT_FOREST = 34
BIOME_SAVANNA = 35
BIOME_SAVANNA_PLATEAU = 36
BIOME_BADLANDS = 37
BIOME_WOODED_BADLANDS = 38
BIOME_SMALL_END_ISLANDS = 40
BIOME_END_MIDLANDS = 41
BIOME_END_HIGHLANDS = 42
BIOME_END_BARRENS = 43
BIOME_WARM_OCEAN = 44
BIOME_LUKEWARM_OCEAN = 45
BIOME_COLD_OCEAN = 46
BIOME_DEEP_LUKEWARM_OCEAN = 48
BIOME_DEEP_COLD_OCEAN = 49
BIOME_DEEP_FROZEN_OCEAN = 50
BIOME_THE_VOID = 127
BIOME_SUNFLOWER_PLAINS = 129
BIOME_FLOWER_FOREST = 132
BIOME_ICE_SPIKES = 140
BIOME_OLD_GROWTH_BIRCH_FOREST = 155
BIOME_OLD_GROWTH_SPRUCE_TAIGA = 160
BIOME_WINDSWEPT_SAVANNA = 163
BIOME_ERODED_BADLANDS = 165
BIOME_BAMBOO_JUNGLE = 168
BIOME_SOUL_SAND_VALLEY = 170
BIOME_CRIMSON_FOREST = 171
BIOME_WARPED_FOREST = 172
BIOME_BASALT_DELTAS = 173
BIOME_DRIPSTONE_CAVES = 174
BIOME_LUSH_CAVES = 175
BIOME_MEADOW = 177
BIOME_GROVE = 178
BIOME_SNOWY_SLOPES = 179
BIOME_JAGGED_PEAKS = 180
BIOME_FROZEN_PEAKS = 181
BIOME_STONY_PEAKS = 182
BIOME_DEEP_DARK = 183
BIOME_MANGROVE_SWAMP = 184
BIOME_CHERRY_GROVE = 185
BIOME_PALE_GARDEN = 186

BIOME_NAMES = {
    BIOME_OCEAN: "ocean",
    BIOME_PLAINS: "plains",
    BIOME_DESERT: "desert",
    BIOME_WINDSWEPT_HILLS: "windswept_hills",
    BIOME_FOREST: "forest",
    BIOME_TAIGA: "taiga",
    BIOME_SWAMP: "swamp",
    BIOME_RIVER: "river",
    BIOME_NETHER_WASTES: "nether_wastes",
    BIOME_THE_END: "the_end",
    BIOME_FROZEN_OCEAN: "frozen_ocean",
    BIOME_FROZEN_RIVER: "frozen_river",
    BIOME_SNOWY_PLAINS: "snowy_plains",
    BIOME_SNOWY_MOUNTAINS: "snowy_mountains",
    BIOME_MUSHROOM_FIELDS: "mushroom_fields",
    BIOME_BEACH: "beach",
    BIOME_JUNGLE: "jungle",
    BIOME_SPARSE_JUNGLE: "sparse_jungle",
    BIOME_DEEP_OCEAN: "deep_ocean",
    BIOME_STONY_SHORE: "stony_shore",
    BIOME_SNOWY_BEACH: "snowy_beach",
    BIOME_BIRCH_FOREST: "birch_forest",
    BIOME_DARK_FOREST: "dark_forest",
    BIOME_SNOWY_TAIGA: "snowy_taiga",
    BIOME_OLD_GROWTH_PINE_TAIGA: "old_growth_pine_taiga",
    BIOME_WINDSWEPT_FOREST: "windswept_forest",
    BIOME_SAVANNA: "savanna",
    BIOME_SAVANNA_PLATEAU: "savanna_plateau",
    BIOME_BADLANDS: "badlands",
    BIOME_WOODED_BADLANDS: "wooded_badlands",
    BIOME_SMALL_END_ISLANDS: "small_end_islands",
    BIOME_END_MIDLANDS: "end_midlands",
    BIOME_END_HIGHLANDS: "end_highlands",
    BIOME_END_BARRENS: "end_barrens",
    BIOME_WARM_OCEAN: "warm_ocean",
    BIOME_LUKEWARM_OCEAN: "lukewarm_ocean",
    BIOME_COLD_OCEAN: "cold_ocean",
    BIOME_DEEP_LUKEWARM_OCEAN: "deep_lukewarm_ocean",
    BIOME_DEEP_COLD_OCEAN: "deep_cold_ocean",
    BIOME_DEEP_FROZEN_OCEAN: "deep_frozen_ocean",
    BIOME_THE_VOID: "the_void",
    BIOME_SUNFLOWER_PLAINS: "sunflower_plains",
    BIOME_FLOWER_FOREST: "flower_forest",
    BIOME_ICE_SPIKES: "ice_spikes",
    BIOME_OLD_GROWTH_BIRCH_FOREST: "old_growth_birch_forest",
    BIOME_OLD_GROWTH_SPRUCE_TAIGA: "old_growth_spruce_taiga",
    BIOME_WINDSWEPT_SAVANNA: "windswept_savanna",
    BIOME_ERODED_BADLANDS: "eroded_badlands",
    BIOME_BAMBOO_JUNGLE: "bamboo_jungle",
    BIOME_SOUL_SAND_VALLEY: "soul_sand_valley",
    BIOME_CRIMSON_FOREST: "crimson_forest",
    BIOME_WARPED_FOREST: "warped_forest",
    BIOME_BASALT_DELTAS: "basalt_deltas",
    BIOME_DRIPSTONE_CAVES: "dripstone_caves",
    BIOME_LUSH_CAVES: "lush_caves",
    BIOME_MEADOW: "meadow",
    BIOME_GROVE: "grove",
    BIOME_SNOWY_SLOPES: "snowy_slopes",
    BIOME_JAGGED_PEAKS: "jagged_peaks",
    BIOME_FROZEN_PEAKS: "frozen_peaks",
    BIOME_STONY_PEAKS: "stony_peaks",
    BIOME_DEEP_DARK: "deep_dark",
    BIOME_MANGROVE_SWAMP: "mangrove_swamp",
    BIOME_CHERRY_GROVE: "cherry_grove",
    BIOME_PALE_GARDEN: "pale_garden",
}

# --- Default Color Mappings ---
# Exact map colors as packed 0xRRGGBB integers, keyed by biome name.
COLOR_MAP_MCSEEDMAP = {
    # Oceans
    "ocean": 0x000070,
    "deep_ocean": 0x000030,
    "frozen_ocean": 0x7070D6,
    "deep_frozen_ocean": 0x404090,
    "cold_ocean": 0x202070,
    "deep_cold_ocean": 0x202038,
    "lukewarm_ocean": 0x000090,
    "deep_lukewarm_ocean": 0x000040,
    "warm_ocean": 0x0000AC,
    # Rivers
    "river": 0x0000FF,
    "frozen_river": 0xA0A0FF,
    # Swamps
    "swamp": 0x07F9B2,
    "mangrove_swamp": 0x2CCC8E,
    # Snow and ice
    "snowy_plains": 0xFFFFFF,
    "ice_spikes": 0xB4DCDC,
    "snowy_taiga": 0x31554A,
    "snowy_slopes": 0xC4C4C4,
    "snowy_beach": 0xFAF0C0,
    "frozen_peaks": 0xB0C8CE,
    "snowy_mountains": 0xA0A0A0,
    # Plains
    "plains": 0x8DB360,
    "sunflower_plains": 0xB5DB88,
    "meadow": 0x60A555,
    # Forests
    "forest": 0x056621,
    "flower_forest": 0x2D8A49,
    "birch_forest": 0x307444,
    "old_growth_birch_forest": 0x58936C,
    "dark_forest": 0x40511A,
    "windswept_forest": 0x5B7352,
    # Taiga
    "taiga": 0x0B6659,
    "old_growth_spruce_taiga": 0x818E79,
    "old_growth_pine_taiga": 0x596651,
    "grove": 0x476B4C,
    # Savanna
    "savanna": 0xBDB25F,
    "savanna_plateau": 0xA79D64,
    "windswept_savanna": 0xE5DA87,
    # Jungle
    "jungle": 0x507B0A,
    "sparse_jungle": 0x608B0F,
    "bamboo_jungle": 0x849400,
    # Badlands
    "badlands": 0xD94515,
    "eroded_badlands": 0xFF6D3D,
    "wooded_badlands": 0xCA8C65,
    # Shores
    "beach": 0xFADE55,
    "stony_shore": 0xA2A284,
    # Desert
    "desert": 0xFA9418,
    # Mountains
    "windswept_hills": 0x606060,
    "jagged_peaks": 0xDCDCD8,
    "stony_peaks": 0x7B9594,
    # Special
    "mushroom_fields": 0xFF00FF,
    "cherry_grove": 0xFFC1E0,
    "pale_garden": 0x696A85,
    "deep_dark": 0x031F39,
    "lush_caves": 0x283800,
    "dripstone_caves": 0x4E3F32,
    # Nether
    "nether_wastes": 0x572526,
    "soul_sand_valley": 0x4D3B2E,
    "crimson_forest": 0x981A11,
    "warped_forest": 0x49907B,
    "basalt_deltas": 0x645F63,
    # End
    "the_end": 0x8080FF,
    "small_end_islands": 0x4B4BAB,
    "end_midlands": 0xC9C459,
    "end_highlands": 0xB5DA36,
    "end_barrens": 0x7070CC,
    "the_void": 0x000000,
}

# A desaturated alternative palette.
COLOR_MAP_SOFT = {
    "deep_frozen_ocean": (62, 100, 132),
    "deep_cold_ocean": (45, 85, 120),
    "deep_ocean": (35, 65, 115),
    "deep_lukewarm_ocean": (50, 90, 130),
    "frozen_ocean": (82, 145, 185),
    "cold_ocean": (70, 125, 170),
    "ocean": (60, 105, 160),
    "warm_ocean": (75, 140, 175),
    "lukewarm_ocean": (70, 130, 170),
    "frozen_river": (140, 180, 210),
    "river": (85, 130, 180),
    "swamp": (85, 140, 110),
    "mangrove_swamp": (55, 95, 75),
    "snowy_plains": (235, 240, 245),
    "ice_spikes": (185, 215, 235),
    "snowy_taiga": (175, 200, 180),
    "snowy_slopes": (170, 195, 215),
    "snowy_beach": (195, 200, 170),
    "frozen_peaks": (210, 215, 220),
    "plains": (141, 179, 96),
    "sunflower_plains": (155, 190, 85),
    "meadow": (165, 195, 95),
    "forest": (86, 140, 70),
    "flower_forest": (105, 155, 75),
    "birch_forest": (115, 165, 100),
    "old_growth_birch_forest": (100, 170, 95),
    "dark_forest": (55, 95, 55),
    "windswept_forest": (75, 120, 90),
    "taiga": (75, 110, 60),
    "old_growth_spruce_taiga": (60, 85, 50),
    "old_growth_pine_taiga": (70, 90, 45),
    "grove": (145, 160, 175),
    "savanna": (155, 180, 90),
    "savanna_plateau": (135, 160, 75),
    "windswept_savanna": (150, 175, 95),
    "jungle": (80, 160, 65),
    "sparse_jungle": (110, 170, 70),
    "bamboo_jungle": (90, 165, 85),
    "badlands": (195, 120, 60),
    "eroded_badlands": (175, 100, 50),
    "wooded_badlands": (180, 130, 55),
    "beach": (220, 210, 150),
    "stony_shore": (115, 115, 110),
    "desert": (215, 200, 130),
    "windswept_hills": (115, 135, 130),
    "jagged_peaks": (185, 175, 185),
    "stony_peaks": (160, 170, 180),
    "mushroom_fields": (200, 145, 195),
    "cherry_grove": (195, 145, 190),
    "pale_garden": (155, 160, 155),
    "deep_dark": (25, 40, 35),
    "lush_caves": (100, 175, 85),
    "dripstone_caves": (130, 115, 75),
    "nether_wastes": (145, 75, 70),
    "soul_sand_valley": (125, 115, 100),
    "crimson_forest": (175, 70, 60),
    "warped_forest": (75, 140, 135),
    "basalt_deltas": (85, 80, 75),
    "the_end": (200, 195, 130),
    "small_end_islands": (190, 195, 100),
    "end_midlands": (155, 160, 80),
    "end_highlands": (115, 120, 65),
    "end_barrens": (175, 180, 135),
    "the_void": (15, 15, 20),
}


def unpack_rgb(packed: int) -> tuple[int, int, int]:
    """Splits a 0xRRGGBB integer into its channels."""
    return (packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF


PALETTES = {
    "mcseedmap": {name: unpack_rgb(color) for name, color in COLOR_MAP_MCSEEDMAP.items()},
    "soft": COLOR_MAP_SOFT,
}


def biome_to_str(biome_id: int) -> str:
    """Returns the biome's resource name, or "" for ids with no name."""
    return BIOME_NAMES.get(biome_id, "")


# --- Color Lookup Table (LUT) Generation ---
def create_biome_color_lut(style: str = DEFAULTS.DEFAULT_PALETTE) -> np.ndarray:
    """
    Creates a LUT where the index is the masked Biome ID and the value is the
    RGB color. Slots without a named color get DEFAULT_BIOME_COLOR.
    """
    if style not in PALETTES:
        raise ValueError(f"Unknown palette '{style}'. Expected one of {sorted(PALETTES)}.")
    colors_by_name = PALETTES[style]

    lut = np.empty((DEFAULTS.PALETTE_SIZE, 3), dtype=np.uint8)
    lut[:] = DEFAULTS.DEFAULT_BIOME_COLOR
    for biome_id in range(DEFAULTS.PALETTE_SIZE):
        color = colors_by_name.get(biome_to_str(biome_id))
        if color is not None:
            lut[biome_id] = color
    return lut


def get_biome_color_array(biome_map: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """
    Converts an integer biome map of any shape into an RGB color array using
    the masked index. This is a very fast operation.
    """
    return biome_lut[np.bitwise_and(biome_map, BIOME_ID_MASK)]


def lookup_color(biome_lut: np.ndarray, biome_id: int) -> tuple[int, int, int]:
    r, g, b = biome_lut[biome_id & BIOME_ID_MASK]
    return int(r), int(g), int(b)
