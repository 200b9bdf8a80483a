# biome_renderer/world_model.py

"""
================================================================================
WORLD MODEL CONTRACT AND REFERENCE GENERATOR
================================================================================
The renderer never decides which biome lives where. It asks a world model: a
deterministic function from (seed, variant, coordinate) to a biome id and,
optionally, to a surface height.

This module defines that contract as a Protocol and ships `NoiseWorldModel`,
a self-contained reference generator used when no external model is bound.

Data Contract:
---------------
- `initialize(variant, flags)` must precede any query.
- `set_seed(seed, dimension)` binds deterministic state and invalidates every
  previously returned value.
- `biome_at(scale, x, y, z)` returns a biome id, or UNDEFINED_BIOME (-1) when
  the coordinate cannot be resolved or the model is not set up.
- Optional `biomes_at(scale, xs, y, zs)`: vectorised form of `biome_at`.
- Optional `surface_heights_at(xs, zs)`: integer surface heights, or None when
  the active variant/dimension has no direct height accessor.
- Invariants: identical (seed, variant, flags, dimension, coordinate) inputs
  always give identical outputs.
================================================================================
"""
import logging
from typing import Protocol

import numpy as np

from . import config as DEFAULTS
from . import noise
from . import palette as P
from . import versions

UNDEFINED_BIOME = -1

DIM_NETHER = -1
DIM_OVERWORLD = 0
DIM_END = 1

# Generator flag bits passed to `initialize`.
LARGE_BIOMES = 0x1


def join_seed(seed_lo: int, seed_hi: int) -> int:
    """Reassembles a signed 64-bit seed from two unsigned 32-bit halves."""
    seed = ((seed_hi & 0xFFFFFFFF) << 32) | (seed_lo & 0xFFFFFFFF)
    if seed >= 1 << 63:
        seed -= 1 << 64
    return seed


def split_seed(seed: int) -> tuple[int, int]:
    """Splits a 64-bit seed into its (low, high) unsigned 32-bit halves."""
    return seed & 0xFFFFFFFF, (seed >> 32) & 0xFFFFFFFF


class WorldModel(Protocol):
    """
    A protocol defining the interface the renderer expects from a world model.
    Any generator can be plugged in as long as it provides these methods.
    """
    def initialize(self, variant: int, flags: int) -> None: ...
    def set_seed(self, seed: int, dimension: int) -> None: ...
    def biome_at(self, scale: int, x: int, y: int, z: int) -> int: ...


# --- Version Gating ---
# Biomes absent from older variants, with the biome that stands in for them.
INTRODUCED_IN = {
    P.BIOME_MANGROVE_SWAMP: (versions.MC_1_19_2, P.BIOME_SWAMP),
    P.BIOME_DEEP_DARK: (versions.MC_1_19_2, P.BIOME_DRIPSTONE_CAVES),
    P.BIOME_CHERRY_GROVE: (versions.MC_1_20_6, P.BIOME_MEADOW),
    P.BIOME_PALE_GARDEN: (versions.MC_1_21_WD, P.BIOME_DARK_FOREST),
}

# Replacements applied for variants without 3D biomes (before 1.18).
LEGACY_SUBSTITUTES = {
    P.BIOME_FROZEN_PEAKS: P.BIOME_SNOWY_MOUNTAINS,
    P.BIOME_SNOWY_SLOPES: P.BIOME_SNOWY_MOUNTAINS,
    P.BIOME_JAGGED_PEAKS: P.BIOME_WINDSWEPT_HILLS,
    P.BIOME_STONY_PEAKS: P.BIOME_WINDSWEPT_HILLS,
    P.BIOME_GROVE: P.BIOME_SNOWY_TAIGA,
    P.BIOME_MEADOW: P.BIOME_PLAINS,
    P.BIOME_CHERRY_GROVE: P.BIOME_PLAINS,
    P.BIOME_LUSH_CAVES: P.BIOME_FOREST,
    P.BIOME_DRIPSTONE_CAVES: P.BIOME_WINDSWEPT_HILLS,
    P.BIOME_DEEP_DARK: P.BIOME_WINDSWEPT_HILLS,
}

# Land biomes indexed by [temperature band][humidity band].
LAND_BIOME_TABLE = np.array([
    [P.BIOME_SNOWY_PLAINS, P.BIOME_ICE_SPIKES, P.BIOME_SNOWY_TAIGA, P.BIOME_SNOWY_TAIGA],
    [P.BIOME_PLAINS, P.BIOME_TAIGA, P.BIOME_OLD_GROWTH_SPRUCE_TAIGA, P.BIOME_OLD_GROWTH_PINE_TAIGA],
    [P.BIOME_SUNFLOWER_PLAINS, P.BIOME_BIRCH_FOREST, P.BIOME_FOREST, P.BIOME_DARK_FOREST],
    [P.BIOME_SAVANNA, P.BIOME_PLAINS, P.BIOME_SPARSE_JUNGLE, P.BIOME_JUNGLE],
    [P.BIOME_DESERT, P.BIOME_BADLANDS, P.BIOME_SAVANNA_PLATEAU, P.BIOME_BAMBOO_JUNGLE],
], dtype=np.int32)
TEMPERATURE_BANDS = np.array([-0.3, -0.1, 0.12, 0.3])
HUMIDITY_BANDS = np.array([-0.15, 0.05, 0.22])


class NoiseWorldModel:
    """
    Deterministic reference world model built from layered Perlin noise.
    It stands in for an external biome generator and follows the same
    initialise -> seed -> query lifecycle.
    """
    def __init__(self, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.variant = versions.MC_UNDEF
        self.flags = 0
        self.seed = None
        self.dimension = DIM_OVERWORLD
        self._layers = None
        self._size_factor = 1.0

    @property
    def ready(self) -> bool:
        return self.variant != versions.MC_UNDEF and self._layers is not None

    def initialize(self, variant: int, flags: int = 0) -> None:
        self.variant = versions.normalize_variant(variant)
        self.flags = flags
        self._size_factor = DEFAULTS.LARGE_BIOMES_FACTOR if flags & LARGE_BIOMES else 1.0
        # A new rule set invalidates the seeded state.
        self.seed = None
        self._layers = None
        self.logger.debug(
            f"World model initialized for variant {versions.variant_name(self.variant)} (flags={flags})."
        )

    def set_seed(self, seed: int, dimension: int = DIM_OVERWORLD) -> None:
        if self.variant == versions.MC_UNDEF:
            self.logger.warning("set_seed called before initialize; ignoring.")
            return
        self.seed = seed
        self.dimension = dimension
        self._layers = {
            'elevation': noise.make_permutation_table(seed, DEFAULTS.ELEVATION_SEED_OFFSET + dimension),
            'temperature': noise.make_permutation_table(seed, DEFAULTS.TEMPERATURE_SEED_OFFSET + dimension),
            'humidity': noise.make_permutation_table(seed, DEFAULTS.HUMIDITY_SEED_OFFSET + dimension),
            'river': noise.make_permutation_table(seed, DEFAULTS.RIVER_SEED_OFFSET + dimension),
        }
        self.logger.debug(f"World model seeded with {seed} (dimension {dimension}).")

    # --- Noise Layers ---
    def _layer(self, name: str, xs: np.ndarray, zs: np.ndarray, feature_scale: float, octaves: int) -> np.ndarray:
        return noise.sample_layer(
            self._layers[name], xs, zs,
            feature_scale * self._size_factor,
            octaves, DEFAULTS.NOISE_PERSISTENCE, DEFAULTS.NOISE_LACUNARITY
        )

    def _climate(self, xs: np.ndarray, zs: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        temperature = self._layer('temperature', xs, zs, DEFAULTS.CLIMATE_FEATURE_SCALE_BLOCKS, DEFAULTS.CLIMATE_NOISE_OCTAVES)
        humidity = self._layer('humidity', xs, zs, DEFAULTS.CLIMATE_FEATURE_SCALE_BLOCKS, DEFAULTS.CLIMATE_NOISE_OCTAVES)
        return temperature, humidity

    def _terrain_heights(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        elevation = self._layer('elevation', xs, zs, DEFAULTS.ELEVATION_FEATURE_SCALE_BLOCKS, DEFAULTS.ELEVATION_NOISE_OCTAVES)
        heights = DEFAULTS.SEA_LEVEL + elevation * DEFAULTS.TERRAIN_AMPLITUDE_BLOCKS
        return np.clip(heights, DEFAULTS.BUILD_FLOOR, DEFAULTS.BUILD_CEILING).astype(np.int32)

    # --- Public Queries ---
    def biome_at(self, scale: int, x: int, y: int, z: int) -> int:
        return int(self.biomes_at(scale, np.array([x]), y, np.array([z]))[0])

    def biomes_at(self, scale: int, xs: np.ndarray, y: int, zs: np.ndarray) -> np.ndarray:
        """
        Classifies every (xs[k], y, zs[k]) block coordinate. `scale` is only a
        resolution hint for this model; coordinates are always in blocks.
        """
        xs = np.asarray(xs, dtype=np.int64)
        zs = np.asarray(zs, dtype=np.int64)
        if not self.ready or y < DEFAULTS.BUILD_FLOOR or y > DEFAULTS.BUILD_CEILING:
            return np.full(xs.shape, UNDEFINED_BIOME, dtype=np.int32)

        if self.dimension == DIM_NETHER:
            biomes = self._nether_biomes(xs, zs)
        elif self.dimension == DIM_END:
            biomes = self._end_biomes(xs, zs)
        elif self.dimension == DIM_OVERWORLD:
            biomes = self._overworld_biomes(xs, y, zs)
        else:
            return np.full(xs.shape, UNDEFINED_BIOME, dtype=np.int32)
        return self._apply_version_gates(biomes)

    def surface_heights_at(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray | None:
        """
        Direct surface height accessor. Only the overworld of variants with
        3D biomes has one; everything else returns None.
        """
        if not self.ready or self.dimension != DIM_OVERWORLD:
            return None
        if not versions.supports_3d_biomes(self.variant):
            return None
        return self._terrain_heights(np.asarray(xs), np.asarray(zs))

    # --- Biome Classification ---
    def _overworld_biomes(self, xs: np.ndarray, y: int, zs: np.ndarray) -> np.ndarray:
        surface = self._terrain_heights(xs, zs)
        temperature, humidity = self._climate(xs, zs)
        river = self._layer('river', xs, zs, DEFAULTS.RIVER_FEATURE_SCALE_BLOCKS, DEFAULTS.RIVER_NOISE_OCTAVES)
        sea = DEFAULTS.SEA_LEVEL

        t_band = np.digitize(temperature, TEMPERATURE_BANDS)
        h_band = np.digitize(humidity, HUMIDITY_BANDS)
        land = LAND_BIOME_TABLE[t_band, h_band]
        frozen = t_band == 0
        cold = t_band <= 1
        warm = t_band >= 3

        conditions = [
            surface < sea - 24,
            surface < sea,
            (np.abs(river) < 0.02) & (surface < sea + 40),
            surface < sea + 3,
            (surface < sea + 8) & (humidity > 0.3),
            surface > sea + 110,
            surface > sea + 70,
        ]
        choices = [
            np.select([frozen, cold, warm], [P.BIOME_DEEP_FROZEN_OCEAN, P.BIOME_DEEP_COLD_OCEAN, P.BIOME_DEEP_LUKEWARM_OCEAN], default=P.BIOME_DEEP_OCEAN),
            np.select([frozen, cold, t_band == 4, warm], [P.BIOME_FROZEN_OCEAN, P.BIOME_COLD_OCEAN, P.BIOME_WARM_OCEAN, P.BIOME_LUKEWARM_OCEAN], default=P.BIOME_OCEAN),
            np.where(frozen, P.BIOME_FROZEN_RIVER, P.BIOME_RIVER),
            np.select([frozen, humidity < -0.3], [P.BIOME_SNOWY_BEACH, P.BIOME_STONY_SHORE], default=P.BIOME_BEACH),
            np.where(warm, P.BIOME_MANGROVE_SWAMP, P.BIOME_SWAMP),
            np.select([cold, warm], [P.BIOME_FROZEN_PEAKS, P.BIOME_STONY_PEAKS], default=P.BIOME_JAGGED_PEAKS),
            np.select(
                [cold & (humidity > 0.05), cold, humidity > 0.22],
                [P.BIOME_GROVE, P.BIOME_SNOWY_SLOPES, P.BIOME_CHERRY_GROVE],
                default=P.BIOME_MEADOW
            ),
        ]
        biomes = np.select(conditions, choices, default=land).astype(np.int32)

        # Very humid dark forests turn into pale gardens.
        biomes[(biomes == P.BIOME_DARK_FOREST) & (humidity > 0.45)] = P.BIOME_PALE_GARDEN

        # Cave biomes replace the surface biome deep underground.
        if versions.supports_3d_biomes(self.variant):
            underground = (y < surface - 48) & (surface >= sea)
            caves = np.select(
                [(y < 0) & (temperature < 0.0), humidity > 0.2],
                [P.BIOME_DEEP_DARK, P.BIOME_LUSH_CAVES],
                default=P.BIOME_DRIPSTONE_CAVES
            )
            biomes = np.where(underground, caves, biomes).astype(np.int32)
        return biomes

    def _nether_biomes(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        if self.variant < versions.MC_1_16_1:
            return np.full(xs.shape, P.BIOME_NETHER_WASTES, dtype=np.int32)
        temperature, humidity = self._climate(xs, zs)
        return np.select(
            [
                (temperature < -0.2) & (humidity < 0.0),
                (temperature < -0.2),
                (temperature > 0.2) & (humidity > 0.0),
                (temperature > 0.2),
            ],
            [P.BIOME_SOUL_SAND_VALLEY, P.BIOME_BASALT_DELTAS, P.BIOME_CRIMSON_FOREST, P.BIOME_WARPED_FOREST],
            default=P.BIOME_NETHER_WASTES
        ).astype(np.int32)

    def _end_biomes(self, xs: np.ndarray, zs: np.ndarray) -> np.ndarray:
        radius = DEFAULTS.END_CENTRAL_ISLAND_RADIUS
        central = (xs * xs + zs * zs) <= radius * radius
        if self.variant < versions.MC_1_13:
            return np.full(xs.shape, P.BIOME_THE_END, dtype=np.int32)
        elevation = self._layer('elevation', xs, zs, DEFAULTS.ELEVATION_FEATURE_SCALE_BLOCKS, DEFAULTS.ELEVATION_NOISE_OCTAVES)
        return np.select(
            [central, elevation > 0.25, elevation > 0.1, elevation > -0.05],
            [P.BIOME_THE_END, P.BIOME_END_HIGHLANDS, P.BIOME_END_MIDLANDS, P.BIOME_END_BARRENS],
            default=P.BIOME_SMALL_END_ISLANDS
        ).astype(np.int32)

    def _apply_version_gates(self, biomes: np.ndarray) -> np.ndarray:
        for biome_id, (introduced, substitute) in INTRODUCED_IN.items():
            if self.variant < introduced:
                biomes[biomes == biome_id] = substitute
        if not versions.supports_3d_biomes(self.variant):
            for biome_id, substitute in LEGACY_SUBSTITUTES.items():
                biomes[biomes == biome_id] = substitute
        return biomes
