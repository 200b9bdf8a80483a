# biome_renderer/versions.py

"""
================================================================================
GENERATION VARIANT TAGS
================================================================================
Game versions are reduced to a small set of discrete generation-variant tags.
A tag selects which rule set the world model applies (which biomes exist,
whether biomes are three-dimensional, and so on).

Tags are ordered integers, so "variant >= MC_1_18" reads as "1.18 or newer".
Some tags are aliases of the most recent patch release of their minor version.

Data Contract:
---------------
- Inputs: (major, minor, patch) integers or a version string such as
  "1_21_4" or "1.21.4".
- Outputs: an integer variant tag.
- Invariants: every input resolves to a known tag. Unrecognised major/minor
  combinations resolve to MC_NEWEST.
================================================================================
"""

MC_UNDEF = 0
MC_1_12 = 1
MC_1_13 = 2
MC_1_14 = 3
MC_1_15 = 4
MC_1_16_1 = 5
MC_1_16 = 6
MC_1_17 = 7
MC_1_18 = 8
MC_1_19_2 = 9
MC_1_19_4 = 10
MC_1_20_6 = 11
MC_1_21_1 = 12
MC_1_21_3 = 13
MC_1_21_WD = 14

# --- Aliases ---
MC_1_19 = MC_1_19_4
MC_1_20 = MC_1_20_6
MC_1_21 = MC_1_21_WD
MC_NEWEST = MC_1_21

VARIANT_NAMES = {
    MC_1_12: "1.12",
    MC_1_13: "1.13",
    MC_1_14: "1.14",
    MC_1_15: "1.15",
    MC_1_16_1: "1.16.1",
    MC_1_16: "1.16",
    MC_1_17: "1.17",
    MC_1_18: "1.18",
    MC_1_19_2: "1.19.2",
    MC_1_19_4: "1.19",
    MC_1_20_6: "1.20",
    MC_1_21_1: "1.21.1",
    MC_1_21_3: "1.21.3",
    MC_1_21_WD: "1.21",
}

# Per minor version: (minimum patch, tag) pairs, most specific first.
PATCH_THRESHOLDS = {
    12: [(0, MC_1_12)],
    13: [(0, MC_1_13)],
    14: [(0, MC_1_14)],
    15: [(0, MC_1_15)],
    16: [(2, MC_1_16), (0, MC_1_16_1)],
    17: [(0, MC_1_17)],
    18: [(0, MC_1_18)],
    19: [(4, MC_1_19_4), (2, MC_1_19_2), (0, MC_1_19)],
    20: [(6, MC_1_20_6), (0, MC_1_20)],
    21: [(3, MC_1_21_WD), (1, MC_1_21_3), (0, MC_1_21_1)],
}

# Defaults used when a version string is missing a part.
DEFAULT_MAJOR = 1
DEFAULT_MINOR = 21
DEFAULT_PATCH = 0


def parse_version(major: int, minor: int, patch: int) -> int:
    """Maps a (major, minor, patch) triple to a generation-variant tag."""
    if major != 1:
        return MC_NEWEST

    thresholds = PATCH_THRESHOLDS.get(minor)
    if thresholds is None:
        return MC_NEWEST

    for min_patch, variant in thresholds:
        if patch >= min_patch:
            return variant
    return thresholds[-1][1]


def split_version_string(version_str: str) -> tuple[int, int, int]:
    """
    Splits "1_21_4" or "1.21.4" into integers. Missing or non-numeric parts
    fall back to 1, 21 and 0 respectively.
    """
    parts = version_str.strip().replace(".", "_").split("_") if version_str else []
    defaults = (DEFAULT_MAJOR, DEFAULT_MINOR, DEFAULT_PATCH)

    numbers = []
    for i, default in enumerate(defaults):
        try:
            value = int(parts[i]) if i < len(parts) else 0
        except ValueError:
            value = 0
        # A zero major or minor is treated as absent.
        if value == 0 and i < 2:
            value = default
        numbers.append(value)
    return numbers[0], numbers[1], numbers[2]


def resolve_version_string(version_str: str) -> int:
    """Resolves a version string to a generation-variant tag."""
    return parse_version(*split_version_string(version_str))


def normalize_variant(variant: int) -> int:
    """Returns the tag unchanged if it is known, MC_NEWEST otherwise."""
    if variant in VARIANT_NAMES:
        return variant
    return MC_NEWEST


def supports_3d_biomes(variant: int) -> bool:
    "Biomes vary with y from 1.18 onward."
    return variant >= MC_1_18


def variant_name(variant: int) -> str:
    return VARIANT_NAMES.get(variant, "")
