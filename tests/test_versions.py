import pytest

from biome_renderer import versions


@pytest.mark.parametrize("triple,expected", [
    ((1, 18, 2), versions.MC_1_18),
    ((1, 19, 0), versions.MC_1_19),
    ((1, 19, 2), versions.MC_1_19_2),
    ((1, 19, 3), versions.MC_1_19_2),
    ((1, 19, 4), versions.MC_1_19_4),
    ((1, 20, 1), versions.MC_1_20),
    ((1, 20, 6), versions.MC_1_20_6),
    ((1, 21, 0), versions.MC_1_21_1),
    ((1, 21, 1), versions.MC_1_21_3),
    ((1, 21, 2), versions.MC_1_21_3),
    ((1, 21, 4), versions.MC_1_21_WD),
    ((1, 16, 1), versions.MC_1_16_1),
    ((1, 16, 5), versions.MC_1_16),
])
def test_patch_thresholds(triple, expected):
    assert versions.parse_version(*triple) == expected


@pytest.mark.parametrize("triple", [(2, 0, 0), (1, 99, 0), (1, 5, 2), (0, 21, 4)])
def test_unrecognised_versions_resolve_to_newest(triple):
    assert versions.parse_version(*triple) == versions.MC_NEWEST


def test_version_strings():
    assert versions.split_version_string("1_21_4") == (1, 21, 4)
    assert versions.split_version_string("1.20.6") == (1, 20, 6)
    assert versions.split_version_string("1.18") == (1, 18, 0)
    assert versions.split_version_string("") == (1, 21, 0)
    assert versions.split_version_string("x.y.z") == (1, 21, 0)
    assert versions.resolve_version_string("1.19.4") == versions.MC_1_19_4


def test_three_dimensional_biomes_start_at_1_18():
    assert not versions.supports_3d_biomes(versions.MC_1_17)
    assert versions.supports_3d_biomes(versions.MC_1_18)
    assert versions.supports_3d_biomes(versions.MC_NEWEST)


def test_normalize_variant():
    assert versions.normalize_variant(versions.MC_1_16) == versions.MC_1_16
    assert versions.normalize_variant(-3) == versions.MC_NEWEST
    assert versions.normalize_variant(versions.MC_UNDEF) == versions.MC_NEWEST
