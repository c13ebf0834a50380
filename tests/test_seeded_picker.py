"""
Tests for dailygames/domain/seeded_picker.py.

Validates:
    - hash32 / pick_in_range are reproducible and bounded
    - reversed and zero-width ranges are tolerated
    - pick_distinct_from_pool honours the avoid set and never loops forever
    - fallback names, case numbers and face emojis are deterministic
"""

import pytest

from dailygames.domain.seeded_picker import (
    DESCRIPTOR_POOL,
    FACE_EMOJIS,
    case_number_from_seed,
    fallback_title,
    hash32,
    mix,
    normalize_choice,
    pick_distinct_from_pool,
    pick_face_emoji,
    pick_in_range,
)

SEEDS = ["2025-01-01-v3:A", "2025-01-01-v3:B", "x", "", "ünïcødé", "0189a1b2-c3d4"]


class TestHash:
    def test_hash_is_stable(self):
        assert hash32("2025-01-01-v3:A") == hash32("2025-01-01-v3:A")

    def test_hash_is_uint32(self):
        for seed in SEEDS:
            assert 0 <= hash32(seed) <= 0xFFFFFFFF

    def test_adjacent_seeds_differ_in_low_bits(self):
        """Seeds differing in one trailing character should not share low bits."""
        low_bits = {hash32(f"X:{suffix}") & 0xFF for suffix in "ABCDEFGH"}
        assert len(low_bits) > 4

    def test_mix_decorrelates_indices(self):
        h = hash32("2025-01-01-v3:A")
        assert len({mix(h, i) for i in range(10)}) == 10


class TestPickInRange:
    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("lo,hi", [(1, 6), (20, 500), (-5, 5), (0, 0), (9, 3)])
    def test_within_bounds_and_reproducible(self, seed, lo, hi):
        value = pick_in_range(seed, lo, hi)
        assert min(lo, hi) <= value <= max(lo, hi)
        assert pick_in_range(seed, lo, hi) == value

    def test_reversed_range_matches_normal_range(self):
        assert pick_in_range("seed", 10, 1) == pick_in_range("seed", 1, 10)

    def test_zero_span_returns_lo(self):
        assert pick_in_range("anything", 7, 7) == 7

    def test_index_changes_the_pick_distribution(self):
        picks = {pick_in_range("seed", 0, 1_000_000, index=i) for i in range(5)}
        assert len(picks) > 1

    def test_covers_the_whole_range(self):
        values = {pick_in_range(f"s{i}", 1, 3) for i in range(200)}
        assert values == {1, 2, 3}


class TestPickDistinctFromPool:
    def test_returns_requested_count_of_distinct_values(self):
        picks = pick_distinct_from_pool("2025-01-01-v3:A", 2)
        assert len(picks) == 2
        assert len({normalize_choice(p) for p in picks}) == 2
        assert all(p in DESCRIPTOR_POOL for p in picks)

    def test_is_deterministic(self):
        assert pick_distinct_from_pool("seed:A", 3) == pick_distinct_from_pool("seed:A", 3)

    def test_avoid_set_is_case_and_space_insensitive(self):
        pool = ["Alpha", "beta", "Gamma"]
        picks = pick_distinct_from_pool("seed", 2, avoid=["  ALPHA "], pool=pool)
        assert "Alpha" not in picks
        assert sorted(picks) == ["Gamma", "beta"]

    def test_exhausted_pool_repeats_instead_of_looping(self):
        pool = ["one", "two"]
        picks = pick_distinct_from_pool("seed", 5, avoid=["one"], pool=pool)
        assert len(picks) == 5
        assert picks[0] == "two"
        assert set(picks) <= set(pool)

    def test_zero_count_or_empty_pool(self):
        assert pick_distinct_from_pool("seed", 0) == []
        assert pick_distinct_from_pool("seed", 2, pool=[]) == []


class TestDerivedValues:
    def test_fallback_title_is_deterministic_and_non_empty(self):
        assert fallback_title("seed:A") == fallback_title("seed:A")
        assert len(fallback_title("seed:A")) >= 3

    def test_case_number_is_four_digits(self):
        for seed in SEEDS:
            assert 1000 <= case_number_from_seed(seed) <= 9999

    def test_face_emoji_comes_from_the_pool(self):
        assert pick_face_emoji("2025-01-01-v1") in FACE_EMOJIS
