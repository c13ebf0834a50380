"""
Tests for dailygames/domain/sanitize.py -- player-visible text contracts.
"""

import math

import pytest

from dailygames.domain.sanitize import (
    clamp_answer,
    clamp_int,
    format_market_summary,
    sanitize_blurb,
    sanitize_name,
    sanitize_pitch,
    sanitize_title,
    split_sentences,
)
from dailygames.domain.seeded_picker import fallback_title

DESCRIPTORS = ["neon armadillo", "quarterly taxes"]


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

class TestSanitizeTitle:
    def test_descriptor_tokens_are_removed(self):
        title = sanitize_title("Neon Armadillo Tax Tracker", DESCRIPTORS, "seed:A")
        tokens = {t.lower() for t in title.split()}
        assert tokens.isdisjoint({"neon", "armadillo", "tax", "taxes"})
        assert title == "Tracker"

    def test_empty_remainder_uses_fallback_name(self):
        title = sanitize_title("Neon Armadillo Taxes", DESCRIPTORS, "seed:A")
        assert title == fallback_title("seed:A")
        assert title

    def test_short_tokens_are_kept(self):
        descriptors = ["go kart", "ox tail"]
        assert sanitize_title("Go Ox Express", descriptors, "seed") == "Go Ox Express"

    def test_too_short_remainder_uses_fallback(self):
        assert sanitize_title("Neon Go", DESCRIPTORS, "seed:B") == fallback_title("seed:B")

    def test_punctuation_does_not_hide_a_descriptor(self):
        assert sanitize_title("Armadillo's Ledger", DESCRIPTORS, "seed") == "Ledger"

    def test_blank_title_uses_fallback(self):
        assert sanitize_title("   ", DESCRIPTORS, "seed:C") == fallback_title("seed:C")

    @pytest.mark.parametrize(
        "title, descriptors, expected",
        [
            ("Horse Blender", ["tiny horses", "desk plants"], "Blender"),
            ("Gnome Radar", ["garden gnomes", "lost socks"], "Radar"),
            ("Zone Clock", ["time zones", "jazz hands"], "Clock"),
            ("Horses Blender", ["tiny horses", "desk plants"], "Blender"),
            ("Glass Box Lamp", ["broken glasses", "office boxes"], "Lamp"),
        ],
    )
    def test_plural_descriptors_remove_singular_words(self, title, descriptors, expected):
        assert sanitize_title(title, descriptors, "seed") == expected

    def test_unrelated_prefix_of_a_descriptor_is_kept(self):
        descriptors = ["passive aggressive notes", "desk plants"]
        assert sanitize_title("Not Guilty Stapler", descriptors, "seed") == "Not Guilty Stapler"
        assert sanitize_title("Note Guilty Stapler", descriptors, "seed") == "Guilty Stapler"


# ---------------------------------------------------------------------------
# Pitches and narratives
# ---------------------------------------------------------------------------

class TestSanitizePitch:
    def test_hook_line_dropped_and_two_sentences_kept(self):
        raw = "Hook: Never lose a sock again.\nOur socks find each other. They phone home!"
        assert sanitize_pitch(raw) == "Our socks find each other. They phone home!"

    def test_truncates_to_two_sentences(self):
        raw = "One. Two? Three! Four."
        assert sanitize_pitch(raw) == "One. Two?"

    def test_strips_bullets_and_collapses_whitespace(self):
        raw = "- Sharks,   this   is big.\n* Really   big."
        assert sanitize_pitch(raw) == "Sharks, this is big. Really big."

    def test_trailing_fragment_counts_as_sentence(self):
        assert sanitize_pitch("It hums. It glows") == "It hums. It glows"

    def test_empty_input(self):
        assert sanitize_pitch("") == ""
        assert sanitize_pitch("Target: everyone") == ""

    def test_split_sentences(self):
        assert split_sentences("A. B! C") == ["A.", "B!", "C"]


class TestSanitizeBlurb:
    def test_strips_money_percentages_and_big_numbers(self):
        raw = "It sold 12,000 units at $79.99 each. Margins hit 75% and 40 dollars vanished. USD 500 later."
        blurb = sanitize_blurb(raw)
        assert "$" not in blurb
        assert "%" not in blurb
        assert "12,000" not in blurb
        assert "dollars" not in blurb
        assert blurb.count(".") == 2

    def test_small_numbers_survive(self):
        assert sanitize_blurb("3 influencers cried.") == "3 influencers cried."

    def test_bullets_are_stripped(self):
        assert sanitize_blurb("- Buyers rioted.\n- Stock vanished.") == "Buyers rioted. Stock vanished."


# ---------------------------------------------------------------------------
# Numbers, names, answers
# ---------------------------------------------------------------------------

class TestClampInt:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (-5, 1),
            (math.nan, 1),
            (1e9, 1_000_000),
            (math.inf, 1),
            (2.5, 3),
            (3.5, 4),
            ("12", 12),
            ("junk", 1),
            (None, 1),
            (10 ** 400, 1_000_000),
            (-(10 ** 400), 1),
        ],
    )
    def test_clamps_into_range(self, raw, expected):
        assert clamp_int(raw, 1, 1_000_000) == expected

    def test_rounds_half_away_from_zero(self):
        assert clamp_int(-2.5, -10, 10) == -3
        assert clamp_int(0.5, -10, 10) == 1


class TestNamesAndAnswers:
    def test_nicknames_and_epithets_removed(self):
        assert sanitize_name('Douglas "Cash King" Winston') == "Douglas Winston"
        assert sanitize_name("Marla “Marlboro” Quince") == "Marla Quince"
        assert sanitize_name("Ada (the Terrible) Byron") == "Ada Byron"
        assert sanitize_name("") == "Unknown"

    def test_long_answers_are_clamped(self):
        answer = clamp_answer("word " * 100)
        assert len(answer) <= 240
        assert answer.endswith("…")

    def test_short_answers_are_untouched(self):
        assert clamp_answer("  I   did   it. ") == "I did it."


class TestMarketSummary:
    def test_summary_lines(self):
        summary = format_market_summary("Fans rioted. It was $5 well spent.", 1500, 25, 37_500, 9_375)
        lines = summary.split("\n")
        assert lines[0] == "Fans rioted. It was well spent."
        assert lines[1] == ""
        assert lines[2] == "Units sold: 1,500 @ $25"
        assert lines[3] == "Product gross revenue: $37,500"
        assert lines[4] == "Your payout: $9,375"

    def test_empty_blurb_gets_placeholder(self):
        assert format_market_summary("", 1, 5, 5, 1).startswith("The market reacted.")
