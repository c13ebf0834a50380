from datetime import date

import pytest

from dailygames.domain.keys import (
    DAILY_TTL_SECONDS,
    GATES_DAILY_SEED_VERSION,
    INVEST_DAILY_SEED_VERSION,
    RANDOM_TTL_SECONDS,
    GameKind,
    GameMode,
    coerce_mode,
    daily_date_key,
    derive_key,
    local_date_key,
    resolve_action_key,
    ttl_for,
)
from dailygames.errors import InvalidArgument


class TestDeriveKey:
    def test_daily_key_uses_date_key(self):
        assert derive_key(GameKind.invest, GameMode.daily, "ignored", "2025-01-01-v3") == "inv:daily:2025-01-01-v3"

    def test_random_key_uses_game_id(self):
        assert derive_key(GameKind.invest, GameMode.debug_random, "abc", "2025-01-01-v3") == "inv:random:abc"

    def test_daily_without_date_key_is_rejected(self):
        with pytest.raises(InvalidArgument):
            derive_key(GameKind.invest, GameMode.daily, "abc", None)
        with pytest.raises(InvalidArgument):
            derive_key(GameKind.gates, GameMode.daily, "abc", "   ")

    def test_games_never_collide(self):
        invest = derive_key(GameKind.invest, GameMode.daily, "", "2025-01-01-v1")
        gates = derive_key(GameKind.gates, GameMode.daily, "", "2025-01-01-v1")
        assert invest != gates
        assert gates == "pg:daily:2025-01-01-v1"


class TestResolveActionKey:
    def test_missing_game_id_falls_back_to_date_key(self):
        assert resolve_action_key(GameKind.invest, GameMode.daily, None, "2025-01-01-v3") == "inv:daily:2025-01-01-v3"

    def test_random_mode_requires_game_id(self):
        with pytest.raises(InvalidArgument):
            resolve_action_key(GameKind.gates, GameMode.debug_random, "", "")

    def test_daily_mode_requires_date_key(self):
        with pytest.raises(InvalidArgument):
            resolve_action_key(GameKind.invest, GameMode.daily, "game", "")


class TestModeAndDates:
    def test_coerce_mode(self):
        assert coerce_mode("debug-random") == GameMode.debug_random
        assert coerce_mode("daily") == GameMode.daily
        assert coerce_mode(None) == GameMode.daily
        assert coerce_mode("nonsense") == GameMode.daily

    def test_ttl_per_mode(self):
        assert ttl_for(GameMode.daily) == DAILY_TTL_SECONDS == 2_592_000
        assert ttl_for(GameMode.debug_random) == RANDOM_TTL_SECONDS == 86_400

    def test_date_keys(self):
        day = date(2025, 1, 2)
        assert local_date_key(day) == "2025-01-02"
        assert daily_date_key(day, INVEST_DAILY_SEED_VERSION) == "2025-01-02-v3"
        assert daily_date_key(day, GATES_DAILY_SEED_VERSION) == "2025-01-02-v1"
