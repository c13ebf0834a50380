"""
Tests for dailygames/domain/invest_rules.py -- economics and bankroll rules.
"""

import math

import pytest

from dailygames.domain.invest_rules import (
    BANKROLL_FLOOR_USD,
    MAX_INVEST_FRACTION_OF_VALUATION,
    MAX_UNITS_SOLD,
    MIN_UNITS_SOLD,
    STARTING_BANKROLL_USD,
    UNIT_PRICE_MAX_USD,
    UNIT_PRICE_MIN_USD,
    VALUATION_MAX_USD,
    VALUATION_MIN_USD,
    apply_transaction,
    clamp_units_sold,
    gross_revenue,
    max_investable,
    new_bankroll,
    observe_day,
    ownership_share,
    payout,
    pick_economics,
    resolve_investment,
)
from dailygames.errors import InvalidArgument
from dailygames.models.schema_models import BankrollState


class TestPickEconomics:
    @pytest.mark.parametrize("seed", ["2025-01-01-v3:A", "2025-01-01-v3:B", "random-id:C"])
    def test_within_bounds_and_deterministic(self, seed):
        economics = pick_economics(seed)
        assert VALUATION_MIN_USD <= economics["valuation_usd"] <= VALUATION_MAX_USD
        assert economics["valuation_usd"] % 1_000 == 0
        assert UNIT_PRICE_MIN_USD <= economics["unit_price_usd"] <= UNIT_PRICE_MAX_USD
        assert 0 <= economics["unit_cogs_usd"] <= economics["unit_price_usd"]
        assert pick_economics(seed) == economics


class TestOwnershipShare:
    def test_share_is_invested_over_valuation(self):
        assert ownership_share(10_000, 100_000) == pytest.approx(0.1)

    def test_share_is_capped(self):
        assert ownership_share(1_000_000, 100_000) == MAX_INVEST_FRACTION_OF_VALUATION

    def test_non_positive_valuation_gives_zero(self):
        assert ownership_share(10_000, 0) == 0
        assert ownership_share(10_000, -5) == 0

    def test_monotonic_in_investment(self):
        shares = [ownership_share(amount, 200_000) for amount in range(0, 300_000, 5_000)]
        assert shares == sorted(shares)
        assert max(shares) <= MAX_INVEST_FRACTION_OF_VALUATION


class TestInvestmentLimits:
    def test_max_investable_uses_valuation_cap(self):
        assert max_investable(100_001) == 75_000

    def test_max_investable_uses_available_funds(self):
        assert max_investable(100_000, available_funds=1_234.9) == 1_234

    def test_resolve_floors_and_clamps(self):
        assert resolve_investment(500.9, 100_000) == 500
        assert resolve_investment(999_999, 100_000) == 75_000
        assert resolve_investment(50_000, 100_000, available_funds=20_000) == 20_000

    @pytest.mark.parametrize("raw", [0, -10, math.nan, math.inf, None, "abc", 10 ** 400])
    def test_resolve_rejects_invalid_requests(self, raw):
        with pytest.raises(InvalidArgument):
            resolve_investment(raw, 100_000)

    def test_amount_resolving_to_zero_is_rejected(self):
        with pytest.raises(InvalidArgument, match="too small"):
            resolve_investment(0.5, 100_000)
        with pytest.raises(InvalidArgument, match="too small"):
            resolve_investment(100, 100_000, available_funds=0)


class TestPayout:
    @pytest.mark.parametrize("raw", [-5, math.nan, 1e9])
    def test_units_sold_always_clamped(self, raw):
        assert MIN_UNITS_SOLD <= clamp_units_sold(raw) <= MAX_UNITS_SOLD

    def test_payout_formula(self):
        units = clamp_units_sold(1_234.4)
        share = ownership_share(30_000, 120_000)
        gross = gross_revenue(units, 19)
        assert units == 1_234
        assert gross == 23_446
        assert payout(gross, share) == 5_862

    def test_payout_rounds_half_away_from_zero(self):
        assert payout(5, 0.5) == 3


class TestBankroll:
    def test_new_bankroll(self):
        assert new_bankroll().bankroll_usd == STARTING_BANKROLL_USD

    def test_transaction_updates_balance(self):
        state = BankrollState(bankroll_usd=100_000)
        assert apply_transaction(state, 10_000, 2_500).bankroll_usd == 92_500

    def test_transaction_never_goes_negative(self):
        state = BankrollState(bankroll_usd=1_000)
        assert apply_transaction(state, 5_000, 0).bankroll_usd == 0

    def test_floor_applies_on_first_view_of_a_day_only(self):
        state = BankrollState(bankroll_usd=500, last_seen_date_key="2025-01-01-v3")
        state = observe_day(state, "2025-01-02-v3", BANKROLL_FLOOR_USD)
        assert state.bankroll_usd == 10_000
        assert state.last_seen_date_key == "2025-01-02-v3"

        state = apply_transaction(state, 9_000, 0)
        assert state.bankroll_usd == 1_000
        assert observe_day(state, "2025-01-02-v3").bankroll_usd == 1_000

    def test_floor_repairs_non_finite_balance(self):
        state = BankrollState(bankroll_usd=math.nan)
        assert observe_day(state, "2025-01-02-v3").bankroll_usd == BANKROLL_FLOOR_USD

    def test_balance_above_floor_is_kept(self):
        state = BankrollState(bankroll_usd=55_000)
        assert observe_day(state, "2025-01-02-v3").bankroll_usd == 55_000
