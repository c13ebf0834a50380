"""High Stakes rules: bounds, economics and bankroll bookkeeping.

Rule of thumb:
- OK: math, validation, clamping, pure transformations.
- Not OK: touching the cache store, FastAPI, datetime.now(), etc.
"""

import math

from dailygames.domain.sanitize import clamp_int, round_half_away_from_zero
from dailygames.domain.seeded_picker import pick_in_range
from dailygames.errors import InvalidArgument
from dailygames.models.schema_models import BankrollState

INVENTION_IDS = ("A", "B", "C")
INVENTIONS_PER_DAY = len(INVENTION_IDS)

STARTING_BANKROLL_USD = 100_000
BANKROLL_FLOOR_USD = 10_000

VALUATION_MIN_USD = 20_000
VALUATION_MAX_USD = 500_000
UNIT_PRICE_MIN_USD = 5
UNIT_PRICE_MAX_USD = 5_000

MAX_INVEST_FRACTION_OF_VALUATION = 0.75
MIN_UNITS_SOLD = 1
MAX_UNITS_SOLD = 1_000_000

MAX_SUGGESTION_CHARS = 220

# Valuations are picked on a 1,000 grid so they read like real asks.
VALUATION_STEP_USD = 1_000


def pick_economics(seed: str) -> dict:
    """Pre-select the numeric fields of one invention from its seed.

    Returns:
        dict: valuation_usd, unit_price_usd and unit_cogs_usd, all within bounds
    """
    valuation_steps = pick_in_range(
        seed,
        VALUATION_MIN_USD // VALUATION_STEP_USD,
        VALUATION_MAX_USD // VALUATION_STEP_USD,
        index=1,
    )
    unit_price_usd = pick_in_range(seed, UNIT_PRICE_MIN_USD, UNIT_PRICE_MAX_USD, index=2)
    # cogs land between 10% and 90% of the price
    cogs_percent = pick_in_range(seed, 10, 90, index=3)
    return {
        "valuation_usd": valuation_steps * VALUATION_STEP_USD,
        "unit_price_usd": unit_price_usd,
        "unit_cogs_usd": clamp_int(unit_price_usd * cogs_percent / 100, 0, unit_price_usd),
    }


def ownership_share(invested_usd: float, valuation_usd: float, cap_fraction: float = MAX_INVEST_FRACTION_OF_VALUATION) -> float:
    """Fraction of gross revenue owned for an investment, capped at ``cap_fraction``."""
    if valuation_usd <= 0 or invested_usd <= 0:
        return 0.0
    return min(cap_fraction, invested_usd / valuation_usd)


def max_investable(
    valuation_usd: float,
    cap_fraction: float = MAX_INVEST_FRACTION_OF_VALUATION,
    available_funds: float | None = None,
) -> int:
    limit = valuation_usd * cap_fraction
    if available_funds is not None:
        limit = min(limit, available_funds)
    if not math.isfinite(limit):
        return 0
    return max(0, math.floor(limit))


def resolve_investment(
    raw_amount,
    valuation_usd: float,
    cap_fraction: float = MAX_INVEST_FRACTION_OF_VALUATION,
    available_funds: float | None = None,
) -> int:
    """Floor and clamp a requested investment.

    Args:
        raw_amount: Amount requested by the player (untrusted)
        valuation_usd (float): Valuation of the invention
        cap_fraction (float, optional): Max fraction of the valuation that can be bought.
        available_funds (float | None, optional): Bankroll limit, if known. Defaults to None.

    Raises:
        InvalidArgument: Non-numeric or non-positive request
        InvalidArgument: The request resolves to zero after clamping

    Returns:
        int: The investment actually made
    """
    try:
        amount = float(raw_amount)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument("Invalid investedUsd")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidArgument("Invalid investedUsd")

    resolved = max(0, min(math.floor(amount), max_investable(valuation_usd, cap_fraction, available_funds)))
    if resolved <= 0:
        raise InvalidArgument("Investment is too small")
    return resolved


def clamp_units_sold(raw_units) -> int:
    return clamp_int(raw_units, MIN_UNITS_SOLD, MAX_UNITS_SOLD)


def gross_revenue(units_sold: int, unit_price_usd: int) -> int:
    return units_sold * unit_price_usd


def payout(gross_revenue_usd: float, share: float) -> int:
    return round_half_away_from_zero(gross_revenue_usd * share)


def apply_transaction(state: BankrollState, invested_usd: float, payout_usd: float) -> BankrollState:
    """Settle one investment against the bankroll; never goes below zero."""
    balance = state.bankroll_usd - invested_usd + payout_usd
    if not math.isfinite(balance):
        balance = 0
    return state.model_copy(update={"bankroll_usd": max(0, round_half_away_from_zero(balance))})


def observe_day(state: BankrollState, date_key: str, floor_usd: int = BANKROLL_FLOOR_USD) -> BankrollState:
    """Apply the bankroll floor on the first view of a new day.

    Later views on the same day leave the balance alone, even below the floor.
    """
    if state.last_seen_date_key == date_key:
        return state
    balance = state.bankroll_usd
    if not math.isfinite(balance) or balance <= 0 or balance < floor_usd:
        balance = floor_usd
    return state.model_copy(update={"bankroll_usd": balance, "last_seen_date_key": date_key})


def new_bankroll() -> BankrollState:
    return BankrollState(bankroll_usd=STARTING_BANKROLL_USD)
