"""Pure calculation functions for plan projection and asset analysis."""

from __future__ import annotations

import math
from collections.abc import Iterable

from plantrack.models import MONTHS_PER_YEAR


def monthly_rate(annual_return_pct: float) -> float:
    """Monthly compounding rate as a decimal (12% a year -> 0.01)."""
    return annual_return_pct / 100 / MONTHS_PER_YEAR


def compound_month(value: float, contribution: float, rate: float) -> tuple[float, float]:
    """Add a month's contribution, then grow for one month.

    Returns (value_after_growth, growth_this_month).
    """
    before_growth = value + contribution
    after_growth = before_growth * (1 + rate)
    return after_growth, after_growth - before_growth


def period_years(years: int | float, months: int | float) -> float:
    """Holding period in fractional years."""
    return years + months / MONTHS_PER_YEAR


def total_return_pct(invested: float, current: float) -> float:
    """Total return as a percentage (50.0 = 50%). Zero when nothing was invested."""
    if invested == 0:
        return 0.0
    return (current - invested) / invested * 100


def cagr_pct(invested: float, current: float, years: float) -> float:
    """Compound Annual Growth Rate as a percentage.

    Zero unless both the investment and the period are positive.
    """
    if invested <= 0 or years <= 0:
        return 0.0
    return (float((current / invested) ** (1 / years)) - 1) * 100


def per_year(amount: float, years: float) -> float:
    if years <= 0:
        return 0.0
    return amount / years


def risk_adjusted_return(annualized_pct: float, risk_score: float) -> float:
    """Discount a return by 10% for every risk level above the lowest."""
    return annualized_pct * (1 - (risk_score - 1) * 0.1)


def weighted_mean(pairs: Iterable[tuple[float, float]]) -> float:
    """Mean of (value, weight) pairs. Zero when the weights sum to zero."""
    total = 0.0
    total_weight = 0.0
    for value, weight in pairs:
        total += value * weight
        total_weight += weight
    if total_weight == 0:
        return 0.0
    return total / total_weight


def sanitize_contribution(value: object) -> float:
    """Coerce a contribution entry to a non-negative float.

    Numbers and numeric strings are accepted. Anything else (None, text,
    NaN, infinities, negative amounts) becomes 0.0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        amount = float(value)
    elif isinstance(value, str):
        try:
            amount = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount
