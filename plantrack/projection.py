"""Projection engine: recompute a plan's year-by-year values from its schedule.

Both variants walk the schedule in ascending year and month order. The SIP
variant carries the running value across year boundaries, so any edit to an
earlier year changes every later year and a full re-walk is always done.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import assert_never

from plantrack import calculator
from plantrack.models import (
    MONTH_NAMES,
    MONTHS_PER_YEAR,
    InsuranceTerms,
    Plan,
    SIPTerms,
    YearRecord,
)
from plantrack.money import format_money

logger = logging.getLogger(__name__)


def as_of_year(as_of: date | None) -> int:
    """Calendar year used as the "current year" cutoff."""
    return (as_of or date.today()).year


def normalize_contributions(values: list[object]) -> list[float]:
    """Exactly twelve sanitized monthly entries; missing months are 0."""
    cleaned = [calculator.sanitize_contribution(v) for v in values[:MONTHS_PER_YEAR]]
    cleaned.extend([0.0] * (MONTHS_PER_YEAR - len(cleaned)))
    return cleaned


def recalculate(plan: Plan, as_of: date | None = None) -> Plan:
    """Return a copy of the plan with every YearRecord and aggregate recomputed."""
    terms = plan.terms
    if isinstance(terms, SIPTerms):
        result = recalculate_sip(plan, terms, as_of)
    elif isinstance(terms, InsuranceTerms):
        result = recalculate_insurance(plan, terms, as_of)
    else:
        assert_never(terms)
    logger.debug(
        "Recalculated plan %s (%s): invested=%.2f value=%.2f",
        plan.id,
        plan.kind,
        result.total_invested,
        result.current_value,
    )
    return result


def recalculate_sip(plan: Plan, terms: SIPTerms, as_of: date | None = None) -> Plan:
    """Monthly compounding with per-year manual overrides."""
    def money(amount: float) -> str:
        return format_money(amount, plan.currency)

    cutoff = as_of_year(as_of)
    rate = calculator.monthly_rate(terms.annual_return)
    current_value = 0.0
    total_invested = 0.0
    yearly_data: dict[int, YearRecord] = {}
    logs = [
        f"=== {plan.name} SIP Calculation Log ===",
        f"Annual Return: {terms.annual_return:g}% | Monthly Return: {rate * 100:.4f}%",
    ]

    for year in plan.years:
        rec = plan.yearly_data[year]
        contributions = normalize_contributions(rec.contributions)
        year_contributed = sum(contributions)
        year_start = current_value
        logs.append("")
        logs.append(f"--- Year {year} ---")
        logs.append(f"Starting Value: {money(year_start)}")

        actual = rec.actual_year_end_value
        if rec.is_manual_override and actual is not None:
            total_invested += year_contributed
            year_end = actual
            yearly_return = year_end - year_start - year_contributed
            logs.append(f"MANUAL OVERRIDE: Using actual year end value: {money(year_end)}")
            logs.append(f"Total Contributed: {money(year_contributed)}")
            logs.append(f"Year Returns: {money(yearly_return)}")
            logs.append(f"Year End Value: {money(year_end)}")
        else:
            year_end = year_start
            for month, contribution in enumerate(contributions):
                total_invested += contribution
                year_end, growth = calculator.compound_month(year_end, contribution, rate)
                logs.append(
                    f"{MONTH_NAMES[month]}: Contributed {money(contribution)}, "
                    f"Growth {money(growth)}, End: {money(year_end)}"
                )
            yearly_return = year_end - year_start - year_contributed
            logs.append(f"Year {year} Summary:")
            logs.append(f"  Total Contributed: {money(year_contributed)}")
            logs.append(f"  Year Growth: {money(yearly_return)}")
            logs.append(f"  Year End Value: {money(year_end)}")

        yearly_data[year] = replace(
            rec,
            contributions=contributions,
            year_start_value=year_start,
            year_end_value=year_end,
            yearly_return=yearly_return,
            is_complete=year < cutoff,
        )
        current_value = year_end

    total_returns = current_value - total_invested
    logs.append("")
    logs.append("=== Final Summary ===")
    logs.append(f"Total Invested: {money(total_invested)}")
    logs.append(f"Final Value: {money(current_value)}")
    logs.append(f"Total Returns: {money(total_returns)}")

    return replace(
        plan,
        yearly_data=yearly_data,
        total_invested=total_invested,
        current_value=current_value,
        total_returns=total_returns,
        calculation_logs=logs,
    )


def recalculate_insurance(
    plan: Plan, terms: InsuranceTerms, as_of: date | None = None
) -> Plan:
    """Flat maturity value; premiums count only up to the as-of year."""
    def money(amount: float) -> str:
        return format_money(amount, plan.currency)

    cutoff = as_of_year(as_of)
    maturity = terms.maturity_value
    total_invested = 0.0
    yearly_data: dict[int, YearRecord] = {}
    logs = [
        f"=== {plan.name} Insurance Calculation Log ===",
        f"Premium Amount: {money(terms.premium_amount)} ({terms.premium_frequency})",
        f"Guaranteed Maturity Value: {money(maturity)}",
    ]

    for year in plan.years:
        rec = plan.yearly_data[year]
        contributions = normalize_contributions(rec.contributions)
        year_contributed = sum(contributions)
        if year <= cutoff:
            total_invested += year_contributed

        logs.append("")
        logs.append(f"--- Year {year} ---")
        logs.append(f"Premiums This Year: {money(year_contributed)}")
        logs.append(f"Total Premiums to Date: {money(total_invested)}")

        yearly_data[year] = replace(
            rec,
            contributions=contributions,
            year_start_value=maturity,
            year_end_value=maturity,
            yearly_return=0.0,
            actual_year_end_value=None,
            is_manual_override=False,
            is_complete=year < cutoff,
        )

    total_returns = maturity - total_invested
    logs.append("")
    logs.append("=== Final Summary ===")
    logs.append(f"Total Premiums Paid: {money(total_invested)}")
    logs.append(f"Guaranteed Maturity Value: {money(maturity)}")
    logs.append(f"Total Returns: {money(total_returns)}")

    return replace(
        plan,
        yearly_data=yearly_data,
        total_invested=total_invested,
        current_value=maturity,
        total_returns=total_returns,
        calculation_logs=logs,
    )
