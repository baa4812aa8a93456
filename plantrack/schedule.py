"""Contribution schedule construction, edits and plan status transitions.

Every edit returns a new, fully recalculated plan; the plan passed in is
left untouched. Status gating (which years a paused or stopped plan may
edit) belongs to the caller.
"""

from __future__ import annotations

import copy
from dataclasses import replace
from datetime import date

from plantrack.calculator import sanitize_contribution
from plantrack.errors import InvalidInput, NotFound
from plantrack.models import MONTHS_PER_YEAR, Plan, YearRecord
from plantrack.projection import as_of_year, recalculate


def build_schedule(
    start_year: int,
    end_year: int,
    monthly_amount: float,
    as_of: date | None = None,
) -> dict[int, YearRecord]:
    """One YearRecord per year; years after the as-of year start empty."""
    cutoff = as_of_year(as_of)
    amount = sanitize_contribution(monthly_amount)
    return {
        year: YearRecord(
            contributions=[0.0 if year > cutoff else amount] * MONTHS_PER_YEAR,
        )
        for year in range(start_year, end_year + 1)
    }


def _editable_copy(plan: Plan, year: int) -> tuple[Plan, YearRecord]:
    if year not in plan.yearly_data:
        raise NotFound(
            f"Year {year} is outside plan {plan.id} ({plan.start_year}-{plan.end_year})"
        )
    edited = copy.deepcopy(plan)
    return edited, edited.yearly_data[year]


def set_month(
    plan: Plan,
    year: int,
    month_index: int,
    amount: object,
    as_of: date | None = None,
) -> Plan:
    """Replace one month's contribution (month_index 0 = January)."""
    if not 0 <= month_index < MONTHS_PER_YEAR:
        raise InvalidInput(f"Month index must be between 0 and 11, got {month_index}")
    edited, rec = _editable_copy(plan, year)
    rec.contributions[month_index] = sanitize_contribution(amount)
    return recalculate(edited, as_of)


def set_all_months(
    plan: Plan, year: int, amount: object, as_of: date | None = None
) -> Plan:
    """Apply the same contribution to every month of a year."""
    edited, rec = _editable_copy(plan, year)
    rec.contributions = [sanitize_contribution(amount)] * MONTHS_PER_YEAR
    return recalculate(edited, as_of)


def zero_all_months(plan: Plan, year: int, as_of: date | None = None) -> Plan:
    edited, rec = _editable_copy(plan, year)
    rec.contributions = [0.0] * MONTHS_PER_YEAR
    return recalculate(edited, as_of)


def stop(plan: Plan, as_of: date | None = None) -> Plan:
    """Stop the plan and drop every contribution after the as-of year."""
    cutoff = as_of_year(as_of)
    edited = copy.deepcopy(plan)
    edited.status = "stopped"
    for year, rec in edited.yearly_data.items():
        if year > cutoff:
            rec.contributions = [0.0] * MONTHS_PER_YEAR
    return recalculate(edited, as_of)


def pause(plan: Plan) -> Plan:
    if plan.status != "active":
        raise InvalidInput(f"Only active plans can be paused (plan is {plan.status})")
    return replace(plan, status="paused")


def resume(plan: Plan) -> Plan:
    if plan.status != "paused":
        raise InvalidInput(f"Only paused plans can be resumed (plan is {plan.status})")
    return replace(plan, status="active")
