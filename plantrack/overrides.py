"""Manual year-end overrides for SIP plans.

An override replaces the calculated year-end value with the value actually
observed. It stays in force on every later recalculation until cleared.
"""

from __future__ import annotations

import copy
import math
from datetime import date

from plantrack.errors import InvalidInput, NotFound
from plantrack.models import Plan, SIPTerms
from plantrack.projection import recalculate


def parse_override_value(value: object) -> float:
    """Strictly parse an observed year-end value; rejects rather than coerces."""
    if isinstance(value, bool):
        raise InvalidInput("Please enter a valid positive number")
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidInput("Please enter a valid positive number") from exc
    if not math.isfinite(parsed) or parsed < 0:
        raise InvalidInput("Please enter a valid positive number")
    return parsed


def _sip_copy(plan: Plan, year: int) -> Plan:
    if not isinstance(plan.terms, SIPTerms):
        raise InvalidInput(f"Plan {plan.id} is a {plan.kind} plan; overrides apply to SIP plans only")
    if year not in plan.yearly_data:
        raise NotFound(f"Year {year} is outside plan {plan.id}")
    return copy.deepcopy(plan)


def set_override(
    plan: Plan, year: int, actual_value: object, as_of: date | None = None
) -> Plan:
    value = parse_override_value(actual_value)
    edited = _sip_copy(plan, year)
    rec = edited.yearly_data[year]
    rec.actual_year_end_value = value
    rec.is_manual_override = True
    return recalculate(edited, as_of)


def clear_override(plan: Plan, year: int, as_of: date | None = None) -> Plan:
    edited = _sip_copy(plan, year)
    rec = edited.yearly_data[year]
    rec.actual_year_end_value = None
    rec.is_manual_override = False
    return recalculate(edited, as_of)
