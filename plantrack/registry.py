"""Plan registry: the owned collection of plans and its CRUD operations."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, date, datetime

from plantrack.errors import InvalidInput, NotFound
from plantrack.models import (
    PLAN_KINDS,
    PREMIUM_FREQUENCIES,
    SUPPORTED_CURRENCIES,
    InsuranceTerms,
    Plan,
    PlanSpec,
    PortfolioSummary,
    SIPTerms,
)
from plantrack.projection import recalculate
from plantrack.schedule import build_schedule

logger = logging.getLogger(__name__)


def _require_number(value: float | None, name: str) -> float:
    if value is None:
        raise InvalidInput(f"{name} is required")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{name} must be a number, got {value!r}") from exc


def _validate(spec: PlanSpec) -> None:
    if spec.kind not in PLAN_KINDS:
        raise InvalidInput(f"Unknown plan type {spec.kind!r}. Supported: {', '.join(PLAN_KINDS)}")
    if not spec.name or not spec.name.strip():
        raise InvalidInput("Plan name is required")
    if spec.currency not in SUPPORTED_CURRENCIES:
        supported = ", ".join(SUPPORTED_CURRENCIES)
        raise InvalidInput(f"Currency {spec.currency!r} not supported. Supported: {supported}")
    if spec.period < 1:
        raise InvalidInput("Investment period must be at least one year")


class PlanRegistry:
    """Holds every plan, keyed by id, and assigns new ids.

    ``as_of`` fixes the "current year" used when building schedules and
    recalculating; ``None`` means today.
    """

    def __init__(self, plans: list[Plan] | None = None, as_of: date | None = None) -> None:
        self._plans: dict[int, Plan] = {p.id: p for p in plans or []}
        self._last_id = max(self._plans, default=0)
        self.as_of = as_of

    def _next_id(self) -> int:
        # Millisecond timestamp, bumped when two plans land in the same tick.
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return self._last_id

    def create(self, spec: PlanSpec) -> Plan:
        _validate(spec)
        end_year = spec.start_year + spec.period - 1

        if spec.kind == "sip":
            terms: SIPTerms | InsuranceTerms = SIPTerms(
                annual_return=_require_number(spec.annual_return, "Annual return"),
            )
            monthly = spec.initial_amount or 0.0
        else:
            frequency = spec.premium_frequency
            if frequency not in PREMIUM_FREQUENCIES:
                raise InvalidInput(f"Premium frequency must be monthly or annual, got {frequency!r}")
            terms = InsuranceTerms(
                premium_amount=_require_number(spec.premium_amount, "Premium amount"),
                premium_frequency=frequency,  # type: ignore[arg-type]
                maturity_value=_require_number(spec.maturity_value, "Maturity value"),
            )
            monthly = terms.monthly_premium

        plan = Plan(
            id=self._next_id(),
            name=spec.name.strip(),
            currency=spec.currency,
            start_year=spec.start_year,
            end_year=end_year,
            terms=terms,
            yearly_data=build_schedule(spec.start_year, end_year, monthly, self.as_of),
            created_at=datetime.now(UTC),
        )
        plan = recalculate(plan, self.as_of)

        self._plans[plan.id] = plan
        logger.info("Created %s plan %s (%r)", plan.kind, plan.id, plan.name)
        return plan

    def get(self, plan_id: int) -> Plan:
        try:
            return self._plans[plan_id]
        except KeyError:
            raise NotFound(f"Plan {plan_id} not found") from None

    def list_plans(self) -> list[Plan]:
        return list(self._plans.values())

    def delete(self, plan_id: int) -> Plan:
        plan = self.get(plan_id)
        del self._plans[plan_id]
        logger.info("Deleted plan %s", plan_id)
        return plan

    def update(self, plan_id: int, change: Callable[[Plan], Plan]) -> Plan:
        """Apply an engine operation to a stored plan and keep its result."""
        updated = change(self.get(plan_id))
        self._plans[plan_id] = updated
        logger.info("Updated plan %s", plan_id)
        return updated

    def summary(self) -> PortfolioSummary:
        plans = self.list_plans()
        total_invested = sum(p.total_invested for p in plans)
        current_value = sum(p.current_value for p in plans)
        return PortfolioSummary(
            plan_count=len(plans),
            total_invested=total_invested,
            current_value=current_value,
            total_returns=current_value - total_invested,
        )
