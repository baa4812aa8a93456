"""Tests for schedule construction, edits and status transitions."""

from datetime import date

import pytest

from plantrack.errors import InvalidInput, NotFound
from plantrack.models import PlanSpec
from plantrack.registry import PlanRegistry
from plantrack.schedule import (
    build_schedule,
    pause,
    resume,
    set_all_months,
    set_month,
    stop,
    zero_all_months,
)

AS_OF = date(2025, 6, 1)


def _sip_plan(start_year: int = 2024, period: int = 4):
    registry = PlanRegistry(as_of=AS_OF)
    return registry.create(
        PlanSpec(
            kind="sip",
            name="Index SIP",
            currency="PKR",
            start_year=start_year,
            period=period,
            annual_return=12.0,
            initial_amount=1000.0,
        )
    )


def _insurance_plan():
    registry = PlanRegistry(as_of=AS_OF)
    return registry.create(
        PlanSpec(
            kind="insurance",
            name="Endowment",
            currency="USD",
            start_year=2024,
            period=4,
            premium_amount=12000.0,
            premium_frequency="annual",
            maturity_value=60000.0,
        )
    )


class TestBuildSchedule:
    def test_covers_every_year(self):
        data = build_schedule(2024, 2027, 1000.0, AS_OF)
        assert sorted(data) == [2024, 2025, 2026, 2027]

    def test_future_years_start_empty(self):
        data = build_schedule(2024, 2027, 1000.0, AS_OF)
        assert data[2025].contributions == [1000.0] * 12
        assert data[2026].contributions == [0.0] * 12
        assert data[2027].contributions == [0.0] * 12

    def test_records_are_independent(self):
        data = build_schedule(2024, 2025, 1000.0, AS_OF)
        data[2024].contributions[0] = 5.0
        assert data[2025].contributions[0] == 1000.0


class TestSetMonth:
    def test_updates_one_month(self):
        plan = _sip_plan()
        edited = set_month(plan, 2026, 2, 750, AS_OF)
        assert edited.yearly_data[2026].contributions[2] == 750.0
        assert edited.yearly_data[2026].contributions[3] == 0.0
        assert edited.total_invested == pytest.approx(plan.total_invested + 750.0)

    def test_original_untouched(self):
        plan = _sip_plan()
        set_month(plan, 2026, 2, 750, AS_OF)
        assert plan.yearly_data[2026].contributions[2] == 0.0

    def test_non_numeric_coerced_to_zero(self):
        plan = _sip_plan()
        edited = set_month(plan, 2024, 0, "abc", AS_OF)
        assert edited.yearly_data[2024].contributions[0] == 0.0

    @pytest.mark.parametrize("month_index", [-1, 12])
    def test_month_out_of_range(self, month_index):
        with pytest.raises(InvalidInput):
            set_month(_sip_plan(), 2024, month_index, 100, AS_OF)

    def test_unknown_year(self):
        with pytest.raises(NotFound):
            set_month(_sip_plan(), 2030, 0, 100, AS_OF)


class TestYearEdits:
    def test_set_all_months(self):
        edited = set_all_months(_sip_plan(), 2027, "2000", AS_OF)
        assert edited.yearly_data[2027].contributions == [2000.0] * 12

    def test_zero_all_months(self):
        plan = _sip_plan()
        edited = zero_all_months(plan, 2024, AS_OF)
        assert edited.yearly_data[2024].contributions == [0.0] * 12
        assert edited.total_invested == pytest.approx(12000.0)

    def test_insurance_edit_recalculates(self):
        plan = _insurance_plan()
        assert plan.total_invested == pytest.approx(24000.0)
        edited = zero_all_months(plan, 2024, AS_OF)
        assert edited.total_invested == pytest.approx(12000.0)
        assert edited.current_value == 60000.0


class TestStop:
    def test_future_contributions_zeroed(self):
        plan = set_all_months(_sip_plan(), 2027, 1000, AS_OF)
        stopped = stop(plan, AS_OF)
        assert stopped.status == "stopped"
        assert stopped.yearly_data[2026].contributions == [0.0] * 12
        assert stopped.yearly_data[2027].contributions == [0.0] * 12
        assert stopped.yearly_data[2025].contributions == [1000.0] * 12

    def test_sip_keeps_compounding(self):
        stopped = stop(_sip_plan(), AS_OF)
        y2026 = stopped.yearly_data[2026]
        assert y2026.year_end_value == pytest.approx(y2026.year_start_value * 1.01**12)
        assert stopped.current_value > stopped.yearly_data[2025].year_end_value
        assert stopped.total_invested == pytest.approx(24000.0)

    def test_insurance_stays_flat(self):
        stopped = stop(_insurance_plan(), AS_OF)
        assert stopped.current_value == 60000.0
        for rec in stopped.yearly_data.values():
            assert rec.year_end_value == 60000.0


class TestPauseResume:
    def test_pause_then_resume(self):
        plan = _sip_plan()
        paused = pause(plan)
        assert paused.status == "paused"
        assert paused.current_value == plan.current_value
        assert paused.yearly_data == plan.yearly_data
        assert resume(paused).status == "active"

    def test_cannot_pause_stopped(self):
        with pytest.raises(InvalidInput):
            pause(stop(_sip_plan(), AS_OF))

    def test_cannot_resume_active(self):
        with pytest.raises(InvalidInput):
            resume(_sip_plan())
