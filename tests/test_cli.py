"""Tests for CLI entry point."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from plantrack import store
from plantrack.cli import main


@pytest.fixture()
def invoke(tmp_path, monkeypatch):
    monkeypatch.setattr("plantrack.store.DATA_DIR", tmp_path)
    runner = CliRunner()

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(
            main,
            ["--data-dir", str(tmp_path), "--as-of", "2025-06-01", *args],
            input=input,
        )

    return _invoke


def _create_sip(invoke, *extra: str) -> int:
    result = invoke(
        "create-sip",
        "--name", "Equity SIP",
        "--start-year", "2024",
        "--period", "3",
        "--annual-return", "12",
        "--monthly-amount", "1000",
        *extra,
    )
    assert result.exit_code == 0, result.output
    return store.load_plans()[-1].id


class TestCreate:
    def test_create_sip(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        (plan,) = store.load_plans()
        assert plan.id == plan_id
        assert plan.total_invested == pytest.approx(24000.0)
        assert plan.yearly_data[2026].contributions == [0.0] * 12

    def test_create_insurance(self, invoke) -> None:
        result = invoke(
            "create-insurance",
            "--name", "Policy",
            "--currency", "USD",
            "--start-year", "2021",
            "--period", "5",
            "--premium", "500",
            "--maturity-value", "40000",
        )
        assert result.exit_code == 0, result.output
        assert "Invested $30,000, value $40,000, returns $10,000" in result.output

    def test_missing_required(self, invoke) -> None:
        result = invoke("create-sip", "--name", "x")
        assert result.exit_code != 0

    def test_invalid_period(self, invoke) -> None:
        result = invoke(
            "create-sip", "--name", "x", "--period", "0", "--annual-return", "5"
        )
        assert result.exit_code == 1
        assert "at least one year" in result.output


class TestRead:
    def test_list(self, invoke) -> None:
        _create_sip(invoke)
        result = invoke("list")
        assert result.exit_code == 0
        assert "Equity SIP" in result.output
        assert "Plans: 1" in result.output

    def test_list_json(self, invoke) -> None:
        _create_sip(invoke)
        data = json.loads(invoke("list", "--output", "json").output)
        assert data["summary"]["plan_count"] == 1

    def test_show_csv(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("show", str(plan_id), "--output", "csv")
        assert result.exit_code == 0
        assert len(result.output.strip().splitlines()) == 4

    def test_show_missing(self, invoke) -> None:
        result = invoke("show", "123")
        assert result.exit_code == 1
        assert "Plan 123 not found" in result.output

    def test_logs(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("logs", str(plan_id))
        assert "Year 2024 Summary:" in result.output
        assert "=== Final Summary ===" in result.output


class TestMutations:
    def test_set_month(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("set-month", str(plan_id), "2026", "1", "500")
        assert result.exit_code == 0, result.output
        (plan,) = store.load_plans()
        assert plan.yearly_data[2026].contributions[0] == 500.0
        assert plan.total_invested == pytest.approx(24500.0)

    def test_set_month_rejects_month_13(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("set-month", str(plan_id), "2026", "13", "500")
        assert result.exit_code != 0

    def test_set_year_and_zero_year(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        invoke("set-year", str(plan_id), "2026", "2000")
        assert store.load_plans()[0].yearly_data[2026].contributions == [2000.0] * 12
        invoke("zero-year", str(plan_id), "2026")
        assert store.load_plans()[0].yearly_data[2026].contributions == [0.0] * 12

    def test_unknown_year(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("set-year", str(plan_id), "2031", "2000")
        assert result.exit_code == 1
        assert "outside plan" in result.output

    def test_override_and_clear(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("override", str(plan_id), "2024", "10000")
        assert result.exit_code == 0, result.output
        (plan,) = store.load_plans()
        assert plan.yearly_data[2025].year_start_value == 10000.0

        invoke("clear-override", str(plan_id), "2024")
        (plan,) = store.load_plans()
        assert not plan.yearly_data[2024].is_manual_override

    def test_override_rejects_non_numeric(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("override", str(plan_id), "2024", "abc")
        assert result.exit_code == 1
        assert "valid positive number" in result.output

    @pytest.mark.parametrize("year", ["2025", "2026"])
    def test_override_refused_for_unfinished_year(self, invoke, year) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("override", str(plan_id), year, "1")
        assert result.exit_code == 1
        assert "not complete yet" in result.output
        assert not store.load_plans()[0].yearly_data[int(year)].is_manual_override

    def test_clear_override_refused_for_unfinished_year(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("clear-override", str(plan_id), "2026")
        assert result.exit_code == 1

    def test_stop_blocks_edits(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        invoke("set-year", str(plan_id), "2026", "1000")
        assert invoke("stop", str(plan_id)).exit_code == 0
        (plan,) = store.load_plans()
        assert plan.status == "stopped"
        assert plan.yearly_data[2026].contributions == [0.0] * 12

        result = invoke("set-year", str(plan_id), "2026", "1000")
        assert result.exit_code == 1
        assert "stopped" in result.output

    def test_paused_locks_only_past_years(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        assert invoke("pause", str(plan_id)).exit_code == 0

        result = invoke("set-year", str(plan_id), "2024", "1")
        assert result.exit_code == 1
        assert "paused" in result.output

        assert invoke("set-month", str(plan_id), "2025", "1", "500").exit_code == 0
        assert invoke("set-year", str(plan_id), "2026", "1").exit_code == 0
        (plan,) = store.load_plans()
        assert plan.yearly_data[2025].contributions[0] == 500.0

        assert invoke("resume", str(plan_id)).exit_code == 0
        assert store.load_plans()[0].status == "active"

    def test_delete(self, invoke) -> None:
        plan_id = _create_sip(invoke)
        result = invoke("delete", str(plan_id), "--yes")
        assert result.exit_code == 0
        assert store.load_plans() == []


class TestAnalysis:
    def _add(self, invoke, name: str, invested: str, current: str, years: str) -> None:
        result = invoke(
            "asset", "add",
            "--name", name,
            "--type", "stocks",
            "--invested", invested,
            "--current-value", current,
            "--years", years,
        )
        assert result.exit_code == 0, result.output

    def test_analyze_json(self, invoke) -> None:
        self._add(invoke, "Equities", "100000", "150000", "3")
        result = invoke("analyze", "--output", "json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["individual"][0]["annualized_return"] == 14.47
        assert len(store.load_history()) == 1

    def test_analyze_without_assets(self, invoke) -> None:
        result = invoke("analyze")
        assert result.exit_code == 1
        assert "at least one asset" in result.output

    def test_asset_remove_and_clear(self, invoke) -> None:
        self._add(invoke, "A", "100", "110", "1")
        self._add(invoke, "B", "100", "90", "1")
        first = store.load_assets()[0].id
        assert invoke("asset", "remove", str(first)).exit_code == 0
        assert [a.name for a in store.load_assets()] == ["B"]
        assert invoke("asset", "clear", "--yes").exit_code == 0
        assert store.load_assets() == []

    def test_negative_asset_rejected(self, invoke) -> None:
        result = invoke(
            "asset", "add", "--name", "X", "--invested", "-5",
            "--current-value", "1", "--years", "1",
        )
        assert result.exit_code == 1

    def test_history(self, invoke) -> None:
        self._add(invoke, "Equities", "100000", "150000", "3")
        invoke("analyze")
        result = invoke("history")
        assert "assets=1" in result.output


class TestDataDir:
    def test_data_dir_option_leaves_default_untouched(self, tmp_path, monkeypatch) -> None:
        default = tmp_path / "default"
        chosen = tmp_path / "chosen"
        monkeypatch.setattr("plantrack.store.DATA_DIR", default)
        result = CliRunner().invoke(
            main,
            [
                "--data-dir", str(chosen),
                "--as-of", "2025-06-01",
                "create-sip", "--name", "x", "--period", "1", "--annual-return", "5",
            ],
        )
        assert result.exit_code == 0, result.output
        assert store.DATA_DIR == default
        assert len(store.load_plans(chosen)) == 1
        assert store.load_plans() == []

    def test_show_csv_with_short_stored_year(self, invoke, tmp_path) -> None:
        record = {
            "id": 5,
            "name": "Hand edited",
            "currency": "PKR",
            "start_year": 2024,
            "end_year": 2024,
            "annual_return": 10,
            "yearly_data": {"2024": {"contributions": [100] * 11}},
        }
        (tmp_path / "plans.json").write_text(json.dumps([record]))
        result = invoke("show", "5", "--output", "csv")
        assert result.exit_code == 0, result.output
        assert result.output.strip().splitlines()[1].startswith("2024,100.00,")
