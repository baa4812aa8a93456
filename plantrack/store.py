"""File-based persistence for plans, analysis assets and analysis history.

Store layout:
    ~/.plantrack/
        plans.json
        assets.json
        analyses.json

The directory can be moved with the PLANTRACK_HOME environment variable,
or per call by passing ``data_dir`` to the load and save functions.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from plantrack.errors import InvalidInput
from plantrack.models import (
    PLAN_KINDS,
    PLAN_STATUSES,
    PREMIUM_FREQUENCIES,
    AnalysisRun,
    Asset,
    InsuranceTerms,
    Plan,
    SIPTerms,
    YearRecord,
)
from plantrack.projection import normalize_contributions

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("PLANTRACK_HOME", Path.home() / ".plantrack"))


def _resolve_dir(data_dir: Path | None) -> Path:
    return data_dir if data_dir is not None else DATA_DIR


def _read_list(name: str, data_dir: Path | None = None) -> list[Any]:
    path = _resolve_dir(data_dir) / name
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError:
        logger.warning("Ignoring unreadable %s", path)
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring %s: expected a list", path)
        return []
    return data


def _write_list(name: str, items: list[dict[str, Any]], data_dir: Path | None = None) -> None:
    directory = _resolve_dir(data_dir)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(json.dumps(items, indent=2))


# --- Plans ---


def year_to_dict(rec: YearRecord, kind: str) -> dict[str, Any]:
    data: dict[str, Any] = {
        "contributions": list(rec.contributions),
        "year_start_value": rec.year_start_value,
        "year_end_value": rec.year_end_value,
        "yearly_return": rec.yearly_return,
        "is_complete": rec.is_complete,
    }
    if kind == "sip":
        data["actual_year_end_value"] = rec.actual_year_end_value
        data["is_manual_override"] = rec.is_manual_override
    return data


def year_from_dict(data: dict[str, Any]) -> YearRecord:
    actual = data.get("actual_year_end_value")
    return YearRecord(
        contributions=normalize_contributions(list(data["contributions"])),
        year_start_value=float(data.get("year_start_value", 0.0)),
        year_end_value=float(data.get("year_end_value", 0.0)),
        yearly_return=float(data.get("yearly_return", 0.0)),
        actual_year_end_value=float(actual) if actual is not None else None,
        is_manual_override=bool(data.get("is_manual_override", False)),
        is_complete=bool(data.get("is_complete", False)),
    )


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": plan.id,
        "type": plan.kind,
        "name": plan.name,
        "currency": plan.currency,
        "start_year": plan.start_year,
        "end_year": plan.end_year,
        "status": plan.status,
    }
    terms = plan.terms
    if isinstance(terms, SIPTerms):
        data["annual_return"] = terms.annual_return
    else:
        data["premium_amount"] = terms.premium_amount
        data["premium_frequency"] = terms.premium_frequency
        data["maturity_value"] = terms.maturity_value
    data.update({
        "yearly_data": {
            str(year): year_to_dict(plan.yearly_data[year], plan.kind)
            for year in plan.years
        },
        "total_invested": plan.total_invested,
        "current_value": plan.current_value,
        "total_returns": plan.total_returns,
        "calculation_logs": list(plan.calculation_logs),
        "created_at": plan.created_at.isoformat() if plan.created_at else None,
    })
    return data


def plan_from_dict(data: dict[str, Any]) -> Plan:
    # Records written before insurance plans existed carry no type.
    kind = data.get("type") or "sip"
    if kind not in PLAN_KINDS:
        raise InvalidInput(f"Unknown plan type {kind!r}")
    status = data.get("status", "active")
    if status not in PLAN_STATUSES:
        raise InvalidInput(f"Unknown plan status {status!r}")

    terms: SIPTerms | InsuranceTerms
    if kind == "insurance":
        frequency = data["premium_frequency"]
        if frequency not in PREMIUM_FREQUENCIES:
            raise InvalidInput(f"Unknown premium frequency {frequency!r}")
        terms = InsuranceTerms(
            premium_amount=float(data["premium_amount"]),
            premium_frequency=frequency,
            maturity_value=float(data["maturity_value"]),
        )
    else:
        terms = SIPTerms(annual_return=float(data["annual_return"]))
    created_at = data.get("created_at")
    return Plan(
        id=int(data["id"]),
        name=data["name"],
        currency=data["currency"],
        start_year=int(data["start_year"]),
        end_year=int(data["end_year"]),
        terms=terms,
        status=status,
        yearly_data={
            int(year): year_from_dict(rec)
            for year, rec in data.get("yearly_data", {}).items()
        },
        total_invested=float(data.get("total_invested", 0.0)),
        current_value=float(data.get("current_value", 0.0)),
        total_returns=float(data.get("total_returns", 0.0)),
        calculation_logs=list(data.get("calculation_logs", [])),
        created_at=datetime.fromisoformat(created_at) if created_at else None,
    )


def load_plans(data_dir: Path | None = None) -> list[Plan]:
    plans = []
    for raw in _read_list("plans.json", data_dir):
        try:
            plans.append(plan_from_dict(raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed plan record: %s", exc)
    return plans


def save_plans(plans: list[Plan], data_dir: Path | None = None) -> None:
    _write_list("plans.json", [plan_to_dict(p) for p in plans], data_dir)


# --- Analysis assets ---


def asset_to_dict(asset: Asset) -> dict[str, Any]:
    return {
        "id": asset.id,
        "name": asset.name,
        "asset_type": asset.asset_type,
        "risk_profile": asset.risk_profile,
        "investment_amount": asset.investment_amount,
        "current_value": asset.current_value,
        "years": asset.years,
        "months": asset.months,
        "currency": asset.currency,
    }


def asset_from_dict(data: dict[str, Any]) -> Asset:
    return Asset(
        id=int(data["id"]),
        name=data["name"],
        asset_type=data["asset_type"],
        risk_profile=data["risk_profile"],
        investment_amount=float(data["investment_amount"]),
        current_value=float(data["current_value"]),
        years=int(data["years"]),
        months=int(data.get("months", 0)),
        currency=data.get("currency", "PKR"),
    )


def load_assets(data_dir: Path | None = None) -> list[Asset]:
    assets = []
    for raw in _read_list("assets.json", data_dir):
        try:
            assets.append(asset_from_dict(raw))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed asset record: %s", exc)
    return assets


def save_assets(assets: list[Asset], data_dir: Path | None = None) -> None:
    _write_list("assets.json", [asset_to_dict(a) for a in assets], data_dir)


# --- Analysis history ---


def analysis_to_dict(run: AnalysisRun) -> dict[str, Any]:
    c = run.cumulative
    return {
        "analysis_date": run.analysis_date.isoformat(),
        "individual": [
            {
                **asset_to_dict(a.asset),
                "total_period_years": round(a.total_period_years, 4),
                "profit": round(a.profit, 2),
                "total_return_pct": round(a.total_return_pct, 2),
                "profit_per_year": round(a.profit_per_year, 2),
                "annualized_return": round(a.annualized_return, 2),
                "risk_score": a.risk_score,
                "risk_adjusted_return": round(a.risk_adjusted_return, 2),
                "benchmark_return": a.benchmark_return,
                "performance_vs_benchmark": round(a.performance_vs_benchmark, 2),
            }
            for a in run.individual
        ],
        "cumulative": {
            "total_investment": round(c.total_investment, 2),
            "total_current_value": round(c.total_current_value, 2),
            "total_profit": round(c.total_profit, 2),
            "total_return_pct": round(c.total_return_pct, 2),
            "weighted_annualized_return": round(c.weighted_annualized_return, 2),
            "weighted_risk_score": round(c.weighted_risk_score, 2),
            "avg_period": round(c.avg_period, 4),
            "profit_per_year": round(c.profit_per_year, 2),
            "asset_count": c.asset_count,
            "currency": c.currency,
        },
    }


def load_history(data_dir: Path | None = None) -> list[dict[str, Any]]:
    """Past analysis runs, oldest first, as stored."""
    return [r for r in _read_list("analyses.json", data_dir) if isinstance(r, dict)]


def append_history(run: AnalysisRun, data_dir: Path | None = None) -> None:
    history = load_history(data_dir)
    history.append(analysis_to_dict(run))
    _write_list("analyses.json", history, data_dir)
