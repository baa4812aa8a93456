"""Output formatters for tables, JSON, and CSV."""

from __future__ import annotations

import csv
import io
import json
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from plantrack.models import (
    ASSET_TYPE_LABELS,
    MONTH_NAMES,
    RISK_PROFILE_LABELS,
    AnalysisRun,
    Plan,
    PortfolioSummary,
    SIPTerms,
)
from plantrack.money import format_money
from plantrack.store import analysis_to_dict, plan_to_dict


def _fmt_pct(val: float, plus_sign: bool = True) -> str:
    """Format a percentage value with 2 decimal places."""
    if plus_sign and val > 0:
        return f"+{val:.2f}%"
    return f"{val:.2f}%"


def _render(*renderables: Any) -> str:
    buf = io.StringIO()
    rich_console = Console(file=buf, width=140, no_color=True)
    for r in renderables:
        rich_console.print(r)
    return buf.getvalue()


# --- Plans ---


def _plan_detail(plan: Plan) -> str:
    terms = plan.terms
    if isinstance(terms, SIPTerms):
        return f"{terms.annual_return:g}% p.a."
    premium = format_money(terms.premium_amount, plan.currency)
    return f"{premium} {terms.premium_frequency}"


def format_plans_table(plans: list[Plan], summary: PortfolioSummary) -> str:
    """Portfolio overview: one row per plan plus the summary footer."""
    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("ID", style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Years")
    table.add_column("Terms", justify="right")
    table.add_column("Invested", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Returns", justify="right")

    for p in plans:
        table.add_row(
            str(p.id),
            p.name,
            p.kind.upper() if p.kind == "sip" else "Insurance",
            p.status.capitalize(),
            f"{p.start_year}-{p.end_year}",
            _plan_detail(p),
            format_money(p.total_invested, p.currency),
            format_money(p.current_value, p.currency),
            format_money(p.total_returns, p.currency),
        )

    header = "Investment Portfolio\n====================\n"
    if not plans:
        return header + "\nNo plans yet.\n"

    # Totals are plain sums; they are shown in the first plan's currency.
    currency = plans[0].currency
    footer = (
        f"\nPlans: {summary.plan_count}"
        f"  Invested: {format_money(summary.total_invested, currency)}"
        f"  Value: {format_money(summary.current_value, currency)}"
        f"  Returns: {format_money(summary.total_returns, currency)}"
    )
    return _render(header, table, footer)


def format_plan_table(plan: Plan) -> str:
    """Year-by-year view of one plan."""
    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Year", style="bold")
    table.add_column("Start", justify="right")
    table.add_column("Contributed", justify="right")
    table.add_column("Growth", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Note")

    for year in plan.years:
        rec = plan.yearly_data[year]
        note = "manual" if rec.has_override else ""
        table.add_row(
            str(year),
            format_money(rec.year_start_value, plan.currency),
            format_money(rec.total_contributed, plan.currency),
            format_money(rec.yearly_return, plan.currency),
            format_money(rec.year_end_value, plan.currency),
            note,
        )

    header = (
        f"{plan.name} ({plan.id})\n"
        f"Type: {plan.kind}  Status: {plan.status}  Terms: {_plan_detail(plan)}\n"
        f"Invested: {format_money(plan.total_invested, plan.currency)}"
        f"  Value: {format_money(plan.current_value, plan.currency)}"
        f"  Returns: {format_money(plan.total_returns, plan.currency)}\n"
    )
    return _render(header, table)


def format_plan_json(plan: Plan) -> str:
    return json.dumps(plan_to_dict(plan), indent=2)


def format_plans_json(plans: list[Plan], summary: PortfolioSummary) -> str:
    data = {
        "summary": {
            "plan_count": summary.plan_count,
            "total_invested": round(summary.total_invested, 2),
            "current_value": round(summary.current_value, 2),
            "total_returns": round(summary.total_returns, 2),
        },
        "plans": [plan_to_dict(p) for p in plans],
    }
    return json.dumps(data, indent=2)


def format_plan_csv(plan: Plan) -> str:
    """One row per year with the twelve monthly contributions."""
    buf = io.StringIO()
    fields = [
        "year",
        *[m.lower() for m in MONTH_NAMES],
        "year_start_value",
        "year_end_value",
        "yearly_return",
        "manual_override",
    ]
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()

    for year in plan.years:
        rec = plan.yearly_data[year]
        row: dict[str, str] = {"year": str(year)}
        for name, amount in zip(MONTH_NAMES, rec.contributions, strict=True):
            row[name.lower()] = f"{amount:.2f}"
        row["year_start_value"] = f"{rec.year_start_value:.2f}"
        row["year_end_value"] = f"{rec.year_end_value:.2f}"
        row["yearly_return"] = f"{rec.yearly_return:.2f}"
        row["manual_override"] = (
            f"{rec.actual_year_end_value:.2f}" if rec.has_override else ""
        )
        writer.writerow(row)

    return buf.getvalue()


# --- Analysis ---


def format_analysis_table(run: AnalysisRun) -> str:
    """Format a multi-asset analysis as a Rich table rendered to string."""
    c = run.cumulative
    header = (
        f"Multi-Asset Analysis\n"
        f"====================\n"
        f"Assets: {c.asset_count}  Average period: {c.avg_period:.2f} years\n"
    )

    table = Table(box=box.SIMPLE_HEAD, pad_edge=False)
    table.add_column("Asset", style="bold")
    table.add_column("Type")
    table.add_column("Risk")
    table.add_column("Invested", justify="right")
    table.add_column("Value", justify="right")
    table.add_column("Return", justify="right")
    table.add_column("CAGR", justify="right")
    table.add_column("Risk-Adj.", justify="right")
    table.add_column("vs Bench.", justify="right")

    for a in run.individual:
        asset = a.asset
        table.add_row(
            asset.name,
            ASSET_TYPE_LABELS.get(asset.asset_type, asset.asset_type),
            RISK_PROFILE_LABELS.get(asset.risk_profile, asset.risk_profile),
            format_money(asset.investment_amount, asset.currency),
            format_money(asset.current_value, asset.currency),
            _fmt_pct(a.total_return_pct),
            _fmt_pct(a.annualized_return),
            _fmt_pct(a.risk_adjusted_return),
            _fmt_pct(a.performance_vs_benchmark),
        )

    footer = (
        f"\nTotal invested: {format_money(c.total_investment, c.currency)}"
        f"  Current value: {format_money(c.total_current_value, c.currency)}"
        f"  Profit: {format_money(c.total_profit, c.currency)}"
        f" ({_fmt_pct(c.total_return_pct)})"
        f"\nWeighted CAGR: {_fmt_pct(c.weighted_annualized_return)}"
        f"  Weighted risk score: {c.weighted_risk_score:.2f}"
        f"  Profit per year: {format_money(c.profit_per_year, c.currency)}"
    )
    return _render(header, table, footer)


def format_analysis_json(run: AnalysisRun) -> str:
    return json.dumps(analysis_to_dict(run), indent=2)


def format_analysis_csv(run: AnalysisRun) -> str:
    """Format per-asset analysis rows as CSV."""
    buf = io.StringIO()
    fields = [
        "name",
        "asset_type",
        "risk_profile",
        "investment_amount",
        "current_value",
        "total_period_years",
        "profit",
        "total_return_pct",
        "annualized_return",
        "risk_score",
        "risk_adjusted_return",
        "benchmark_return",
        "performance_vs_benchmark",
    ]
    writer = csv.DictWriter(buf, fieldnames=fields)
    writer.writeheader()

    for a in run.individual:
        writer.writerow({
            "name": a.asset.name,
            "asset_type": a.asset.asset_type,
            "risk_profile": a.asset.risk_profile,
            "investment_amount": f"{a.asset.investment_amount:.2f}",
            "current_value": f"{a.asset.current_value:.2f}",
            "total_period_years": f"{a.total_period_years:.4f}",
            "profit": f"{a.profit:.2f}",
            "total_return_pct": f"{a.total_return_pct:.2f}",
            "annualized_return": f"{a.annualized_return:.2f}",
            "risk_score": str(a.risk_score),
            "risk_adjusted_return": f"{a.risk_adjusted_return:.2f}",
            "benchmark_return": f"{a.benchmark_return:.2f}",
            "performance_vs_benchmark": f"{a.performance_vs_benchmark:.2f}",
        })

    return buf.getvalue()
