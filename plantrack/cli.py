"""CLI entry point for plantrack."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import NoReturn

import click

from plantrack import analysis, formatters, overrides, schedule, store
from plantrack.errors import PlanTrackError
from plantrack.models import (
    ASSET_TYPE_LABELS,
    PREMIUM_FREQUENCIES,
    RISK_PROFILE_LABELS,
    SUPPORTED_CURRENCIES,
    Asset,
    Plan,
    PlanSpec,
)
from plantrack.money import format_money
from plantrack.projection import as_of_year
from plantrack.registry import PlanRegistry

OUTPUT_FORMATS = click.Choice(["table", "json", "csv"])


def _fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _as_of(ctx: click.Context) -> date | None:
    return ctx.obj["as_of"]


def _data_dir(ctx: click.Context) -> Path | None:
    return ctx.obj["data_dir"]


def _load_registry(ctx: click.Context) -> PlanRegistry:
    return PlanRegistry(store.load_plans(_data_dir(ctx)), as_of=_as_of(ctx))


def _check_editable(plan: Plan, year: int, current_year: int) -> None:
    """Stopped plans are frozen; paused plans keep their past years fixed."""
    if plan.status == "stopped":
        _fail(f"Plan {plan.id} is stopped; its schedule can no longer be edited.")
    if plan.status == "paused" and year < current_year:
        _fail(f"Plan {plan.id} is paused; only the current and future years can be edited.")


def _check_past_year(year: int, current_year: int) -> None:
    if year >= current_year:
        _fail(f"Year {year} is not complete yet; only past years take an actual end value.")


def _mutate(
    ctx: click.Context,
    plan_id: int,
    change: Callable[[Plan], Plan],
    year: int | None = None,
) -> Plan:
    """Load, apply one engine operation, write back."""
    registry = _load_registry(ctx)
    try:
        if year is not None:
            _check_editable(registry.get(plan_id), year, as_of_year(_as_of(ctx)))
        plan = registry.update(plan_id, change)
    except PlanTrackError as exc:
        _fail(str(exc))
    store.save_plans(registry.list_plans(), _data_dir(ctx))
    return plan


def _echo_totals(plan: Plan) -> None:
    click.echo(
        f"Invested {format_money(plan.total_invested, plan.currency)}, "
        f"value {format_money(plan.current_value, plan.currency)}, "
        f"returns {format_money(plan.total_returns, plan.currency)}"
    )


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding plans.json, assets.json and analyses.json",
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Treat this date as today (YYYY-MM-DD)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(
    ctx: click.Context,
    data_dir: Path | None,
    as_of: datetime | None,
    verbose: bool,
) -> None:
    """Investment plan tracker.

    Tracks SIP and insurance plans, projects their value with monthly
    compounding, and analyses a list of assets against benchmarks.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - [%(levelname)s] - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["as_of"] = as_of.date() if as_of else None


# --- Plan creation ---


def _create(ctx: click.Context, spec: PlanSpec) -> None:
    registry = _load_registry(ctx)
    try:
        plan = registry.create(spec)
    except PlanTrackError as exc:
        _fail(str(exc))
    store.save_plans(registry.list_plans(), _data_dir(ctx))
    click.echo(f"Created plan {plan.id} ({plan.name}, {plan.start_year}-{plan.end_year}).")
    _echo_totals(plan)


@main.command("create-sip")
@click.option("--name", required=True, help="Plan name")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES), default="PKR")
@click.option("--start-year", type=int, help="First year (default: current year)")
@click.option("--period", type=int, required=True, help="Duration in years")
@click.option("--annual-return", type=float, required=True, help="Expected annual return, percent")
@click.option("--monthly-amount", type=float, default=0.0, help="Initial monthly contribution")
@click.pass_context
def create_sip(
    ctx: click.Context,
    name: str,
    currency: str,
    start_year: int | None,
    period: int,
    annual_return: float,
    monthly_amount: float,
) -> None:
    """Create a variable-contribution (SIP) plan."""
    _create(
        ctx,
        PlanSpec(
            kind="sip",
            name=name,
            currency=currency,
            start_year=start_year or as_of_year(_as_of(ctx)),
            period=period,
            annual_return=annual_return,
            initial_amount=monthly_amount,
        ),
    )


@main.command("create-insurance")
@click.option("--name", required=True, help="Plan name")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES), default="PKR")
@click.option("--start-year", type=int, help="First year (default: current year)")
@click.option("--period", type=int, required=True, help="Duration in years")
@click.option("--premium", type=float, required=True, help="Premium amount per payment")
@click.option("--frequency", type=click.Choice(PREMIUM_FREQUENCIES), default="monthly")
@click.option("--maturity-value", type=float, required=True, help="Guaranteed maturity value")
@click.pass_context
def create_insurance(
    ctx: click.Context,
    name: str,
    currency: str,
    start_year: int | None,
    period: int,
    premium: float,
    frequency: str,
    maturity_value: float,
) -> None:
    """Create a fixed-premium insurance plan."""
    _create(
        ctx,
        PlanSpec(
            kind="insurance",
            name=name,
            currency=currency,
            start_year=start_year or as_of_year(_as_of(ctx)),
            period=period,
            premium_amount=premium,
            premium_frequency=frequency,
            maturity_value=maturity_value,
        ),
    )


# --- Read access ---


@main.command("list")
@click.option("--output", "output_format", default="table", type=click.Choice(["table", "json"]))
@click.pass_context
def list_plans(ctx: click.Context, output_format: str) -> None:
    """Show every plan and the portfolio totals."""
    registry = _load_registry(ctx)
    plans = registry.list_plans()
    if output_format == "json":
        click.echo(formatters.format_plans_json(plans, registry.summary()))
    else:
        click.echo(formatters.format_plans_table(plans, registry.summary()), nl=False)


@main.command()
@click.argument("plan_id", type=int)
@click.option("--output", "output_format", default="table", type=OUTPUT_FORMATS)
@click.pass_context
def show(ctx: click.Context, plan_id: int, output_format: str) -> None:
    """Show one plan year by year."""
    try:
        plan = _load_registry(ctx).get(plan_id)
    except PlanTrackError as exc:
        _fail(str(exc))
    if output_format == "json":
        click.echo(formatters.format_plan_json(plan))
    elif output_format == "csv":
        click.echo(formatters.format_plan_csv(plan), nl=False)
    else:
        click.echo(formatters.format_plan_table(plan), nl=False)


@main.command()
@click.argument("plan_id", type=int)
@click.pass_context
def logs(ctx: click.Context, plan_id: int) -> None:
    """Print the calculation trace from the last recalculation."""
    try:
        plan = _load_registry(ctx).get(plan_id)
    except PlanTrackError as exc:
        _fail(str(exc))
    if not plan.calculation_logs:
        click.echo("No calculation logs available.")
        return
    click.echo("\n".join(plan.calculation_logs))


@main.command()
@click.argument("plan_id", type=int)
@click.confirmation_option(prompt="Are you sure you want to delete this plan?")
@click.pass_context
def delete(ctx: click.Context, plan_id: int) -> None:
    """Delete a plan permanently."""
    registry = _load_registry(ctx)
    try:
        plan = registry.delete(plan_id)
    except PlanTrackError as exc:
        _fail(str(exc))
    store.save_plans(registry.list_plans(), _data_dir(ctx))
    click.echo(f"Deleted plan {plan.id} ({plan.name}).")


# --- Schedule edits ---


@main.command("set-month")
@click.argument("plan_id", type=int)
@click.argument("year", type=int)
@click.argument("month", type=click.IntRange(1, 12))
@click.argument("amount")
@click.pass_context
def set_month(ctx: click.Context, plan_id: int, year: int, month: int, amount: str) -> None:
    """Set one month's contribution (MONTH is 1-12)."""
    as_of = _as_of(ctx)
    plan = _mutate(
        ctx,
        plan_id,
        lambda p: schedule.set_month(p, year, month - 1, amount, as_of),
        year=year,
    )
    _echo_totals(plan)


@main.command("set-year")
@click.argument("plan_id", type=int)
@click.argument("year", type=int)
@click.argument("amount")
@click.pass_context
def set_year(ctx: click.Context, plan_id: int, year: int, amount: str) -> None:
    """Apply one contribution amount to every month of YEAR."""
    as_of = _as_of(ctx)
    plan = _mutate(
        ctx, plan_id, lambda p: schedule.set_all_months(p, year, amount, as_of), year=year
    )
    _echo_totals(plan)


@main.command("zero-year")
@click.argument("plan_id", type=int)
@click.argument("year", type=int)
@click.pass_context
def zero_year(ctx: click.Context, plan_id: int, year: int) -> None:
    """Clear every contribution in YEAR."""
    as_of = _as_of(ctx)
    plan = _mutate(
        ctx, plan_id, lambda p: schedule.zero_all_months(p, year, as_of), year=year
    )
    _echo_totals(plan)


@main.command()
@click.argument("plan_id", type=int)
@click.pass_context
def stop(ctx: click.Context, plan_id: int) -> None:
    """Stop a plan and drop all future contributions."""
    as_of = _as_of(ctx)
    plan = _mutate(ctx, plan_id, lambda p: schedule.stop(p, as_of))
    click.echo(f"Plan {plan.id} stopped.")
    _echo_totals(plan)


@main.command()
@click.argument("plan_id", type=int)
@click.pass_context
def pause(ctx: click.Context, plan_id: int) -> None:
    """Pause an active plan."""
    plan = _mutate(ctx, plan_id, schedule.pause)
    click.echo(f"Plan {plan.id} paused.")


@main.command()
@click.argument("plan_id", type=int)
@click.pass_context
def resume(ctx: click.Context, plan_id: int) -> None:
    """Resume a paused plan."""
    plan = _mutate(ctx, plan_id, schedule.resume)
    click.echo(f"Plan {plan.id} resumed.")


# --- Manual overrides ---


@main.command()
@click.argument("plan_id", type=int)
@click.argument("year", type=int)
@click.argument("value")
@click.pass_context
def override(ctx: click.Context, plan_id: int, year: int, value: str) -> None:
    """Replace YEAR's calculated end value with the actual VALUE."""
    as_of = _as_of(ctx)
    _check_past_year(year, as_of_year(as_of))
    plan = _mutate(ctx, plan_id, lambda p: overrides.set_override(p, year, value, as_of))
    click.echo(f"Year {year} end value updated successfully.")
    _echo_totals(plan)


@main.command("clear-override")
@click.argument("plan_id", type=int)
@click.argument("year", type=int)
@click.pass_context
def clear_override(ctx: click.Context, plan_id: int, year: int) -> None:
    """Go back to the calculated end value for YEAR."""
    as_of = _as_of(ctx)
    _check_past_year(year, as_of_year(as_of))
    plan = _mutate(ctx, plan_id, lambda p: overrides.clear_override(p, year, as_of))
    click.echo(f"Year {year} reset to calculated value.")
    _echo_totals(plan)


# --- Multi-asset analysis ---


@main.group()
def asset() -> None:
    """Manage the assets used by `analyze`."""


@asset.command("add")
@click.option("--name", required=True, help="Asset name")
@click.option("--type", "asset_type", type=click.Choice(list(ASSET_TYPE_LABELS)), default="other")
@click.option("--risk", "risk_profile", type=click.Choice(list(RISK_PROFILE_LABELS)), default="moderate")
@click.option("--invested", type=float, required=True, help="Amount originally invested")
@click.option("--current-value", type=float, required=True, help="Value today")
@click.option("--years", type=int, required=True, help="Years held")
@click.option("--months", type=int, default=0, help="Additional months held")
@click.option("--currency", type=click.Choice(SUPPORTED_CURRENCIES), default="PKR")
@click.pass_context
def asset_add(
    ctx: click.Context,
    name: str,
    asset_type: str,
    risk_profile: str,
    invested: float,
    current_value: float,
    years: int,
    months: int,
    currency: str,
) -> None:
    """Add an asset to the analysis list."""
    assets = store.load_assets(_data_dir(ctx))
    new = Asset(
        id=analysis.new_asset_id(assets),
        name=name,
        asset_type=asset_type,
        risk_profile=risk_profile,
        investment_amount=invested,
        current_value=current_value,
        years=years,
        months=months,
        currency=currency,
    )
    try:
        analysis.validate_asset(new)
    except PlanTrackError as exc:
        _fail(str(exc))
    assets.append(new)
    store.save_assets(assets, _data_dir(ctx))
    click.echo(f"Added asset {new.id} ({new.name}).")


@asset.command("remove")
@click.argument("asset_id", type=int)
@click.pass_context
def asset_remove(ctx: click.Context, asset_id: int) -> None:
    """Remove one asset from the analysis list."""
    try:
        assets = analysis.remove_asset(store.load_assets(_data_dir(ctx)), asset_id)
    except PlanTrackError as exc:
        _fail(str(exc))
    store.save_assets(assets, _data_dir(ctx))
    click.echo(f"Removed asset {asset_id}.")


@asset.command("list")
@click.pass_context
def asset_list(ctx: click.Context) -> None:
    """Show the analysis list."""
    assets = store.load_assets(_data_dir(ctx))
    if not assets:
        click.echo("No assets added yet.")
        return
    for a in assets:
        period = f"{a.years}y {a.months}m"
        click.echo(
            f"{a.id}  {a.name:20s}  {ASSET_TYPE_LABELS.get(a.asset_type, a.asset_type):15s}"
            f"  {format_money(a.investment_amount, a.currency):>14s}"
            f" -> {format_money(a.current_value, a.currency):>14s}  {period}"
        )


@asset.command("clear")
@click.confirmation_option(prompt="Remove all assets from the analysis?")
@click.pass_context
def asset_clear(ctx: click.Context) -> None:
    """Remove every asset from the analysis list."""
    store.save_assets([], _data_dir(ctx))
    click.echo("All assets cleared.")


@main.command()
@click.option("--output", "output_format", default="table", type=OUTPUT_FORMATS)
@click.pass_context
def analyze(ctx: click.Context, output_format: str) -> None:
    """Analyse every asset in the list and record the run."""
    try:
        run = analysis.run_analysis(store.load_assets(_data_dir(ctx)))
    except PlanTrackError as exc:
        _fail(str(exc))
    store.append_history(run, _data_dir(ctx))

    if output_format == "json":
        click.echo(formatters.format_analysis_json(run))
    elif output_format == "csv":
        click.echo(formatters.format_analysis_csv(run), nl=False)
    else:
        click.echo(formatters.format_analysis_table(run), nl=False)


@main.command()
@click.pass_context
def history(ctx: click.Context) -> None:
    """List past analysis runs."""
    runs = store.load_history(_data_dir(ctx))
    if not runs:
        click.echo("No analyses recorded.")
        return
    for r in runs:
        c = r.get("cumulative", {})
        click.echo(
            f"{r.get('analysis_date', '?')}  assets={c.get('asset_count', 0)}"
            f"  invested={c.get('total_investment', 0):,.2f}"
            f"  weighted_cagr={c.get('weighted_annualized_return', 0):.2f}%"
        )


if __name__ == "__main__":
    main()
