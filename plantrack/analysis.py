"""Multi-asset analysis: per-asset CAGR, risk and benchmark figures, and
investment-weighted portfolio aggregates.

Stateless; nothing here touches plans. Zero investments and zero periods
produce 0 for the affected ratios instead of NaN or infinity.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime

from plantrack import calculator
from plantrack.errors import InvalidInput, NotFound
from plantrack.models import (
    BENCHMARK_RETURNS,
    DEFAULT_BENCHMARK_RETURN,
    DEFAULT_RISK_SCORE,
    RISK_SCORES,
    AnalysisRun,
    Asset,
    AssetAnalysis,
    CumulativeAnalysis,
)


def risk_score(risk_profile: str) -> int:
    return RISK_SCORES.get(risk_profile, DEFAULT_RISK_SCORE)


def benchmark_return(asset_type: str) -> float:
    """Reference annual return (percent) for an asset category."""
    return BENCHMARK_RETURNS.get(asset_type, DEFAULT_BENCHMARK_RETURN)


def validate_asset(asset: Asset) -> None:
    if asset.investment_amount < 0:
        raise InvalidInput("Investment amount cannot be negative")
    if asset.current_value < 0:
        raise InvalidInput("Current value cannot be negative")
    if asset.years < 0 or asset.months < 0:
        raise InvalidInput("Holding period cannot be negative")


def analyze(asset: Asset) -> AssetAnalysis:
    validate_asset(asset)
    years = calculator.period_years(asset.years, asset.months)
    profit = asset.current_value - asset.investment_amount
    annualized = calculator.cagr_pct(asset.investment_amount, asset.current_value, years)
    score = risk_score(asset.risk_profile)
    benchmark = benchmark_return(asset.asset_type)

    return AssetAnalysis(
        asset=asset,
        total_period_years=years,
        profit=profit,
        total_return_pct=calculator.total_return_pct(
            asset.investment_amount, asset.current_value
        ),
        profit_per_year=calculator.per_year(profit, years),
        annualized_return=annualized,
        risk_score=score,
        risk_adjusted_return=calculator.risk_adjusted_return(annualized, score),
        benchmark_return=benchmark,
        performance_vs_benchmark=annualized - benchmark,
    )


def aggregate(analyses: list[AssetAnalysis]) -> CumulativeAnalysis:
    """Combine per-asset results; returns and risk are weighted by investment."""
    if not analyses:
        raise InvalidInput("Please add at least one asset to analyze")

    total_investment = sum(a.asset.investment_amount for a in analyses)
    total_current = sum(a.asset.current_value for a in analyses)
    total_profit = total_current - total_investment
    avg_period = sum(a.total_period_years for a in analyses) / len(analyses)

    return CumulativeAnalysis(
        total_investment=total_investment,
        total_current_value=total_current,
        total_profit=total_profit,
        total_return_pct=calculator.total_return_pct(total_investment, total_current),
        weighted_annualized_return=calculator.weighted_mean(
            (a.annualized_return, a.asset.investment_amount) for a in analyses
        ),
        weighted_risk_score=calculator.weighted_mean(
            (a.risk_score, a.asset.investment_amount) for a in analyses
        ),
        avg_period=avg_period,
        profit_per_year=calculator.per_year(total_profit, avg_period),
        asset_count=len(analyses),
        currency=analyses[0].asset.currency or "PKR",
    )


def run_analysis(assets: list[Asset]) -> AnalysisRun:
    individual = [analyze(a) for a in assets]
    return AnalysisRun(
        individual=individual,
        cumulative=aggregate(individual),
        analysis_date=datetime.now(UTC),
    )


# --- Asset list management ---


def new_asset_id(assets: list[Asset]) -> int:
    candidate = time.time_ns() // 1_000_000
    return max([candidate, *(a.id + 1 for a in assets)])


def remove_asset(assets: list[Asset], asset_id: int) -> list[Asset]:
    remaining = [a for a in assets if a.id != asset_id]
    if len(remaining) == len(assets):
        raise NotFound(f"Asset {asset_id} not found")
    return remaining
