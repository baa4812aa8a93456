"""Data models for plans, schedules and asset analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Literal

MONTHS_PER_YEAR = 12
MONTH_NAMES = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

PlanKind = Literal["sip", "insurance"]
PlanStatus = Literal["active", "paused", "stopped"]
PremiumFrequency = Literal["monthly", "annual"]

PLAN_KINDS: tuple[str, ...] = ("sip", "insurance")
PLAN_STATUSES: tuple[str, ...] = ("active", "paused", "stopped")
PREMIUM_FREQUENCIES: tuple[str, ...] = ("monthly", "annual")


@dataclass(slots=True)
class CurrencyInfo:
    code: str
    symbol: str
    grouping: Literal["western", "south_asian"]


@dataclass(slots=True)
class YearRecord:
    contributions: list[float]
    year_start_value: float = 0.0
    year_end_value: float = 0.0
    yearly_return: float = 0.0
    actual_year_end_value: float | None = None  # manual override
    is_manual_override: bool = False
    is_complete: bool = False

    @property
    def total_contributed(self) -> float:
        return sum(self.contributions)

    @property
    def has_override(self) -> bool:
        return self.is_manual_override and self.actual_year_end_value is not None


@dataclass(slots=True)
class SIPTerms:
    """Variable-contribution plan compounding at a fixed annual rate."""

    annual_return: float
    kind: ClassVar[PlanKind] = "sip"


@dataclass(slots=True)
class InsuranceTerms:
    """Fixed-premium plan paying a guaranteed value at maturity."""

    premium_amount: float
    premium_frequency: PremiumFrequency
    maturity_value: float
    kind: ClassVar[PlanKind] = "insurance"

    @property
    def monthly_premium(self) -> float:
        if self.premium_frequency == "monthly":
            return self.premium_amount
        return self.premium_amount / MONTHS_PER_YEAR


PlanTerms = SIPTerms | InsuranceTerms


@dataclass(slots=True)
class Plan:
    id: int
    name: str
    currency: str
    start_year: int
    end_year: int
    terms: PlanTerms
    status: PlanStatus = "active"
    yearly_data: dict[int, YearRecord] = field(default_factory=dict)
    total_invested: float = 0.0
    current_value: float = 0.0
    total_returns: float = 0.0
    calculation_logs: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def kind(self) -> PlanKind:
        return self.terms.kind

    @property
    def years(self) -> list[int]:
        return sorted(self.yearly_data)


@dataclass(slots=True)
class PlanSpec:
    """User input for a new plan, before validation."""

    kind: str
    name: str
    currency: str
    start_year: int
    period: int
    annual_return: float | None = None
    initial_amount: float | None = None
    premium_amount: float | None = None
    premium_frequency: str | None = None
    maturity_value: float | None = None


@dataclass(slots=True)
class PortfolioSummary:
    plan_count: int
    total_invested: float
    current_value: float
    total_returns: float


# --- Multi-asset analysis ---


@dataclass(slots=True)
class Asset:
    id: int
    name: str
    asset_type: str
    risk_profile: str
    investment_amount: float
    current_value: float
    years: int
    months: int = 0
    currency: str = "PKR"


@dataclass(slots=True)
class AssetAnalysis:
    asset: Asset
    total_period_years: float
    profit: float
    total_return_pct: float
    profit_per_year: float
    annualized_return: float
    risk_score: int
    risk_adjusted_return: float
    benchmark_return: float
    performance_vs_benchmark: float


@dataclass(slots=True)
class CumulativeAnalysis:
    total_investment: float
    total_current_value: float
    total_profit: float
    total_return_pct: float
    weighted_annualized_return: float
    weighted_risk_score: float
    avg_period: float
    profit_per_year: float
    asset_count: int
    currency: str


@dataclass(slots=True)
class AnalysisRun:
    individual: list[AssetAnalysis]
    cumulative: CumulativeAnalysis
    analysis_date: datetime


# --- Registries ---

def _build_currency_map() -> dict[str, CurrencyInfo]:
    entries = [
        CurrencyInfo("USD", "$", "western"),
        CurrencyInfo("PKR", "Rs", "south_asian"),
    ]
    return {e.code: e for e in entries}


CURRENCIES = _build_currency_map()
SUPPORTED_CURRENCIES = list(CURRENCIES.keys())

DEFAULT_RISK_SCORE = 3
RISK_SCORES: dict[str, int] = {
    "low": 1,
    "medium": 2,
    "moderate": 3,
    "high": 4,
    "very-high": 5,
}

DEFAULT_BENCHMARK_RETURN = 6.0
BENCHMARK_RETURNS: dict[str, float] = {
    "stocks": 10.0,
    "money-market": 3.0,
    "bonds": 5.0,
    "debts": 4.0,
    "commodity": 7.0,
    "real-estate": 8.0,
    "crypto": 15.0,
    "mutual-funds": 8.0,
    "etf": 9.0,
    "other": 6.0,
}

ASSET_TYPE_LABELS: dict[str, str] = {
    "stocks": "Stocks",
    "money-market": "Money Market",
    "bonds": "Bonds",
    "debts": "Debts",
    "commodity": "Commodity",
    "real-estate": "Real Estate",
    "crypto": "Cryptocurrency",
    "mutual-funds": "Mutual Funds",
    "etf": "ETF",
    "other": "Other",
}

RISK_PROFILE_LABELS: dict[str, str] = {
    "low": "Low",
    "medium": "Medium",
    "moderate": "Moderate",
    "high": "High",
    "very-high": "Very High",
}
