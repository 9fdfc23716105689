from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Amount:
    quantity: float
    commodity: str = ""


@dataclass(frozen=True, slots=True)
class CategoryBreakdown:
    name: str
    amount: float
    percentage: float


@dataclass(frozen=True, slots=True)
class SpendingBreakdownResult:
    categories: list[CategoryBreakdown]
    total: float
    period: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PeriodTrend:
    date: str
    income: float
    expenses: float
    net: float
    start: str = ""


@dataclass(frozen=True, slots=True)
class TrendsResult:
    periods: list[PeriodTrend]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class TopExpense:
    name: str
    amount: float


@dataclass(frozen=True, slots=True)
class FinancialSummaryResult:
    net_worth: float
    total_income: float
    total_expenses: float
    savings_rate: float
    cashflow: float
    top_expenses: list[TopExpense]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class NetWorthPoint:
    date: str
    net_worth: float


@dataclass(frozen=True, slots=True)
class NetWorthForecastResult:
    historical: list[NetWorthPoint]
    current_net_worth: float
    avg_monthly_savings: float
    # Keyed by Scenario value.
    forecasts: dict[str, list[NetWorthPoint]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
