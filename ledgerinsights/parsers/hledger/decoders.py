from __future__ import annotations

from datetime import date
from typing import Any, Literal

import pandas as pd

from ledgerinsights.domain.enums import SCENARIO_MULTIPLIERS
from ledgerinsights.domain.errors import DecodeShapeError
from ledgerinsights.domain.models.insights import (
    CategoryBreakdown,
    FinancialSummaryResult,
    NetWorthForecastResult,
    NetWorthPoint,
    PeriodTrend,
    SpendingBreakdownResult,
    TopExpense,
    TrendsResult,
)
from ledgerinsights.logger import get_logger
from ledgerinsights.parsers.hledger.amounts import (
    extract_amount,
    percentage,
    round2,
    strip_account_prefix,
)
from ledgerinsights.parsers.hledger.dates import date_span_contents, period_key, period_start
from ledgerinsights.parsers.hledger.shapes import (
    CompoundReport,
    Subreport,
    parse_balance_report,
    parse_compound_report,
    subreport,
)

TOP_EXPENSES = 5

BreakdownSort = Literal["amount"] | None


def decode_spending_breakdown(
    raw: Any, period: str, *, sort: BreakdownSort = None
) -> SpendingBreakdownResult:
    """
    Decode ``bal expenses ... -S`` into per-category amounts and shares.

    Categories keep hledger's row order (``-S`` already sorts by magnitude).
    ``sort="amount"`` re-sorts descending; the sort is stable, so equal
    amounts keep their upstream order.
    """
    report = parse_balance_report(raw, report="balance")
    total = abs(extract_amount(report.totals, report="balance", field="1"))

    categories: list[CategoryBreakdown] = []
    for i, row in enumerate(report.rows):
        amount = abs(extract_amount(row.amounts, report="balance", field=f"0.{i}.3"))
        categories.append(
            CategoryBreakdown(
                name=strip_account_prefix(row.full_name),
                amount=amount,
                percentage=percentage(amount, total),
            )
        )

    if sort == "amount":
        categories.sort(key=lambda c: c.amount, reverse=True)
    elif sort is not None:
        raise ValueError(f"unsupported sort: {sort!r}")

    return SpendingBreakdownResult(categories=categories, total=total, period=period)


def _column_dates(compound: CompoundReport, *, report: str) -> list[tuple[str, str]]:
    dates: list[tuple[str, str]] = []
    for i, span in enumerate(compound.cbrDates):
        if not span:
            raise DecodeShapeError(report, f"cbrDates.{i}", "empty date span")
        field = f"cbrDates.{i}.0"
        contents = date_span_contents(span[0], report=report, field=field)
        key = period_key(contents, report=report, field=f"{field}.contents")
        start = period_start(contents, report=report, field=f"{field}.contents")
        dates.append((key, start.isoformat()))
    return dates


def _column_sum(sub: Subreport, index: int, *, report: str, role: str) -> float:
    """Sum one period column over every row; a missing cell counts as no activity."""
    total = 0.0
    for r, row in enumerate(sub.report.prRows):
        total += extract_amount(
            row.column(index),
            report=report,
            field=f"{role}.prRows.{r}.prrAmounts.{index}",
        )
    return round2(total)


def decode_trends(raw: Any, *, report: str = "incomestatement") -> TrendsResult:
    compound = parse_compound_report(raw, report=report)
    revenues = subreport(compound, "revenues", report=report)
    expenses = subreport(compound, "expenses", report=report)
    logger = get_logger().bind(report=report)

    periods: list[PeriodTrend] = []
    for i, (key, start) in enumerate(_column_dates(compound, report=report)):
        raw_income = _column_sum(revenues, i, report=report, role="revenues")
        if raw_income < 0:
            # hledger flips revenue signs for is; a negative sum means that changed.
            logger.warning(f"negative revenue total {raw_income} for {key}; using its magnitude")
        income = abs(raw_income)
        spent = abs(_column_sum(expenses, i, report=report, role="expenses"))
        periods.append(
            PeriodTrend(
                date=key,
                income=income,
                expenses=spent,
                net=round2(income - spent),
                start=start,
            )
        )
    return TrendsResult(periods=periods)


def decode_financial_summary(
    balance_sheet: Any,
    income_statement: Any,
    ranking: Any,
    *,
    top_n: int = TOP_EXPENSES,
) -> FinancialSummaryResult:
    """
    Combine ``bs``, ``is`` and ``bal expenses --depth 2 -S`` into one summary.

    Income and expenses come from each subreport's own total, never from a
    row sum, so rounding or unposted entries cannot drift the figures.
    """
    bs = parse_compound_report(balance_sheet, report="balancesheet")
    net_worth = extract_amount(bs.cbrTotals.prrTotal, report="balancesheet", field="cbrTotals.prrTotal")

    inc = parse_compound_report(income_statement, report="incomestatement")
    revenues = subreport(inc, "revenues", report="incomestatement")
    expenses = subreport(inc, "expenses", report="incomestatement")
    raw_income = extract_amount(
        revenues.report.prTotals.prrTotal,
        report="incomestatement",
        field="cbrSubreports.0.prTotals.prrTotal",
    )
    if raw_income < 0:
        get_logger().bind(report="incomestatement").warning(
            f"negative revenue total {raw_income}; using its magnitude"
        )
    total_income = abs(raw_income)
    total_expenses = abs(
        extract_amount(
            expenses.report.prTotals.prrTotal,
            report="incomestatement",
            field="cbrSubreports.1.prTotals.prrTotal",
        )
    )

    bal = parse_balance_report(ranking, report="balance")
    top_expenses = [
        TopExpense(
            name=strip_account_prefix(row.full_name),
            amount=abs(extract_amount(row.amounts, report="balance", field=f"0.{i}.3")),
        )
        for i, row in enumerate(bal.rows[:top_n])
    ]

    return FinancialSummaryResult(
        net_worth=net_worth,
        total_income=total_income,
        total_expenses=total_expenses,
        savings_rate=percentage(total_income - total_expenses, total_income),
        cashflow=round2(total_income - total_expenses),
        top_expenses=top_expenses,
    )


def decode_net_worth_forecast(
    balance_sheet: Any,
    income_statement: Any,
    *,
    today: date,
    months: int = 9,
) -> NetWorthForecastResult:
    """
    Project net worth forward from the monthly savings pace of ``is -M``.

    ``today`` only anchors the projection when the balance sheet has no
    period columns; otherwise it starts after the last reported month.
    """
    bs = parse_compound_report(balance_sheet, report="balancesheet")
    columns = _column_dates(bs, report="balancesheet")
    balances = bs.cbrTotals.prrAmounts
    if len(balances) != len(columns):
        # A balance is not activity: a missing column is not a zero balance.
        raise DecodeShapeError(
            "balancesheet",
            "cbrTotals.prrAmounts",
            f"expected {len(columns)} period columns, got {len(balances)}",
        )
    historical: list[NetWorthPoint] = []
    for i, (key, _) in enumerate(columns):
        historical.append(
            NetWorthPoint(
                date=key,
                net_worth=extract_amount(
                    balances[i],
                    report="balancesheet",
                    field=f"cbrTotals.prrAmounts.{i}",
                ),
            )
        )

    if historical:
        current = historical[-1].net_worth
        last_month = pd.Period(historical[-1].date, freq="M")
    else:
        current = extract_amount(bs.cbrTotals.prrTotal, report="balancesheet", field="cbrTotals.prrTotal")
        last_month = pd.Period(today, freq="M")

    trends = decode_trends(income_statement)
    if trends.periods:
        avg = round2(sum(p.net for p in trends.periods) / len(trends.periods))
    else:
        avg = 0.0

    forecasts: dict[str, list[NetWorthPoint]] = {}
    for scenario, multiplier in SCENARIO_MULTIPLIERS.items():
        forecasts[scenario.value] = [
            NetWorthPoint(
                date=str(last_month + k),
                net_worth=round2(current + avg * multiplier * k),
            )
            for k in range(1, months + 1)
        ]

    return NetWorthForecastResult(
        historical=historical,
        current_net_worth=current,
        avg_monthly_savings=avg,
        forecasts=forecasts,
    )
