from __future__ import annotations

from collections.abc import Callable
from datetime import date

from ledgerinsights.domain.enums import Interval
from ledgerinsights.domain.errors import ValidationError
from ledgerinsights.domain.models.insights import (
    FinancialSummaryResult,
    NetWorthForecastResult,
    SpendingBreakdownResult,
    TrendsResult,
)
from ledgerinsights.domain.ports.command_gateway import CommandGatewayPort
from ledgerinsights.logger import get_logger
from ledgerinsights.parsers.hledger.decoders import (
    decode_financial_summary,
    decode_net_worth_forecast,
    decode_spending_breakdown,
    decode_trends,
)


def _require_period(period: str | None) -> str:
    value = str(period or "").strip()
    if not value:
        raise ValidationError("period must not be empty")
    return value


def _period_args(period: str | None) -> list[str]:
    value = str(period or "").strip()
    return ["-p", value] if value else []


def _parse_interval(interval: str | Interval) -> Interval:
    try:
        return Interval(interval)
    except ValueError as exc:
        raise ValidationError(
            f"unsupported interval: {interval!r}",
            details={"allowed": [i.value for i in Interval]},
        ) from exc


class InsightsService:
    """The report operations: build hledger arguments, fetch JSON, decode it."""

    def __init__(self, gateway: CommandGatewayPort, today: Callable[[], date] = date.today) -> None:
        self._gateway = gateway
        self._today = today
        self._logger = get_logger()

    def spending_breakdown(
        self,
        period: str,
        depth: int | None = None,
        category_filter: str | None = None,
    ) -> SpendingBreakdownResult:
        period = _require_period(period)
        if depth is not None and depth < 1:
            raise ValidationError("depth must be >= 1", details={"depth": depth})
        category = str(category_filter or "").strip()
        account = f"expenses:{category}" if category else "expenses"

        args = ["bal", account]
        if depth is not None:
            args += ["--depth", str(depth)]
        args += ["-p", period, "-S"]

        raw = self._gateway.run_json(args)
        result = decode_spending_breakdown(raw, period)
        self._logger.bind(report="balance").info(
            f"spending breakdown period={period!r} categories={len(result.categories)} total={result.total}"
        )
        return result

    def financial_trends(self, period: str, interval: str | Interval = Interval.MONTHLY) -> TrendsResult:
        period = _require_period(period)
        flag = _parse_interval(interval).hledger_flag
        raw = self._gateway.run_json(["is", flag, "-p", period])
        result = decode_trends(raw)
        self._logger.bind(report="incomestatement").info(
            f"trends period={period!r} interval={interval} periods={len(result.periods)}"
        )
        return result

    def financial_summary(self, period: str | None = None) -> FinancialSummaryResult:
        scope = _period_args(period)
        # Unrelated read-only queries; any failure fails the whole summary.
        balance_sheet = self._gateway.run_json(["bs", *scope])
        income_statement = self._gateway.run_json(["is", *scope])
        ranking = self._gateway.run_json(["bal", "expenses", "--depth", "2", *scope, "-S"])
        result = decode_financial_summary(balance_sheet, income_statement, ranking)
        self._logger.bind(report="summary").info(
            f"summary period={period!r} net_worth={result.net_worth} savings_rate={result.savings_rate}"
        )
        return result

    def net_worth_forecast(self, period: str = "last 12 months", months: int = 9) -> NetWorthForecastResult:
        period = _require_period(period)
        if months < 1:
            raise ValidationError("months must be >= 1", details={"months": months})
        balance_sheet = self._gateway.run_json(["bs", "-M", "-p", period])
        income_statement = self._gateway.run_json(["is", "-M", "-p", period])
        return decode_net_worth_forecast(balance_sheet, income_statement, months=months, today=self._today())
