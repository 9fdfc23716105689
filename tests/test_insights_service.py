import unittest
from datetime import date

from hledger_fixtures import (
    FixtureGateway,
    balance_report,
    balance_row,
    compound_report,
    exact,
    periodic_row,
)

from ledgerinsights.application.services.insights_service import InsightsService
from ledgerinsights.domain.enums import Interval
from ledgerinsights.domain.errors import UpstreamExecutionError, ValidationError

INCOME_STATEMENT = compound_report(
    [exact("2025-09-01")],
    [periodic_row("revenues:salary", [[5000]])],
    [periodic_row("expenses:rent", [[-4000]])],
    revenue_total=[5000],
    expense_total=[-4000],
)
BALANCE_SHEET = compound_report(
    [exact("2025-09-01")],
    titles=("Assets", "Liabilities"),
    grand_columns=[[12000]],
    grand_total=[12000],
)
RANKING = balance_report([balance_row("expenses:rent", -4000, depth=2)], -4000)


class TestInsightsService(unittest.TestCase):
    def test_spending_breakdown_arguments(self) -> None:
        gateway = FixtureGateway({"bal": RANKING})
        service = InsightsService(gateway)

        result = service.spending_breakdown("this month")
        self.assertEqual(result.period, "this month")
        self.assertEqual(result.categories[0].name, "rent")

        service.spending_breakdown("2025-10", depth=2, category_filter="food")
        self.assertEqual(
            gateway.calls,
            [
                ["bal", "expenses", "-p", "this month", "-S"],
                ["bal", "expenses:food", "--depth", "2", "-p", "2025-10", "-S"],
            ],
        )

    def test_trends_interval_flags(self) -> None:
        gateway = FixtureGateway({"is": INCOME_STATEMENT})
        service = InsightsService(gateway)
        for interval, flag in [("monthly", "-M"), ("weekly", "-W"), (Interval.QUARTERLY, "-Q")]:
            with self.subTest(interval=interval):
                result = service.financial_trends("last 6 months", interval)
                self.assertEqual(result.periods[0].net, 1000)
                self.assertEqual(gateway.calls[-1], ["is", flag, "-p", "last 6 months"])

    def test_summary_runs_three_reports(self) -> None:
        gateway = FixtureGateway({"bs": BALANCE_SHEET, "is": INCOME_STATEMENT, "bal": RANKING})
        result = InsightsService(gateway).financial_summary()
        self.assertEqual(result.net_worth, 12000)
        self.assertEqual(result.savings_rate, 20.0)
        self.assertEqual(result.cashflow, 1000)
        self.assertEqual(gateway.calls, [["bs"], ["is"], ["bal", "expenses", "--depth", "2", "-S"]])

        InsightsService(gateway).financial_summary("last quarter")
        self.assertEqual(
            gateway.calls[-3:],
            [
                ["bs", "-p", "last quarter"],
                ["is", "-p", "last quarter"],
                ["bal", "expenses", "--depth", "2", "-p", "last quarter", "-S"],
            ],
        )

    def test_summary_fails_when_any_report_fails(self) -> None:
        failure = UpstreamExecutionError("hledger command failed (exit 1): boom", args=["bal"], exit_code=1)
        gateway = FixtureGateway({"bs": BALANCE_SHEET, "is": INCOME_STATEMENT, "bal": failure})
        with self.assertRaises(UpstreamExecutionError):
            InsightsService(gateway).financial_summary("this year")

    def test_net_worth_forecast_arguments(self) -> None:
        gateway = FixtureGateway({"bs": BALANCE_SHEET, "is": INCOME_STATEMENT})
        result = InsightsService(gateway).net_worth_forecast(months=2)
        self.assertEqual(result.current_net_worth, 12000)
        self.assertEqual(result.avg_monthly_savings, 1000)
        self.assertEqual([p.net_worth for p in result.forecasts["realistic"]], [13000, 14000])
        self.assertEqual(
            gateway.calls,
            [["bs", "-M", "-p", "last 12 months"], ["is", "-M", "-p", "last 12 months"]],
        )

    def test_net_worth_forecast_uses_injected_day(self) -> None:
        empty_bs = compound_report([], titles=("Assets", "Liabilities"), grand_total=[700])
        gateway = FixtureGateway({"bs": empty_bs, "is": compound_report([])})
        service = InsightsService(gateway, today=lambda: date(2025, 12, 31))
        result = service.net_worth_forecast(months=1)
        self.assertEqual(result.forecasts["realistic"][0].date, "2026-01")
        self.assertEqual(result.forecasts["realistic"][0].net_worth, 700)

    def test_validation(self) -> None:
        service = InsightsService(FixtureGateway({}))
        with self.assertRaises(ValidationError):
            service.spending_breakdown("  ")
        with self.assertRaises(ValidationError):
            service.spending_breakdown("this month", depth=0)
        with self.assertRaises(ValidationError) as ctx:
            service.financial_trends("this year", "daily")
        self.assertEqual(ctx.exception.details["allowed"], ["monthly", "weekly", "quarterly"])
        with self.assertRaises(ValidationError):
            service.net_worth_forecast(months=0)
