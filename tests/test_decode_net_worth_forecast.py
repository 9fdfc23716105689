import unittest
from datetime import date

from hledger_fixtures import compound_report, exact, periodic_row

from ledgerinsights.domain.errors import DecodeShapeError
from ledgerinsights.parsers.hledger.decoders import decode_net_worth_forecast

TODAY = date(2026, 4, 15)


def _months(*keys: str) -> list[dict]:
    return [exact(f"{k}-01") for k in keys]


class TestNetWorthForecast(unittest.TestCase):
    def test_projects_each_scenario_from_average_savings(self) -> None:
        months = _months("2025-10", "2025-11", "2025-12")
        bs = compound_report(months, title="Balance Sheet", grand_columns=[[10000], [10500], [11200]])
        inc = compound_report(
            months,
            [periodic_row("revenues:salary", [[3000], [3000], [3000]])],
            [periodic_row("expenses:rent", [[-2500], [-2300], [-2600]])],
        )
        result = decode_net_worth_forecast(bs, inc, months=3, today=TODAY)

        self.assertEqual([p.date for p in result.historical], ["2025-10", "2025-11", "2025-12"])
        self.assertEqual([p.net_worth for p in result.historical], [10000, 10500, 11200])
        self.assertEqual(result.current_net_worth, 11200)
        self.assertEqual(result.avg_monthly_savings, 533.33)

        self.assertEqual(set(result.forecasts), {"pessimistic", "realistic", "optimistic"})
        realistic = result.forecasts["realistic"]
        self.assertEqual([p.date for p in realistic], ["2026-01", "2026-02", "2026-03"])
        self.assertEqual([p.net_worth for p in realistic], [11733.33, 12266.66, 12799.99])
        self.assertEqual(result.forecasts["pessimistic"][0].net_worth, 11413.33)
        self.assertEqual(result.forecasts["optimistic"][0].net_worth, 12053.33)

    def test_no_activity_keeps_net_worth_flat(self) -> None:
        months = _months("2025-06")
        bs = compound_report(months, title="Balance Sheet", grand_columns=[[500]])
        inc = compound_report(months)
        result = decode_net_worth_forecast(bs, inc, months=2, today=TODAY)
        self.assertEqual(result.avg_monthly_savings, 0)
        for points in result.forecasts.values():
            self.assertEqual([p.net_worth for p in points], [500, 500])
            self.assertEqual([p.date for p in points], ["2025-07", "2025-08"])

    def test_short_balance_columns_are_a_shape_error(self) -> None:
        months = _months("2025-06", "2025-07")
        bs = compound_report(months, title="Balance Sheet", grand_columns=[[10000]])
        inc = compound_report(months, [periodic_row("revenues:salary", [[1000], [1000]])])
        with self.assertRaises(DecodeShapeError) as ctx:
            decode_net_worth_forecast(bs, inc, months=1, today=TODAY)
        self.assertEqual(ctx.exception.report, "balancesheet")
        self.assertEqual(ctx.exception.field, "cbrTotals.prrAmounts")

    def test_empty_balance_cell_is_a_zero_balance(self) -> None:
        months = _months("2025-06", "2025-07")
        bs = compound_report(months, title="Balance Sheet", grand_columns=[[500], []])
        result = decode_net_worth_forecast(bs, compound_report(months), months=1, today=TODAY)
        self.assertEqual([p.net_worth for p in result.historical], [500, 0])

    def test_without_columns_anchors_on_the_given_day(self) -> None:
        bs = compound_report([], title="Balance Sheet", grand_total=[2500])
        first = decode_net_worth_forecast(bs, compound_report([]), months=2, today=TODAY)
        again = decode_net_worth_forecast(bs, compound_report([]), months=2, today=TODAY)
        self.assertEqual(first, again)
        self.assertEqual(first.historical, [])
        self.assertEqual(first.current_net_worth, 2500)
        self.assertEqual([p.date for p in first.forecasts["realistic"]], ["2026-05", "2026-06"])
        self.assertEqual([p.net_worth for p in first.forecasts["realistic"]], [2500, 2500])
