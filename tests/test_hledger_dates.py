import unittest
from datetime import date, timedelta

from hledger_fixtures import MJD_EPOCH

from ledgerinsights.domain.errors import DecodeShapeError
from ledgerinsights.parsers.hledger.dates import date_span_contents, period_key, period_start


class TestPeriodKey(unittest.TestCase):
    def test_exact_string(self) -> None:
        self.assertEqual(period_key("2025-09-01"), "2025-09")
        self.assertEqual(period_start("2025-09-15"), date(2025, 9, 15))

    def test_modified_julian_day(self) -> None:
        self.assertEqual(period_key(40587), "1970-01")
        self.assertEqual(period_key(60919), "2025-09")

    def test_julian_day(self) -> None:
        self.assertEqual(period_key(2440587.5), "1970-01")
        self.assertEqual(period_key(60919 + 2400000.5), "2025-09")

    def test_every_encoding_of_a_day_gives_the_same_key(self) -> None:
        day = date(2019, 12, 25)
        end = date(2027, 3, 10)
        while day <= end:
            day_number = (day - MJD_EPOCH).days
            key = period_key(day.isoformat())
            self.assertEqual(key, day.strftime("%Y-%m"))
            self.assertEqual(period_key(day_number), key, day)
            self.assertEqual(period_key(day_number + 2400000.5), key, day)
            self.assertEqual(period_start(day_number), day)
            day += timedelta(days=1)

    def test_month_boundaries(self) -> None:
        for day in (date(2024, 2, 29), date(2024, 3, 1), date(2025, 12, 31), date(2026, 1, 1)):
            with self.subTest(day=day):
                self.assertEqual(period_key((day - MJD_EPOCH).days), day.strftime("%Y-%m"))

    def test_unsupported_encodings(self) -> None:
        for contents in ("last month", "", True, None, {"y": 2025}, [2025, 9]):
            with self.subTest(contents=contents):
                with self.assertRaises(DecodeShapeError):
                    period_key(contents)

    def test_date_span_contents(self) -> None:
        self.assertEqual(date_span_contents({"tag": "Exact", "contents": "2025-09-01"}), "2025-09-01")
        with self.assertRaises(DecodeShapeError) as ctx:
            date_span_contents({"tag": "Exact"}, report="incomestatement", field="cbrDates.0.0")
        self.assertEqual(ctx.exception.field, "cbrDates.0.0")
        with self.assertRaises(DecodeShapeError):
            date_span_contents("2025-09-01")
