"""Period dates as they appear in hledger ``cbrDates`` columns.

hledger 1.51+ writes ``{"tag": "Exact", "contents": "2025-09-01"}``; older
releases write the day as a number, ``{"tag": "ModifiedJulianDay",
"contents": 60588}``. Both must map to the same period key.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

from ledgerinsights.domain.errors import DecodeShapeError

_MJD_EPOCH = date(1858, 11, 17)
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Julian Day of 1970-01-01T00:00Z; also the MJD offset 2400000.5 plus MJD 40587.
_JULIAN_DAY_UNIX_EPOCH = 2440587.5
_MS_PER_DAY = 86_400_000
# Anything at or above the MJD origin expressed as a Julian Day is a Julian Day.
_JULIAN_DAY_THRESHOLD = 2400000.5


def _from_day_number(value: float) -> date:
    if value >= _JULIAN_DAY_THRESHOLD:
        unix_ms = (value - _JULIAN_DAY_UNIX_EPOCH) * _MS_PER_DAY
        return (_UNIX_EPOCH + timedelta(milliseconds=unix_ms)).date()
    return _MJD_EPOCH + timedelta(days=int(value))


def period_start(contents: Any, *, report: str = "date", field: str = "contents") -> date:
    if isinstance(contents, bool):
        raise DecodeShapeError(report, field, f"unsupported date encoding: {contents!r}")
    if isinstance(contents, str):
        try:
            return date.fromisoformat(contents[:10])
        except ValueError as exc:
            raise DecodeShapeError(report, field, f"invalid date string: {contents!r}") from exc
    if isinstance(contents, (int, float)):
        try:
            return _from_day_number(contents)
        except (OverflowError, ValueError) as exc:
            raise DecodeShapeError(report, field, f"day number out of range: {contents!r}") from exc
    raise DecodeShapeError(report, field, f"unsupported date encoding: {contents!r}")


def period_key(contents: Any, *, report: str = "date", field: str = "contents") -> str:
    """Month key (``YYYY-MM``) for either date encoding."""
    if isinstance(contents, str):
        period_start(contents, report=report, field=field)
        return contents[:7]
    return period_start(contents, report=report, field=field).strftime("%Y-%m")


def date_span_contents(span: Any, *, report: str = "date", field: str = "") -> Any:
    if not isinstance(span, dict) or "contents" not in span:
        raise DecodeShapeError(report, field, "expected an object with 'contents'")
    return span["contents"]
