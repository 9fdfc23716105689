"""Report shapes printed by ``hledger ... -O json``.

``balance`` prints a flat ``[rows, totals]`` pair where each row is
``[full_name, display_name, depth, amounts]``. ``balancesheet`` and
``incomestatement`` print a compound object with per-period columns and
``[title, report, increases_total]`` subreports.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ledgerinsights.domain.errors import DecodeShapeError
from ledgerinsights.logger import get_logger
from ledgerinsights.parsers.hledger.amounts import error_field

T = TypeVar("T")

# Amount lists stay raw here; the amount extractor owns their validation.
RawAmounts = list[Any]


class _Shape(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class BalanceRow(_Shape):
    full_name: str
    display_name: str
    depth: int
    amounts: RawAmounts


class BalanceReport(_Shape):
    rows: list[BalanceRow]
    totals: RawAmounts


class PeriodicRow(_Shape):
    prrName: Any = ""
    prrAmounts: list[RawAmounts] = Field(default_factory=list)
    prrTotal: RawAmounts = Field(default_factory=list)
    prrAverage: RawAmounts = Field(default_factory=list)

    def column(self, index: int) -> RawAmounts:
        """Amounts for one period column; rows may stop early when later periods are empty."""
        if index < len(self.prrAmounts):
            return self.prrAmounts[index]
        return []


class PeriodicReport(_Shape):
    prDates: list[Any] = Field(default_factory=list)
    prRows: list[PeriodicRow] = Field(default_factory=list)
    prTotals: PeriodicRow


class Subreport(_Shape):
    title: str
    report: PeriodicReport
    increases_total: bool = True


class CompoundReport(_Shape):
    cbrTitle: str = ""
    cbrDates: list[list[Any]]
    cbrSubreports: list[Subreport]
    cbrTotals: PeriodicRow


_BALANCE_ROW = TypeAdapter(tuple[str, str, int, RawAmounts])
_BALANCE_PAIR = TypeAdapter(tuple[list[Any], RawAmounts])
_SUBREPORT = TypeAdapter(tuple[str, PeriodicReport, bool])


def _validate(adapter: TypeAdapter[T], raw: Any, *, report: str, field: str = "") -> T:
    try:
        return adapter.validate_python(raw)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        path = ".".join(p for p in (field, error_field(first)) if p)
        raise DecodeShapeError(report, path, first.get("msg", "invalid value")) from exc


def parse_balance_report(raw: Any, *, report: str = "balance") -> BalanceReport:
    """Accept only the flat ``[rows, totals]`` pair; a compound object fails fast."""
    if isinstance(raw, dict):
        raise DecodeShapeError(report, "", "expected a [rows, totals] pair, got a compound report")
    rows_raw, totals = _validate(_BALANCE_PAIR, raw, report=report)
    rows: list[BalanceRow] = []
    for i, row_raw in enumerate(rows_raw):
        full_name, display_name, depth, amounts = _validate(
            _BALANCE_ROW, row_raw, report=report, field=f"0.{i}"
        )
        rows.append(
            BalanceRow(full_name=full_name, display_name=display_name, depth=depth, amounts=amounts)
        )
    return BalanceReport(rows=rows, totals=totals)


def parse_compound_report(raw: Any, *, report: str = "compound") -> CompoundReport:
    """Accept only the compound balance report object; a flat pair fails fast."""
    if not isinstance(raw, dict):
        raise DecodeShapeError(report, "", "expected a compound report object")
    subreports_raw = raw.get("cbrSubreports")
    if not isinstance(subreports_raw, list):
        raise DecodeShapeError(report, "cbrSubreports", "expected a list of subreports")
    subreports: list[Subreport] = []
    for i, entry in enumerate(subreports_raw):
        title, body, increases = _validate(
            _SUBREPORT, entry, report=report, field=f"cbrSubreports.{i}"
        )
        subreports.append(Subreport(title=title, report=body, increases_total=increases))
    fields = {k: v for k, v in raw.items() if k != "cbrSubreports"}
    try:
        return CompoundReport.model_validate({**fields, "cbrSubreports": subreports})
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise DecodeShapeError(report, error_field(first), first.get("msg", "invalid value")) from exc


# Position of each subreport role in hledger's ``is`` / ``bs`` output.
_SUBREPORT_POSITIONS: dict[str, tuple[int, str]] = {
    "revenues": (0, "revenues"),
    "expenses": (1, "expenses"),
}


def subreport(compound: CompoundReport, role: str, *, report: str = "compound") -> Subreport:
    """Look up a subreport by role rather than by index at every call site."""
    index, expected_title = _SUBREPORT_POSITIONS[role]
    if index >= len(compound.cbrSubreports):
        raise DecodeShapeError(
            report,
            f"cbrSubreports.{index}",
            f"missing {role} subreport (got {len(compound.cbrSubreports)} subreports)",
        )
    found = compound.cbrSubreports[index]
    if expected_title not in found.title.lower():
        get_logger().bind(report=report).warning(
            f"subreport {index} titled {found.title!r}, expected {role}"
        )
    return found
