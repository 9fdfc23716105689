from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ledgerinsights.domain.errors import DecodeShapeError
from ledgerinsights.domain.models.insights import Amount

_CENT = Decimal("0.01")
# Enough digits to quantize any finite float (up to ~1.8e308) to cents.
_CENT_PRECISION = 320


class RawQuantity(BaseModel):
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    floatingPoint: float


class RawAmount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    aquantity: RawQuantity
    acommodity: str = ""


_AMOUNT_LIST = TypeAdapter(list[RawAmount])


def error_field(err: dict[str, Any]) -> str:
    return ".".join(str(part) for part in err.get("loc", ()))


def round2(value: float) -> float:
    """Round half away from zero to cents; float ``round`` would round half to even."""
    with localcontext() as ctx:
        ctx.prec = _CENT_PRECISION
        return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def percentage(part: float, whole: float) -> float:
    if whole > 0:
        return round2(part / whole * 100)
    return 0.0


def _as_amounts(entries: Sequence[Any], *, report: str, field: str) -> list[RawAmount]:
    try:
        return _AMOUNT_LIST.validate_python(list(entries))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        path = ".".join(p for p in (field, error_field(first)) if p)
        raise DecodeShapeError(report, path, first.get("msg", "invalid amount")) from exc
    except TypeError as exc:
        raise DecodeShapeError(report, field, "amounts must be a list") from exc


def decode_amount(
    entries: Sequence[Any], *, report: str = "amount", field: str = ""
) -> Amount | None:
    """
    Decode the first commodity amount of an hledger ``MixedAmount`` list.

    Returns ``None`` when the list is empty: no postings in that cell is not
    the same thing as a zero balance.
    """
    amounts = _as_amounts(entries, report=report, field=field)
    if not amounts:
        return None
    first = amounts[0]
    return Amount(quantity=round2(first.aquantity.floatingPoint), commodity=first.acommodity)


def extract_amount(entries: Sequence[Any], *, report: str = "amount", field: str = "") -> float:
    amount = decode_amount(entries, report=report, field=field)
    if amount is None:
        return 0.0
    return amount.quantity


def strip_account_prefix(name: str, prefix: str = "expenses") -> str:
    head = f"{prefix}:"
    if name.startswith(head):
        return name[len(head):]
    return name
