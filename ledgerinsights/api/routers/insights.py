from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from ledgerinsights.api.dependencies import ApiContext, get_ctx
from ledgerinsights.api.schemas.common import ok
from ledgerinsights.domain.enums import Interval
from ledgerinsights.logger import current_request_id

router = APIRouter(prefix="/insights", tags=["insights"])

# hledger blocks on a subprocess, so these stay sync and run in the threadpool.


@router.get("/spending-breakdown")
def spending_breakdown(
    ctx: Annotated[ApiContext, Depends(get_ctx)],
    period: str = Query(min_length=1),
    depth: int | None = Query(default=2, ge=1),
    category_filter: str | None = Query(default=None),
) -> dict:
    result = ctx.insights.spending_breakdown(period, depth=depth, category_filter=category_filter)
    return ok(result.to_dict(), request_id=current_request_id())


@router.get("/trends")
def trends(
    ctx: Annotated[ApiContext, Depends(get_ctx)],
    period: str = Query(min_length=1),
    interval: Interval = Query(default=Interval.MONTHLY),
) -> dict:
    result = ctx.insights.financial_trends(period, interval)
    return ok(result.to_dict(), request_id=current_request_id())


@router.get("/summary")
def summary(
    ctx: Annotated[ApiContext, Depends(get_ctx)],
    period: str | None = Query(default=None),
) -> dict:
    result = ctx.insights.financial_summary(period)
    return ok(result.to_dict(), request_id=current_request_id())


@router.get("/net-worth-forecast")
def net_worth_forecast(
    ctx: Annotated[ApiContext, Depends(get_ctx)],
    period: str = Query(default="last 12 months", min_length=1),
    months: int = Query(default=9, ge=1, le=120),
) -> dict:
    result = ctx.insights.net_worth_forecast(period, months=months)
    return ok(result.to_dict(), request_id=current_request_id())
