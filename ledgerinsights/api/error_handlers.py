from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from ledgerinsights.api.schemas.common import err
from ledgerinsights.domain.errors import DecodeShapeError, DomainError, UpstreamExecutionError
from ledgerinsights.logger import current_request_id, get_logger


def register_error_handlers(app: FastAPI) -> None:
    logger = get_logger()

    @app.exception_handler(DomainError)
    async def _domain_error_handler(_: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc, (UpstreamExecutionError, DecodeShapeError)):
            logger.bind(report=getattr(exc, "report", "-")).warning(f"{exc.code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=err(
                request_id=current_request_id(),
                code=exc.code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(HTTPException)
    async def _http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
        code = "http_error"
        if exc.status_code == 404:
            code = "not_found"
        return JSONResponse(
            status_code=exc.status_code,
            content=err(
                request_id=current_request_id(),
                code=code,
                message=str(exc.detail),
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=err(
                request_id=current_request_id(),
                code="validation_error",
                message="request validation failed",
                details=jsonable_errors(exc),
            ),
        )

    @app.exception_handler(Exception)
    async def _generic_error_handler(_: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error("unhandled error")
        return JSONResponse(
            status_code=500,
            content=err(
                request_id=current_request_id(),
                code="internal_error",
                message="internal server error",
            ),
        )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry exception objects that JSONResponse cannot encode.
    return [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
