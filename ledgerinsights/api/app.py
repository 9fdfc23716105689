from __future__ import annotations

from pathlib import Path
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from ledgerinsights.api.dependencies import build_context
from ledgerinsights.api.error_handlers import register_error_handlers
from ledgerinsights.api.routers.health import router as health_router
from ledgerinsights.api.routers.insights import router as insights_router
from ledgerinsights.domain.ports.command_gateway import CommandGatewayPort
from ledgerinsights.logger import get_logger, reset_request_id, set_request_id, setup_logging
from ledgerinsights.settings import Settings, load_settings

API_PREFIX = "/api/v1"


def _report_scope(path: str) -> str:
    # /api/v1/insights/{report}
    parts = [seg for seg in path.split("/") if seg]
    if len(parts) >= 4 and parts[:3] == ["api", "v1", "insights"]:
        return parts[3] or "-"
    return "-"


def create_app(root: Path, gateway: CommandGatewayPort | None = None) -> FastAPI:
    settings = load_settings()
    setup_logging(settings)

    app = FastAPI(title="Ledger Insights API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.state.ctx = build_context(root, gateway)

    logger = get_logger()

    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        request_id = (
            str(request.headers.get("x-request-id", "") or "").strip()
            or uuid4().hex[:16]
        )
        token = set_request_id(request_id)
        started = perf_counter()
        req_logger = logger.bind(
            request_id=request_id,
            report=_report_scope(request.url.path),
            method=request.method,
            path=request.url.path,
        )
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - started) * 1000
            req_logger.bind(status_code=500).opt(exception=True).error(
                f"request failed duration_ms={duration_ms:.2f}"
            )
            reset_request_id(token)
            raise

        duration_ms = (perf_counter() - started) * 1000
        response.headers["X-Request-Id"] = request_id
        status_code = int(response.status_code)
        message = f"request completed status={status_code} duration_ms={duration_ms:.2f}"
        if status_code >= 500:
            req_logger.bind(status_code=status_code).error(message)
        elif status_code >= 400:
            req_logger.bind(status_code=status_code).warning(message)
        else:
            req_logger.bind(status_code=status_code).info(message)
        reset_request_id(token)
        return response

    register_error_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(insights_router, prefix=API_PREFIX)

    @app.api_route(f"{API_PREFIX}/{{rest:path}}", methods=["GET"], include_in_schema=False)
    async def api_not_found(rest: str) -> Response:
        raise HTTPException(status_code=404, detail=f"route not found: {API_PREFIX}/{rest}")

    return app


def serve(root: Path, host: str = "127.0.0.1", port: int = 8000) -> None:
    settings: Settings = load_settings()
    setup_logging(settings)
    app = create_app(root)
    logger = get_logger()
    logger.info(f"API listening on http://{host}:{port}{API_PREFIX}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
