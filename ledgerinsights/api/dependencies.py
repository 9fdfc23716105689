from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import Request

from ledgerinsights.application.services.insights_service import InsightsService
from ledgerinsights.domain.ports.command_gateway import CommandGatewayPort
from ledgerinsights.infrastructure.hledger.gateway import HledgerGateway, gateway_config_from_settings
from ledgerinsights.logger import get_logger
from ledgerinsights.settings import Settings, load_settings


@dataclass(slots=True)
class ApiContext:
    root: Path
    settings: Settings
    logger: Any
    insights: InsightsService


def build_context(root: Path, gateway: CommandGatewayPort | None = None) -> ApiContext:
    settings = load_settings()
    logger = get_logger()
    if gateway is None:
        gateway = HledgerGateway(gateway_config_from_settings(root, settings))
    insights = InsightsService(gateway)
    return ApiContext(root=root, settings=settings, logger=logger, insights=insights)


def get_ctx(request: Request) -> ApiContext:
    return request.app.state.ctx
