from __future__ import annotations

import json
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ledgerinsights.config import resolve_journal_path
from ledgerinsights.domain.errors import UpstreamExecutionError
from ledgerinsights.logger import get_logger
from ledgerinsights.settings import Settings


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    binary: str
    journal_path: Path
    timeout_s: float = 5.0

    def with_journal(self, journal_path: Path) -> GatewayConfig:
        return replace(self, journal_path=journal_path)


def gateway_config_from_settings(root: Path, settings: Settings) -> GatewayConfig:
    return GatewayConfig(
        binary=settings.hledger_bin,
        journal_path=resolve_journal_path(root, settings),
        timeout_s=settings.command_timeout_s,
    )


class HledgerGateway:
    """Runs hledger against one journal file and hands back its stdout."""

    def __init__(self, config: GatewayConfig) -> None:
        self._config = config
        self._logger = get_logger()

    @property
    def config(self) -> GatewayConfig:
        return self._config

    def _command(self, args: Sequence[str]) -> list[str]:
        return [self._config.binary, "-f", str(self._config.journal_path), *args]

    def run(self, args: Sequence[str]) -> str:
        cmd = self._command(args)
        self._logger.debug(f"running: {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._config.timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            self._logger.warning(f"hledger timed out after {self._config.timeout_s}s: {' '.join(args)}")
            raise UpstreamExecutionError(
                f"hledger command timed out after {self._config.timeout_s}s",
                args=args,
            ) from exc
        except OSError as exc:
            self._logger.warning(f"hledger could not be started: {exc}")
            raise UpstreamExecutionError(
                f"hledger command could not be started: {exc}",
                args=args,
            ) from exc

        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            self._logger.warning(f"hledger exited with {proc.returncode}: {stderr}")
            raise UpstreamExecutionError(
                f"hledger command failed (exit {proc.returncode}): {stderr}",
                args=args,
                exit_code=proc.returncode,
                stderr=stderr,
            )
        return proc.stdout

    def run_json(self, args: Sequence[str]) -> Any:
        output = self.run([*args, "-O", "json"])
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise UpstreamExecutionError(
                f"hledger produced invalid JSON: {exc}",
                args=args,
                exit_code=0,
            ) from exc
