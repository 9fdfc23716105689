from __future__ import annotations

import math
import os
from dataclasses import dataclass


def _env(key: str, default: str | None = None, *, legacy: tuple[str, ...] = ()) -> str | None:
    """
    Read an env var with optional legacy fallbacks.

    We treat empty strings as "unset" to avoid surprising behavior when users
    export variables but forget to assign values.
    """
    for k in (key, *legacy):
        v = os.environ.get(k)
        if v is not None and str(v).strip() != "":
            return v
    return default


def _parse_bool(v: str | None, default: bool) -> bool:
    if v is None:
        return default
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_int(v: str | None, default: int) -> int:
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _parse_float(v: str | None, default: float) -> float:
    if v is None:
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    log_json: bool
    log_path: str | None
    log_rotation_mb: int
    log_retention_days: int
    hledger_bin: str
    ledger_file: str | None
    command_timeout_s: float


def load_settings() -> Settings:
    host = _env("LEDGERINSIGHTS_HOST", "127.0.0.1") or "127.0.0.1"
    port = _parse_int(_env("LEDGERINSIGHTS_PORT", "8000"), 8000)

    log_level = (_env("LEDGERINSIGHTS_LOG_LEVEL", "INFO") or "INFO").upper()
    log_json = _parse_bool(_env("LEDGERINSIGHTS_LOG_JSON", None), False)
    log_path = _env("LEDGERINSIGHTS_LOG_PATH", None)
    log_rotation_mb = max(_parse_int(_env("LEDGERINSIGHTS_LOG_ROTATION_MB", "10"), 10), 1)
    log_retention_days = max(_parse_int(_env("LEDGERINSIGHTS_LOG_RETENTION_DAYS", "14"), 14), 1)

    hledger_bin = _env("LEDGERINSIGHTS_HLEDGER_BIN", "hledger") or "hledger"
    # LEDGER_FILE is what hledger itself reads; honour it when ours is unset.
    ledger_file = _env("LEDGERINSIGHTS_LEDGER_FILE", None, legacy=("LEDGER_FILE",))

    command_timeout_s = _parse_float(_env("LEDGERINSIGHTS_COMMAND_TIMEOUT", "5"), 5.0)
    if not math.isfinite(command_timeout_s) or command_timeout_s <= 0:
        # Zero would fail every command and inf/nan would not bound it; keep the default.
        command_timeout_s = 5.0

    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        log_json=log_json,
        log_path=log_path,
        log_rotation_mb=log_rotation_mb,
        log_retention_days=log_retention_days,
        hledger_bin=hledger_bin,
        ledger_file=ledger_file,
        command_timeout_s=command_timeout_s,
    )
