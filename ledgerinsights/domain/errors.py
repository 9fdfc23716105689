from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class DomainError(Exception):
    code: str
    message: str
    details: Any = None
    status_code: int = 400

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(
            code="validation_error",
            message=message,
            details=details,
            status_code=400,
        )


class UpstreamExecutionError(DomainError):
    """hledger exited non-zero, timed out, could not be started, or printed non-JSON."""

    def __init__(
        self,
        message: str,
        *,
        args: Sequence[str] = (),
        exit_code: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(
            code="upstream_execution_error",
            message=message,
            details={"args": list(args), "exit_code": exit_code, "stderr": stderr},
            status_code=502,
        )
        self.exit_code = exit_code
        self.stderr = stderr


class DecodeShapeError(DomainError):
    """The JSON parsed but did not have the report shape we decode."""

    def __init__(self, report: str, field: str, message: str) -> None:
        super().__init__(
            code="decode_shape_error",
            message=f"unexpected {report} report shape at {field or '<root>'}: {message}",
            details={"report": report, "field": field},
            status_code=502,
        )
        self.report = report
        self.field = field
