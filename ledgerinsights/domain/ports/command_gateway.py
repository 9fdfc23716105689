from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class CommandGatewayPort(Protocol):
    def run(self, args: Sequence[str]) -> str: ...

    def run_json(self, args: Sequence[str]) -> Any: ...
