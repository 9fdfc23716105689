from __future__ import annotations

from pathlib import Path

from .settings import Settings


def resolve_journal_path(root: Path, settings: Settings) -> Path:
    """
    显式配置优先；否则优先使用本地覆盖账本（已被 gitignore），再回退到仓库内的示例账本。
    """
    if settings.ledger_file:
        explicit = Path(settings.ledger_file).expanduser()
        return explicit if explicit.is_absolute() else root / explicit
    local_journal = root / "data" / "local.journal"
    if local_journal.exists():
        return local_journal
    return root / "data" / "sample.journal"
