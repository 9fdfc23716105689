import tempfile
import unittest
from dataclasses import replace
from pathlib import Path

from ledgerinsights.config import resolve_journal_path
from ledgerinsights.settings import load_settings


class TestJournalPath(unittest.TestCase):
    def setUp(self) -> None:
        self.settings = replace(load_settings(), ledger_file=None)

    def test_prefers_local_override_if_present(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "data").mkdir(parents=True, exist_ok=True)
            (root / "data" / "sample.journal").write_text("", encoding="utf-8")
            local = root / "data" / "local.journal"
            local.write_text("", encoding="utf-8")
            self.assertEqual(resolve_journal_path(root, self.settings), local)

    def test_falls_back_to_sample(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            self.assertEqual(
                resolve_journal_path(root, self.settings),
                root / "data" / "sample.journal",
            )

    def test_explicit_relative_path_is_under_root(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            settings = replace(self.settings, ledger_file="books/2025.journal")
            self.assertEqual(resolve_journal_path(root, settings), root / "books" / "2025.journal")

    def test_explicit_absolute_path_wins(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "data").mkdir()
            (root / "data" / "local.journal").write_text("", encoding="utf-8")
            target = root / "elsewhere.journal"
            settings = replace(self.settings, ledger_file=str(target))
            self.assertEqual(resolve_journal_path(root, settings), target)
