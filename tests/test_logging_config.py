# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from src.config.logging_config import ROOT_LOGGER, setup_logging
from src.config.settings import Settings


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour against a temporary logs dir."""

    def setUp(self) -> None:
        self.root_logger = logging.getLogger(ROOT_LOGGER)
        self._saved_handlers = list(self.root_logger.handlers)
        self.root_logger.handlers.clear()

        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.logs_dir = Path(tmp.name) / "logs"
        for target, value in (
            ("LOGS_DIR", self.logs_dir),
            ("CONSOLE_LOG_LEVEL", "WARNING"),
            ("LOG_RETENTION", 3),
        ):
            patcher = patch.object(Settings, target, value)
            patcher.start()
            self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        for handler in self.root_logger.handlers:
            handler.close()
        self.root_logger.handlers[:] = self._saved_handlers

    def test_creates_named_log_file(self) -> None:
        """The log file lives in logs/ and is named run_YYYYMMDD_HHMMSS.log."""
        log_path = setup_logging()
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_debug_console_warning(self) -> None:
        setup_logging()
        file_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.FileHandler)
        ]
        console_handlers = [
            h
            for h in self.root_logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(len(console_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)
        self.assertEqual(console_handlers[0].level, logging.WARNING)
        self.assertEqual(self.root_logger.level, logging.DEBUG)

    def test_repeated_calls_reuse_first_file(self) -> None:
        first = setup_logging()
        count = len(self.root_logger.handlers)
        self.assertEqual(setup_logging(), first)
        self.assertEqual(len(self.root_logger.handlers), count)

    def test_old_runs_pruned(self) -> None:
        self.logs_dir.mkdir(parents=True)
        for day in range(1, 6):
            (self.logs_dir / f"run_2020010{day}_000000.log").write_text("")
        (self.logs_dir / "notes.txt").write_text("keep me")

        log_path = setup_logging()

        remaining = sorted(p.name for p in self.logs_dir.glob("run_*.log"))
        self.assertEqual(len(remaining), 3)
        self.assertIn(log_path.name, remaining)
        self.assertIn("run_20200105_000000.log", remaining)
        self.assertNotIn("run_20200101_000000.log", remaining)
        self.assertTrue((self.logs_dir / "notes.txt").exists())

    def test_child_logger_records_reach_file(self) -> None:
        log_path = setup_logging()
        logging.getLogger(f"{ROOT_LOGGER}.aggregator").debug(
            "grouped %d listings", 7
        )
        for handler in self.root_logger.handlers:
            handler.flush()
        self.assertIn(
            "grouped 7 listings", log_path.read_text(encoding="utf-8")
        )


if __name__ == "__main__":
    unittest.main()
