# src/config/logging_config.py

"""Per-run logging for whisky_offers.

A CLI run or an API process writes everything logged under
``whisky_offers.*`` to ``logs/run_<YYYYMMDD_HHMMSS>.log`` at DEBUG, while
stderr only shows records at ``Settings.CONSOLE_LOG_LEVEL`` and above so
JSON written to stdout stays parseable.  Only the newest
``Settings.LOG_RETENTION`` run files are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER = "whisky_offers"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _existing_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def _prune_old_runs(logs_dir: Path, keep: int) -> None:
    """Delete all but the newest *keep* ``run_*.log`` files."""
    runs = sorted(logs_dir.glob("run_*.log"))
    for stale in runs[: max(len(runs) - keep, 0)]:
        try:
            stale.unlink()
        except OSError as exc:
            logging.getLogger(ROOT_LOGGER).debug(
                "Could not remove old log %s: %s", stale, exc
            )


def setup_logging() -> Path:
    """Attach the run file and stderr handlers to the ``whisky_offers`` logger.

    Safe to call more than once: later calls return the file chosen by the
    first one.
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)

    current = _existing_log_file(root_logger)
    if current is not None:
        return current

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    if Settings.LOG_RETENTION > 0:
        _prune_old_runs(logs_dir, Settings.LOG_RETENTION - 1)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{stamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(Settings.CONSOLE_LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.info("Logging to %s", log_file)
    return log_file
