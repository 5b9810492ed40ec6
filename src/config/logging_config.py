# src/config/logging_config.py

"""Per-run timestamped logging configuration for stock_sync.

Each run creates a dedicated log file inside ``logs/``, named with the
launch timestamp (e.g. ``logs/run_20260214_153045.log``).  All
``stock_sync.*`` loggers route through this file handler so that the
fetch, reconcile and apply phases of one run land in the same log.

Every record is tagged with the run id (the launch timestamp) and the
run mode (``sync`` or ``check``), so lines copied out of the file or the
console can be traced back to their run.

The console only receives warnings and errors; progress output is
rendered separately by the CLI runner.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(run_id)s %(run_mode)s | "
    "%(name)s | %(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(levelname)-8s | %(run_mode)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RunContextFilter(logging.Filter):
    """Stamp records with the id and mode of the current run."""

    def __init__(self, run_id: str, run_mode: str) -> None:
        super().__init__()
        self.run_id = run_id
        self.run_mode = run_mode

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        record.run_mode = self.run_mode
        return True


def setup_logging(mode: str = "sync") -> Path:
    """Initialise the root ``stock_sync`` logger for the current run.

    Args:
        mode: ``sync`` for a reconciliation run, ``check`` for the
            single-EAN inspection.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)

    run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = Settings.LOGS_DIR / f"run_{run_id}.log"

    root_logger = logging.getLogger("stock_sync")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls keep the handlers of the first run
    if root_logger.handlers:
        return log_file

    context = RunContextFilter(run_id, mode)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.addFilter(context)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.addFilter(context)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Run %s (%s), log file: %s", run_id, mode, log_file)

    return log_file
