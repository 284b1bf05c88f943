# src/edge_core/logging_config.py
"""Central logging configuration for the Neural Edge Engine.

One call to setup_logging() per process (API server, backtest CLI) wires:
- a console handler with short "[LEVEL] message" lines
- a file handler writing logs/<run_id>.log, each record tagged with the run id
- WARNING as the floor for chatty third-party loggers (urllib3, torch, ...)

Modules never configure handlers themselves; they only call
logging.getLogger(__name__).

Usage:
    >>> from src.edge_core.logging_config import generate_run_id, setup_logging
    >>> log_file = setup_logging(run_id=generate_run_id("backtest"), level="DEBUG")
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Literal
from uuid import uuid4

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | [%(run_id)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = ("urllib3", "requests", "httpx", "torch", "uvicorn.access")


class RunIDFilter(logging.Filter):
    """Stamp every record with the run id so the file format can print it."""

    def __init__(self, run_id: str):
        super().__init__()
        self.run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id  # type: ignore[attr-defined]
        return True


def generate_run_id(prefix: str = "run") -> str:
    """Generate a unique Run-ID: ``{prefix}_{YYYYMMDD}_{HHMMSS}_{8 hex chars}``.

    Example:
        >>> generate_run_id("backtest")
        'backtest_20250115_143022_a1b2c3d4'
    """
    return f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}_{uuid4().hex[:8]}"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(log_file: Path, run_id: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    # Attached to the handler: root-logger filters are skipped for records
    # propagated from child loggers
    handler.addFilter(RunIDFilter(run_id))
    return handler


def setup_logging(
    run_id: str | None = None,
    level: LogLevel = "INFO",
    log_dir: Path | str | None = None,
) -> Path:
    """Install console and per-run file logging on the root logger.

    Args:
        run_id: Run identifier used in the file name and every file record
            (default: generate_run_id())
        level: Logging level, default: INFO
        log_dir: Directory for the log file (default: settings.logs_dir)

    Returns:
        Path of the log file receiving this run's records

    Side effects:
        Creates ``log_dir`` if needed; closes and replaces any handlers already
        installed on the root logger.
    """
    run_id = run_id or generate_run_id()
    if log_dir is None:
        from src.edge_core.config.settings import get_settings

        log_dir = get_settings().logs_dir
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{run_id}.log"

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    root.setLevel(numeric_level)
    root.addHandler(_console_handler(numeric_level))
    root.addHandler(_file_handler(log_file, run_id, numeric_level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).info(
        f"Logging initialized: Run-ID={run_id}, Level={level}, Log file={log_file}"
    )
    return log_file
