# src/edge_core/logging_utils.py
"""Logging utilities for scripts and API routers."""
from __future__ import annotations

import logging


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    If logging has not been configured yet, this will use Python's default
    logging configuration. For long-running processes, call
    logging_config.setup_logging() first.

    Args:
        name: Logger name (default: "edge_core")

    Returns:
        Logger instance
    """
    if name is None:
        name = "edge_core"
    return logging.getLogger(name)
