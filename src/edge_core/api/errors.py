"""Mapping of pipeline errors to HTTP responses."""
from __future__ import annotations

from fastapi import HTTPException

from src.edge_core.errors import (
    BacktestCancelledError,
    EdgeCoreError,
    InsufficientDataError,
    TrainingFailureError,
    UpstreamUnavailableError,
)

ERROR_STATUS_CODES: dict[type[EdgeCoreError], int] = {
    InsufficientDataError: 422,
    TrainingFailureError: 500,
    UpstreamUnavailableError: 503,
    BacktestCancelledError: 409,
}


def to_http_exception(error: EdgeCoreError) -> HTTPException:
    """Translate an EdgeCoreError into an HTTPException (500 for unknown subclasses)."""
    status_code = 500
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_type):
            status_code = code
            break
    return HTTPException(
        status_code=status_code,
        detail={
            "error": type(error).__name__,
            "message": str(error),
            "retryable": error.retryable,
        },
    )
