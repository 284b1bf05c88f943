"""Cooperative cancellation for long-running simulations."""
from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe flag a caller sets to abort a running backtest.

    The simulator checks the token once per loop index, so a cancelled run
    stops between iterations, never in the middle of model training.

    Example:
        >>> token = CancellationToken()
        >>> token.cancelled
        False
        >>> token.cancel()
        >>> token.cancelled
        True
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
