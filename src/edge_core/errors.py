"""Error taxonomy for the signal pipeline.

Callers should treat retryable errors (insufficient data, upstream outages)
as advisory, and TrainingFailureError as an unexpected fault that needs
investigation.
"""
from __future__ import annotations


class EdgeCoreError(Exception):
    """Base class for all pipeline errors."""

    retryable: bool = False


class InsufficientDataError(EdgeCoreError):
    """Raised when a series is shorter than a component's stated minimum.

    Attributes:
        component: Name of the component that rejected the input
        required: Minimum number of observations required
        actual: Number of observations supplied
    """

    retryable = True

    def __init__(self, component: str, required: int, actual: int) -> None:
        self.component = component
        self.required = required
        self.actual = actual
        super().__init__(
            f"{component}: insufficient data depth ({actual} < {required} observations)"
        )


class TrainingFailureError(EdgeCoreError):
    """Raised when a predictor diverges or produces non-finite output."""

    retryable = False

    def __init__(self, model_name: str, message: str) -> None:
        self.model_name = model_name
        super().__init__(f"[{model_name}] training failure: {message}")


class UpstreamUnavailableError(EdgeCoreError):
    """Raised when the market data provider cannot deliver a series."""

    retryable = True

    def __init__(self, provider: str, symbol: str, message: str) -> None:
        self.provider = provider
        self.symbol = symbol
        super().__init__(f"{provider} unavailable for {symbol}: {message}")


class BacktestCancelledError(EdgeCoreError):
    """Raised at an iteration boundary when the caller cancelled a backtest."""

    retryable = True

    def __init__(self, symbol: str, index: int) -> None:
        self.symbol = symbol
        self.index = index
        super().__init__(f"Backtest for {symbol} cancelled before index {index}")
