"""Market data providers.

A provider turns (symbol, timeframe) into an ascending, de-duplicated list of
ObservationPoint. Provider failures surface as UpstreamUnavailableError so the
pipeline can tell them apart from InsufficientDataError.

API keys are handed out by an ApiKeyRotator owned by the caller. Sharing one
rotator between providers spreads requests across the key pool; giving each
provider its own keeps their rotation independent.

Example:
    >>> from src.edge_core.data.market_data import ApiKeyRotator, TwelveDataProvider
    >>> provider = TwelveDataProvider(ApiKeyRotator(["key1", "key2"]))
    >>> history = provider.fetch("EUR/USD", "1min")
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from typing import Any, Protocol

import pandas as pd
import requests

from src.edge_core.config.constants import (
    DEFAULT_OUTPUT_SIZE,
    DEFAULT_REQUEST_TIMEOUT,
    OTC_SUFFIX,
    TWELVE_DATA_BASE_URL,
)
from src.edge_core.data.contracts import ObservationPoint
from src.edge_core.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

SUPPORTED_TIMEFRAMES = ("1min", "5min", "15min", "1h", "4h")


class MarketDataProvider(Protocol):
    """Anything that can fetch an ordered observation history."""

    def fetch(self, symbol: str, timeframe: str) -> list[ObservationPoint]:
        ...


class ApiKeyRotator:
    """Round-robin selector over a pool of API keys.

    Thread-safe: concurrent fetches each receive the next key in order.
    """

    def __init__(self, keys: Sequence[str]) -> None:
        cleaned = [k for k in keys if k]
        if not cleaned:
            raise ValueError("ApiKeyRotator requires at least one API key")
        self._keys = list(cleaned)
        self._index = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._keys)

    def next_key(self) -> str:
        with self._lock:
            key = self._keys[self._index]
            self._index = (self._index + 1) % len(self._keys)
        return key


def clean_symbol(symbol: str) -> str:
    """Strip the OTC suffix; OTC pairs are priced from the underlying pair."""
    return symbol.replace(OTC_SUFFIX, "")


def parse_time_series(values: list[dict[str, Any]]) -> list[ObservationPoint]:
    """Convert Twelve Data ``values`` rows (newest first) into observations.

    Missing volume becomes 0; missing high/low fall back to the close. Rows
    are returned ascending by time with duplicate timestamps dropped (the
    first occurrence wins).
    """
    if not values:
        return []

    df = pd.DataFrame(values)
    df["timestamp"] = df["datetime"]
    df["close"] = pd.to_numeric(df["close"], errors="coerce")
    for col in ("volume", "high", "low"):
        if col not in df.columns:
            df[col] = pd.NA
        df[col] = pd.to_numeric(df[col], errors="coerce")
    df["volume"] = df["volume"].fillna(0.0)
    df["high"] = df["high"].fillna(df["close"])
    df["low"] = df["low"].fillna(df["close"])

    df = (
        df.dropna(subset=["close"])
        .drop_duplicates(subset="timestamp", keep="first")
        .sort_values("timestamp", kind="stable")
        .reset_index(drop=True)
    )

    return [
        ObservationPoint(
            time=row.timestamp,
            price=float(row.close),
            volume=float(row.volume),
            high=float(row.high),
            low=float(row.low),
        )
        for row in df.itertuples(index=False)
    ]


class TwelveDataProvider:
    """Twelve Data ``time_series`` client.

    Args:
        key_rotator: Injected selector handing out one API key per request
        base_url: REST base URL (default: https://api.twelvedata.com)
        output_size: Number of bars requested (default: 100)
        timeout: HTTP timeout in seconds (default: 30)
        session: Optional requests.Session (tests inject a fake)
    """

    name = "twelve_data"

    def __init__(
        self,
        key_rotator: ApiKeyRotator,
        base_url: str = TWELVE_DATA_BASE_URL,
        output_size: int = DEFAULT_OUTPUT_SIZE,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.key_rotator = key_rotator
        self.base_url = base_url.rstrip("/")
        self.output_size = output_size
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, symbol: str, timeframe: str = "1min") -> list[ObservationPoint]:
        """Fetch the most recent ``output_size`` bars for ``symbol``.

        Raises:
            ValueError: If ``timeframe`` is not supported
            UpstreamUnavailableError: If the request fails or the response
                carries no ``values``
        """
        if timeframe not in SUPPORTED_TIMEFRAMES:
            raise ValueError(
                f"Unsupported timeframe: {timeframe}. Supported: {SUPPORTED_TIMEFRAMES}"
            )

        params = {
            "symbol": clean_symbol(symbol),
            "interval": timeframe,
            "apikey": self.key_rotator.next_key(),
            "outputsize": self.output_size,
        }

        try:
            response = self.session.get(
                f"{self.base_url}/time_series", params=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Market data request failed for {symbol} ({timeframe}): {e}")
            raise UpstreamUnavailableError(self.name, symbol, str(e)) from e

        values = payload.get("values") if isinstance(payload, dict) else None
        if not values:
            message = "no values in response"
            if isinstance(payload, dict) and payload.get("message"):
                message = str(payload["message"])
            logger.warning(f"Market data unavailable for {symbol} ({timeframe}): {message}")
            raise UpstreamUnavailableError(self.name, symbol, message)

        try:
            points = parse_time_series(values)
        except (KeyError, TypeError) as e:
            logger.warning(f"Malformed market data for {symbol} ({timeframe}): {e!r}")
            raise UpstreamUnavailableError(self.name, symbol, f"malformed response: {e!r}") from e
        logger.info(f"Fetched {len(points)} bars for {symbol} ({timeframe})")
        return points
