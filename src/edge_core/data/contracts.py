"""Observation contracts shared by every pipeline stage.

An observation is one price/volume sample of a market series. Sequences are
plain Python lists ordered ascending by time; pandas frames are supported as
an interchange format (columns: timestamp, close, volume, high, low).
"""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

OBSERVATION_COLUMNS = ["timestamp", "close", "volume", "high", "low"]


@dataclass(frozen=True)
class ObservationPoint:
    """One market observation.

    Attributes:
        time: Ordered timestamp or index (datetime string, pd.Timestamp or int)
        price: Close price
        volume: Traded volume (>= 0, 0 when the provider reports none)
        high: Bar high (defaults to price)
        low: Bar low (defaults to price)
    """

    time: Any
    price: float
    volume: float = 0.0
    high: float | None = None
    low: float | None = None

    def __post_init__(self) -> None:
        if self.high is None:
            object.__setattr__(self, "high", self.price)
        if self.low is None:
            object.__setattr__(self, "low", self.price)


def price_array(points: Sequence[ObservationPoint]) -> np.ndarray:
    """Return the close prices of ``points`` as a float64 array."""
    return np.fromiter((p.price for p in points), dtype="float64", count=len(points))


def volume_array(points: Sequence[ObservationPoint]) -> np.ndarray:
    """Return the volumes of ``points`` as a float64 array."""
    return np.fromiter((p.volume for p in points), dtype="float64", count=len(points))


def validate_observations(points: Sequence[ObservationPoint]) -> None:
    """Check the observation contract.

    Raises:
        ValueError: If a price is not finite, a volume is negative, or a bar's
            high/low do not bracket its price
    """
    for idx, point in enumerate(points):
        if not math.isfinite(point.price):
            raise ValueError(f"Observation {idx} ({point.time}): non-finite price {point.price}")
        if point.volume < 0:
            raise ValueError(f"Observation {idx} ({point.time}): negative volume {point.volume}")
        if point.high < point.price or point.low > point.price:
            raise ValueError(
                f"Observation {idx} ({point.time}): high/low ({point.high}/{point.low}) "
                f"do not bracket price {point.price}"
            )


def observations_from_frame(
    df: pd.DataFrame,
    price_col: str = "close",
    timestamp_col: str = "timestamp",
) -> list[ObservationPoint]:
    """Convert a price DataFrame into an ordered list of observations.

    Args:
        df: DataFrame with at least ``timestamp_col`` and ``price_col``;
            ``volume``, ``high`` and ``low`` are optional
        price_col: Column holding the close price (default: "close")
        timestamp_col: Column holding the timestamp (default: "timestamp")

    Returns:
        Observations sorted ascending by timestamp

    Raises:
        KeyError: If ``timestamp_col`` or ``price_col`` is missing
    """
    for col in (timestamp_col, price_col):
        if col not in df.columns:
            raise KeyError(
                f"Column '{col}' not found. Available columns: {list(df.columns)}"
            )

    frame = df.sort_values(timestamp_col, kind="stable").reset_index(drop=True)
    prices = frame[price_col].astype("float64")
    volumes = (
        frame["volume"].fillna(0.0).astype("float64")
        if "volume" in frame.columns
        else pd.Series(0.0, index=frame.index)
    )
    highs = frame["high"].fillna(prices) if "high" in frame.columns else prices
    lows = frame["low"].fillna(prices) if "low" in frame.columns else prices

    return [
        ObservationPoint(
            time=ts,
            price=float(price),
            volume=float(volume),
            high=float(high),
            low=float(low),
        )
        for ts, price, volume, high, low in zip(
            frame[timestamp_col], prices, volumes, highs, lows
        )
    ]


def observations_to_frame(points: Sequence[ObservationPoint]) -> pd.DataFrame:
    """Convert observations into a DataFrame with OBSERVATION_COLUMNS."""
    return pd.DataFrame(
        {
            "timestamp": [p.time for p in points],
            "close": [p.price for p in points],
            "volume": [p.volume for p in points],
            "high": [p.high for p in points],
            "low": [p.low for p in points],
        },
        columns=OBSERVATION_COLUMNS,
    )
