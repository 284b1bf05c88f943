"""Trading-session status by UTC clock.

Session hours (UTC): SYDNEY 22-07, TOKYO 00-09, LONDON 08-17, NEW YORK 13-22.
All sessions are closed on Saturday and Sunday. Crypto assets trade around the
clock; FX and metals close from Friday 22:00 to Sunday 22:00 UTC.

Functions take an explicit ``now`` so results are reproducible; it defaults to
the current UTC time.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

CRYPTO_TICKERS = (
    "BTC", "ETH", "SOL", "BNB", "XRP", "ADA", "DOT", "DOGE",
    "LINK", "MATIC", "PEPE", "SHIB", "LTC", "AVAX", "TRX", "UNI",
)

# name -> (open hour, close hour), UTC; open > close wraps past midnight
SESSION_HOURS = {
    "SYDNEY": (22, 7),
    "TOKYO": (0, 9),
    "LONDON": (8, 17),
    "NEW YORK": (13, 22),
}

OVERLAP_HOURS = (13, 17)  # London / New York


class VolatilityBias(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


@dataclass(frozen=True)
class MarketSession:
    name: str
    is_open: bool


@dataclass(frozen=True)
class GlobalMarketStatus:
    """Snapshot of session status and the resulting volatility bias."""

    sessions: list[MarketSession] = field(default_factory=list)
    volatility_bias: VolatilityBias = VolatilityBias.LOW
    recommendation: str = ""


def _utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _in_hours(hour: int, start: int, end: int) -> bool:
    if start > end:
        return hour >= start or hour < end
    return start <= hour < end


def is_crypto(symbol: str) -> bool:
    return symbol.startswith(CRYPTO_TICKERS)


def is_asset_open(symbol: str, now: datetime | None = None) -> bool:
    """Whether ``symbol`` is tradable at ``now``."""
    if is_crypto(symbol):
        return True
    ts = _utc(now)
    weekday, hour = ts.weekday(), ts.hour  # Monday=0 .. Sunday=6
    is_weekend = (
        weekday == 5
        or (weekday == 4 and hour >= 22)
        or (weekday == 6 and hour < 22)
    )
    return not is_weekend


def get_global_market_status(now: datetime | None = None) -> GlobalMarketStatus:
    """Open/closed state of the four major sessions and a volatility bias."""
    ts = _utc(now)
    hour = ts.hour
    is_weekend = ts.weekday() >= 5

    sessions = [
        MarketSession(name=name, is_open=not is_weekend and _in_hours(hour, start, end))
        for name, (start, end) in SESSION_HOURS.items()
    ]

    if is_weekend:
        bias = VolatilityBias.LOW
        recommendation = (
            "Weekend: institutional liquidity is offline. "
            "Crypto markets may see elevated manipulation."
        )
    elif _in_hours(hour, *OVERLAP_HOURS):
        bias = VolatilityBias.HIGH
        recommendation = "Peak liquidity: London/New York overlap."
    else:
        bias = VolatilityBias.MEDIUM
        recommendation = "Active markets: standard volatility expected. Follow higher-timeframe trend."

    return GlobalMarketStatus(sessions=sessions, volatility_bias=bias, recommendation=recommendation)
