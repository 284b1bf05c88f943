"""Request dependencies shared by the routers."""
from __future__ import annotations

from fastapi import HTTPException, Request

from src.edge_core.data.market_data import MarketDataProvider


def get_provider(request: Request) -> MarketDataProvider:
    """Market data provider configured on the app.

    Raises:
        HTTPException: 503 if no provider is configured (no API keys)
    """
    provider = getattr(request.app.state, "provider", None)
    if provider is None:
        raise HTTPException(
            status_code=503,
            detail="No market data provider configured. Set EDGE_TWELVE_DATA_API_KEYS.",
        )
    return provider
