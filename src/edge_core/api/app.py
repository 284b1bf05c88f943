# src/edge_core/api/app.py
"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from src.edge_core import __version__
from src.edge_core.api.routers import backtest, market, physics, signals
from src.edge_core.config.settings import Environment, Settings, get_settings
from src.edge_core.data.market_data import (
    ApiKeyRotator,
    MarketDataProvider,
    TwelveDataProvider,
)
from src.edge_core.logging_utils import get_logger

logger = get_logger(__name__)


def _provider_from_settings(settings: Settings) -> MarketDataProvider | None:
    if not settings.twelve_data_api_keys:
        logger.warning("No Twelve Data API keys configured; provider-backed endpoints return 503")
        return None
    return TwelveDataProvider(
        key_rotator=ApiKeyRotator(settings.twelve_data_api_keys),
        base_url=settings.twelve_data_base_url,
        output_size=settings.market_data_output_size,
        timeout=settings.request_timeout_seconds,
    )


def create_app(provider: MarketDataProvider | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    In DEV mode the app runs with debug enabled (tracebacks on unhandled
    errors); BACKTEST mode keeps plain 500 responses.

    Args:
        provider: Market data provider used when a request carries no
            history. Default: a TwelveDataProvider built from settings, or
            None when no API keys are configured.

    Returns:
        Configured FastAPI instance with all routers included
    """
    settings = get_settings()
    app = FastAPI(
        title="Neural Edge Engine API",
        description="Market physics, ensemble signals and walk-forward backtests",
        version=__version__,
        debug=settings.environment is Environment.DEV,
    )
    app.state.provider = provider if provider is not None else _provider_from_settings(settings)
    logger.info(f"API created: environment={settings.environment.value}, seed={settings.default_seed}")

    # Include routers under /api/v1 prefix
    app.include_router(physics.router, prefix="/api/v1", tags=["physics"])
    app.include_router(signals.router, prefix="/api/v1", tags=["signals"])
    app.include_router(backtest.router, prefix="/api/v1", tags=["backtest"])
    app.include_router(market.router, prefix="/api/v1", tags=["market"])

    return app
