"""Market context endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.edge_core.api.dependencies import get_provider
from src.edge_core.api.errors import to_http_exception
from src.edge_core.api.models import (
    BrokerProfileModel,
    IndicatorModel,
    MarketSessionModel,
    MarketStatusResponse,
    PhysicsResponse,
    SymbolProfileResponse,
)
from src.edge_core.data.market_data import MarketDataProvider
from src.edge_core.errors import EdgeCoreError
from src.edge_core.features.physics import compute_physics
from src.edge_core.logging_utils import get_logger
from src.edge_core.market.brokers import BrokerId, get_broker_profile
from src.edge_core.market.indicators import recommend_indicators
from src.edge_core.market.sessions import get_global_market_status, is_asset_open

router = APIRouter()
logger = get_logger(__name__)


@router.get("/market/status", response_model=MarketStatusResponse)
def get_market_status() -> MarketStatusResponse:
    """Current open/closed state of the major trading sessions."""
    status = get_global_market_status()
    return MarketStatusResponse(
        sessions=[MarketSessionModel(name=s.name, is_open=s.is_open) for s in status.sessions],
        volatility_bias=status.volatility_bias,
        recommendation=status.recommendation,
    )


@router.get("/market/{symbol:path}/profile", response_model=SymbolProfileResponse)
def get_symbol_profile(
    symbol: str,
    timeframe: str = Query(default="1min", description="Bar timeframe"),
    broker: BrokerId = Query(default=BrokerId.IQ_OPTION, description="Broker profile"),
    provider: MarketDataProvider = Depends(get_provider),
) -> SymbolProfileResponse:
    """Physics, broker profile and indicator recommendation for a symbol.

    Symbols may contain slashes, e.g. /market/EUR/USD/profile.

    Raises:
        HTTPException: 422 for an unsupported timeframe, 503 if the provider
            is unavailable
    """
    try:
        history = provider.fetch(symbol, timeframe)
    except EdgeCoreError as e:
        logger.warning(f"Profile fetch for {symbol} failed: {e}")
        raise to_http_exception(e) from e
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    physics = compute_physics(history)
    profile = get_broker_profile(symbol, physics, broker)
    indicators = recommend_indicators(symbol, physics)
    logger.info(
        f"Profile {symbol} ({timeframe}, {profile.broker_id.value}): "
        f"momentum={physics.momentum_direction.value}, indicators enabled={indicators.enabled_count}"
    )

    return SymbolProfileResponse(
        symbol=symbol,
        timeframe=timeframe,
        is_open=is_asset_open(symbol),
        physics=PhysicsResponse(**physics.to_dict()),
        broker=BrokerProfileModel(
            broker_id=profile.broker_id,
            name=profile.name,
            tick_resolution=profile.tick_resolution,
            observed_spread=profile.observed_spread,
            max_expiry=profile.max_expiry,
            is_synthetic=profile.is_synthetic,
            reliability_score=profile.reliability_score,
            physics_bias=profile.physics_bias,
        ),
        indicators=IndicatorModel(**indicators.to_dict()),
    )
