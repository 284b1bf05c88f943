"""Market context: trading sessions, broker profiles and indicator recommendations."""

from src.edge_core.market.brokers import (
    BROKER_DEFINITIONS,
    BrokerId,
    BrokerProfile,
    PhysicsBias,
    get_broker_profile,
    is_otc,
)
from src.edge_core.market.indicators import IndicatorRecommendation, recommend_indicators
from src.edge_core.market.sessions import (
    GlobalMarketStatus,
    MarketSession,
    VolatilityBias,
    get_global_market_status,
    is_asset_open,
    is_crypto,
)

__all__ = [
    "BROKER_DEFINITIONS",
    "BrokerId",
    "BrokerProfile",
    "GlobalMarketStatus",
    "IndicatorRecommendation",
    "MarketSession",
    "PhysicsBias",
    "VolatilityBias",
    "get_broker_profile",
    "get_global_market_status",
    "is_asset_open",
    "is_crypto",
    "is_otc",
    "recommend_indicators",
]
