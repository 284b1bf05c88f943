"""Market data contracts and providers.

This package handles:
- ObservationPoint, the unit of every price series
- DataFrame interchange for observation sequences
- Market data providers with injectable API-key rotation
"""

from src.edge_core.data.contracts import (
    ObservationPoint,
    observations_from_frame,
    observations_to_frame,
    validate_observations,
)
from src.edge_core.data.market_data import (
    ApiKeyRotator,
    MarketDataProvider,
    TwelveDataProvider,
)

__all__ = [
    "ObservationPoint",
    "observations_from_frame",
    "observations_to_frame",
    "validate_observations",
    "ApiKeyRotator",
    "MarketDataProvider",
    "TwelveDataProvider",
]
