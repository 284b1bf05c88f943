"""Broker profiles derived from symbol type and market physics."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.edge_core.config.constants import OTC_SUFFIX
from src.edge_core.features.physics import PhysicsDescriptor


class BrokerId(str, Enum):
    POCKET_OPTION = "POCKET_OPTION"
    IQ_OPTION = "IQ_OPTION"
    QUOTEX = "QUOTEX"
    INSTITUTIONAL = "INSTITUTIONAL"


class PhysicsBias(str, Enum):
    SMOOTH = "SMOOTH"
    NOISY = "NOISY"
    INSTITUTIONAL = "INSTITUTIONAL"
    SYNTHETIC = "SYNTHETIC"


@dataclass(frozen=True)
class BrokerDefinition:
    name: str
    reliability_score: int
    physics_bias: PhysicsBias


BROKER_DEFINITIONS: dict[BrokerId, BrokerDefinition] = {
    BrokerId.POCKET_OPTION: BrokerDefinition("Pocket Option", 82, PhysicsBias.SYNTHETIC),
    BrokerId.IQ_OPTION: BrokerDefinition("IQ Option", 88, PhysicsBias.SMOOTH),
    BrokerId.QUOTEX: BrokerDefinition("Quotex", 85, PhysicsBias.NOISY),
    BrokerId.INSTITUTIONAL: BrokerDefinition(
        "Direct LP (Institutional)", 98, PhysicsBias.INSTITUTIONAL
    ),
}

OTC_RELIABILITY_PENALTY = 15
OTC_MAX_EXPIRY_SECONDS = 300
DEFAULT_MAX_EXPIRY_SECONDS = 3600


@dataclass(frozen=True)
class BrokerProfile:
    """Execution characteristics of a broker for one symbol.

    Attributes:
        broker_id: Broker identifier
        name: Display name
        tick_resolution: Seconds between ticks (0.5 for noisy feeds, else 2)
        observed_spread: Spread estimate taken from the physics descriptor
        max_expiry: Longest allowed expiry in seconds
        is_synthetic: True for OTC (broker-generated) prices
        reliability_score: Reliability in [0, 100], reduced for OTC symbols
        physics_bias: Character of the price feed
    """

    broker_id: BrokerId
    name: str
    tick_resolution: float
    observed_spread: float
    max_expiry: int
    is_synthetic: bool
    reliability_score: int
    physics_bias: PhysicsBias


def is_otc(symbol: str) -> bool:
    return OTC_SUFFIX.strip() in symbol


def get_broker_profile(
    symbol: str, physics: PhysicsDescriptor, broker_id: BrokerId | str
) -> BrokerProfile:
    """Build the broker profile for ``symbol``.

    Raises:
        ValueError: If ``broker_id`` is not a known broker
    """
    broker_id = BrokerId(broker_id)
    definition = BROKER_DEFINITIONS[broker_id]
    otc = is_otc(symbol)

    return BrokerProfile(
        broker_id=broker_id,
        name=definition.name,
        tick_resolution=0.5 if definition.physics_bias is PhysicsBias.NOISY else 2.0,
        observed_spread=physics.spread,
        max_expiry=OTC_MAX_EXPIRY_SECONDS if otc else DEFAULT_MAX_EXPIRY_SECONDS,
        is_synthetic=otc,
        reliability_score=(
            definition.reliability_score - OTC_RELIABILITY_PENALTY
            if otc
            else definition.reliability_score
        ),
        physics_bias=PhysicsBias.SYNTHETIC if otc else definition.physics_bias,
    )
