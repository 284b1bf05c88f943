"""Indicator recommendations from market physics.

A rule table that switches chart overlays on or off depending on noise,
momentum, volatility and whether the symbol is an OTC (broker-synthesized)
instrument. Each rule that fires adds one line of reasoning.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from src.edge_core.features.physics import MomentumDirection, PhysicsDescriptor
from src.edge_core.market.brokers import is_otc

HIGH_NOISE_THRESHOLD = 0.00015
STAIRCASE_NOISE_THRESHOLD = 0.0003
OTC_SMC_VOLATILITY_THRESHOLD = 0.0005
VOLATILITY_SURGE_THRESHOLD = 0.001


@dataclass
class IndicatorRecommendation:
    """Indicator switches plus the reasoning that produced them."""

    rsi: bool = True
    macd: bool = False
    bollinger_bands: bool = True
    ichimoku: bool = False
    smc: bool = False
    vsa: bool = False
    liquidity: bool = False
    multi_htf: bool = True
    neural_cross_check: bool = True
    vwap: bool = False
    atr: bool = True
    manipulation_overlay: bool = False
    reasoning: list[str] = field(default_factory=list)

    @property
    def enabled_count(self) -> int:
        return sum(1 for k, v in asdict(self).items() if k != "reasoning" and v)

    def to_dict(self) -> dict:
        return asdict(self)


def recommend_indicators(symbol: str, physics: PhysicsDescriptor) -> IndicatorRecommendation:
    """Recommend indicators for ``symbol`` given its window physics.

    Args:
        symbol: Market symbol; a "(OTC)" marker flags synthetic pricing
        physics: PhysicsDescriptor of the latest window

    Returns:
        IndicatorRecommendation
    """
    otc = is_otc(symbol)
    rec = IndicatorRecommendation(
        vsa=not otc and physics.volatility > 0,
        smc=not otc,
        liquidity=not otc,
        vwap=not otc,
    )

    if physics.noise_floor > HIGH_NOISE_THRESHOLD:
        rec.manipulation_overlay = True
        rec.bollinger_bands = True
        rec.reasoning.append(
            f"HIGH NOISE [{physics.noise_floor * 10000:.2f}]: broker-side jitter detected. "
            "Activating wick filtering and expansion bands."
        )
    else:
        rec.reasoning.append(
            "LOW NOISE: structure is stable. Manipulation filters suppressed."
        )

    if physics.momentum_direction is not MomentumDirection.FLAT:
        rec.macd = True
        rec.ichimoku = not otc
        rec.reasoning.append(
            f"STRUCTURAL MOMENTUM: {physics.momentum_direction.value} bias "
            f"(velocity {abs(physics.velocity * 1000):.2f}). Activating trend layers."
        )
    else:
        rec.bollinger_bands = True
        rec.reasoning.append(
            "NEUTRAL BIAS: equilibrium detected. Prioritizing mean reversion (BB/RSI)."
        )

    if otc:
        rec.smc = physics.volatility > OTC_SMC_VOLATILITY_THRESHOLD
        rec.vsa = False
        rec.reasoning.append(
            "OTC CONTEXT: synthetic liquidity. VSA disabled to avoid false volume signals."
        )
        if physics.noise_floor > STAIRCASE_NOISE_THRESHOLD:
            rec.reasoning.append(
                "ALGO SIGNATURE: staircase pattern likely. Expansion targets more probable."
            )
    else:
        rec.smc = True
        rec.liquidity = True
        rec.reasoning.append(
            "INSTITUTIONAL CONTEXT: real liquidity pools. SMC and flow layers enabled."
        )

    if physics.volatility > VOLATILITY_SURGE_THRESHOLD:
        rec.atr = True
        rec.reasoning.append(
            "VOLATILITY SURGE: expansion phase. ATR calibrated for wider exits."
        )

    return rec
