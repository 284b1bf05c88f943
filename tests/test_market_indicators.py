# tests/test_market_indicators.py
"""Tests for indicator recommendations."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.features.physics import NEUTRAL_PHYSICS, MomentumDirection
from src.edge_core.market.indicators import recommend_indicators

pytestmark = pytest.mark.unit


class TestRecommendIndicators:
    """Tests for recommend_indicators()."""

    def test_quiet_regular_market(self):
        physics = replace(NEUTRAL_PHYSICS, volatility=0.0002, noise_floor=0.0001)
        rec = recommend_indicators("EUR/USD", physics)

        assert rec.rsi and rec.bollinger_bands and rec.atr and rec.multi_htf
        assert rec.smc and rec.liquidity and rec.vwap and rec.vsa
        assert not rec.manipulation_overlay
        assert not rec.macd and not rec.ichimoku
        assert len(rec.reasoning) == 3
        assert rec.reasoning[0].startswith("LOW NOISE")

    def test_high_noise_enables_manipulation_overlay(self):
        physics = replace(NEUTRAL_PHYSICS, noise_floor=0.0002)
        rec = recommend_indicators("EUR/USD", physics)
        assert rec.manipulation_overlay
        assert "HIGH NOISE [2.00]" in rec.reasoning[0]

    def test_momentum_enables_trend_layers(self):
        physics = replace(NEUTRAL_PHYSICS, momentum_direction=MomentumDirection.BULL, velocity=0.002)
        rec = recommend_indicators("EUR/USD", physics)
        assert rec.macd and rec.ichimoku
        assert any("BULL" in line for line in rec.reasoning)

    def test_otc_disables_volume_layers(self):
        physics = replace(
            NEUTRAL_PHYSICS,
            volatility=0.0004,
            noise_floor=0.0004,
            momentum_direction=MomentumDirection.BEAR,
        )
        rec = recommend_indicators("EUR/USD (OTC)", physics)

        assert not rec.vsa
        assert not rec.smc
        assert not rec.liquidity
        assert not rec.vwap
        assert not rec.ichimoku
        assert rec.macd
        assert any(line.startswith("ALGO SIGNATURE") for line in rec.reasoning)

    def test_otc_smc_needs_volatility(self):
        physics = replace(NEUTRAL_PHYSICS, volatility=0.0006)
        assert recommend_indicators("EUR/USD (OTC)", physics).smc

    def test_volatility_surge(self):
        physics = replace(NEUTRAL_PHYSICS, volatility=0.002)
        rec = recommend_indicators("BTC/USD", physics)
        assert rec.atr
        assert rec.reasoning[-1].startswith("VOLATILITY SURGE")

    def test_to_dict_has_twelve_flags(self):
        data = recommend_indicators("EUR/USD", NEUTRAL_PHYSICS).to_dict()
        assert len([k for k in data if k != "reasoning"]) == 12

    def test_enabled_count_matches_flags(self):
        for symbol in ("EUR/USD", "EUR/USD (OTC)"):
            rec = recommend_indicators(symbol, NEUTRAL_PHYSICS)
            flags = {k: v for k, v in rec.to_dict().items() if k != "reasoning"}
            assert rec.enabled_count == sum(flags.values())
            assert 0 < rec.enabled_count <= 12

    def test_otc_enables_fewer_indicators(self):
        physics = replace(NEUTRAL_PHYSICS, volatility=0.001)
        regular = recommend_indicators("EUR/USD", physics)
        otc = recommend_indicators("EUR/USD (OTC)", physics)
        assert otc.enabled_count < regular.enabled_count
