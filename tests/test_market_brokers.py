# tests/test_market_brokers.py
"""Tests for broker profiles."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.features.physics import NEUTRAL_PHYSICS
from src.edge_core.market.brokers import (
    BROKER_DEFINITIONS,
    BrokerId,
    PhysicsBias,
    get_broker_profile,
    is_otc,
)

pytestmark = pytest.mark.unit

PHYSICS = replace(NEUTRAL_PHYSICS, spread=0.00042)


class TestGetBrokerProfile:
    """Tests for get_broker_profile()."""

    def test_definitions(self):
        assert BROKER_DEFINITIONS[BrokerId.POCKET_OPTION].reliability_score == 82
        assert BROKER_DEFINITIONS[BrokerId.IQ_OPTION].physics_bias is PhysicsBias.SMOOTH
        assert BROKER_DEFINITIONS[BrokerId.QUOTEX].physics_bias is PhysicsBias.NOISY
        assert BROKER_DEFINITIONS[BrokerId.INSTITUTIONAL].reliability_score == 98

    def test_regular_symbol(self):
        profile = get_broker_profile("EUR/USD", PHYSICS, BrokerId.IQ_OPTION)
        assert profile.name == "IQ Option"
        assert profile.tick_resolution == 2.0
        assert profile.observed_spread == 0.00042
        assert profile.max_expiry == 3600
        assert not profile.is_synthetic
        assert profile.reliability_score == 88
        assert profile.physics_bias is PhysicsBias.SMOOTH

    def test_otc_symbol(self):
        profile = get_broker_profile("EUR/USD (OTC)", PHYSICS, "IQ_OPTION")
        assert is_otc("EUR/USD (OTC)")
        assert profile.max_expiry == 300
        assert profile.is_synthetic
        assert profile.reliability_score == 73
        assert profile.physics_bias is PhysicsBias.SYNTHETIC

    def test_noisy_broker_tick_resolution(self):
        profile = get_broker_profile("EUR/USD", PHYSICS, BrokerId.QUOTEX)
        assert profile.tick_resolution == 0.5

    def test_unknown_broker(self):
        with pytest.raises(ValueError):
            get_broker_profile("EUR/USD", PHYSICS, "NOPE")
