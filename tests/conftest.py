"""Pytest configuration and shared fixtures for the signal pipeline tests."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.config.settings import reset_settings
from src.edge_core.data.contracts import ObservationPoint


def make_points(prices, volumes=None, start_time: int = 1_700_000_000, step: int = 60):
    """Build observations with evenly spaced epoch timestamps."""
    if volumes is None:
        volumes = [100.0] * len(prices)
    return [
        ObservationPoint(time=start_time + i * step, price=float(p), volume=float(v))
        for i, (p, v) in enumerate(zip(prices, volumes))
    ]


@pytest.fixture
def points_factory():
    """Expose make_points to tests."""
    return make_points


@pytest.fixture
def rising_history():
    """100 strictly increasing prices (1.0000 .. 1.0099)."""
    return make_points([1.0 + 0.0001 * i for i in range(100)])


@pytest.fixture
def falling_history():
    """100 strictly decreasing prices."""
    return make_points([2.0 - 0.0001 * i for i in range(100)])


@pytest.fixture
def flat_history():
    """100 identical prices with zero volume."""
    return make_points([1.2345] * 100, volumes=[0.0] * 100)


@pytest.fixture
def random_walk_history():
    """Deterministic 100-point random walk around 1.10 (seed 42)."""
    rng = np.random.default_rng(42)
    steps = rng.normal(0.0, 0.0003, size=100)
    prices = 1.10 + np.cumsum(steps)
    volumes = rng.integers(50, 500, size=100)
    return make_points(prices, volumes)


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep tests independent of the caller's EDGE_* environment."""
    for var in ("EDGE_TWELVE_DATA_API_KEYS", "EDGE_DEFAULT_SEED", "EDGE_ENVIRONMENT"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()
