# tests/test_utils_random_state.py
"""Tests for seeding, cancellation and step timing utilities."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from src.edge_core.config.settings import reset_settings
from src.edge_core.utils import (
    CancellationToken,
    resolve_seed,
    seed_or_default,
    spawn_seeds,
    timed_step,
)

pytestmark = pytest.mark.unit


class TestSeeds:
    """Tests for request-scoped seeding."""

    def test_spawn_is_deterministic(self):
        assert spawn_seeds(42, 3) == spawn_seeds(42, 3)
        assert len(set(spawn_seeds(42, 3))) == 3

    def test_spawn_zero(self):
        assert spawn_seeds(1, 0) == []

    def test_spawn_negative(self):
        with pytest.raises(ValueError):
            spawn_seeds(1, -1)

    def test_different_roots_differ(self):
        assert spawn_seeds(1, 2) != spawn_seeds(2, 2)

    def test_resolve_seed(self):
        assert resolve_seed(7) == 7
        assert isinstance(resolve_seed(None), int)

    def test_explicit_seed_wins(self, monkeypatch):
        monkeypatch.setenv("EDGE_DEFAULT_SEED", "42")
        reset_settings()
        assert seed_or_default(7) == 7
        assert seed_or_default(0) == 0

    def test_none_without_default_stays_none(self):
        assert seed_or_default(None) is None

    def test_none_falls_back_to_configured_default(self, monkeypatch):
        monkeypatch.setenv("EDGE_DEFAULT_SEED", "42")
        reset_settings()
        assert seed_or_default(None) == 42


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_cancel_from_another_thread(self):
        token = CancellationToken()
        assert not token.cancelled
        thread = threading.Thread(target=token.cancel)
        thread.start()
        thread.join()
        assert token.cancelled


class TestTimedStep:
    """Tests for timed_step()."""

    def test_records_timing(self):
        timings: dict = {}
        with timed_step("fit", timings, meta={"rows": 3}):
            pass
        record = timings["fit"]
        assert record.duration_ms >= 0
        assert record.meta == {"rows": 3}
        assert not record.failed

    def test_records_on_error(self):
        timings: dict = {}
        with pytest.raises(RuntimeError):
            with timed_step("fit", timings):
                raise RuntimeError("boom")
        assert timings["fit"].failed
        assert timings["fit"].duration_ms is not None
