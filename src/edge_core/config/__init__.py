"""Configuration package for the Neural Edge Engine.

This package provides:
- `settings.py`: Pydantic Settings-based configuration (environment, paths, provider keys)
- `models.py`: Strict Pydantic models for predictor and backtest parameters
- `constants.py`: Central constants
"""
from __future__ import annotations

from src.edge_core.config.models import BacktestConfig, ClassifierConfig, RegressorConfig
from src.edge_core.config.settings import (
    Environment,
    Settings,
    get_settings,
    reset_settings,
)

__all__ = [
    "BacktestConfig",
    "ClassifierConfig",
    "RegressorConfig",
    "Environment",
    "Settings",
    "get_settings",
    "reset_settings",
]
