"""Neural Edge Engine - Core Backend Package.

This package provides the signal research pipeline:
- Market data contracts and provider clients
- Window features and market "physics" descriptors
- Two self-training predictors (pattern classifier, sequence regressor)
- Consensus signal aggregation
- Walk-forward backtest simulation
- FastAPI backend exposing physics, ensemble and backtest operations

Main modules:
- data: Observation contracts and market data providers
- features: Feature vectors and physics descriptors
- ml: Predictor models (trained fresh on every call)
- signals: Model signals and consensus rule
- qa: Backtest simulator
- experiments: Batches of independent backtests
- market: Trading sessions, broker profiles, indicator recommendations
- api: FastAPI application and routers
- config: Central configuration (settings, model configs, constants)
"""

__version__ = "0.1.0"
