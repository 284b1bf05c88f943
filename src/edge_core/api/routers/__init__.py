"""API routers: physics, signals, backtest, market."""
