"""FastAPI backend modules.

Current modules:
- app: create_app() - FastAPI application factory
- models: Pydantic models for API requests/responses
- errors: pipeline error -> HTTP status mapping
- routers: physics, signals (ensemble), backtest, market
"""
