"""Ensemble signal endpoint."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from src.edge_core.api.errors import to_http_exception
from src.edge_core.api.models import (
    EnsembleResponse,
    ModelSignalModel,
    PhysicsResponse,
    WindowRequest,
    to_points,
)
from src.edge_core.data.contracts import validate_observations
from src.edge_core.errors import EdgeCoreError
from src.edge_core.features.physics import compute_physics
from src.edge_core.logging_utils import get_logger
from src.edge_core.signals.ensemble import (
    aggregate_consensus,
    has_momentum_mismatch,
    run_ensemble,
)
from src.edge_core.utils.random_state import seed_or_default

router = APIRouter()
logger = get_logger(__name__)


@router.post("/ensemble", response_model=EnsembleResponse)
def post_ensemble(request: WindowRequest) -> EnsembleResponse:
    """Train both predictors on the window and return their signals.

    Short windows produce HOLD signals with confidence 0 (and a NEUTRAL
    consensus) rather than an error.

    Raises:
        HTTPException: 422 for invalid observations, 500 if training fails
    """
    points = to_points(request.window)
    try:
        validate_observations(points)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    try:
        forest, lstm = run_ensemble(points, seed=seed_or_default(request.seed))
    except EdgeCoreError as e:
        logger.error(f"Ensemble failed for a window of {len(points)} points: {e}")
        raise to_http_exception(e) from e

    physics = compute_physics(points)
    direction = aggregate_consensus(forest, lstm).direction

    return EnsembleResponse(
        forest=ModelSignalModel(**forest.to_dict()),
        lstm=ModelSignalModel(**lstm.to_dict()),
        consensus=direction,
        physics=PhysicsResponse(**physics.to_dict()),
        momentum_mismatch=has_momentum_mismatch(direction, physics),
    )
