"""Physics endpoint."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from src.edge_core.api.models import PhysicsResponse, WindowRequest, to_points
from src.edge_core.data.contracts import validate_observations
from src.edge_core.features.physics import compute_physics

router = APIRouter()


@router.post("/physics", response_model=PhysicsResponse)
def post_physics(request: WindowRequest) -> PhysicsResponse:
    """Compute the physics descriptor of a window.

    Windows shorter than 20 observations get the neutral descriptor.

    Raises:
        HTTPException: 422 if the observations are invalid
    """
    points = to_points(request.window)
    try:
        validate_observations(points)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return PhysicsResponse(**compute_physics(points).to_dict())
