"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request

from planner.engine import RoutePlanner


# ------------------------------------------------------------------
# Planner session (singleton from app.state)
# ------------------------------------------------------------------


def get_planner(request: Request) -> RoutePlanner:
    return request.app.state.planner


def get_ready_planner(
    planner: RoutePlanner = Depends(get_planner),
) -> RoutePlanner:
    """The planner, once the base is known. 503 until then."""
    if planner.base is None:
        raise HTTPException(
            status_code=503,
            detail="Base location is not resolved; the service cannot plan routes yet",
        )
    return planner
