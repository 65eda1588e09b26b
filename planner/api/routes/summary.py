"""Route summary endpoint: distance, fuel and optional road geometry."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from planner.api.deps import get_ready_planner
from planner.engine import RoutePlanner

router = APIRouter(prefix="/route", tags=["route"])


@router.get("")
async def get_route_summary(
    planner: RoutePlanner = Depends(get_ready_planner),
) -> dict:
    """Served from the route cache while the stop sequence is unchanged.

    ``path_geometry`` is absent when the straight-line fallback was used.
    """
    summary = await planner.summary()
    return summary.to_document()
