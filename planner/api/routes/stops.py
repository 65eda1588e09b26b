"""Stop list endpoints: add, remove, drag, reorder, clear."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from planner.api.deps import get_planner, get_ready_planner
from planner.contracts.common import Coordinate
from planner.engine import RoutePlanner

router = APIRouter(prefix="/stops", tags=["stops"])


class StopCreate(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    city: str = ""


class MoveRequest(BaseModel):
    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=0)


@router.get("")
async def list_stops(
    planner: RoutePlanner = Depends(get_planner),
) -> list[dict]:
    """Full sequence: base start, stops in order, base end."""
    return [stop.to_document() for stop in planner.stops.sequence()]


@router.post("", status_code=201)
async def add_stop(
    body: StopCreate,
    planner: RoutePlanner = Depends(get_ready_planner),
) -> dict:
    stop = planner.add_stop(Coordinate(lat=body.lat, lng=body.lng), body.city.strip().upper())
    return stop.to_document()


@router.delete("", status_code=204, response_class=Response)
async def clear_stops(
    planner: RoutePlanner = Depends(get_planner),
) -> Response:
    planner.clear()
    return Response(status_code=204)


@router.post("/move")
async def move_stop(
    body: MoveRequest,
    planner: RoutePlanner = Depends(get_ready_planner),
) -> list[dict]:
    count = len(planner.stops)
    if body.from_index >= count or body.to_index >= count:
        raise HTTPException(
            status_code=400,
            detail=f"Indices must be within 0..{count - 1} for {count} stop(s)",
        )
    planner.move_stop(body.from_index, body.to_index)
    return [stop.to_document() for stop in planner.stops.stops]


@router.put("/{stop_id}/position")
async def move_stop_position(
    stop_id: str,
    body: Coordinate,
    planner: RoutePlanner = Depends(get_ready_planner),
) -> dict:
    if planner.stops.get(stop_id) is None:
        raise HTTPException(status_code=404, detail="Stop not found")
    planner.move_stop_position(stop_id, body)
    return planner.stops.get(stop_id).to_document()


@router.delete("/{stop_id}", status_code=204, response_class=Response)
async def remove_stop(
    stop_id: str,
    planner: RoutePlanner = Depends(get_planner),
) -> Response:
    planner.remove_stop(stop_id)
    return Response(status_code=204)
