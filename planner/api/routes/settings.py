"""Vehicle settings endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from planner.api.deps import get_planner
from planner.engine import RoutePlanner

router = APIRouter(prefix="/settings", tags=["settings"])


class FuelEfficiency(BaseModel):
    km_per_liter: float = Field(..., ge=0, description="0 disables the fuel estimate")


@router.get("/fuel-efficiency")
async def get_fuel_efficiency(
    planner: RoutePlanner = Depends(get_planner),
) -> dict:
    return {"km_per_liter": planner.fuel_efficiency_km_per_liter}


@router.put("/fuel-efficiency")
async def set_fuel_efficiency(
    body: FuelEfficiency,
    planner: RoutePlanner = Depends(get_planner),
) -> dict:
    planner.set_fuel_efficiency(body.km_per_liter)
    return {"km_per_liter": planner.fuel_efficiency_km_per_liter}
