"""RouteResult, RouteCacheEntry, RouteSummary: computed route information.

All models here are **calculated** and never persisted.  A result can be
recomputed at any time from the current stop sequence.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field

from planner.contracts.common import DocumentModel
from planner.contracts.enums import RouteSource


class RouteResult(DocumentModel):
    """Length (and optionally shape) of the base → stops → base path.

    ``path_geometry`` is a GeoJSON LineString and is present **only** when
    the road-routing service answered.  Its absence is the sole signal that
    the straight-line fallback was used.
    """

    distance_km: float = Field(..., ge=0)
    path_geometry: dict[str, Any] | None = Field(
        default=None, description="GeoJSON LineString from the routing service"
    )

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def source(self) -> RouteSource:
        if self.path_geometry is None:
            return RouteSource.STRAIGHT_LINE
        return RouteSource.ROAD

    @property
    def used_fallback(self) -> bool:
        return self.path_geometry is None


class RouteCacheEntry(BaseModel):
    """A route result together with the fingerprint it was computed for.

    Replaced as a whole, so a reader never sees a fingerprint paired with
    a result computed for another sequence.
    """

    fingerprint: str
    result: RouteResult

    model_config = ConfigDict(frozen=True)


class RouteSummary(DocumentModel):
    """Figures shown next to the map: stops, kilometers, liters."""

    stop_count: int = Field(..., ge=0, description="Includes both base endpoints")
    distance_km: float = Field(..., ge=0)
    fuel_efficiency_km_per_liter: float = Field(default=0.0, ge=0)
    liters_needed: float = Field(default=0.0, ge=0)
    source: RouteSource = RouteSource.STRAIGHT_LINE
    path_geometry: dict[str, Any] | None = None
