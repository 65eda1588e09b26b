"""Stop, Base, StopsDocument: the editable part of a delivery route.

A ``Stop`` is a mid-route delivery point owned by the user.
The ``Base`` is the fixed start/end point resolved once per session.

``StopsDocument`` is the **persisted** shape:
``{"stops": [{id, lat, lng, city}], "fuelEfficiencyKmPerLiter": n}``
"""

import logging
import math
import uuid
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field, field_validator, model_validator

from planner.contracts.common import Coordinate, DocumentModel

logger = logging.getLogger(__name__)

BASE_START_ID = "BASE_START"
BASE_END_ID = "BASE_END"


def new_stop_id() -> str:
    """Random opaque stop ID, never reused within a session."""
    return uuid.uuid4().hex


class Stop(DocumentModel):
    """A delivery point in the mid-route list.

    ``id`` is the sole key for lookup and removal; two stops may share
    coordinates but never an ``id``.
    """

    id: str = Field(default_factory=new_stop_id, min_length=1)
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    city: str = ""

    @field_validator("city", mode="before")
    @classmethod
    def default_city(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class Base(DocumentModel):
    """The depot every route starts from and returns to."""

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    name: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)

    def as_stop(self, stop_id: str) -> Stop:
        return Stop(id=stop_id, lat=self.lat, lng=self.lng, city=self.name)


def _coerce_float(value: Any) -> float | None:
    """Coerce numbers and numeric strings; anything else is ``None``."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


class StopsDocument(DocumentModel):
    """Persisted stop list and fuel efficiency.

    Hydration is tolerant: missing IDs are generated, numeric strings are
    coerced, missing cities default to ``""``.  Stops whose coordinates
    cannot be recovered are dropped.  The legacy keys ``deliveries`` and
    ``kmpl`` are accepted on read.
    """

    stops: list[Stop] = Field(default_factory=list)
    fuel_efficiency_km_per_liter: float = Field(
        default=0.0,
        ge=0,
        alias="fuelEfficiencyKmPerLiter",
        validation_alias=AliasChoices(
            "fuelEfficiencyKmPerLiter", "fuel_efficiency_km_per_liter"
        ),
    )

    @model_validator(mode="before")
    @classmethod
    def tolerate_malformed(cls, data: Any) -> dict[str, Any]:
        if not isinstance(data, dict):
            return {}

        raw_stops = data.get("stops", data.get("deliveries"))
        if not isinstance(raw_stops, list):
            raw_stops = []

        stops: list[dict[str, Any]] = []
        seen_ids: set[str] = set()
        for item in raw_stops:
            if isinstance(item, Stop):
                item = item.model_dump()
            if not isinstance(item, dict):
                logger.warning("Dropping non-object stop entry: %r", item)
                continue
            lat = _coerce_float(item.get("lat"))
            lng = _coerce_float(item.get("lng"))
            if lat is None or lng is None or not -90 <= lat <= 90 or not -180 <= lng <= 180:
                logger.warning("Dropping stop with invalid coordinates: %r", item)
                continue
            stop_id = str(item.get("id") or "").strip()
            if not stop_id or stop_id in seen_ids:
                stop_id = new_stop_id()
            seen_ids.add(stop_id)
            city = item.get("city")
            stops.append(
                {
                    "id": stop_id,
                    "lat": lat,
                    "lng": lng,
                    "city": city if isinstance(city, str) else "",
                }
            )

        efficiency = None
        for key in ("fuelEfficiencyKmPerLiter", "fuel_efficiency_km_per_liter", "kmpl"):
            if key in data:
                efficiency = _coerce_float(data[key])
                break
        if efficiency is None or efficiency < 0:
            efficiency = 0.0

        return {"stops": stops, "fuelEfficiencyKmPerLiter": efficiency}
