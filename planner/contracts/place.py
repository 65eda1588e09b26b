"""PlaceMatch: best forward-geocoding match for a free-text query."""

from pydantic import BaseModel, ConfigDict, Field

from planner.contracts.common import Coordinate


class PlaceMatch(BaseModel):
    """Normalized geocoder answer.

    ``city`` is already upper-cased and may be empty when the service
    returned no usable address component.
    """

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)
    city: str = ""
    display_label: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)
