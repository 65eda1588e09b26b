"""Base classes and shared types for planner contracts.

Unit conventions (all contracts and API responses):
- **Distances**: kilometers: suffix ``_km``
- **Fuel volumes**: liters: prefix/suffix ``liters``
- **Fuel efficiency**: kilometers per liter: suffix ``_km_per_liter``
- **Coordinates**: WGS84 decimal degrees, ``lat``/``lng``

External services may use other units (OSRM reports meters) but must
convert to the above before returning to the engine.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentModel(BaseModel):
    """Base model with JSON-document-friendly serialization.

    - Enums serialize as string values.
    - ``to_document()`` produces a JSON-safe dict using field aliases.
    - ``from_document()`` hydrates from such a dict.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_document(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "DocumentModel":
        """Create model instance from a document dict."""
        return cls.model_validate(data)


class Coordinate(BaseModel):
    """WGS84 geographic coordinate."""

    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)

    model_config = ConfigDict(frozen=True)
