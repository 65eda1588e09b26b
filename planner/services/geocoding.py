"""Nominatim (OpenStreetMap) geocoding client.

Forward geocoding turns a free-text query into a ``PlaceMatch``; reverse
geocoding turns a coordinate into a city-level label.  An empty result
set is returned as ``None``/``""``; transport, HTTP and payload problems
raise ``ServiceError``.
"""

from __future__ import annotations

import os

import httpx

from planner.contracts.place import PlaceMatch
from planner.errors import InvalidInputError, ServiceError

BASE_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "delivery-route-planner/0.1")
LANGUAGE = os.getenv("GEOCODER_LANGUAGE", "pt-BR")

SERVICE_NAME = "geocoder"

# Address components tried in order to label a place
_CITY_KEYS = (
    "city",
    "town",
    "village",
    "municipality",
    "county",
    "state",
    "region",
)


def pick_city(address: dict) -> str:
    """City-level label from Nominatim address details, upper-cased."""
    for key in _CITY_KEYS:
        value = address.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
    return ""


class NominatimClient:
    """Async HTTP client for Nominatim search and reverse lookups."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = BASE_URL,
        language: str = LANGUAGE,
        user_agent: str = USER_AGENT,
    ):
        self._client = http_client or httpx.AsyncClient(timeout=15.0)
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Accept": "application/json",
            "Accept-Language": language,
            "User-Agent": user_agent,
        }

    async def forward_geocode(self, query: str) -> PlaceMatch | None:
        """Best match for *query*, or ``None`` when nothing was found."""
        query = (query or "").strip()
        if not query:
            raise InvalidInputError("Search query must not be empty")

        data = await self._get_json(
            "/search",
            {"q": query, "format": "json", "limit": 1, "addressdetails": 1},
        )
        if not isinstance(data, list):
            raise ServiceError(SERVICE_NAME, "Unexpected search payload")
        if not data:
            return None
        return _parse_place(data[0])

    async def reverse_geocode(self, lat: float, lng: float) -> str:
        """City-level label for a coordinate, ``""`` when none applies."""
        data = await self._get_json(
            "/reverse",
            {
                "format": "jsonv2",
                "lat": lat,
                "lon": lng,
                "zoom": 10,
                "addressdetails": 1,
            },
        )
        if not isinstance(data, dict):
            raise ServiceError(SERVICE_NAME, "Unexpected reverse payload")
        address = data.get("address") or {}
        if not isinstance(address, dict):
            return ""
        return pick_city(address)

    async def _get_json(self, path: str, params: dict):
        try:
            resp = await self._client.get(
                f"{self._base_url}{path}", params=params, headers=self._headers
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            raise ServiceError(
                SERVICE_NAME, f"HTTP {exc.response.status_code} from {path}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ServiceError(SERVICE_NAME, f"Request to {path} failed: {exc}") from exc
        except ValueError as exc:
            raise ServiceError(SERVICE_NAME, f"Invalid JSON from {path}") from exc


def _parse_place(raw) -> PlaceMatch:
    """Parse a single Nominatim search entry into a PlaceMatch."""
    try:
        lat = float(raw["lat"])
        lng = float(raw["lon"])
        address = raw.get("address") or {}
        return PlaceMatch(
            lat=lat,
            lng=lng,
            city=pick_city(address) if isinstance(address, dict) else "",
            display_label=str(raw.get("display_name") or ""),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ServiceError(SERVICE_NAME, f"Malformed search result: {exc}") from exc
