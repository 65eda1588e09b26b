"""Road routing through OSRM, with a straight-line fallback.

``OsrmClient.fetch_route`` talks to the service and raises on any
problem.  ``compute_route`` is the error boundary callers use: it always
returns a usable ``RouteResult``, degrading to the sum of great-circle
segments when the road network cannot be queried.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Sequence

import httpx

from planner.contracts.route import RouteResult
from planner.errors import ServiceError
from planner.services.geo import HasLatLng, path_length_km

logger = logging.getLogger(__name__)

BASE_URL = os.getenv("OSRM_URL", "https://router.project-osrm.org")
PROFILE = os.getenv("OSRM_PROFILE", "driving")

SERVICE_NAME = "router"


def format_coordinates(points: Sequence[HasLatLng]) -> str:
    """OSRM path segment: ``lng,lat;lng,lat;...``."""
    return ";".join(f"{p.lng},{p.lat}" for p in points)


class OsrmClient:
    """Async HTTP client for the OSRM ``/route`` service."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = BASE_URL,
        profile: str = PROFILE,
    ):
        self._client = http_client or httpx.AsyncClient(timeout=15.0)
        self._base_url = base_url.rstrip("/")
        self._profile = profile

    async def fetch_route(self, points: Sequence[HasLatLng]) -> RouteResult:
        """Road distance and geometry through *points*, in order."""
        if len(points) < 2:
            raise ValueError("At least two coordinates are required to compute a route")

        url = f"{self._base_url}/route/v1/{self._profile}/{format_coordinates(points)}"
        try:
            resp = await self._client.get(
                url, params={"overview": "full", "geometries": "geojson"}
            )
            data = resp.json()
        except httpx.HTTPError as exc:
            raise ServiceError(SERVICE_NAME, f"Request failed: {exc}") from exc
        except ValueError as exc:
            raise ServiceError(
                SERVICE_NAME, f"Invalid JSON (HTTP {resp.status_code})"
            ) from exc

        # OSRM reports errors in the body, usually alongside a 4xx status
        if not isinstance(data, dict) or data.get("code") != "Ok":
            message = data.get("message", "unknown error") if isinstance(data, dict) else "bad payload"
            raise ServiceError(SERVICE_NAME, f"HTTP {resp.status_code}: {message}")
        return _parse_route(data)


def _parse_route(data: dict) -> RouteResult:
    try:
        route = data["routes"][0]
        meters = float(route["distance"])
        geometry = route["geometry"]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ServiceError(SERVICE_NAME, f"Malformed route payload: {exc}") from exc
    if not math.isfinite(meters) or meters < 0:
        raise ServiceError(SERVICE_NAME, f"Invalid distance: {meters}")
    if not isinstance(geometry, dict):
        raise ServiceError(SERVICE_NAME, "Route geometry is not GeoJSON")
    return RouteResult(distance_km=meters / 1000, path_geometry=geometry)


async def compute_route(
    sequence: Sequence[HasLatLng], router: OsrmClient | None
) -> RouteResult:
    """Route through *sequence*; never raises.

    Fewer than two points give a zero-length result without any request.
    Without a router, or when it fails, the distance is the sum of the
    haversine segments and ``path_geometry`` is ``None``.
    """
    if len(sequence) < 2:
        return RouteResult(distance_km=0.0)

    if router is not None:
        try:
            return await router.fetch_route(sequence)
        except ServiceError as exc:
            logger.warning("Road routing unavailable, using straight line: %s", exc)
        except Exception:
            logger.exception("Road routing failed unexpectedly, using straight line")

    return RouteResult(distance_km=path_length_km(sequence))
