"""Tests for OSRM routing and the straight-line fallback."""

from __future__ import annotations

import httpx
import pytest

from planner.contracts.common import Coordinate
from planner.errors import ServiceError
from planner.services.geo import path_length_km
from planner.services.routing import OsrmClient, compute_route, format_coordinates

GUARULHOS = Coordinate(lat=-23.4543, lng=-46.5337)
CAMPINAS = Coordinate(lat=-22.9056, lng=-47.0608)
SANTOS = Coordinate(lat=-23.9608, lng=-46.3336)
SEQUENCE = [GUARULHOS, CAMPINAS, SANTOS, GUARULHOS]

OSRM_RESPONSE = {
    "code": "Ok",
    "routes": [
        {
            "distance": 254321.7,
            "duration": 12000.0,
            "geometry": {
                "type": "LineString",
                "coordinates": [[-46.5337, -23.4543], [-47.0608, -22.9056]],
            },
        }
    ],
    "waypoints": [],
}


def _client(handler) -> OsrmClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OsrmClient(http_client=http, base_url="http://osrm.test")


class TestOsrmClient:
    async def test_parses_distance_and_geometry(self):
        client = _client(lambda req: httpx.Response(200, json=OSRM_RESPONSE))
        result = await client.fetch_route(SEQUENCE)
        assert result.distance_km == pytest.approx(254.3217)
        assert result.path_geometry["type"] == "LineString"

    async def test_url_uses_lng_lat_order(self):
        captured: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=OSRM_RESPONSE)

        await _client(handler).fetch_route([GUARULHOS, CAMPINAS])
        url = captured[0].url
        assert url.path == "/route/v1/driving/-46.5337,-23.4543;-47.0608,-22.9056"
        assert url.params["geometries"] == "geojson"
        assert url.params["overview"] == "full"

    def test_format_coordinates(self):
        assert format_coordinates([GUARULHOS, SANTOS]) == "-46.5337,-23.4543;-46.3336,-23.9608"

    async def test_no_route_code_raises(self):
        client = _client(
            lambda req: httpx.Response(400, json={"code": "NoRoute", "message": "Impossible route"})
        )
        with pytest.raises(ServiceError, match="Impossible route"):
            await client.fetch_route(SEQUENCE)

    async def test_missing_routes_raises(self):
        client = _client(lambda req: httpx.Response(200, json={"code": "Ok", "routes": []}))
        with pytest.raises(ServiceError):
            await client.fetch_route(SEQUENCE)


class TestComputeRoute:
    @pytest.mark.parametrize("sequence", [[], [GUARULHOS]])
    async def test_short_sequence_is_zero_without_request(self, sequence):
        calls = []
        client = _client(lambda req: calls.append(req) or httpx.Response(200, json=OSRM_RESPONSE))
        result = await compute_route(sequence, client)
        assert result.distance_km == 0
        assert result.path_geometry is None
        assert calls == []

    async def test_success_uses_road_distance(self):
        client = _client(lambda req: httpx.Response(200, json=OSRM_RESPONSE))
        result = await compute_route(SEQUENCE, client)
        assert result.distance_km == pytest.approx(254.3217)
        assert not result.used_fallback

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(503, text="Service Unavailable"),
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"code": "Ok", "routes": [{"distance": "far"}]}),
            httpx.Response(200, json={"code": "Ok", "routes": [{"distance": -5, "geometry": {}}]}),
            httpx.Response(200, json=["unexpected"]),
            httpx.Response(429, json={"code": "TooBig", "message": "Too many coordinates"}),
        ],
        ids=["http-503", "not-json", "bad-distance", "negative", "list-payload", "rate-limited"],
    )
    async def test_failure_falls_back_to_haversine(self, response):
        client = _client(lambda req: response)
        result = await compute_route(SEQUENCE, client)
        assert result.path_geometry is None
        assert result.distance_km >= 0
        assert result.distance_km == pytest.approx(path_length_km(SEQUENCE))

    async def test_network_error_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        result = await compute_route(SEQUENCE, _client(handler))
        assert result.used_fallback
        assert result.distance_km == pytest.approx(path_length_km(SEQUENCE))

    async def test_unexpected_exception_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise RuntimeError("bug in transport")

        result = await compute_route(SEQUENCE, _client(handler))
        assert result.used_fallback

    async def test_without_router(self):
        result = await compute_route(SEQUENCE, None)
        assert result.distance_km == pytest.approx(path_length_km(SEQUENCE))
