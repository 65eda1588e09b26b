"""Tests for the interactive search endpoint."""

from planner.api.routes.search import NOT_FOUND_HINT, RETRY_HINT


class TestSearchApi:
    async def test_search_only(self, client, planner):
        resp = await client.get("/api/search", params={"q": "Campinas - SP"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["city"] == "CAMPINAS"
        assert data["lat"] == -22.9056
        assert "stop" not in data
        assert len(planner.stops) == 0

    async def test_search_and_add(self, client, planner):
        resp = await client.get("/api/search", params={"q": "Santos - SP", "add": "true"})
        assert resp.status_code == 200
        stop = resp.json()["stop"]
        assert stop["city"] == "SANTOS"
        assert planner.stops.get(stop["id"]) is not None

    async def test_not_found_hint(self, client):
        resp = await client.get("/api/search", params={"q": "Nowhere"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == NOT_FOUND_HINT

    async def test_service_error_hint(self, client):
        resp = await client.get("/api/search", params={"q": "Busy"})
        assert resp.status_code == 503
        assert resp.json()["detail"] == RETRY_HINT

    async def test_blank_query(self, client, nominatim):
        resp = await client.get("/api/search", params={"q": "   "})
        assert resp.status_code == 422
        assert nominatim.search_queries == ["Guarulhos, SP, Brasil"]

    async def test_add_requires_base(self, unready_client):
        resp = await unready_client.get(
            "/api/search", params={"q": "Campinas - SP", "add": "true"}
        )
        assert resp.status_code == 503
