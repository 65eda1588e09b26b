"""Tests for the route summary, settings, batch and health endpoints."""

import pytest


class TestRouteApi:
    async def test_summary_with_road_route(self, client, osrm):
        await client.post("/api/stops", json={"lat": -22.9056, "lng": -47.0608, "city": "A"})
        await client.put("/api/settings/fuel-efficiency", json={"km_per_liter": 12})
        resp = await client.get("/api/route")
        assert resp.status_code == 200
        data = resp.json()
        assert data["stop_count"] == 3
        assert data["distance_km"] == pytest.approx(120.0)
        assert data["liters_needed"] == pytest.approx(10.0)
        assert data["source"] == "road"
        assert data["path_geometry"]["type"] == "LineString"

    async def test_summary_cached_between_reads(self, client, osrm):
        await client.post("/api/stops", json={"lat": -22.9056, "lng": -47.0608, "city": "A"})
        await client.get("/api/route")
        await client.get("/api/route")
        assert osrm.calls == 1

    async def test_fallback_has_no_geometry(self, client, osrm):
        osrm.fail = True
        await client.post("/api/stops", json={"lat": -22.9056, "lng": -47.0608, "city": "A"})
        data = (await client.get("/api/route")).json()
        assert data["source"] == "straight_line"
        assert "path_geometry" not in data
        assert data["distance_km"] > 0

    async def test_requires_base(self, unready_client):
        resp = await unready_client.get("/api/route")
        assert resp.status_code == 503


class TestSettingsApi:
    async def test_get_and_set(self, client):
        assert (await client.get("/api/settings/fuel-efficiency")).json() == {"km_per_liter": 0.0}
        resp = await client.put("/api/settings/fuel-efficiency", json={"km_per_liter": 9.5})
        assert resp.json() == {"km_per_liter": 9.5}

    async def test_negative_rejected(self, client):
        resp = await client.put("/api/settings/fuel-efficiency", json={"km_per_liter": -1})
        assert resp.status_code == 422


class TestBatchApi:
    async def test_text_batch(self, client, planner):
        resp = await client.post(
            "/api/batch", json={"text": "Campinas - SP\n\nNowhere\n  Santos - SP  \n"}
        )
        assert resp.status_code == 200
        assert resp.json() == {"succeeded": 2, "failed": 1, "total": 3}
        assert [s.city for s in planner.stops.stops] == ["CAMPINAS", "SANTOS"]

        progress = (await client.get("/api/batch/progress")).json()
        assert progress["running"] is False
        assert progress["progress"]["index"] == 3
        assert progress["progress"]["status"] == "added"

    async def test_query_list(self, client):
        resp = await client.post("/api/batch", json={"queries": ["Busy", "Campinas - SP"]})
        assert resp.json() == {"succeeded": 1, "failed": 1, "total": 2}

    async def test_nothing_to_process(self, client):
        resp = await client.post("/api/batch", json={"text": " \n \n"})
        assert resp.status_code == 422

    async def test_body_required(self, client):
        resp = await client.post("/api/batch", json={})
        assert resp.status_code == 422

    async def test_progress_before_any_batch(self, client):
        assert (await client.get("/api/batch/progress")).json() == {
            "running": False,
            "progress": None,
        }


class TestHealth:
    async def test_ready(self, client):
        data = (await client.get("/api/health")).json()
        assert data["status"] == "ok"
        assert data["base"]["name"] == "GUARULHOS"
        assert "base_error" not in data

    async def test_degraded(self, unready_client):
        data = (await unready_client.get("/api/health")).json()
        assert data["status"] == "degraded"
        assert data["base_ready"] is False
        assert "no geocoding match" in data["base_error"]
