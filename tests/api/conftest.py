"""Shared fixtures for API tests."""

from __future__ import annotations

import httpx
import pytest

from planner.api.app import app, attach_store
from planner.persistence.document_store import DocumentStore
from tests.fakes import FakeNominatim, FakeOsrm, make_planner, place


@pytest.fixture
def nominatim():
    return FakeNominatim(
        {
            "Campinas - SP": place(-22.9056, -47.0608, "Campinas"),
            "Santos - SP": place(-23.9608, -46.3336, "Santos"),
            "Nowhere": None,
            "Busy": 429,
        },
        reverse={"address": {"city": "Jundiaí"}},
    )


@pytest.fixture
def osrm():
    return FakeOsrm(distance_m=120_000)


@pytest.fixture
def store(tmp_path):
    return DocumentStore(tmp_path / "entregas_v6.json")


@pytest.fixture
async def planner(nominatim, osrm, store):
    """Session with the base already resolved and saving to ``store``."""
    planner = make_planner(nominatim, osrm)
    await planner.resolve_base()
    attach_store(planner, store)
    yield planner
    await planner.wait_for_lookups()


@pytest.fixture
def test_app(planner):
    """FastAPI app with the planner placed on app.state (lifespan is skipped)."""
    app.state.planner = planner
    app.state.base_error = None
    yield app


@pytest.fixture
async def client(test_app):
    """httpx AsyncClient wired to the test app."""
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def unready_client(nominatim, osrm):
    """Client against a session whose base could not be resolved."""
    app.state.planner = make_planner(nominatim, osrm)
    app.state.base_error = "Could not resolve base 'Guarulhos, SP, Brasil': no geocoding match"
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
