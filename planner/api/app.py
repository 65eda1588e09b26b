"""FastAPI application factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
import httpx  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from planner.api.routes import batch, search, settings, stops, summary  # noqa: E402
from planner.contracts.enums import FallbackCachePolicy  # noqa: E402
from planner.engine import RoutePlanner  # noqa: E402
from planner.errors import BaseResolutionError  # noqa: E402
from planner.persistence.document_store import DocumentStore  # noqa: E402
from planner.persistence.errors import PersistenceError  # noqa: E402
from planner.services.geocoding import NominatimClient  # noqa: E402
from planner.services.routing import OsrmClient  # noqa: E402

logger = logging.getLogger(__name__)


def attach_store(planner: RoutePlanner, store: DocumentStore) -> None:
    """Persist the planner's document after every change."""

    def _save(_event) -> None:
        try:
            store.save(planner.to_document())
        except PersistenceError as exc:
            logger.error("Failed to save document: %s", exc)

    planner.subscribe(_save)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the planner session, restore saved stops and resolve the base."""
    timeout = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "15"))
    policy = FallbackCachePolicy(os.environ.get("ROUTE_FALLBACK_POLICY", "cache"))

    async with httpx.AsyncClient(timeout=timeout) as http:
        planner = RoutePlanner(
            NominatimClient(http_client=http),
            OsrmClient(http_client=http),
            fallback_policy=policy,
        )
        store = DocumentStore()
        planner.load_document(store.load())
        logger.info("Restored %d stops from %s", len(planner.stops), store.path)
        attach_store(planner, store)

        app.state.planner = planner
        app.state.base_error = None
        try:
            await planner.resolve_base()
        except BaseResolutionError as exc:
            logger.error("Session start failed: %s", exc)
            app.state.base_error = str(exc)

        yield
        await planner.wait_for_lookups()


app = FastAPI(
    title="Delivery Route Planner API",
    description="Single-vehicle delivery route planning",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stops.router, prefix="/api")
app.include_router(summary.router, prefix="/api")
app.include_router(search.router, prefix="/api")
app.include_router(batch.router, prefix="/api")
app.include_router(settings.router, prefix="/api")


@app.get("/api/health")
async def health():
    planner: RoutePlanner = app.state.planner
    base = planner.base
    result = {
        "status": "ok" if base is not None else "degraded",
        "base_ready": base is not None,
        "stop_count": len(planner.stops),
        "batch_running": planner.batch.running,
    }
    if base is not None:
        result["base"] = base.to_document()
    if app.state.base_error:
        result["base_error"] = app.state.base_error
    return result
