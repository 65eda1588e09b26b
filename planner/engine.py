"""Route planner session.

One ``RoutePlanner`` per session owns the base, the stop sequence, the
route cache and the batch resolver, and is handed to whatever relays UI
events (the HTTP API, the CLI).  Listeners are told about every change so
the caller can re-render or persist.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Callable, Iterable

from planner.contracts.batch import BatchSummary
from planner.contracts.common import Coordinate
from planner.contracts.enums import EventKind, FallbackCachePolicy
from planner.contracts.event import PlannerEvent
from planner.contracts.place import PlaceMatch
from planner.contracts.route import RouteResult, RouteSummary
from planner.contracts.stop import Base, Stop, StopsDocument
from planner.errors import BaseNotResolvedError, BaseResolutionError, ServiceError
from planner.services.batch import DEFAULT_DELAY_SECONDS, BatchResolver, ProgressCallback
from planner.services.geocoding import NominatimClient
from planner.services.route_cache import RouteCache
from planner.services.routing import OsrmClient
from planner.services.stop_sequence import StopSequence

logger = logging.getLogger(__name__)

BASE_NAME = os.getenv("PLANNER_BASE_NAME", "GUARULHOS")
BASE_QUERY = os.getenv("PLANNER_BASE_QUERY", "Guarulhos, SP, Brasil")

Listener = Callable[[PlannerEvent], None]


class RoutePlanner:
    """Base, stops, cached route and fuel estimate for one vehicle."""

    def __init__(
        self,
        geocoder: NominatimClient,
        router: OsrmClient | None,
        *,
        base_query: str = BASE_QUERY,
        base_name: str = BASE_NAME,
        fallback_policy: FallbackCachePolicy = FallbackCachePolicy.CACHE,
        batch_delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._geocoder = geocoder
        self.base_query = base_query
        self.base_name = base_name
        self.cache = RouteCache(router, policy=fallback_policy)
        self.stops = StopSequence(cache=self.cache)
        self.batch = BatchResolver(
            geocoder,
            self.stops,
            delay_seconds=batch_delay_seconds,
            sleep=sleep,
            on_stop_added=self._stop_added,
        )
        self.fuel_efficiency_km_per_liter = 0.0
        self._listeners: list[Listener] = []
        self._lookups: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Base
    # ------------------------------------------------------------------

    @property
    def base(self) -> Base | None:
        return self.stops.base

    async def resolve_base(self) -> Base:
        """Geocode the base query once; later calls return the same base."""
        if self.stops.base is not None:
            return self.stops.base
        try:
            place = await self._geocoder.forward_geocode(self.base_query)
        except ServiceError as exc:
            raise BaseResolutionError(self.base_query, str(exc)) from exc
        if place is None:
            raise BaseResolutionError(self.base_query, "no geocoding match")

        base = Base(lat=place.lat, lng=place.lng, name=self.base_name)
        self.stops.set_base(base)
        logger.info("Base %s resolved at %.6f, %.6f", base.name, base.lat, base.lng)
        self._emit(EventKind.STOPS_CHANGED)
        return base

    # ------------------------------------------------------------------
    # Stops
    # ------------------------------------------------------------------

    def add_stop(self, coord: Coordinate, city: str = "") -> Stop:
        """Append a stop; without a city one is looked up in the background."""
        stop = self.stops.add_stop(coord, city)
        self._stop_added(stop)
        return stop

    def remove_stop(self, stop_id: str) -> bool:
        changed = self.stops.remove_stop(stop_id)
        if changed:
            self._emit(EventKind.STOPS_CHANGED, stop_id)
        return changed

    def move_stop(self, from_index: int, to_index: int) -> bool:
        changed = self.stops.move_stop(from_index, to_index)
        if changed:
            self._emit(EventKind.STOPS_CHANGED)
        return changed

    def move_stop_position(self, stop_id: str, coord: Coordinate) -> bool:
        """Marker dragged: new position, then a fresh city lookup."""
        changed = self.stops.update_position(stop_id, coord)
        if changed:
            self._emit(EventKind.STOPS_CHANGED, stop_id)
            self.schedule_city_lookup(stop_id)
        return changed

    def clear(self) -> bool:
        changed = self.stops.clear()
        if changed:
            self._emit(EventKind.STOPS_CHANGED)
        return changed

    def _stop_added(self, stop: Stop) -> None:
        self._emit(EventKind.STOPS_CHANGED, stop.id)
        if not stop.city:
            self.schedule_city_lookup(stop.id)

    # ------------------------------------------------------------------
    # City labels
    # ------------------------------------------------------------------

    def schedule_city_lookup(self, stop_id: str) -> asyncio.Task | None:
        """Reverse-geocode a stop without blocking the caller.

        Completion posts a ``STOP_UPDATED`` event when the label changed.
        Outside a running event loop nothing is scheduled.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No event loop, skipping city lookup for stop %s", stop_id)
            return None
        task = loop.create_task(self.refresh_city(stop_id))
        self._lookups.add(task)
        task.add_done_callback(self._lookups.discard)
        return task

    async def refresh_city(self, stop_id: str) -> str | None:
        """Look up and store a stop's city. Returns the stored label.

        The answer is dropped if the stop was removed or moved while the
        request was in flight.  An empty answer or a service failure keeps
        the previous label.
        """
        stop = self.stops.get(stop_id)
        if stop is None:
            return None
        lat, lng = stop.lat, stop.lng

        try:
            city = await self._geocoder.reverse_geocode(lat, lng)
        except ServiceError as exc:
            logger.warning("City lookup failed for stop %s: %s", stop_id, exc)
            return stop.city

        current = self.stops.get(stop_id)
        if current is None or (current.lat, current.lng) != (lat, lng):
            logger.debug("Discarding stale city lookup for stop %s", stop_id)
            return current.city if current is not None else None
        if city and self.stops.set_city(stop_id, city):
            self._emit(EventKind.STOP_UPDATED, stop_id)
        return current.city

    async def wait_for_lookups(self) -> None:
        """Wait until every scheduled city lookup has finished."""
        while self._lookups:
            await asyncio.gather(*list(self._lookups), return_exceptions=True)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search(self, query: str) -> PlaceMatch | None:
        """Interactive search. ``ServiceError`` propagates to the caller."""
        return await self._geocoder.forward_geocode(query)

    async def search_and_add(self, query: str) -> tuple[PlaceMatch | None, Stop | None]:
        place = await self.search(query)
        if place is None:
            return None, None
        return place, self.add_stop(place.coordinate, place.city)

    async def run_batch(
        self,
        queries: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> BatchSummary:
        return await self.batch.run(queries, on_progress)

    # ------------------------------------------------------------------
    # Route & fuel
    # ------------------------------------------------------------------

    async def route(self) -> RouteResult:
        if self.stops.base is None:
            raise BaseNotResolvedError("Base has not been resolved yet")
        return await self.cache.get_route(self.stops.coordinates())

    def set_fuel_efficiency(self, km_per_liter: float) -> None:
        if km_per_liter < 0:
            raise ValueError("Fuel efficiency must not be negative")
        if km_per_liter != self.fuel_efficiency_km_per_liter:
            self.fuel_efficiency_km_per_liter = km_per_liter
            self._emit(EventKind.SETTINGS_CHANGED)

    def liters_needed(self, distance_km: float) -> float:
        if self.fuel_efficiency_km_per_liter <= 0:
            return 0.0
        return distance_km / self.fuel_efficiency_km_per_liter

    async def summary(self) -> RouteSummary:
        result = await self.route()
        return RouteSummary(
            stop_count=len(self.stops.sequence()),
            distance_km=result.distance_km,
            fuel_efficiency_km_per_liter=self.fuel_efficiency_km_per_liter,
            liters_needed=self.liters_needed(result.distance_km),
            source=result.source,
            path_geometry=result.path_geometry,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_document(self) -> StopsDocument:
        return StopsDocument(
            stops=self.stops.stops,
            fuel_efficiency_km_per_liter=self.fuel_efficiency_km_per_liter,
        )

    def load_document(self, document: StopsDocument) -> None:
        """Replace stops and settings; unlabeled stops get a city lookup."""
        self.stops.load(document.stops)
        self.fuel_efficiency_km_per_liter = document.fuel_efficiency_km_per_liter
        self._emit(EventKind.STOPS_CHANGED)
        for stop in self.stops.stops:
            if not stop.city:
                self.schedule_city_lookup(stop.id)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self, kind: EventKind, stop_id: str | None = None) -> None:
        event = PlannerEvent(kind=kind, stop_id=stop_id)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Planner listener failed on %s", kind.value)
