"""Stop sequence model: the base and the user-ordered mid-route stops.

The full sequence is derived on every read as
``BASE_START → stops (user order) → BASE_END`` and is what every distance
and route computation consumes.

Every structural mutator invalidates the route cache itself and returns
whether anything actually changed.  Editing a city label is metadata
only and leaves the cache alone.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from planner.contracts.common import Coordinate
from planner.contracts.stop import BASE_END_ID, BASE_START_ID, Base, Stop
from planner.errors import PlannerError

if TYPE_CHECKING:
    from planner.services.route_cache import RouteCache

logger = logging.getLogger(__name__)


class StopSequence:
    """Owns the base point and the ordered list of mid-route stops."""

    def __init__(self, cache: RouteCache | None = None):
        self._cache = cache
        self._base: Base | None = None
        self._stops: list[Stop] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def base(self) -> Base | None:
        return self._base

    @property
    def stops(self) -> list[Stop]:
        """Copy of the mid-route stops in user order."""
        return list(self._stops)

    def __len__(self) -> int:
        return len(self._stops)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def sequence(self) -> list[Stop]:
        """Base → stops → base, or ``[]`` while the base is unknown."""
        if self._base is None:
            return []
        return [
            self._base.as_stop(BASE_START_ID),
            *self._stops,
            self._base.as_stop(BASE_END_ID),
        ]

    def coordinates(self) -> list[Coordinate]:
        return [stop.coordinate for stop in self.sequence()]

    def get(self, stop_id: str) -> Stop | None:
        for stop in self._stops:
            if stop.id == stop_id:
                return stop
        return None

    def index_of(self, stop_id: str) -> int | None:
        for i, stop in enumerate(self._stops):
            if stop.id == stop_id:
                return i
        return None

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def set_base(self, base: Base) -> bool:
        """Set the base once. Setting the same base again is a no-op."""
        if self._base is not None:
            if self._base == base:
                return False
            raise PlannerError("Base is already set for this session")
        self._base = base
        self._invalidate()
        return True

    def add_stop(self, coord: Coordinate, city: str = "") -> Stop:
        """Append a new stop with a fresh ID."""
        stop = Stop(lat=coord.lat, lng=coord.lng, city=city)
        self._stops.append(stop)
        self._invalidate()
        return stop

    def remove_stop(self, stop_id: str) -> bool:
        index = self.index_of(stop_id)
        if index is None:
            return False
        del self._stops[index]
        self._invalidate()
        return True

    def move_stop(self, from_index: int, to_index: int) -> bool:
        """Move a stop within the mid-route list (splice semantics).

        The element is removed first, then inserted at ``to_index`` of the
        shortened list.  Bounds are the caller's responsibility.
        """
        if from_index == to_index:
            return False
        stop = self._stops.pop(from_index)
        self._stops.insert(to_index, stop)
        self._invalidate()
        return True

    def update_position(self, stop_id: str, coord: Coordinate) -> bool:
        stop = self.get(stop_id)
        if stop is None:
            return False
        if stop.lat == coord.lat and stop.lng == coord.lng:
            return False
        stop.lat = coord.lat
        stop.lng = coord.lng
        self._invalidate()
        return True

    def set_city(self, stop_id: str, city: str) -> bool:
        """Update a stop's label. Does not touch the route cache."""
        stop = self.get(stop_id)
        if stop is None or stop.city == city:
            return False
        stop.city = city
        return True

    def clear(self) -> bool:
        if not self._stops:
            return False
        self._stops.clear()
        self._invalidate()
        return True

    def load(self, stops: Iterable[Stop]) -> None:
        """Replace every stop, e.g. when rehydrating a saved document."""
        self._stops = [stop.model_copy() for stop in stops]
        logger.debug("Loaded %d stops", len(self._stops))
        self._invalidate()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _invalidate(self) -> None:
        if self._cache is not None:
            self._cache.invalidate()
