"""Route cache keyed by the ordered coordinate fingerprint.

A cached result is served only while the fingerprint of the requested
sequence equals the one it was computed for.  Stop mutations call
``invalidate()`` directly, so the next read always recomputes.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from planner.contracts.common import Coordinate
from planner.contracts.enums import FallbackCachePolicy
from planner.contracts.route import RouteCacheEntry, RouteResult
from planner.services.geo import HasLatLng
from planner.services.routing import OsrmClient, compute_route

logger = logging.getLogger(__name__)

FINGERPRINT_PRECISION = 6
FINGERPRINT_SEPARATOR = "|"


def _fmt(value: float) -> str:
    text = f"{value:.{FINGERPRINT_PRECISION}f}"
    # -0.0000001 and 0.0 are the same position
    return text[1:] if text.startswith("-") and not text.strip("-0.") else text


def fingerprint(sequence: Sequence[HasLatLng]) -> str:
    """Order-sensitive key of every coordinate at 6 decimal places.

    IDs and city labels do not take part.
    """
    return FINGERPRINT_SEPARATOR.join(f"{_fmt(p.lat)},{_fmt(p.lng)}" for p in sequence)


class RouteCache:
    """Memoizes ``compute_route`` for the most recent stop sequence."""

    def __init__(
        self,
        router: OsrmClient | None,
        policy: FallbackCachePolicy = FallbackCachePolicy.CACHE,
    ):
        self._router = router
        self._policy = FallbackCachePolicy(policy)
        self._entry: RouteCacheEntry | None = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def entry(self) -> RouteCacheEntry | None:
        return self._entry

    @property
    def fingerprint(self) -> str | None:
        entry = self._entry
        return entry.fingerprint if entry is not None else None

    @property
    def policy(self) -> FallbackCachePolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Cache operations
    # ------------------------------------------------------------------

    def invalidate(self) -> None:
        self._entry = None

    def lookup(self, key: str) -> RouteResult | None:
        """Cached result for *key* if it may be served under the policy."""
        entry = self._entry
        if entry is None or entry.fingerprint != key:
            return None
        if entry.result.used_fallback and self._policy is FallbackCachePolicy.RETRY:
            return None
        return entry.result

    async def get_route(self, sequence: Sequence[HasLatLng]) -> RouteResult:
        # Key and result must come from the same coordinates
        sequence = [Coordinate(lat=p.lat, lng=p.lng) for p in sequence]
        key = fingerprint(sequence)
        cached = self.lookup(key)
        if cached is not None:
            logger.debug("Route cache hit (%d stops)", len(sequence))
            return cached

        async with self._lock:
            # Another reader may have filled the entry while we waited
            cached = self.lookup(key)
            if cached is not None:
                return cached
            result = await compute_route(sequence, self._router)
            self._entry = RouteCacheEntry(fingerprint=key, result=result)
        logger.debug(
            "Route computed: %.2f km via %s (%d stops)",
            result.distance_km,
            result.source.value,
            len(sequence),
        )
        return result
