"""Sequential, rate-limited resolution of many addresses at once.

Each query is forward-geocoded in turn; a match becomes a new stop, a
miss or a service failure is counted and the batch moves on.  Public
Nominatim allows one request per second, hence the fixed pause between
attempts.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Callable, Iterable

from planner.contracts.batch import BatchProgress, BatchSummary
from planner.contracts.enums import BatchItemStatus
from planner.contracts.stop import Stop
from planner.errors import ServiceError
from planner.services.geocoding import NominatimClient
from planner.services.stop_sequence import StopSequence

logger = logging.getLogger(__name__)

MIN_DELAY_SECONDS = 0.9
DEFAULT_DELAY_SECONDS = float(os.getenv("BATCH_DELAY_SECONDS", MIN_DELAY_SECONDS))

ProgressCallback = Callable[[BatchProgress], None]


def split_queries(text: str) -> list[str]:
    """One query per non-blank line, surrounding whitespace removed."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class BatchResolver:
    """Turns a list of free-text addresses into stops, one at a time.

    Runs never overlap: a second ``run()`` waits for the first to finish.
    There is no cancellation; a started batch runs to completion.
    """

    def __init__(
        self,
        geocoder: NominatimClient,
        stops: StopSequence,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_stop_added: Callable[[Stop], None] | None = None,
    ):
        if delay_seconds < MIN_DELAY_SECONDS:
            raise ValueError(
                f"delay_seconds must be at least {MIN_DELAY_SECONDS}, got {delay_seconds}"
            )
        self._geocoder = geocoder
        self._stops = stops
        self._delay = delay_seconds
        self._sleep = sleep
        self._on_stop_added = on_stop_added
        self._lock = asyncio.Lock()
        self.progress: BatchProgress | None = None

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(
        self,
        queries: Iterable[str],
        on_progress: ProgressCallback | None = None,
    ) -> BatchSummary:
        lines = [q.strip() for q in queries if q and q.strip()]
        summary = BatchSummary()
        if not lines:
            return summary

        async with self._lock:
            self.progress = None
            total = len(lines)
            logger.info("Resolving %d address(es)", total)

            for i, query in enumerate(lines, start=1):
                if i > 1:
                    await self._sleep(self._delay)

                status, stop = await self._resolve_one(query)
                if status is BatchItemStatus.ADDED:
                    summary.succeeded += 1
                else:
                    summary.failed += 1

                self.progress = BatchProgress(
                    index=i,
                    total=total,
                    query=query,
                    status=status,
                    succeeded=summary.succeeded,
                    failed=summary.failed,
                    stop_id=stop.id if stop is not None else None,
                )
                if on_progress is not None:
                    on_progress(self.progress)

        logger.info(
            "Batch complete: %d added, %d failed", summary.succeeded, summary.failed
        )
        return summary

    async def _resolve_one(self, query: str) -> tuple[BatchItemStatus, Stop | None]:
        try:
            place = await self._geocoder.forward_geocode(query)
        except ServiceError as exc:
            logger.warning("Lookup failed for %r: %s", query, exc)
            return BatchItemStatus.FAILED, None

        if place is None:
            logger.info("No match for %r", query)
            return BatchItemStatus.NOT_FOUND, None

        stop = self._stops.add_stop(place.coordinate, place.city)
        if self._on_stop_added is not None:
            self._on_stop_added(stop)
        return BatchItemStatus.ADDED, stop
