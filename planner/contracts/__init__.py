"""Planner data contracts: Pydantic v2 models for delivery route planning.

Data authority
--------------

**Local JSON document** (source of truth for user-owned data):
- ``StopsDocument``: mid-route ``Stop`` list plus fuel efficiency

**Geocoding service** (resolved at runtime, never persisted):
- ``Base``: depot resolved once per session from a fixed query
- ``PlaceMatch``: best match for a search or batch line

Calculated (never persisted)
----------------------------
- ``RouteResult`` / ``RouteCacheEntry``: road or straight-line distance
- ``RouteSummary``: stop count, kilometers, liters
- ``BatchProgress`` / ``BatchSummary``: batch import bookkeeping
"""

from planner.contracts.enums import (
    BatchItemStatus,
    EventKind,
    FallbackCachePolicy,
    RouteSource,
)
from planner.contracts.common import Coordinate, DocumentModel
from planner.contracts.stop import (
    BASE_END_ID,
    BASE_START_ID,
    Base,
    Stop,
    StopsDocument,
    new_stop_id,
)
from planner.contracts.place import PlaceMatch
from planner.contracts.route import RouteCacheEntry, RouteResult, RouteSummary
from planner.contracts.batch import BatchProgress, BatchSummary
from planner.contracts.event import PlannerEvent

__all__ = [
    # Enums
    "BatchItemStatus",
    "EventKind",
    "FallbackCachePolicy",
    "RouteSource",
    # Common
    "Coordinate",
    "DocumentModel",
    # Stops
    "BASE_END_ID",
    "BASE_START_ID",
    "Base",
    "Stop",
    "StopsDocument",
    "new_stop_id",
    # Geocoding
    "PlaceMatch",
    # Route
    "RouteCacheEntry",
    "RouteResult",
    "RouteSummary",
    # Batch
    "BatchProgress",
    "BatchSummary",
    # Events
    "PlannerEvent",
]
