"""Enumerations shared across all planner contracts."""

from enum import Enum


class RouteSource(str, Enum):
    """How the distance of a route result was obtained."""
    ROAD = "road"
    STRAIGHT_LINE = "straight_line"


class FallbackCachePolicy(str, Enum):
    """Whether a straight-line fallback result may be served from cache."""
    CACHE = "cache"  # keep it until the stop sequence changes
    RETRY = "retry"  # ask the routing service again on the next read


class BatchItemStatus(str, Enum):
    """Outcome of a single query inside a batch."""
    ADDED = "added"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class EventKind(str, Enum):
    """Notifications published by the route planner session."""
    STOPS_CHANGED = "stops_changed"
    STOP_UPDATED = "stop_updated"
    SETTINGS_CHANGED = "settings_changed"
