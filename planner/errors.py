"""Planner exceptions.

A geocoder finding nothing is **not** an error: lookups return ``None``.
"""


class PlannerError(Exception):
    """Base exception for all planner errors."""


class ServiceError(PlannerError):
    """Raised when an external service call fails.

    Covers network errors, non-success HTTP statuses (rate limiting
    included) and payloads that cannot be parsed.  Retrying later may
    succeed.
    """

    def __init__(self, service: str, message: str):
        self.service = service
        self.message = message
        super().__init__(f"{service}: {message}")


class InvalidInputError(PlannerError, ValueError):
    """Raised before any network call when the input cannot be used."""


class BaseResolutionError(PlannerError):
    """Raised when the base query cannot be geocoded at session start."""

    def __init__(self, query: str, reason: str):
        self.query = query
        self.reason = reason
        super().__init__(f"Could not resolve base {query!r}: {reason}")


class BaseNotResolvedError(PlannerError):
    """Raised when a route is requested before the base is known."""
