"""Persistence-specific exceptions."""

from pathlib import Path

from planner.errors import PlannerError


class PersistenceError(PlannerError):
    """Base exception for all persistence errors."""


class DocumentWriteError(PersistenceError):
    """Raised when the local document cannot be written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")
