"""Local JSON document holding the stop list and fuel efficiency."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from planner.contracts.stop import StopsDocument
from planner.persistence.errors import DocumentWriteError

logger = logging.getLogger(__name__)

STORAGE_KEY = "entregas_v6"
DEFAULT_PATH = Path(
    os.environ.get(
        "PLANNER_DOCUMENT_PATH",
        Path.home() / ".delivery-planner" / f"{STORAGE_KEY}.json",
    )
)


class DocumentStore:
    """Reads and writes a single ``StopsDocument`` on disk.

    Reading never fails: a missing or unreadable file yields an empty
    document, malformed entries are repaired by ``StopsDocument``.
    Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, path: Path | str | None = None):
        self._path = Path(path) if path is not None else DEFAULT_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StopsDocument:
        if not self._path.exists():
            return StopsDocument()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable document %s: %s", self._path, exc)
            return StopsDocument()
        document = StopsDocument.from_document(raw)
        logger.debug("Loaded %d stops from %s", len(document.stops), self._path)
        return document

    def save(self, document: StopsDocument) -> None:
        payload = json.dumps(document.to_document(), ensure_ascii=False, indent=2)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise DocumentWriteError(self._path, str(exc)) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp, self._path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.unlink(tmp)
            raise DocumentWriteError(self._path, str(exc)) from exc
