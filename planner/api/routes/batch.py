"""Batch address import endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, model_validator

from planner.api.deps import get_planner, get_ready_planner
from planner.engine import RoutePlanner
from planner.services.batch import split_queries

router = APIRouter(prefix="/batch", tags=["batch"])


class BatchRequest(BaseModel):
    """Either pasted text (one address per line) or an explicit list."""

    text: str | None = None
    queries: list[str] | None = None

    @model_validator(mode="after")
    def one_source(self) -> "BatchRequest":
        if self.text is None and self.queries is None:
            raise ValueError("Provide 'text' or 'queries'")
        return self

    def lines(self) -> list[str]:
        if self.queries is not None:
            return [q.strip() for q in self.queries if q and q.strip()]
        return split_queries(self.text or "")


@router.post("")
async def run_batch(
    body: BatchRequest,
    planner: RoutePlanner = Depends(get_ready_planner),
) -> dict:
    """Resolve every line in turn; returns once the whole batch is done."""
    lines = body.lines()
    if not lines:
        raise HTTPException(status_code=422, detail="Nothing to process")
    summary = await planner.run_batch(lines)
    return summary.model_dump()


@router.get("/progress")
async def batch_progress(
    planner: RoutePlanner = Depends(get_planner),
) -> dict:
    progress = planner.batch.progress
    return {
        "running": planner.batch.running,
        "progress": progress.model_dump() if progress is not None else None,
    }
