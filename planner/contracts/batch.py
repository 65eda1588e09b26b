"""BatchProgress, BatchSummary: bookkeeping for multi-address imports."""

from pydantic import BaseModel, Field, computed_field

from planner.contracts.enums import BatchItemStatus


class BatchProgress(BaseModel):
    """State of a running batch after one query has been processed.

    ``index`` is 1-based; ``succeeded`` and ``failed`` are running totals.
    """

    index: int = Field(..., ge=1)
    total: int = Field(..., ge=1)
    query: str
    status: BatchItemStatus
    succeeded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    stop_id: str | None = None

    @property
    def done(self) -> bool:
        return self.index == self.total


class BatchSummary(BaseModel):
    """Final counts of a batch run."""

    succeeded: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.succeeded + self.failed
