"""PlannerEvent: notification posted to session listeners."""

from pydantic import BaseModel, ConfigDict

from planner.contracts.enums import EventKind


class PlannerEvent(BaseModel):
    kind: EventKind
    stop_id: str | None = None

    model_config = ConfigDict(frozen=True)
