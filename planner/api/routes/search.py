"""Interactive address search."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from planner.api.deps import get_planner, get_ready_planner
from planner.engine import RoutePlanner
from planner.errors import InvalidInputError, ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

NOT_FOUND_HINT = "No match. Try 'City - State' or a more complete address."
RETRY_HINT = "Search failed, possibly a service limit. Try again in a few seconds."


@router.get("")
async def search_place(
    q: str = Query(..., description="Free-text address or place name"),
    add: bool = Query(False, description="Append the match as a new stop"),
    planner: RoutePlanner = Depends(get_planner),
) -> dict:
    if add:
        # Adding a stop requires a resolved base
        get_ready_planner(planner)
    try:
        if add:
            place, stop = await planner.search_and_add(q)
        else:
            place, stop = await planner.search(q), None
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ServiceError as exc:
        logger.warning("Interactive search failed for %r: %s", q, exc)
        raise HTTPException(status_code=503, detail=RETRY_HINT)

    if place is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_HINT)

    result = place.model_dump()
    if stop is not None:
        result["stop"] = stop.to_document()
    return result
