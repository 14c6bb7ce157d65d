from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Request

from ..api_models import CountEventResponse, CountsResponse, StatusResponse, TrackResponse

router = APIRouter()


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    return StatusResponse(**request.app.state.shared.get_status())


@router.get("/tracks", response_model=List[TrackResponse])
def tracks(request: Request):
    return [TrackResponse(**t.to_dict()) for t in request.app.state.shared.get_tracks()]


@router.get("/events", response_model=List[CountEventResponse])
def events(request: Request, limit: int = Query(50, ge=1, le=1000)):
    db = request.app.state.db
    if db is None:
        return []
    return [CountEventResponse(**e) for e in db.get_recent_events(limit=limit)]


@router.get("/counts", response_model=CountsResponse)
def counts(request: Request, since: Optional[float] = Query(None, ge=0)):
    db = request.app.state.db
    if db is None:
        return CountsResponse(total=0, since=since)
    return CountsResponse(
        total=db.get_count_total(start_time=since),
        by_category=db.get_counts_by_category(start_time=since),
        since=since,
    )
