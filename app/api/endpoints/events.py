"""
Events Endpoint — Club Event Management

GET    /api/v1/events              → list non-deleted events (optional ?clubId=)
POST   /api/v1/events              → create an event          (admin)
GET    /api/v1/events/{event_id}   → event detail
PUT    /api/v1/events/{event_id}   → update an event          (admin)
DELETE /api/v1/events/{event_id}   → soft-delete an event     (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.event_store import (
    ClubNotFoundError,
    EventNotFoundError,
    create_event,
    event_to_detail,
    event_to_out,
    get_event,
    list_events,
    soft_delete_event,
    update_event,
)
from app.core.limiter import limiter
from app.core.security import get_current_admin
from app.models.schemas import (
    EventCreate,
    EventDetailOut,
    EventMutationResponse,
    EventOut,
    EventUpdate,
    MessageResponse,
)

router = APIRouter()

_MISSING_FIELDS = "Missing required fields"
_EVENT_NOT_FOUND = "Event not found"


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=List[EventOut],
    summary="List events",
    description="Returns non-deleted events ordered by start time, newest first.",
)
@limiter.limit("60/minute")
async def get_events(
    request: Request,
    club_id: Optional[str] = Query(default=None, alias="clubId"),
    db: AsyncSession = Depends(get_db),
) -> List[EventOut]:
    events = await list_events(db, club_id=club_id)
    return [event_to_out(event) for event in events]


@router.post(
    "",
    response_model=EventMutationResponse,
    summary="Create an event",
    description="`title`, `clubId` and `startDateTime` are required.",
)
@limiter.limit("30/minute")
async def post_event(
    request: Request,
    payload: EventCreate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_current_admin),
) -> EventMutationResponse:
    if not payload.title or not payload.club_id or payload.start_date_time is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_MISSING_FIELDS)

    try:
        event = await create_event(payload, db)
    except ClubNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Club not found")

    return EventMutationResponse(message="Event created successfully", event=event_to_out(event))


# ---------------------------------------------------------------------------
# Single event
# ---------------------------------------------------------------------------

@router.get(
    "/{event_id}",
    response_model=EventDetailOut,
    summary="Get one event",
)
@limiter.limit("60/minute")
async def get_event_detail(
    request: Request,
    event_id: str,
    db: AsyncSession = Depends(get_db),
) -> EventDetailOut:
    event = await get_event(event_id, db)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_EVENT_NOT_FOUND)
    return event_to_detail(event)


@router.put(
    "/{event_id}",
    response_model=EventMutationResponse,
    summary="Update an event",
    description="`title` and `startDateTime` are required.",
)
@limiter.limit("30/minute")
async def put_event(
    request: Request,
    event_id: str,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_current_admin),
) -> EventMutationResponse:
    if not payload.title or payload.start_date_time is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_MISSING_FIELDS)

    try:
        event = await update_event(event_id, payload, db)
    except EventNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_EVENT_NOT_FOUND)

    return EventMutationResponse(message="Event updated successfully", event=event_to_out(event))


@router.delete(
    "/{event_id}",
    response_model=MessageResponse,
    summary="Soft-delete an event",
)
@limiter.limit("30/minute")
async def delete_event(
    request: Request,
    event_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(get_current_admin),
) -> MessageResponse:
    try:
        await soft_delete_event(event_id, db)
    except EventNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_EVENT_NOT_FOUND)
    return MessageResponse(message="Event deleted successfully")
