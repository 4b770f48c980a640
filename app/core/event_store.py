"""
PostgreSQL-backed async store for club events.

Events are never physically removed: deleting one sets ``is_deleted`` and
every read path filters on it. All functions require an AsyncSession
injected via FastAPI's Depends(get_db).
"""

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only, selectinload

from app.models.db_models import Club, Event, EventRegistration
from app.models.schemas import (
    AddonOut,
    AgendaItemOut,
    EventCreate,
    EventDetailOut,
    EventOrganizer,
    EventOut,
    EventUpdate,
    ResourcePersonOut,
)

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


class EventNotFoundError(LookupError):
    pass


class ClubNotFoundError(LookupError):
    pass


def new_event_id() -> str:
    """``evt_<epoch ms>_<9 random base36 chars>``, sortable by creation time."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"evt_{int(time.time() * 1000)}_{suffix}"


def _summary_options() -> list:
    return [
        selectinload(Event.club),
        selectinload(Event.registrations).options(load_only(EventRegistration.id)),
    ]


def _detail_options() -> list:
    return _summary_options() + [
        selectinload(Event.agenda),
        selectinload(Event.resource_persons),
        selectinload(Event.addons),
    ]


# ---------------------------------------------------------------------------
# Write operations
# ---------------------------------------------------------------------------


async def create_event(data: EventCreate, db: AsyncSession) -> Event:
    """Insert a new event for an existing club and return it with relations loaded."""
    club = await db.get(Club, data.club_id)
    if club is None or club.is_deleted:
        raise ClubNotFoundError(data.club_id)

    event = Event(
        id=new_event_id(),
        title=data.title,
        subtitle=data.subtitle or None,
        club_id=data.club_id,
        category=data.category,
        description=data.description or None,
        start_date_time=data.start_date_time,
        end_date_time=data.end_date_time,
        venue=data.venue or None,
        max_participants=data.max_participants or None,
        is_deleted=False,
    )
    db.add(event)
    await db.commit()
    logger.info("Event %s created for club %s", event.id, data.club_id)
    return await _load_event(event.id, db, include_deleted=True)


async def update_event(event_id: str, data: EventUpdate, db: AsyncSession) -> Event:
    """Overwrite the editable fields of an event.

    Optional fields left out of ``data`` are cleared, matching a full PUT.
    """
    if await db.get(Event, event_id) is None:
        raise EventNotFoundError(event_id)

    await db.execute(
        update(Event)
        .where(Event.id == event_id)
        .values(
            title=data.title,
            subtitle=data.subtitle or None,
            category=data.category,
            description=data.description or None,
            start_date_time=data.start_date_time,
            end_date_time=data.end_date_time,
            venue=data.venue or None,
            max_participants=data.max_participants or None,
            updated_at=datetime.now(timezone.utc),
        )
    )
    await db.commit()
    return await _load_event(event_id, db, include_deleted=True)


async def soft_delete_event(event_id: str, db: AsyncSession) -> None:
    if await db.get(Event, event_id) is None:
        raise EventNotFoundError(event_id)

    await db.execute(
        update(Event)
        .where(Event.id == event_id)
        .values(is_deleted=True, updated_at=datetime.now(timezone.utc))
    )
    await db.commit()
    logger.info("Event %s soft-deleted", event_id)


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------


async def list_events(db: AsyncSession, club_id: str | None = None) -> list[Event]:
    """Return non-deleted events, newest start first, optionally for one club."""
    stmt = select(Event).options(*_summary_options()).where(Event.is_deleted.is_(False))
    if club_id:
        stmt = stmt.where(Event.club_id == club_id)
    result = await db.execute(stmt.order_by(Event.start_date_time.desc()))
    return list(result.scalars().all())


async def get_event(event_id: str, db: AsyncSession) -> Event | None:
    """Return a non-deleted event with agenda, resource persons and addons."""
    result = await db.execute(
        select(Event)
        .options(*_detail_options())
        .where(Event.id == event_id, Event.is_deleted.is_(False))
    )
    return result.scalar_one_or_none()


async def _load_event(event_id: str, db: AsyncSession, include_deleted: bool = False) -> Event:
    stmt = select(Event).options(*_summary_options()).where(Event.id == event_id)
    if not include_deleted:
        stmt = stmt.where(Event.is_deleted.is_(False))
    # populate_existing: the identity map still holds the pre-update row
    result = await db.execute(stmt.execution_options(populate_existing=True))
    return result.scalar_one()


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def event_to_out(event: Event, now: datetime | None = None) -> EventOut:
    if now is None:
        now = datetime.now(timezone.utc)
    start = event.start_date_time
    return EventOut(
        id=event.id,
        title=event.title,
        description=event.description,
        date=start.date().isoformat(),
        time=start.strftime("%H:%M"),
        location=event.venue,
        venue=event.venue,
        cover_image=event.cover_image,
        category=event.category,
        max_capacity=event.max_participants,
        registered_count=len(event.registrations),
        is_active=start > now,
        organizer=EventOrganizer(id=event.club.id, name=event.club.name),
        created_at=event.created_at.isoformat(),
        updated_at=event.updated_at.isoformat(),
    )


def event_to_detail(event: Event, now: datetime | None = None) -> EventDetailOut:
    summary = event_to_out(event, now)
    # Older events store their cover in the first addon's first tag
    cover = next((a.tags[0] for a in event.addons if a.tags), None) or summary.cover_image
    return EventDetailOut(
        **summary.model_dump(exclude={"cover_image"}),
        cover_image=cover,
        subtitle=event.subtitle,
        agenda=[
            AgendaItemOut(id=a.id, title=a.title, start_time=a.start_time, end_time=a.end_time)
            for a in event.agenda
        ],
        resource_persons=[
            ResourcePersonOut(id=p.id, name=p.name, designation=p.designation, photo=p.photo)
            for p in event.resource_persons
        ],
        addons=[AddonOut(id=a.id, name=a.name, tags=list(a.tags)) for a in event.addons],
    )
