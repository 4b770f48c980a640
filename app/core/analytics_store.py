"""
Read side of the admin analytics dashboard.

Responsibilities:
- Compute the reporting windows (today, this month, last month, last hour).
- Issue the fixed battery of aggregate queries concurrently and wait for all.
- Hand the raw counts to :mod:`app.core.analytics` for derivation.

Every query runs on its own session so they can execute in parallel; there
is no transaction spanning them, so counts may reflect slightly different
moments when writes happen during collection.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from fastapi import Depends
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.analytics import RankedClub, RawMetrics, assemble_analytics, derive_metrics
from app.core.database import get_session_factory
from app.models.db_models import (
    Club,
    ClubMember,
    Event,
    EventAttendance,
    EventRegistration,
    User,
)
from app.models.schemas import AnalyticsData

logger = logging.getLogger(__name__)

TOP_CLUBS_LIMIT = 10


# ---------------------------------------------------------------------------
# Reporting windows
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportingWindows:
    now: datetime
    start_of_today: datetime
    start_of_month: datetime
    start_of_last_month: datetime
    end_of_last_month: datetime
    last_hour: datetime


def compute_windows(now: datetime) -> ReportingWindows:
    """Derive the window boundaries from ``now`` in its own timezone.

    Last month runs from ``start_of_last_month`` up to and including
    ``end_of_last_month``, which is midnight at the start of its final day.
    Activity later on that day counts towards neither month-over-month figure.
    """
    start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_month = start_of_today.replace(day=1)
    if start_of_month.month == 1:
        start_of_last_month = start_of_month.replace(year=start_of_month.year - 1, month=12)
    else:
        start_of_last_month = start_of_month.replace(month=start_of_month.month - 1)
    return ReportingWindows(
        now=now,
        start_of_today=start_of_today,
        start_of_month=start_of_month,
        start_of_last_month=start_of_last_month,
        end_of_last_month=start_of_month - timedelta(days=1),
        last_hour=now - timedelta(hours=1),
    )


# ---------------------------------------------------------------------------
# Data access
# ---------------------------------------------------------------------------


class MetricsSource(Protocol):
    """Read-only aggregate queries the collector depends on.

    Range arguments are inclusive at both ends. ``None`` means unbounded.
    """

    async def count_active_users(self, since: datetime) -> int: ...

    async def count_upcoming_events(self, since: datetime) -> int: ...

    async def count_clubs(
        self, created_from: datetime | None = None, created_until: datetime | None = None
    ) -> int: ...

    async def count_events(
        self, created_from: datetime | None = None, created_until: datetime | None = None
    ) -> int: ...

    async def count_attendance(
        self, since: datetime | None = None, until: datetime | None = None
    ) -> int: ...

    async def count_registrations(
        self, since: datetime | None = None, until: datetime | None = None
    ) -> int: ...

    async def count_active_club_memberships(self) -> int: ...

    async def top_clubs_by_members(self, limit: int) -> list[RankedClub]: ...

    async def count_events_by_category(self) -> list[tuple[str, int]]: ...

    async def club_creation_times(self) -> list[datetime]: ...

    async def event_creation_times(self) -> list[datetime]: ...


def _between(column, since: datetime | None, until: datetime | None) -> list:
    conditions = []
    if since is not None:
        conditions.append(column >= since)
    if until is not None:
        conditions.append(column <= until)
    return conditions


class SqlMetricsSource:
    """:class:`MetricsSource` backed by PostgreSQL, one session per query."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _scalar(self, stmt: Select) -> int:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one() or 0

    async def _rows(self, stmt: Select) -> list:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return list(result.all())

    async def count_active_users(self, since: datetime) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(User)
            .where(User.is_active.is_(True), User.last_login >= since)
        )

    async def count_upcoming_events(self, since: datetime) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(Event)
            .where(Event.is_deleted.is_(False), Event.start_date_time >= since)
        )

    async def count_clubs(self, created_from=None, created_until=None) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(Club)
            .where(
                Club.is_deleted.is_(False),
                *_between(Club.created_at, created_from, created_until),
            )
        )

    async def count_events(self, created_from=None, created_until=None) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(Event)
            .where(
                Event.is_deleted.is_(False),
                *_between(Event.created_at, created_from, created_until),
            )
        )

    async def count_attendance(self, since=None, until=None) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(EventAttendance)
            .where(*_between(EventAttendance.attend_time, since, until))
        )

    async def count_registrations(self, since=None, until=None) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(EventRegistration)
            .where(*_between(EventRegistration.registered_at, since, until))
        )

    async def count_active_club_memberships(self) -> int:
        return await self._scalar(
            select(func.count())
            .select_from(ClubMember)
            .join(Club, ClubMember.club_id == Club.id)
            .where(Club.is_active.is_(True), Club.is_deleted.is_(False))
        )

    async def top_clubs_by_members(self, limit: int) -> list[RankedClub]:
        member_count = (
            select(func.count(ClubMember.id))
            .where(ClubMember.club_id == Club.id)
            .correlate(Club)
            .scalar_subquery()
        )
        event_count = (
            select(func.count(Event.id))
            .where(Event.club_id == Club.id, Event.is_deleted.is_(False))
            .correlate(Club)
            .scalar_subquery()
        )
        rows = await self._rows(
            select(
                Club.id,
                Club.name,
                Club.created_at,
                member_count.label("member_count"),
                event_count.label("event_count"),
            )
            .where(Club.is_active.is_(True), Club.is_deleted.is_(False))
            .order_by(member_count.desc())
            .limit(limit)
        )
        return [
            RankedClub(
                id=row.id,
                name=row.name,
                created_at=row.created_at,
                member_count=int(row.member_count or 0),
                event_count=int(row.event_count or 0),
            )
            for row in rows
        ]

    async def count_events_by_category(self) -> list[tuple[str, int]]:
        rows = await self._rows(
            select(Event.category, func.count().label("count"))
            .where(Event.is_deleted.is_(False))
            .group_by(Event.category)
        )
        return [(row.category.value, row.count) for row in rows]

    async def club_creation_times(self) -> list[datetime]:
        rows = await self._rows(select(Club.created_at).where(Club.is_deleted.is_(False)))
        return [row.created_at for row in rows]

    async def event_creation_times(self) -> list[datetime]:
        rows = await self._rows(select(Event.created_at).where(Event.is_deleted.is_(False)))
        return [row.created_at for row in rows]


def get_metrics_source(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> MetricsSource:
    """FastAPI dependency returning the database-backed source."""
    return SqlMetricsSource(session_factory)


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


async def collect_raw_metrics(source: MetricsSource, now: datetime) -> RawMetrics:
    """Run every aggregate query concurrently and wait for all of them.

    The first failing query propagates its exception; no partial result is
    ever returned.
    """
    w = compute_windows(now)

    (
        active_users,
        concurrent_sessions,
        events_today,
        total_clubs,
        clubs_this_month,
        clubs_last_month,
        total_events,
        events_this_month,
        events_last_month,
        total_attendance,
        attendance_this_month,
        attendance_last_month,
        event_registrations,
        event_registrations_last_month,
        club_memberships,
        top_clubs,
        events_by_category,
        club_created_at,
        event_created_at,
    ) = await asyncio.gather(
        source.count_active_users(w.start_of_today),
        source.count_active_users(w.last_hour),
        source.count_upcoming_events(w.start_of_today),
        source.count_clubs(),
        source.count_clubs(created_from=w.start_of_month),
        source.count_clubs(created_from=w.start_of_last_month, created_until=w.end_of_last_month),
        source.count_events(),
        source.count_events(created_from=w.start_of_month),
        source.count_events(created_from=w.start_of_last_month, created_until=w.end_of_last_month),
        source.count_attendance(),
        source.count_attendance(since=w.start_of_month),
        source.count_attendance(since=w.start_of_last_month, until=w.end_of_last_month),
        source.count_registrations(),
        source.count_registrations(since=w.start_of_last_month, until=w.end_of_last_month),
        source.count_active_club_memberships(),
        source.top_clubs_by_members(TOP_CLUBS_LIMIT),
        source.count_events_by_category(),
        source.club_creation_times(),
        source.event_creation_times(),
    )

    return RawMetrics(
        active_users=active_users,
        concurrent_sessions=concurrent_sessions,
        events_today=events_today,
        total_clubs=total_clubs,
        clubs_this_month=clubs_this_month,
        clubs_last_month=clubs_last_month,
        total_events=total_events,
        events_this_month=events_this_month,
        events_last_month=events_last_month,
        total_attendance=total_attendance,
        attendance_this_month=attendance_this_month,
        attendance_last_month=attendance_last_month,
        event_registrations=event_registrations,
        event_registrations_last_month=event_registrations_last_month,
        club_memberships=club_memberships,
        top_clubs=top_clubs,
        events_by_category=events_by_category,
        club_created_at=club_created_at,
        event_created_at=event_created_at,
    )


async def build_analytics(source: MetricsSource, now: datetime | None = None) -> AnalyticsData:
    """Collect, derive and assemble the dashboard document for ``now``.

    ``now`` defaults to the current local time so that "today" and the month
    boundaries follow the server's calendar.
    """
    if now is None:
        now = datetime.now().astimezone()
    raw = await collect_raw_metrics(source, now)
    logger.debug(
        "Analytics collected: clubs=%d events=%d active_users=%d",
        raw.total_clubs,
        raw.total_events,
        raw.active_users,
    )
    return assemble_analytics(raw, derive_metrics(raw, now))
