"""In-memory stand-ins for the database-backed analytics source."""

import asyncio
from dataclasses import dataclass
from datetime import datetime

from app.core.analytics import RankedClub


@dataclass
class FakeUser:
    last_login: datetime | None
    is_active: bool = True


@dataclass
class FakeClub:
    id: str
    name: str
    created_at: datetime
    members: int = 0
    is_active: bool = True
    is_deleted: bool = False


@dataclass
class FakeEvent:
    club_id: str
    category: str
    created_at: datetime
    start_date_time: datetime
    is_deleted: bool = False


def _within(value: datetime, since: datetime | None, until: datetime | None) -> bool:
    if since is not None and value < since:
        return False
    if until is not None and value > until:
        return False
    return True


class InMemoryMetricsSource:
    """Answers every aggregate query by filtering plain Python lists.

    Each call yields to the event loop once, so ``max_in_flight`` shows how
    many queries were outstanding at the same time.
    """

    def __init__(self, users=(), clubs=(), events=(), attendance=(), registrations=()):
        self.users = list(users)
        self.clubs = list(clubs)
        self.events = list(events)
        self.attendance = list(attendance)
        self.registrations = list(registrations)
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1

    def _live_clubs(self):
        return [c for c in self.clubs if not c.is_deleted]

    def _live_events(self):
        return [e for e in self.events if not e.is_deleted]

    async def count_active_users(self, since):
        await self._enter("count_active_users")
        return sum(
            1 for u in self.users
            if u.is_active and u.last_login is not None and u.last_login >= since
        )

    async def count_upcoming_events(self, since):
        await self._enter("count_upcoming_events")
        return sum(1 for e in self._live_events() if e.start_date_time >= since)

    async def count_clubs(self, created_from=None, created_until=None):
        await self._enter("count_clubs")
        return sum(
            1 for c in self._live_clubs() if _within(c.created_at, created_from, created_until)
        )

    async def count_events(self, created_from=None, created_until=None):
        await self._enter("count_events")
        return sum(
            1 for e in self._live_events() if _within(e.created_at, created_from, created_until)
        )

    async def count_attendance(self, since=None, until=None):
        await self._enter("count_attendance")
        return sum(1 for t in self.attendance if _within(t, since, until))

    async def count_registrations(self, since=None, until=None):
        await self._enter("count_registrations")
        return sum(1 for t in self.registrations if _within(t, since, until))

    async def count_active_club_memberships(self):
        await self._enter("count_active_club_memberships")
        return sum(c.members for c in self._live_clubs() if c.is_active)

    async def top_clubs_by_members(self, limit):
        await self._enter("top_clubs_by_members")
        ranked = sorted(
            (c for c in self._live_clubs() if c.is_active),
            key=lambda c: c.members,
            reverse=True,
        )[:limit]
        return [
            RankedClub(
                id=c.id,
                name=c.name,
                created_at=c.created_at,
                member_count=c.members,
                event_count=sum(1 for e in self._live_events() if e.club_id == c.id),
            )
            for c in ranked
        ]

    async def count_events_by_category(self):
        await self._enter("count_events_by_category")
        counts: dict[str, int] = {}
        for e in self._live_events():
            counts[e.category] = counts.get(e.category, 0) + 1
        return list(counts.items())

    async def club_creation_times(self):
        await self._enter("club_creation_times")
        return [c.created_at for c in self._live_clubs()]

    async def event_creation_times(self):
        await self._enter("event_creation_times")
        return [e.created_at for e in self._live_events()]


class BrokenRegistrationsSource(InMemoryMetricsSource):
    """Source whose registration count query always fails."""

    async def count_registrations(self, since=None, until=None):
        await self._enter("count_registrations")
        raise ConnectionError("registrations table unavailable")
