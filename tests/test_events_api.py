from datetime import datetime, timezone

import pytest
from httpx import AsyncClient

from app.api.endpoints import events as events_endpoint
from app.core.event_store import (
    ClubNotFoundError,
    EventNotFoundError,
    event_to_detail,
    event_to_out,
    new_event_id,
)
from app.models.db_models import (
    Club,
    Event,
    EventAddon,
    EventAgendaItem,
    EventCategory,
    EventRegistration,
    EventResourcePerson,
)

EVENTS_URL = "/api/v1/events"
CREATED = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


def _event(event_id="evt_1", start=None, registrations=2, **kwargs) -> Event:
    club = Club(id="club-1", name="Leo Club", is_active=True, is_deleted=False)
    event = Event(
        id=event_id,
        title=kwargs.pop("title", "Beach Cleanup"),
        club_id=club.id,
        category=kwargs.pop("category", EventCategory.VOLUNTEERING),
        start_date_time=start or datetime(2026, 4, 12, 8, 30, tzinfo=timezone.utc),
        venue="Mount Lavinia",
        max_participants=40,
        is_deleted=False,
        created_at=CREATED,
        updated_at=CREATED,
        **kwargs,
    )
    event.club = club
    event.registrations = [
        EventRegistration(id=f"reg-{i}", event_id=event_id, user_id=f"user-{i}")
        for i in range(registrations)
    ]
    event.agenda = []
    event.resource_persons = []
    event.addons = []
    return event


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def test_new_event_id_format():
    event_id = new_event_id()
    prefix, millis, suffix = event_id.split("_")
    assert prefix == "evt"
    assert millis.isdigit()
    assert len(suffix) == 9
    assert suffix.isalnum() and suffix.lower() == suffix


def test_event_summary_fields():
    event = _event()
    out = event_to_out(event, now=datetime(2026, 3, 1, tzinfo=timezone.utc))

    assert out.date == "2026-04-12"
    assert out.time == "08:30"
    assert out.location == "Mount Lavinia"
    assert out.registered_count == 2
    assert out.max_capacity == 40
    assert out.is_active is True
    assert out.organizer.name == "Leo Club"
    assert out.organizer.type == "club"


def test_past_event_is_not_active():
    event = _event(start=datetime(2026, 1, 5, tzinfo=timezone.utc))
    assert event_to_out(event, now=datetime(2026, 3, 1, tzinfo=timezone.utc)).is_active is False


def test_event_detail_takes_cover_from_first_addon_tag():
    event = _event(cover_image="https://img.example/cover.png")
    event.addons = [
        EventAddon(id="a1", event_id=event.id, name="Banner", tags=["https://img.example/banner.png"]),
        EventAddon(id="a2", event_id=event.id, name="T-shirt", tags=["M", "L"]),
    ]
    event.agenda = [
        EventAgendaItem(
            id="ag1",
            event_id=event.id,
            title="Briefing",
            start_time=datetime(2026, 4, 12, 8, 30, tzinfo=timezone.utc),
        )
    ]
    event.resource_persons = [
        EventResourcePerson(id="rp1", event_id=event.id, name="Nimali Perera", designation="Coordinator")
    ]

    detail = event_to_detail(event)

    assert detail.cover_image == "https://img.example/banner.png"
    assert [a.title for a in detail.agenda] == ["Briefing"]
    assert detail.resource_persons[0].designation == "Coordinator"
    assert detail.addons[1].tags == ["M", "L"]


def test_event_detail_falls_back_to_cover_image():
    event = _event(cover_image="https://img.example/cover.png")
    event.addons = [EventAddon(id="a1", event_id=event.id, name="Lunch", tags=[])]

    assert event_to_detail(event).cover_image == "https://img.example/cover.png"


# ---------------------------------------------------------------------------
# HTTP surface
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_events_passes_club_filter(api_client: AsyncClient, db_session, monkeypatch):
    seen = {}

    async def fake_list(db, club_id=None):
        seen["club_id"] = club_id
        return [_event()]

    monkeypatch.setattr(events_endpoint, "list_events", fake_list)

    response = await api_client.get(EVENTS_URL, params={"clubId": "club-1"})

    assert response.status_code == 200
    assert seen["club_id"] == "club-1"
    body = response.json()
    assert body[0]["registeredCount"] == 2
    assert body[0]["category"] == "VOLUNTEERING"
    assert body[0]["organizer"] == {"id": "club-1", "name": "Leo Club", "type": "club"}


@pytest.mark.asyncio
async def test_get_missing_event_returns_404(api_client: AsyncClient, db_session, monkeypatch):
    async def fake_get(event_id, db):
        return None

    monkeypatch.setattr(events_endpoint, "get_event", fake_get)

    response = await api_client.get(f"{EVENTS_URL}/evt_missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Event not found"}


@pytest.mark.asyncio
async def test_create_event_requires_admin(api_client: AsyncClient, db_session):
    response = await api_client.post(
        EVENTS_URL,
        json={"title": "Quiz Night", "clubId": "club-1", "startDateTime": "2026-05-01T18:00:00Z"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"clubId": "club-1", "startDateTime": "2026-05-01T18:00:00Z"},
        {"title": "Quiz Night", "startDateTime": "2026-05-01T18:00:00Z"},
        {"title": "Quiz Night", "clubId": "club-1"},
        {"title": "", "clubId": "club-1", "startDateTime": "2026-05-01T18:00:00Z"},
    ],
)
async def test_create_event_missing_fields(api_client: AsyncClient, db_session, as_admin, payload):
    response = await api_client.post(EVENTS_URL, json=payload)

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing required fields"}


@pytest.mark.asyncio
async def test_create_event(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    received = {}

    async def fake_create(data, db):
        received["data"] = data
        return _event(event_id="evt_new", registrations=0, title=data.title, category=data.category)

    monkeypatch.setattr(events_endpoint, "create_event", fake_create)

    response = await api_client.post(
        EVENTS_URL,
        json={
            "title": "Quiz Night",
            "clubId": "club-1",
            "category": "SOCIAL",
            "startDateTime": "2026-05-01T18:00:00Z",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Event created successfully"
    assert body["event"]["title"] == "Quiz Night"
    assert body["event"]["category"] == "SOCIAL"
    assert received["data"].club_id == "club-1"


@pytest.mark.asyncio
async def test_create_event_defaults_category_to_other(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    received = {}

    async def fake_create(data, db):
        received["category"] = data.category
        return _event(event_id="evt_new", category=data.category)

    monkeypatch.setattr(events_endpoint, "create_event", fake_create)

    await api_client.post(
        EVENTS_URL,
        json={"title": "Quiz Night", "clubId": "club-1", "startDateTime": "2026-05-01T18:00:00Z"},
    )

    assert received["category"] == EventCategory.OTHER


@pytest.mark.asyncio
async def test_create_event_for_unknown_club(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    async def fake_create(data, db):
        raise ClubNotFoundError(data.club_id)

    monkeypatch.setattr(events_endpoint, "create_event", fake_create)

    response = await api_client.post(
        EVENTS_URL,
        json={"title": "Quiz Night", "clubId": "nope", "startDateTime": "2026-05-01T18:00:00Z"},
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "Club not found"}


@pytest.mark.asyncio
async def test_create_event_rejects_unknown_category(api_client: AsyncClient, db_session, as_admin):
    response = await api_client.post(
        EVENTS_URL,
        json={
            "title": "Quiz Night",
            "clubId": "club-1",
            "category": "PICNIC",
            "startDateTime": "2026-05-01T18:00:00Z",
        },
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_event(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    async def fake_update(event_id, data, db):
        return _event(event_id=event_id, title=data.title, start=data.start_date_time)

    monkeypatch.setattr(events_endpoint, "update_event", fake_update)

    response = await api_client.put(
        f"{EVENTS_URL}/evt_1",
        json={"title": "Beach Cleanup II", "startDateTime": "2026-06-01T07:00:00Z"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Event updated successfully"
    assert body["event"]["title"] == "Beach Cleanup II"
    assert body["event"]["date"] == "2026-06-01"


@pytest.mark.asyncio
async def test_update_missing_event(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    async def fake_update(event_id, data, db):
        raise EventNotFoundError(event_id)

    monkeypatch.setattr(events_endpoint, "update_event", fake_update)

    response = await api_client.put(
        f"{EVENTS_URL}/evt_missing",
        json={"title": "Anything", "startDateTime": "2026-06-01T07:00:00Z"},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_requires_title_and_start(api_client: AsyncClient, db_session, as_admin):
    response = await api_client.put(f"{EVENTS_URL}/evt_1", json={"venue": "Galle Face"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing required fields"}


@pytest.mark.asyncio
async def test_delete_event(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    deleted = []

    async def fake_delete(event_id, db):
        deleted.append(event_id)

    monkeypatch.setattr(events_endpoint, "soft_delete_event", fake_delete)

    response = await api_client.delete(f"{EVENTS_URL}/evt_1")

    assert response.status_code == 200
    assert response.json() == {"message": "Event deleted successfully"}
    assert deleted == ["evt_1"]


@pytest.mark.asyncio
async def test_delete_missing_event(api_client: AsyncClient, db_session, as_admin, monkeypatch):
    async def fake_delete(event_id, db):
        raise EventNotFoundError(event_id)

    monkeypatch.setattr(events_endpoint, "soft_delete_event", fake_delete)

    response = await api_client.delete(f"{EVENTS_URL}/evt_missing")

    assert response.status_code == 404
    assert response.json() == {"detail": "Event not found"}
