from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from app.api.endpoints import feedbacks as feedbacks_endpoint
from app.api.endpoints import users as users_endpoint
from app.core.image_host import ImageUploadError
from app.core.user_store import UserNotFoundError, _feedback_to_item
from app.models.db_models import Club, Feedback, User
from app.models.schemas import FeedbackItem

USERS_URL = "/api/v1/users"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _user(**changes) -> User:
    user = User(
        id="user-1",
        first_name="Kasun",
        last_name="Silva",
        email="kasun@example.lk",
        phone="+94770000000",
        image=None,
        created_at=datetime(2025, 11, 2, tzinfo=timezone.utc),
    )
    for attr, value in changes.items():
        setattr(user, attr, value)
    return user


@pytest.fixture
def user_store(monkeypatch):
    """Replaces the profile store with a dict-backed one."""
    users = {"user-1": _user()}

    async def fake_get(user_id, db):
        if user_id not in users:
            raise UserNotFoundError(user_id)
        return users[user_id]

    async def fake_update(user_id, changes, db):
        user = await fake_get(user_id, db)
        for attr, value in changes.items():
            setattr(user, attr, value)
        return user

    monkeypatch.setattr(users_endpoint, "get_user", fake_get)
    monkeypatch.setattr(users_endpoint, "update_user", fake_update)
    return users


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_profile(api_client: AsyncClient, db_session, user_store):
    response = await api_client.get(f"{USERS_URL}/user-1")

    assert response.status_code == 200
    body = response.json()
    assert body["firstName"] == "Kasun"
    assert body["email"] == "kasun@example.lk"
    assert body["image"] is None


@pytest.mark.asyncio
async def test_get_unknown_profile(api_client: AsyncClient, db_session, user_store):
    response = await api_client.get(f"{USERS_URL}/ghost")

    assert response.status_code == 404
    assert response.json() == {"detail": "User not found"}


@pytest.mark.asyncio
async def test_partial_update_only_touches_sent_fields(api_client: AsyncClient, db_session, user_store):
    response = await api_client.put(f"{USERS_URL}/user-1", json={"phone": "+94771234567"})

    assert response.status_code == 200
    body = response.json()
    assert body["phone"] == "+94771234567"
    assert body["firstName"] == "Kasun"
    assert body["email"] == "kasun@example.lk"


@pytest.mark.asyncio
async def test_update_rejects_malformed_email(api_client: AsyncClient, db_session, user_store):
    response = await api_client.put(f"{USERS_URL}/user-1", json={"email": "not-an-email"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_rejects_blank_first_name(api_client: AsyncClient, db_session, user_store):
    response = await api_client.put(f"{USERS_URL}/user-1", json={"firstName": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["firstName", "lastName", "email"])
async def test_update_rejects_null_for_required_columns(
    api_client: AsyncClient, db_session, monkeypatch, field
):
    calls = []

    async def fake_update(user_id, changes, db):
        calls.append(changes)

    monkeypatch.setattr(users_endpoint, "update_user", fake_update)

    response = await api_client.put(f"{USERS_URL}/user-1", json={field: None})

    assert response.status_code == 422
    assert calls == []


@pytest.mark.asyncio
async def test_update_can_clear_phone(api_client: AsyncClient, db_session, user_store):
    response = await api_client.put(f"{USERS_URL}/user-1", json={"phone": None})

    assert response.status_code == 200
    assert response.json()["phone"] is None
    assert user_store["user-1"].first_name == "Kasun"


@pytest.mark.asyncio
async def test_update_with_taken_email_conflicts(api_client: AsyncClient, db_session, monkeypatch):
    async def fake_update(user_id, changes, db):
        raise IntegrityError("UPDATE users", {}, Exception("duplicate key"))

    monkeypatch.setattr(users_endpoint, "update_user", fake_update)

    response = await api_client.put(f"{USERS_URL}/user-1", json={"email": "taken@example.lk"})

    assert response.status_code == 409
    db_session.rollback.assert_awaited_once()


# ---------------------------------------------------------------------------
# Avatar
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_avatar_upload_stores_hosted_url(api_client: AsyncClient, db_session, user_store, monkeypatch):
    uploaded = {}

    async def fake_upload(filename, content, content_type):
        uploaded.update(filename=filename, size=len(content), content_type=content_type)
        return "https://res.cloudinary.com/clubhub-test/image/upload/v1/avatar.png"

    monkeypatch.setattr(users_endpoint, "upload_image", fake_upload)

    response = await api_client.post(
        f"{USERS_URL}/user-1/avatar",
        files={"file": ("avatar.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 200
    assert response.json()["image"].endswith("/avatar.png")
    assert uploaded == {"filename": "avatar.png", "size": len(PNG_BYTES), "content_type": "image/png"}
    assert user_store["user-1"].image.startswith("https://res.cloudinary.com/")


@pytest.mark.asyncio
async def test_avatar_rejects_non_images(api_client: AsyncClient, db_session, user_store):
    response = await api_client.post(
        f"{USERS_URL}/user-1/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 415


@pytest.mark.asyncio
async def test_avatar_rejects_oversized_files(api_client: AsyncClient, db_session, user_store):
    big = b"\x00" * (users_endpoint.MAX_AVATAR_BYTES + 1)
    response = await api_client.post(
        f"{USERS_URL}/user-1/avatar",
        files={"file": ("huge.png", big, "image/png")},
    )
    assert response.status_code == 413


@pytest.mark.asyncio
async def test_avatar_for_unknown_user(api_client: AsyncClient, db_session, user_store):
    response = await api_client.post(
        f"{USERS_URL}/ghost/avatar",
        files={"file": ("avatar.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_avatar_host_failure_leaves_profile_untouched(
    api_client: AsyncClient, db_session, user_store, monkeypatch
):
    async def failing_upload(filename, content, content_type):
        raise ImageUploadError("Failed to upload image")

    monkeypatch.setattr(users_endpoint, "upload_image", failing_upload)

    response = await api_client.post(
        f"{USERS_URL}/user-1/avatar",
        files={"file": ("avatar.png", PNG_BYTES, "image/png")},
    )

    assert response.status_code == 502
    assert user_store["user-1"].image is None


# ---------------------------------------------------------------------------
# Feedback feed
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize("query, expected_limit", [({}, 5), ({"limit": 3}, 3), ({"limit": 500}, 50)])
async def test_feedback_limit(api_client: AsyncClient, db_session, monkeypatch, query, expected_limit):
    seen = []

    async def fake_list(limit, db):
        seen.append(limit)
        return [
            FeedbackItem(
                id="fb-1",
                volunteer_name="Kasun Silva",
                club="Leo Club",
                rating=5,
                comment="Great event",
                date="2026-03-10",
            )
        ]

    monkeypatch.setattr(feedbacks_endpoint, "list_recent_feedbacks", fake_list)

    response = await api_client.get("/api/v1/feedbacks", params=query)

    assert response.status_code == 200
    assert seen == [expected_limit]
    assert response.json()[0]["volunteerName"] == "Kasun Silva"


@pytest.mark.asyncio
async def test_feedback_limit_must_be_positive(api_client: AsyncClient, db_session):
    response = await api_client.get("/api/v1/feedbacks", params={"limit": 0})
    assert response.status_code == 422


def test_feedback_without_user_or_club():
    row = Feedback(id="fb-2", rating=4, comment=None, created_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
    row.user = None
    row.club = None

    item = _feedback_to_item(row)

    assert item.volunteer_name == "Anonymous"
    assert item.club == "Unknown"
    assert item.date == "2026-03-01"


def test_feedback_with_user_and_club():
    row = Feedback(id="fb-3", rating=5, comment="Loved it", created_at=datetime(2026, 3, 2, tzinfo=timezone.utc))
    row.user = _user()
    row.club = Club(id="club-1", name="Rotaract")

    item = _feedback_to_item(row)

    assert item.volunteer_name == "Kasun Silva"
    assert item.club == "Rotaract"
