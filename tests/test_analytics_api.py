from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

from app.core.analytics_store import get_metrics_source
from app.main import app
from fakes import BrokenRegistrationsSource, FakeClub, FakeEvent, FakeUser, InMemoryMetricsSource

ANALYTICS_URL = "/api/v1/admin/analytics"


@pytest.fixture
def use_source():
    def _install(source):
        app.dependency_overrides[get_metrics_source] = lambda: source
        return source

    yield _install
    app.dependency_overrides.pop(get_metrics_source, None)


def _populated_source() -> InMemoryMetricsSource:
    now = datetime.now().astimezone()
    long_ago = now - timedelta(days=400)
    return InMemoryMetricsSource(
        users=[FakeUser(last_login=now - timedelta(minutes=5)) for _ in range(200)],
        clubs=[
            FakeClub("c1", "Leo Club", long_ago, members=40),
            FakeClub("c2", "Rotaract", long_ago, members=60),
        ],
        events=[
            FakeEvent("c1", "WORKSHOP", long_ago, start_date_time=long_ago),
            FakeEvent("c2", "SPORTS", long_ago, start_date_time=long_ago),
            FakeEvent("c2", "SPORTS", long_ago, start_date_time=long_ago),
        ],
        attendance=[long_ago] * 40,
        registrations=[long_ago] * 50,
    )


@pytest.mark.asyncio
async def test_analytics_returns_dashboard_document(api_client: AsyncClient, as_admin, use_source):
    use_source(_populated_source())

    response = await api_client.get(ANALYTICS_URL)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    data = body["data"]
    assert data["liveMetrics"]["activeUsers"] == 200
    assert data["liveMetrics"]["activeUsersChange"] == "+30"
    assert data["summaryStats"]["totalClubs"] == 2
    assert data["summaryStats"]["totalEvents"] == 3
    assert data["summaryStats"]["totalMembers"] == 100
    assert data["engagementMetrics"][0] == {"metric": "User Engagement", "value": 25, "target": 75}
    assert data["engagementMetrics"][1]["value"] == 80
    assert data["performanceMetrics"]["eventSuccessRate"]["value"] == "80.0"
    assert data["performanceMetrics"]["clubParticipation"]["value"] == "50.0"
    assert data["performanceMetrics"]["contentQuality"]["value"] == "1.5"
    assert data["topPerformers"][0]["name"] == "Rotaract"
    assert len(data["monthlyGrowth"]) == 6
    assert len(data["geographicData"]) == 6
    assert {c["category"]: c["count"] for c in data["eventsByCategory"]} == {"WORKSHOP": 1, "SPORTS": 2}


@pytest.mark.asyncio
async def test_analytics_failure_returns_generic_error(api_client: AsyncClient, as_admin, use_source):
    use_source(BrokenRegistrationsSource(clubs=[FakeClub("c1", "Leo Club", datetime.now().astimezone())]))

    response = await api_client.get(ANALYTICS_URL)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch analytics data"}


@pytest.mark.asyncio
async def test_analytics_requires_admin_token(api_client: AsyncClient, use_source):
    use_source(InMemoryMetricsSource())

    response = await api_client.get(ANALYTICS_URL)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_analytics_rejects_invalid_token(api_client: AsyncClient, use_source):
    use_source(InMemoryMetricsSource())

    response = await api_client.get(ANALYTICS_URL, headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
