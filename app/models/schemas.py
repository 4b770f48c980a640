"""
Pydantic request/response contracts for the public API.

JSON keys are camelCase because the dashboard indexes fields by name;
Python attributes stay snake_case. Both spellings are accepted on input.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.db_models import EventCategory


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Analytics dashboard
# ---------------------------------------------------------------------------


class LiveMetrics(CamelModel):
    active_users: int
    concurrent_sessions: int
    events_today: int
    active_users_change: str
    sessions_change: str
    events_today_change: str


class SystemHealth(CamelModel):
    overall: int
    server_uptime: float
    database_performance: float
    api_response_rate: float
    user_satisfaction: float


class SummaryStats(CamelModel):
    total_clubs: int
    total_events: int
    total_members: int
    total_attendance: int
    club_growth: str
    event_growth: str
    attendance_growth: str


class EngagementMetric(CamelModel):
    metric: str
    value: int
    target: int


class PerformanceMetric(CamelModel):
    value: str
    change: str
    trend: Literal["up", "down"]


class PerformanceMetrics(CamelModel):
    user_engagement: PerformanceMetric
    event_success_rate: PerformanceMetric
    club_participation: PerformanceMetric
    content_quality: PerformanceMetric
    growth_velocity: PerformanceMetric


class TopPerformer(CamelModel):
    name: str
    members: int
    events: int
    score: float
    growth: str


class MonthlyGrowthPoint(CamelModel):
    month: str
    new_clubs: int
    new_events: int


class GeographicRegion(CamelModel):
    region: str
    clubs: int
    color: str


class CategoryCount(CamelModel):
    category: str
    count: int


class AnalyticsData(CamelModel):
    live_metrics: LiveMetrics
    system_health: SystemHealth
    summary_stats: SummaryStats
    engagement_metrics: List[EngagementMetric]
    performance_metrics: PerformanceMetrics
    top_performers: List[TopPerformer]
    monthly_growth: List[MonthlyGrowthPoint]
    geographic_data: List[GeographicRegion]
    events_by_category: List[CategoryCount]


class AnalyticsResponse(CamelModel):
    success: bool = True
    data: AnalyticsData


class AnalyticsErrorResponse(CamelModel):
    success: bool = False
    error: str


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class EventUpdate(CamelModel):
    """Body of ``PUT /events/{id}``. Required fields are checked by the endpoint
    so that a missing title yields 400 rather than a 422 validation error."""

    title: Optional[str] = None
    subtitle: Optional[str] = None
    category: EventCategory = EventCategory.OTHER
    description: Optional[str] = None
    start_date_time: Optional[datetime] = None
    end_date_time: Optional[datetime] = None
    venue: Optional[str] = None
    # Accepted for compatibility with older clients; organizers are clubs.
    event_organizer_id: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=0)


class EventCreate(EventUpdate):
    club_id: Optional[str] = None


class EventOrganizer(CamelModel):
    id: str
    name: str
    type: Literal["club"] = "club"


class EventOut(CamelModel):
    id: str
    title: str
    description: Optional[str]
    date: str
    time: str
    location: Optional[str]
    venue: Optional[str]
    cover_image: Optional[str]
    category: EventCategory
    max_capacity: Optional[int]
    registered_count: int
    is_active: bool
    is_paid: bool = False
    price: float = 0
    organizer: EventOrganizer
    created_at: str
    updated_at: str


class AgendaItemOut(CamelModel):
    id: str
    title: str
    start_time: datetime
    end_time: Optional[datetime]


class ResourcePersonOut(CamelModel):
    id: str
    name: str
    designation: Optional[str]
    photo: Optional[str]


class AddonOut(CamelModel):
    id: str
    name: str
    tags: List[str]


class EventDetailOut(EventOut):
    subtitle: Optional[str]
    agenda: List[AgendaItemOut]
    resource_persons: List[ResourcePersonOut]
    addons: List[AddonOut]


class EventMutationResponse(CamelModel):
    message: str
    event: EventOut


class MessageResponse(CamelModel):
    message: str


# ---------------------------------------------------------------------------
# Volunteer profile
# ---------------------------------------------------------------------------


class UserProfile(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str]
    image: Optional[str]
    created_at: datetime


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = None
    email: Optional[str] = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = None
    image: Optional[str] = None

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


class FeedbackItem(CamelModel):
    id: str
    volunteer_name: str
    club: str
    rating: int
    comment: Optional[str]
    date: Optional[str]
