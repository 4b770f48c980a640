"""
SQLAlchemy ORM models for the ClubHub database tables.
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import ARRAY, Boolean, DateTime, Enum, ForeignKey, Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class EventCategory(str, enum.Enum):
    WORKSHOP = "WORKSHOP"
    SEMINAR = "SEMINAR"
    COMPETITION = "COMPETITION"
    SOCIAL = "SOCIAL"
    VOLUNTEERING = "VOLUNTEERING"
    SPORTS = "SPORTS"
    CULTURAL = "CULTURAL"
    OTHER = "OTHER"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    first_name: Mapped[str] = mapped_column(nullable=False)
    last_name: Mapped[str] = mapped_column(nullable=False, default="")
    email: Mapped[str] = mapped_column(nullable=False, unique=True)
    phone: Mapped[str | None] = mapped_column(nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class Club(Base):
    __tablename__ = "clubs"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    members: Mapped[list["ClubMember"]] = relationship(back_populates="club")
    events: Mapped[list["Event"]] = relationship(back_populates="club")


class ClubMember(Base):
    __tablename__ = "club_members"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    club: Mapped[Club] = relationship(back_populates="members")


class Event(Base):
    """A club event. Rows are never removed; ``is_deleted`` hides them."""

    __tablename__ = "events"

    id: Mapped[str] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(nullable=False)
    subtitle: Mapped[str | None] = mapped_column(nullable=True)
    club_id: Mapped[str] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    category: Mapped[EventCategory] = mapped_column(
        Enum(EventCategory, name="event_category"),
        nullable=False,
        default=EventCategory.OTHER,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    end_date_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    venue: Mapped[str | None] = mapped_column(nullable=True)
    cover_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    club: Mapped[Club] = relationship(back_populates="events")
    registrations: Mapped[list["EventRegistration"]] = relationship(back_populates="event")
    agenda: Mapped[list["EventAgendaItem"]] = relationship(
        order_by="EventAgendaItem.start_time",
    )
    resource_persons: Mapped[list["EventResourcePerson"]] = relationship()
    addons: Mapped[list["EventAddon"]] = relationship()


class EventRegistration(Base):
    __tablename__ = "event_registrations"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    event: Mapped[Event] = relationship(back_populates="registrations")


class EventAttendance(Base):
    __tablename__ = "event_attendances"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    attend_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )


class EventAgendaItem(Base):
    __tablename__ = "event_agenda_items"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(nullable=False)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class EventResourcePerson(Base):
    __tablename__ = "event_resource_persons"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(nullable=False)
    designation: Mapped[str | None] = mapped_column(nullable=True)
    photo: Mapped[str | None] = mapped_column(Text, nullable=True)


class EventAddon(Base):
    __tablename__ = "event_addons"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(ForeignKey("events.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(nullable=False)
    # First tag of the first addon doubles as the event's cover image URL
    tags: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)


class Feedback(Base):
    __tablename__ = "feedbacks"

    id: Mapped[str] = mapped_column(primary_key=True, default=_new_id)
    user_id: Mapped[str | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    club_id: Mapped[str | None] = mapped_column(ForeignKey("clubs.id"), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    user: Mapped[User | None] = relationship()
    club: Mapped[Club | None] = relationship()
