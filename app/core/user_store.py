"""
Async store for volunteer profiles and the recent-feedback feed.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.db_models import Feedback, User
from app.models.schemas import FeedbackItem


class UserNotFoundError(LookupError):
    pass


async def get_user(user_id: str, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def update_user(user_id: str, changes: dict[str, Any], db: AsyncSession) -> User:
    """Apply a partial profile update. Keys are ``User`` attribute names."""
    user = await get_user(user_id, db)
    for attr, value in changes.items():
        setattr(user, attr, value)
    await db.commit()
    await db.refresh(user)
    return user


async def list_recent_feedbacks(limit: int, db: AsyncSession) -> list[FeedbackItem]:
    """Return the newest feedback entries shaped for the dashboard feed."""
    result = await db.execute(
        select(Feedback)
        .options(selectinload(Feedback.user), selectinload(Feedback.club))
        .order_by(Feedback.created_at.desc())
        .limit(limit)
    )
    return [_feedback_to_item(row) for row in result.scalars().all()]


def _feedback_to_item(row: Feedback) -> FeedbackItem:
    if row.user is not None:
        name = f"{row.user.first_name or ''} {row.user.last_name or ''}".strip()
    else:
        name = "Anonymous"
    return FeedbackItem(
        id=row.id,
        volunteer_name=name or "Anonymous",
        club=row.club.name if row.club is not None else "Unknown",
        rating=row.rating,
        comment=row.comment,
        date=row.created_at.date().isoformat() if row.created_at else None,
    )
