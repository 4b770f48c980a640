"""
Feedback Endpoint

GET /api/v1/feedbacks?limit=5  →  newest volunteer feedback for the dashboard feed.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.limiter import limiter
from app.core.user_store import list_recent_feedbacks
from app.models.schemas import FeedbackItem

router = APIRouter()


@router.get(
    "",
    response_model=List[FeedbackItem],
    summary="List recent feedback",
    description="Returns the newest entries first. `limit` defaults to 5 and is capped.",
)
@limiter.limit("60/minute")
async def get_feedbacks(
    request: Request,
    limit: int = Query(default=5, ge=1),
    db: AsyncSession = Depends(get_db),
) -> List[FeedbackItem]:
    return await list_recent_feedbacks(min(limit, settings.FEEDBACK_MAX_LIMIT), db)
