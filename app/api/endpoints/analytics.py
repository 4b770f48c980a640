"""
Admin Analytics Endpoint — Dashboard

GET /api/v1/admin/analytics

Returns live counts, month-over-month growth, engagement figures, top clubs
and a six-month creation trend. Either the whole document is returned or a
generic 500. Partial results are never sent.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.analytics_store import MetricsSource, build_analytics, get_metrics_source
from app.core.limiter import limiter
from app.core.security import get_current_admin
from app.models.schemas import AnalyticsErrorResponse, AnalyticsResponse

logger = logging.getLogger(__name__)

router = APIRouter()

ANALYTICS_ERROR_MESSAGE = "Failed to fetch analytics data"


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    responses={500: {"model": AnalyticsErrorResponse}},
    summary="Get the admin analytics dashboard",
    description=(
        "Runs every aggregate query concurrently, derives percentages, growth "
        "rates and the monthly trend, and returns them as one document."
    ),
)
@limiter.limit("30/minute")
async def get_analytics(
    request: Request,
    source: MetricsSource = Depends(get_metrics_source),
    _: str = Depends(get_current_admin),
):
    try:
        data = await build_analytics(source)
    except Exception:
        logger.exception("Error fetching analytics data")
        return JSONResponse(
            status_code=500,
            content=AnalyticsErrorResponse(error=ANALYTICS_ERROR_MESSAGE).model_dump(),
        )
    return AnalyticsResponse(data=data)
