"""
Entry point for the ClubHub API.

Serves the admin analytics dashboard, club event management, volunteer
profiles with picture upload, and the recent-feedback feed under /api/v1.

Run with:
    uvicorn app.main:app --reload --port 8000
"""

import asyncio
import logging
import sys
import time
from contextlib import asynccontextmanager

# asyncpg is incompatible with ProactorEventLoop (Windows default in Python 3.8+).
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from app.core.config import settings

# ---------------------------------------------------------------------------
# Logging: one format for the API, the collector and the image host client
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Third-party loggers stay at WARNING
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

from app.core.database import engine  # noqa: E402
from app.core.limiter import limiter  # noqa: E402

# ---------------------------------------------------------------------------
# Lifespan: warm the pool the analytics fan-out draws from, dispose on exit
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)

    # Pre-warm the DB connection pool so the first dashboard load does not
    # pay for ~20 cold connections at once.
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection pool warmed up.")
    except Exception as exc:
        logger.warning("Could not pre-warm DB pool: %s", exc)

    yield

    await engine.dispose()
    logger.info("Database engine disposed. Shutdown complete.")


# ---------------------------------------------------------------------------
# ClubHub application
# ---------------------------------------------------------------------------

from app.api.endpoints import analytics, auth, events, feedbacks, users  # noqa: E402

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Club and volunteer management API. Administrators get an analytics "
        "dashboard and manage club events; volunteers maintain their profile "
        "and profile picture."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Per-route rate limits (disabled when RATE_LIMIT_ENABLED is false)
# ---------------------------------------------------------------------------

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ---------------------------------------------------------------------------
# Fallback for errors no endpoint translated; analytics formats its own 500
# ---------------------------------------------------------------------------

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"detail": detail},
    )


# ---------------------------------------------------------------------------
# Request timing log and CORS for the Streamlit dashboard
# ---------------------------------------------------------------------------

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)

# ---------------------------------------------------------------------------
# Routers: admin login, analytics, events, volunteer profiles, feedback
# ---------------------------------------------------------------------------

app.include_router(
    auth.router,
    prefix="/api/v1/auth",
    tags=["Auth"],
)

app.include_router(
    analytics.router,
    prefix="/api/v1/admin",
    tags=["Admin — Analytics Dashboard"],
)

app.include_router(
    events.router,
    prefix="/api/v1/events",
    tags=["Events"],
)

app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users — Volunteer Profile"],
)

app.include_router(
    feedbacks.router,
    prefix="/api/v1/feedbacks",
    tags=["Feedback"],
)

# ---------------------------------------------------------------------------
# Service and database health, used by the Status page
# ---------------------------------------------------------------------------

@app.get("/", tags=["Health"], summary="Root")
async def root() -> dict:
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"], summary="Health check")
async def health_check() -> dict:
    return {"status": "healthy"}


@app.get("/health/db", tags=["Health"], summary="Database connectivity check")
async def health_db() -> JSONResponse:
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            row = result.scalar()
    except Exception as exc:
        logger.warning("Database health check failed: %s", exc)
        content = {"status": "error"}
        if settings.DEBUG:
            content["error"] = str(exc)
        return JSONResponse(status_code=503, content=content)
    return JSONResponse(content={"status": "ok", "result": row})
