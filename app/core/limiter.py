"""
Shared rate limiter instance.

Endpoint modules decorate handlers with @limiter.limit(); main.py attaches
the limiter to app.state. Setting RATE_LIMIT_ENABLED=false turns every
limit into a no-op, which the test suite relies on.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.RATE_LIMIT_ENABLED,
)
