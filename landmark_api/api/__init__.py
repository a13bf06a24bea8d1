"""HTTP API layer."""

from .rate_limit import FixedWindowRateLimiter, RateLimitMiddleware
from .routes import get_query_service, router

__all__ = ["FixedWindowRateLimiter", "RateLimitMiddleware", "get_query_service", "router"]
