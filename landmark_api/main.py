"""Landmark API FastAPI application.

Main entry point for the backend API server. ``create_app`` wires the cache
store, its sweeper, the upstream clients and the query service from
Settings; nothing is built at import time except the default ``app``.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from landmark_api.api import FixedWindowRateLimiter, RateLimitMiddleware, router
from landmark_api.config import Settings
from landmark_api.models import AppError, ErrorCode, LandmarkAPIError
from landmark_api.services.cache import (
    CacheStore,
    CacheSweeper,
    InMemoryCacheStore,
    RedisCacheStore,
)
from landmark_api.services.landmark_query import LandmarkQueryService
from landmark_api.services.nominatim import NominatimService
from landmark_api.services.wikipedia import WikipediaService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def build_cache_store(settings: Settings) -> CacheStore:
    if settings.cache_backend == "redis":
        return RedisCacheStore(redis_url=settings.redis_url)
    return InMemoryCacheStore()


def _error_response(status_code: int, error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error.model_dump(mode="json")},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        store = build_cache_store(settings)
        wikipedia = WikipediaService(
            api_url=settings.wikipedia_api_url,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout_seconds,
            max_radius_m=settings.max_search_radius_m,
            geosearch_limit=settings.geosearch_limit,
            max_concurrency=settings.detail_concurrency,
        )
        nominatim = NominatimService(
            search_url=settings.nominatim_url,
            user_agent=settings.user_agent,
            timeout=settings.http_timeout_seconds,
        )
        app.state.query_service = LandmarkQueryService(
            store=store,
            wikipedia=wikipedia,
            nominatim=nominatim,
            landmark_ttl_seconds=settings.landmark_cache_ttl_seconds,
            geocode_ttl_seconds=settings.geocode_cache_ttl_seconds,
        )
        logger.info(f"[APP] Cache backend: {settings.cache_backend}")

        async with CacheSweeper(store, settings.cache_sweep_interval_seconds):
            yield

        # Shutdown
        await wikipedia.close()
        await nominatim.close()
        if isinstance(store, RedisCacheStore):
            await store.disconnect()

    app = FastAPI(
        title="Landmark API",
        description="Cached Wikipedia landmark search and geocoding for map viewports",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS must wrap the rate limiter; the last middleware added runs outermost
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["Retry-After"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(f"[HTTP] {request.method} {request.url.path} {response.status_code} in {elapsed_ms:.0f}ms")
        return response

    # Global exception handlers
    @app.exception_handler(LandmarkAPIError)
    async def landmark_api_exception_handler(request: Request, exc: LandmarkAPIError):
        """Map service errors to their HTTP status."""
        if exc.status_code >= 500:
            logger.error(f"[HTTP] {request.url.path}: {exc.code.value}: {exc.message}")
        return _error_response(exc.status_code, exc.to_app_error())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle missing or malformed query parameters."""
        return _error_response(
            400,
            AppError(
                code=ErrorCode.VALIDATION_ERROR,
                message=str(exc.errors()),
                user_message="Invalid request format. Please check your input.",
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors."""
        logger.exception("Unhandled error")
        return _error_response(
            500,
            AppError(
                code=ErrorCode.API_ERROR,
                message=str(exc),
                user_message="Something went wrong. Please try again.",
            ),
        )

    # Include API routes
    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


settings = Settings.from_env()
configure_logging(settings.log_level)
app = create_app(settings)
