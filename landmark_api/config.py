"""Runtime configuration read from the environment.

Values come from environment variables, with a ``.env`` file in the working
directory loaded first if present.
"""

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # Upstreams
    wikipedia_api_url: str = "https://en.wikipedia.org/w/api.php"
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    user_agent: str = "LandmarkExplorer/1.0"
    http_timeout_seconds: float = 10.0
    max_search_radius_m: float = 10_000
    geosearch_limit: int = 50
    detail_concurrency: int = 50

    # Cache
    cache_backend: str = "memory"  # memory | redis
    redis_url: str = "redis://localhost:6379"
    landmark_cache_ttl_seconds: float = 15 * 60
    # 0 disables geocode caching
    geocode_cache_ttl_seconds: float = 0
    cache_sweep_interval_seconds: float = 60

    # HTTP surface
    rate_limit_max_requests: int = 100
    rate_limit_window_seconds: float = 15 * 60
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.cache_backend not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")
        for name in (
            "http_timeout_seconds",
            "max_search_radius_m",
            "landmark_cache_ttl_seconds",
            "cache_sweep_interval_seconds",
            "rate_limit_window_seconds",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        for name in ("geosearch_limit", "detail_concurrency", "rate_limit_max_requests"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.geocode_cache_ttl_seconds < 0:
            raise ValueError("geocode_cache_ttl_seconds cannot be negative")

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(find_dotenv(usecwd=True))
        defaults = cls()
        return cls(
            wikipedia_api_url=os.getenv("WIKIPEDIA_API_URL", defaults.wikipedia_api_url),
            nominatim_url=os.getenv("NOMINATIM_URL", defaults.nominatim_url),
            user_agent=os.getenv("USER_AGENT", defaults.user_agent),
            http_timeout_seconds=_env_float("HTTP_TIMEOUT_SECONDS", defaults.http_timeout_seconds),
            max_search_radius_m=_env_float("MAX_SEARCH_RADIUS_M", defaults.max_search_radius_m),
            geosearch_limit=_env_int("GEOSEARCH_LIMIT", defaults.geosearch_limit),
            detail_concurrency=_env_int("DETAIL_CONCURRENCY", defaults.detail_concurrency),
            cache_backend=os.getenv("CACHE_BACKEND", defaults.cache_backend).strip().lower(),
            redis_url=os.getenv("REDIS_URL", defaults.redis_url),
            landmark_cache_ttl_seconds=_env_float(
                "LANDMARK_CACHE_TTL_SECONDS", defaults.landmark_cache_ttl_seconds
            ),
            geocode_cache_ttl_seconds=_env_float(
                "GEOCODE_CACHE_TTL_SECONDS", defaults.geocode_cache_ttl_seconds
            ),
            cache_sweep_interval_seconds=_env_float(
                "CACHE_SWEEP_INTERVAL_SECONDS", defaults.cache_sweep_interval_seconds
            ),
            rate_limit_max_requests=_env_int("RATE_LIMIT_MAX_REQUESTS", defaults.rate_limit_max_requests),
            rate_limit_window_seconds=_env_float(
                "RATE_LIMIT_WINDOW_SECONDS", defaults.rate_limit_window_seconds
            ),
            cors_origins=_env_list("CORS_ORIGINS", defaults.cors_origins),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
        )
