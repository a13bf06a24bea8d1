"""Unit tests for environment-driven settings."""

import pytest

from landmark_api.config import Settings
from landmark_api.main import build_cache_store
from landmark_api.services.cache import InMemoryCacheStore, RedisCacheStore

ENV_VARS = [
    "CACHE_BACKEND",
    "LANDMARK_CACHE_TTL_SECONDS",
    "GEOCODE_CACHE_TTL_SECONDS",
    "HTTP_TIMEOUT_SECONDS",
    "RATE_LIMIT_MAX_REQUESTS",
    "CORS_ORIGINS",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env()
        assert settings.cache_backend == "memory"
        assert settings.landmark_cache_ttl_seconds == 900
        assert settings.geocode_cache_ttl_seconds == 0
        assert settings.rate_limit_max_requests == 100
        assert settings.rate_limit_window_seconds == 900
        assert settings.max_search_radius_m == 10_000
        assert settings.geosearch_limit == 50

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CACHE_BACKEND", "Redis")
        monkeypatch.setenv("GEOCODE_CACHE_TTL_SECONDS", "300")
        monkeypatch.setenv("HTTP_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "10")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env()

        assert settings.cache_backend == "redis"
        assert settings.geocode_cache_ttl_seconds == 300
        assert settings.http_timeout_seconds == 2.5
        assert settings.rate_limit_max_requests == 10
        assert settings.cors_origins == ["https://a.example", "https://b.example"]
        assert settings.log_level == "DEBUG"

    def test_blank_value_uses_default(self, monkeypatch) -> None:
        monkeypatch.setenv("LANDMARK_CACHE_TTL_SECONDS", "")
        assert Settings.from_env().landmark_cache_ttl_seconds == 900

    def test_non_numeric_value(self, monkeypatch) -> None:
        monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "lots")
        with pytest.raises(ValueError, match="RATE_LIMIT_MAX_REQUESTS"):
            Settings.from_env()

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="CACHE_BACKEND"):
            Settings(cache_backend="memcached")

    def test_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError):
            Settings(landmark_cache_ttl_seconds=0)

    def test_negative_geocode_ttl(self) -> None:
        with pytest.raises(ValueError):
            Settings(geocode_cache_ttl_seconds=-1)


class TestBuildCacheStore:
    def test_memory_backend(self) -> None:
        assert isinstance(build_cache_store(Settings()), InMemoryCacheStore)

    def test_redis_backend(self) -> None:
        store = build_cache_store(Settings(cache_backend="redis", redis_url="redis://cache:6379/1"))
        assert isinstance(store, RedisCacheStore)
