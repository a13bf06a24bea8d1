"""Shared test fixtures: a controllable clock and fake upstream services."""

import pytest

from landmark_api.models import (
    BoundingBox,
    GeocodeResult,
    Landmark,
    LandmarkDetails,
    UpstreamError,
)
from landmark_api.services.cache import InMemoryCacheStore
from landmark_api.services.landmark_query import LandmarkQueryService


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWikipedia:
    """Stands in for WikipediaService and counts calls."""

    def __init__(self) -> None:
        self.landmarks = [
            Landmark(pageid=1, title="Bank of England", lat=51.5142, lon=-0.0885, distance_km=0.12),
            Landmark(pageid=2, title="Royal Exchange", lat=51.5133, lon=-0.0866, distance_km=0.25),
            Landmark(pageid=3, title="Mansion House", lat=51.5129, lon=-0.0910, distance_km=0.31),
        ]
        self.failing_pageids: set[int] = set()
        self.search_error: Exception | None = None
        self.place_results: list[GeocodeResult] = []
        self.place_error: Exception | None = None

        self.search_calls = 0
        self.detail_calls = 0
        self.place_calls = 0

    async def search_landmarks(self, bounds: BoundingBox) -> list[Landmark]:
        self.search_calls += 1
        if self.search_error is not None:
            raise self.search_error
        return list(self.landmarks)

    async def get_landmark_details(self, pageid: int) -> LandmarkDetails:
        self.detail_calls += 1
        if pageid in self.failing_pageids:
            raise UpstreamError(f"details for {pageid} failed")
        return LandmarkDetails(
            pageid=pageid,
            title=f"Page {pageid}",
            extract=f"Extract for {pageid}",
            thumbnail_url=f"https://upload.wikimedia.org/thumb/{pageid}.jpg",
        )

    async def search_place(self, query: str) -> list[GeocodeResult]:
        self.place_calls += 1
        if self.place_error is not None:
            raise self.place_error
        return list(self.place_results)


class FakeNominatim:
    """Stands in for NominatimService and counts calls."""

    def __init__(self) -> None:
        self.result: GeocodeResult | None = None
        self.error: Exception | None = None
        self.calls = 0

    async def search(self, query: str) -> GeocodeResult | None:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryCacheStore:
    return InMemoryCacheStore(clock=clock)


@pytest.fixture
def fake_wikipedia() -> FakeWikipedia:
    return FakeWikipedia()


@pytest.fixture
def fake_nominatim() -> FakeNominatim:
    return FakeNominatim()


@pytest.fixture
def query_service(
    store: InMemoryCacheStore,
    fake_wikipedia: FakeWikipedia,
    fake_nominatim: FakeNominatim,
    clock: FakeClock,
) -> LandmarkQueryService:
    return LandmarkQueryService(
        store=store,
        wikipedia=fake_wikipedia,
        nominatim=fake_nominatim,
        clock=clock,
    )


@pytest.fixture
def london_bounds() -> BoundingBox:
    return BoundingBox(north=51.51, south=51.50, east=-0.08, west=-0.10)
