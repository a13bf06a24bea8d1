"""Unit tests for the fixed-window rate limiter."""

from landmark_api.api.rate_limit import FixedWindowRateLimiter


class TestFixedWindowRateLimiter:
    def setup_method(self) -> None:
        self.now = 0.0
        self.limiter = FixedWindowRateLimiter(max_requests=3, window_seconds=60, clock=lambda: self.now)

    def test_allows_up_to_limit(self) -> None:
        assert [self.limiter.hit("1.2.3.4")[0] for _ in range(3)] == [True, True, True]

    def test_rejects_over_limit_with_retry_after(self) -> None:
        for _ in range(3):
            self.limiter.hit("1.2.3.4")
        self.now = 20.0
        allowed, retry_after = self.limiter.hit("1.2.3.4")
        assert allowed is False
        assert retry_after == 40.0

    def test_window_resets(self) -> None:
        for _ in range(3):
            self.limiter.hit("1.2.3.4")
        self.now = 60.0
        assert self.limiter.hit("1.2.3.4") == (True, 0.0)

    def test_rejected_requests_do_not_extend_window(self) -> None:
        for _ in range(5):
            self.limiter.hit("1.2.3.4")
        self.now = 59.0
        assert self.limiter.hit("1.2.3.4")[0] is False
        self.now = 60.0
        assert self.limiter.hit("1.2.3.4")[0] is True

    def test_clients_are_independent(self) -> None:
        for _ in range(3):
            self.limiter.hit("1.2.3.4")
        assert self.limiter.hit("5.6.7.8")[0] is True
        assert self.limiter.hit("1.2.3.4")[0] is False

    def test_stale_clients_are_pruned(self) -> None:
        self.limiter.hit("1.2.3.4")
        self.now = 120.0
        self.limiter.hit("5.6.7.8")
        assert set(self.limiter._windows) == {"5.6.7.8"}
