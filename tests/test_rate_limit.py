"""Tests for the rate limiting pure function and middleware integration."""

from studyroom.middleware.request_context import check_rate_limit


class TestCheckRateLimit:
    """Unit tests for the pure function, without middleware or HTTP."""

    def test_allows_within_limit(self):
        bucket: dict = {}
        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)
        assert allowed is True
        assert retry == 0.0

    def test_denies_after_exhaustion(self):
        bucket: dict = {}
        now = 0.0
        # Exhaust all tokens
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=now)

        allowed, retry = check_rate_limit(bucket, "client-a", max_per_minute=60, now=now)
        assert allowed is False
        assert retry > 0

    def test_refills_over_time(self):
        bucket: dict = {}
        # Exhaust tokens at t=0
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        # 2 seconds later: should have refilled ~2 tokens
        allowed, _ = check_rate_limit(bucket, "client-a", max_per_minute=60, now=2.0)
        assert allowed is True

    def test_separate_keys_independent(self):
        bucket: dict = {}
        for _ in range(60):
            check_rate_limit(bucket, "client-a", max_per_minute=60, now=0.0)

        # Different client should still have tokens
        allowed, _ = check_rate_limit(bucket, "client-b", max_per_minute=60, now=0.0)
        assert allowed is True

    def test_zero_limit_always_allows(self):
        bucket: dict = {}
        allowed, _ = check_rate_limit(bucket, "any", max_per_minute=0, now=0.0)
        assert allowed is True


class TestMiddlewareIntegration:

    def test_exhausted_bucket_returns_429(self, client, auth_headers, monkeypatch):
        from studyroom.core.config import settings
        monkeypatch.setattr(settings, "rate_limit_per_minute", 2)

        for _ in range(2):
            assert client.get("/api/study/templates", headers=auth_headers).status_code == 200

        resp = client.get("/api/study/templates", headers=auth_headers)
        assert resp.status_code == 429
        assert resp.json()["error"] == "RATE_LIMITED"
        assert "retry-after" in resp.headers

    def test_health_is_never_throttled(self, client, monkeypatch):
        from studyroom.core.config import settings
        monkeypatch.setattr(settings, "rate_limit_per_minute", 1)

        for _ in range(3):
            assert client.get("/health").status_code == 200
