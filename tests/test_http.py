"""Tests for the retry-with-backoff HTTP helper."""

import asyncio

import httpx
import pytest

from ai_pulse.http import fetch_with_retry


# ── Helpers ──────────────────────────────────────────────────────────────


class _FlakyHandler:
    """MockTransport handler failing the first ``failures`` requests."""

    def __init__(self, failures: int, error: str = "status"):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.calls <= self.failures:
            if self.error == "timeout":
                raise httpx.ConnectTimeout("timed out", request=request)
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json={"ok": True})


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays: list[float] = []

    async def _fake_sleep(delay, *args, **kwargs):
        delays.append(delay)

    monkeypatch.setattr(asyncio, "sleep", _fake_sleep)
    return delays


def _fetch(handler, **kwargs) -> httpx.Response:
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_with_retry(client, "https://api.example.com/x", **kwargs)

    return asyncio.run(_run())


# ── fetch_with_retry tests ───────────────────────────────────────────────


class TestFetchWithRetry:
    """重试与线性退避测试"""

    def test_first_attempt_succeeds(self, sleeps):
        handler = _FlakyHandler(failures=0)
        resp = _fetch(handler)
        assert resp.json() == {"ok": True}
        assert handler.calls == 1
        assert sleeps == []

    def test_recovers_after_failures(self, sleeps):
        """失败两次后第三次成功"""
        handler = _FlakyHandler(failures=2)
        resp = _fetch(handler, max_attempts=3)
        assert resp.status_code == 200
        assert handler.calls == 3

    def test_linear_backoff(self, sleeps):
        """退避间隔 1s, 2s"""
        _fetch(_FlakyHandler(failures=2), max_attempts=3, base_delay=1.0)
        assert sleeps == [1.0, 2.0]

    def test_timeout_is_retried(self, sleeps):
        handler = _FlakyHandler(failures=1, error="timeout")
        assert _fetch(handler).status_code == 200
        assert handler.calls == 2

    def test_exhausted_raises_last_error(self, sleeps):
        handler = _FlakyHandler(failures=10)
        with pytest.raises(httpx.HTTPStatusError):
            _fetch(handler, max_attempts=3)
        assert handler.calls == 3
        assert sleeps == [1.0, 2.0]

    def test_single_attempt_no_sleep(self, sleeps):
        handler = _FlakyHandler(failures=10, error="timeout")
        with pytest.raises(httpx.ConnectTimeout):
            _fetch(handler, max_attempts=1)
        assert sleeps == []
