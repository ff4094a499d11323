"""Tests for the shared HTTP client's retry policy."""

from __future__ import annotations

import httpx
import pytest

from poly_edge.common.http import HttpClient, _is_retryable


def _status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://example.test/x")
    return httpx.HTTPStatusError("err", request=request, response=httpx.Response(code, request=request))


class TestIsRetryable:
    @pytest.mark.parametrize("code", [429, 500, 502, 503, 504])
    def test_transient_status(self, code):
        assert _is_retryable(_status_error(code))

    @pytest.mark.parametrize("code", [400, 401, 403, 404])
    def test_client_errors_not_retried(self, code):
        assert not _is_retryable(_status_error(code))

    def test_timeout(self):
        assert _is_retryable(httpx.ReadTimeout("slow"))

    def test_other_errors(self):
        assert not _is_retryable(ValueError("nope"))


@pytest.mark.asyncio
async def test_post_returns_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    client = HttpClient(base_url="https://example.test", timeout=5)
    client._client = httpx.AsyncClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    )
    async with client:
        resp = await client.post("/x", json={"a": 1})

    assert resp.json() == {"ok": True}


@pytest.mark.asyncio
async def test_post_raises_client_error_without_retry():
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(403)

    client = HttpClient(base_url="https://example.test", timeout=5)
    client._client = httpx.AsyncClient(
        base_url="https://example.test", transport=httpx.MockTransport(handler)
    )
    async with client:
        with pytest.raises(httpx.HTTPStatusError):
            await client.post("/x")

    assert calls == 1
