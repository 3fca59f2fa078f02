# tests/test_proxy_handler.py

from __future__ import annotations

import json
import logging

import pytest

from smart_todo.proxy.errors import InvalidCredential, MalformedRequest, RateLimited, UpstreamUnavailable
from smart_todo.proxy.handler import ProxyHandler, extract_credential

from .fakes import FakeUpstream, FakeUpstreamFactory, reply_body

BODY = json.dumps({"messages": [{"role": "user", "content": "hi"}]}).encode()


def _handler(upstream: FakeUpstream | None = None) -> tuple[ProxyHandler, FakeUpstreamFactory]:
    factory = FakeUpstreamFactory(upstream)
    return ProxyHandler(factory), factory


@pytest.mark.asyncio
async def test_preflight_succeeds_trivially() -> None:
    handler, factory = _handler()

    resp = await handler.handle("OPTIONS", {}, None)

    assert resp.status == 200
    assert resp.body is None
    assert factory.keys == []


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
async def test_non_post_methods_are_rejected(method: str) -> None:
    handler, _ = _handler()

    resp = await handler.handle(method, {"x-api-key": "sk"}, BODY)

    assert resp.status == 405
    assert resp.body["error"] == "Method not allowed"


@pytest.mark.asyncio
async def test_missing_credential_is_401() -> None:
    handler, factory = _handler()

    resp = await handler.handle("POST", {"content-type": "application/json"}, BODY)

    assert resp.status == 401
    assert resp.body["kind"] == "MissingCredential"
    assert resp.body["error"] == "API key required"
    assert factory.keys == []


@pytest.mark.asyncio
async def test_success_relays_upstream_body_and_applies_defaults() -> None:
    upstream = FakeUpstream(result=reply_body("hello there"))
    handler, factory = _handler(upstream)

    resp = await handler.handle("POST", {"X-Api-Key": "sk-live"}, BODY)

    assert resp.status == 200
    assert resp.body == reply_body("hello there")
    assert factory.keys == ["sk-live"]
    assert upstream.calls == [
        {
            "model": "claude-3-haiku-20240307",
            "max_tokens": 400,
            "messages": [{"role": "user", "content": "hi"}],
        }
    ]


@pytest.mark.asyncio
async def test_explicit_model_and_budget_are_forwarded() -> None:
    upstream = FakeUpstream()
    handler, _ = _handler(upstream)
    body = json.dumps(
        {"model": "claude-3-5-sonnet-latest", "max_tokens": 300, "messages": [{"role": "user", "content": "x"}]}
    )

    resp = await handler.handle("POST", {"x-api-key": "sk"}, body)

    assert resp.status == 200
    assert upstream.calls[0]["model"] == "claude-3-5-sonnet-latest"
    assert upstream.calls[0]["max_tokens"] == 300


@pytest.mark.asyncio
async def test_bearer_authorization_is_a_fallback() -> None:
    handler, factory = _handler()

    resp = await handler.handle("POST", {"Authorization": "Bearer sk-bearer"}, BODY)

    assert resp.status == 200
    assert factory.keys == ["sk-bearer"]


def test_x_api_key_wins_over_bearer() -> None:
    assert extract_credential({"x-api-key": "a", "authorization": "Bearer b"}) == "a"
    assert extract_credential({"authorization": "Basic b"}) is None
    assert extract_credential({"x-api-key": "   "}) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "status", "kind", "label"),
    [
        (InvalidCredential(), 401, "InvalidCredential", "Invalid API key"),
        (RateLimited(), 429, "RateLimited", "Rate limit exceeded"),
        (MalformedRequest("messages: field required"), 400, "MalformedRequest", "Bad request"),
        (UpstreamUnavailable(), 500, "UpstreamUnavailable", "Server error"),
        (RuntimeError("boom"), 500, "UpstreamUnavailable", "Server error"),
    ],
)
async def test_upstream_failures_map_to_structured_errors(error, status, kind, label) -> None:
    handler, _ = _handler(FakeUpstream(error=error))

    resp = await handler.handle("POST", {"x-api-key": "sk"}, BODY)

    assert resp.status == status
    assert resp.body["kind"] == kind
    assert resp.body["error"] == label
    assert resp.body["message"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        None,
        b"not json",
        b"[1, 2]",
        json.dumps({"messages": []}),
        json.dumps({"messages": "hi"}),
        json.dumps({"messages": [{"content": "no role"}]}),
        json.dumps({"messages": [{"role": "user", "content": "x"}], "max_tokens": -5}),
        json.dumps({"messages": [{"role": "user", "content": "x"}], "max_tokens": "many"}),
    ],
)
async def test_malformed_inbound_requests_are_400(body) -> None:
    handler, factory = _handler()

    resp = await handler.handle("POST", {"x-api-key": "sk"}, body)

    assert resp.status == 400
    assert resp.body["kind"] == "MalformedRequest"
    assert factory.keys == []


@pytest.mark.asyncio
async def test_credential_never_reaches_the_logs(caplog: pytest.LogCaptureFixture) -> None:
    secret = "sk-ant-super-secret-value"
    caplog.set_level(logging.DEBUG)

    ok, _ = _handler()
    await ok.handle("POST", {"x-api-key": secret}, BODY)
    failing, _ = _handler(FakeUpstream(error=RuntimeError(f"exploded with {secret}")))
    await failing.handle("POST", {"x-api-key": secret}, BODY)

    assert caplog.records
    assert secret not in caplog.text
