# src/smart_todo/proxy/handler.py

"""
Transport-agnostic proxy handler.

One handler, any binding: the FastAPI app (server.py) and the tests both feed it
(method, headers, raw body) and turn the returned ProxyResponse into whatever the
transport needs.

Key invariants:
- stateless: a fresh upstream client is built per request from the caller's key,
- single-shot: no retries, no queuing, no timeout override,
- never raises: every failure becomes a structured JSON error response,
- the credential is never logged.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL
from ..core.ports import ChatMessage, UpstreamClient
from .errors import (
    MalformedRequest,
    MethodNotAllowed,
    MissingCredential,
    ProxyError,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)

UpstreamFactory = Callable[[str], UpstreamClient]


@dataclass(slots=True)
class ProxyResponse:
    status: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class ProxyRequest:
    model: str
    max_tokens: int
    messages: list[ChatMessage]


def extract_credential(headers: Mapping[str, str]) -> str | None:
    """x-api-key first, then "Authorization: Bearer <key>". Header names are case-insensitive."""
    lowered = {str(k).lower(): str(v) for k, v in headers.items()}

    key = lowered.get("x-api-key", "").strip()
    if key:
        return key

    auth = lowered.get("authorization", "").strip()
    if auth[:7].lower() == "bearer ":
        key = auth[7:].strip()
        if key:
            return key
    return None


def parse_request_body(
    body: bytes | str | None,
    *,
    default_model: str = DEFAULT_MODEL,
    default_max_tokens: int = DEFAULT_MAX_TOKENS,
) -> ProxyRequest:
    if not body:
        raise MalformedRequest("Request body is required")
    try:
        data = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedRequest("Request body is not valid JSON") from e
    if not isinstance(data, dict):
        raise MalformedRequest("Request body must be a JSON object")

    messages = data.get("messages")
    if not isinstance(messages, list) or not messages:
        raise MalformedRequest("'messages' must be a non-empty list")
    for m in messages:
        if not isinstance(m, dict) or not isinstance(m.get("role"), str) or "content" not in m:
            raise MalformedRequest("Each message needs a 'role' and 'content'")

    model = data.get("model") or default_model
    if not isinstance(model, str):
        raise MalformedRequest("'model' must be a string")

    max_tokens = data.get("max_tokens") or default_max_tokens
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
        raise MalformedRequest("'max_tokens' must be a positive integer")

    return ProxyRequest(model=model, max_tokens=max_tokens, messages=messages)


def error_response(err: ProxyError) -> ProxyResponse:
    return ProxyResponse(status=err.status, body=err.to_body())


class ProxyHandler:
    def __init__(
        self,
        upstream_factory: UpstreamFactory,
        *,
        default_model: str = DEFAULT_MODEL,
        default_max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._upstream_factory = upstream_factory
        self._default_model = default_model
        self._default_max_tokens = default_max_tokens

    async def handle(
        self,
        method: str,
        headers: Mapping[str, str],
        body: bytes | str | None,
    ) -> ProxyResponse:
        method = (method or "").upper()

        if method == "OPTIONS":
            return ProxyResponse(status=200)

        if method != "POST":
            return error_response(MethodNotAllowed())

        try:
            api_key = extract_credential(headers)
            if api_key is None:
                raise MissingCredential()

            req = parse_request_body(
                body,
                default_model=self._default_model,
                default_max_tokens=self._default_max_tokens,
            )

            logger.info(
                "Proxying model=%s max_tokens=%s messages=%d",
                req.model,
                req.max_tokens,
                len(req.messages),
            )
            upstream = self._upstream_factory(api_key)
            result = await upstream.create_message(
                model=req.model,
                max_tokens=req.max_tokens,
                messages=req.messages,
            )
        except ProxyError as e:
            logger.info("Proxy request failed kind=%s status=%s", e.kind, e.status)
            return error_response(e)
        except Exception as e:
            logger.error("Proxy request failed unexpectedly (%s)", e.__class__.__name__)
            return error_response(UpstreamUnavailable())

        logger.debug("Proxy request succeeded model=%s", req.model)
        return ProxyResponse(status=200, body=result)
