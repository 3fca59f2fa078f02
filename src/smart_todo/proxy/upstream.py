# src/smart_todo/proxy/upstream.py

from __future__ import annotations

import logging
from typing import Any

import anthropic
import httpx

from ..core.ports import ChatMessage
from .errors import (
    InvalidCredential,
    MalformedRequest,
    ProxyError,
    RateLimited,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)


def map_upstream_error(exc: Exception) -> ProxyError:
    """Translate an anthropic SDK exception into the proxy error taxonomy."""
    if isinstance(exc, anthropic.APIStatusError):
        status = exc.status_code
        if status in (401, 403):
            return InvalidCredential()
        if status == 429:
            return RateLimited()
        if status == 400:
            return MalformedRequest(_status_error_message(exc))
        logger.info("Upstream returned status=%s", status)
        return UpstreamUnavailable()

    if isinstance(exc, anthropic.APIConnectionError):
        # includes APITimeoutError
        logger.info("Upstream connection error (%s)", exc.__class__.__name__)
        return UpstreamUnavailable()

    return UpstreamUnavailable()


def _status_error_message(exc: anthropic.APIStatusError) -> str:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
    return getattr(exc, "message", None) or str(exc) or MalformedRequest.default_message


class AnthropicUpstream:
    """
    UpstreamClient backed by the anthropic SDK.

    One instance per inbound request (the key belongs to the caller).
    max_retries=0: the proxy is a single-shot relay. The upstream JSON body is
    returned as received, not re-serialized from the SDK's Message model.
    """

    def __init__(self, api_key: str, *, http_client: httpx.AsyncClient | None = None) -> None:
        kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if http_client is not None:
            kwargs["http_client"] = http_client
        self._client = anthropic.AsyncAnthropic(**kwargs)

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        messages: list[ChatMessage],
    ) -> dict[str, Any]:
        try:
            raw = await self._client.messages.with_raw_response.create(
                model=model,
                max_tokens=max_tokens,
                messages=messages,  # type: ignore[arg-type]
            )
            body = raw.http_response.json()
        except anthropic.AnthropicError as e:
            raise map_upstream_error(e) from e
        finally:
            await self._client.close()

        if not isinstance(body, dict):
            raise UpstreamUnavailable("Upstream response is not a JSON object")
        return body
