# src/smart_todo/llm/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import DEFAULT_MODEL
from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class ProxyCallError(RuntimeError):
    """Non-success response from the proxy endpoint."""

    def __init__(self, status: int, error: str | None = None, message: str | None = None) -> None:
        self.status = status
        self.error = error
        self.message = message
        super().__init__(f"API call failed: {status} {error or ''}".strip())


def _error_fields(resp: httpx.Response) -> tuple[str | None, str | None]:
    try:
        data = resp.json()
    except Exception:
        return None, None
    if not isinstance(data, dict):
        return None, None
    err = data.get("error")
    msg = data.get("message")
    return (err if isinstance(err, str) else None, msg if isinstance(msg, str) else None)


class ProxyTransport:
    """
    CompletionTransport that POSTs Messages API payloads to the proxy endpoint.

    The key travels only in the x-api-key header of this request.
    No retries: a failure is reported once and the caller applies its default.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def complete(
        self,
        *,
        api_key: str,
        messages: list[ChatMessage],
        max_tokens: int,
        model: str | None = None,
    ) -> dict[str, Any]:
        payload = {
            "model": model or DEFAULT_MODEL,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

        resp = await self._client.post(self._url, json=payload, headers=headers)
        if resp.status_code < 200 or resp.status_code >= 300:
            error, message = _error_fields(resp)
            logger.info("Proxy call failed status=%s error=%s", resp.status_code, error)
            raise ProxyCallError(resp.status_code, error, message)

        data = resp.json()
        if not isinstance(data, dict):
            raise ProxyCallError(resp.status_code, "Bad response", "Proxy response is not a JSON object")
        return data
