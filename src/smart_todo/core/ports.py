# src/smart_todo/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage, the proxy transport and the upstream provider swappable
and makes testing easier (see tests/fakes.py).
"""

from __future__ import annotations

from typing import Any, Protocol

ChatMessage = dict[str, str]
# Messages-API style chat messages: {"role": "...", "content": "..."}.


class KeyValueStorage(Protocol):
    """Browser-localStorage-like string store."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class CompletionTransport(Protocol):
    """
    Client-side port: how the AI client reaches the proxy endpoint.

    Returns the upstream response body (already decoded JSON).
    Raises on non-success responses; callers decide how to absorb failures.
    """

    async def complete(
            self,
            *,
            api_key: str,
            messages: list[ChatMessage],
            max_tokens: int,
            model: str | None = None,
    ) -> dict[str, Any]: ...


class UpstreamClient(Protocol):
    """
    Proxy-side port: one Messages API call with an already-attached credential.

    Implementations raise ProxyError subclasses for upstream failures.
    """

    async def create_message(
            self,
            *,
            model: str,
            max_tokens: int,
            messages: list[ChatMessage],
    ) -> dict[str, Any]: ...
