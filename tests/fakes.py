# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from smart_todo.core.ports import ChatMessage


def reply_body(text: str) -> dict[str, Any]:
    """Messages API style response body wrapping a single text block."""
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "model": "claude-3-haiku-20240307",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
    }


@dataclass(slots=True)
class TransportCall:
    api_key: str
    messages: list[ChatMessage]
    max_tokens: int
    model: str | None


class FakeTransport:
    """
    Deterministic CompletionTransport for unit tests.

    - Captures calls for assertions
    - Each queued item is either a reply text, a full body (dict) or an exception to raise
    - Optional gate: when set, complete() waits for gate.set() before answering
    """

    def __init__(self, *replies: str | dict[str, Any] | Exception, gate: asyncio.Event | None = None) -> None:
        self.replies: list[str | dict[str, Any] | Exception] = list(replies)
        self.calls: list[TransportCall] = []
        self.gate = gate

    async def complete(
        self,
        *,
        api_key: str,
        messages: list[ChatMessage],
        max_tokens: int,
        model: str | None = None,
    ) -> dict[str, Any]:
        self.calls.append(TransportCall(api_key, messages, max_tokens, model))
        if self.gate is not None:
            await self.gate.wait()

        item = self.replies.pop(0) if self.replies else "ok"
        if isinstance(item, Exception):
            raise item
        if isinstance(item, dict):
            return item
        return reply_body(item)

    @property
    def prompts(self) -> list[str]:
        return [c.messages[0]["content"] for c in self.calls]


@dataclass
class FakeUpstream:
    """UpstreamClient that returns a fixed body or raises a fixed error."""

    result: dict[str, Any] = field(default_factory=lambda: reply_body("hello"))
    error: Exception | None = None
    calls: list[dict[str, Any]] = field(default_factory=list)

    async def create_message(self, *, model: str, max_tokens: int, messages: list[ChatMessage]) -> dict[str, Any]:
        self.calls.append({"model": model, "max_tokens": max_tokens, "messages": messages})
        if self.error is not None:
            raise self.error
        return self.result


class FakeUpstreamFactory:
    """Records the keys the handler built upstream clients with."""

    def __init__(self, upstream: FakeUpstream | None = None) -> None:
        self.upstream = upstream or FakeUpstream()
        self.keys: list[str] = []

    def __call__(self, api_key: str) -> FakeUpstream:
        self.keys.append(api_key)
        return self.upstream
