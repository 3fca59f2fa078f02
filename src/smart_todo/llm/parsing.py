# src/smart_todo/llm/parsing.py

"""
Lenient extraction of structured fields from free-text model replies.

The extraction contract is intentionally permissive, not a parser: take the span
from the first "{" to the last "}" in the reply and hand it to json.loads.
Prose before/after the object is tolerated; unrelated braces in that prose are not
(the span then fails to decode and the caller falls back to its default).
"""

from __future__ import annotations

import json
from typing import Any

from ..tasks.task_models import CategorizationResult, Priority, SuggestedTime

MAX_SUGGESTIONS = 5


class UnparsableModelReply(ValueError):
    """The upstream body or the model's text could not be turned into the expected shape."""


def extract_json_object(raw: str) -> str | None:
    """Return the first-"{"-to-last-"}" span of raw, or None when there is no such span."""
    raw = (raw or "").strip()
    first = raw.find("{")
    last = raw.rfind("}")
    if first == -1 or last == -1 or last < first:
        return None
    return raw[first : last + 1]


def reply_text(body: Any) -> str:
    """Pull content[0].text out of a Messages API response body."""
    try:
        text = body["content"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise UnparsableModelReply("Response body has no content[0].text") from e
    if not isinstance(text, str):
        raise UnparsableModelReply("content[0].text is not a string")
    return text


def _decode_object(text: str) -> dict[str, Any]:
    span = extract_json_object(text)
    if span is None:
        raise UnparsableModelReply("No JSON object found in model reply")
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise UnparsableModelReply(f"Model reply JSON did not decode: {e.msg}") from e
    if not isinstance(data, dict):
        raise UnparsableModelReply("Model reply JSON is not an object")
    return data


def parse_categorization(text: str) -> CategorizationResult:
    data = _decode_object(text)

    category = data.get("category")
    if not isinstance(category, str) or not category.strip():
        raise UnparsableModelReply("Missing or empty 'category'")

    priority = Priority.parse(data.get("priority"))
    if priority is None:
        raise UnparsableModelReply(f"Unknown priority: {data.get('priority')!r}")

    reasoning = data.get("reasoning")
    is_routine = data.get("isRoutine")

    return CategorizationResult(
        category=category.strip(),
        priority=priority,
        reasoning=reasoning if isinstance(reasoning, str) else "",
        is_routine=is_routine if isinstance(is_routine, bool) else None,
        suggested_time=SuggestedTime.parse(data.get("suggestedTime")),
    )


def parse_suggestions(text: str) -> list[str]:
    data = _decode_object(text)

    raw = data.get("suggestions")
    if not isinstance(raw, list):
        raise UnparsableModelReply("Missing 'suggestions' list")

    out: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        s = item.strip()
        if s:
            out.append(s)
    return out[:MAX_SUGGESTIONS]
