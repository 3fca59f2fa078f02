# tests/test_parsing.py

from __future__ import annotations

import pytest

from smart_todo.llm.parsing import (
    UnparsableModelReply,
    extract_json_object,
    parse_categorization,
    parse_suggestions,
    reply_text,
)
from smart_todo.tasks.task_models import CategorizationResult, Priority, SuggestedTime


def test_extracts_object_wrapped_in_prose() -> None:
    text = 'Sure! {"category":"Work","priority":"High","reasoning":"x"} Hope that helps!'

    result = parse_categorization(text)

    assert result == CategorizationResult(category="Work", priority=Priority.HIGH, reasoning="x")
    assert result.is_routine is None
    assert result.suggested_time is None


def test_extraction_spans_first_open_to_last_close_brace() -> None:
    raw = 'prefix {"a": {"b": 1}} middle } tail'
    assert extract_json_object(raw) == '{"a": {"b": 1}} middle }'


def test_no_braces_means_no_span() -> None:
    assert extract_json_object("I cannot help with that.") is None
    with pytest.raises(UnparsableModelReply):
        parse_categorization("I cannot help with that.")


def test_unrelated_braces_in_prose_break_the_span() -> None:
    # Deliberately lenient extraction: stray braces after the object make it undecodable.
    text = '{"category":"Work","priority":"Low","reasoning":"r"} (see {note})'
    with pytest.raises(UnparsableModelReply):
        parse_categorization(text)


def test_full_categorization_fields_are_read() -> None:
    text = """Here you go:
{
  "category": "Health",
  "priority": "low",
  "reasoning": "Routine workout",
  "isRoutine": true,
  "suggestedTime": "Morning"
}"""
    result = parse_categorization(text)

    assert result.category == "Health"
    assert result.priority is Priority.LOW
    assert result.is_routine is True
    assert result.suggested_time is SuggestedTime.MORNING


def test_unknown_priority_is_unparsable() -> None:
    with pytest.raises(UnparsableModelReply):
        parse_categorization('{"category":"Work","priority":"Urgent","reasoning":""}')


def test_unknown_suggested_time_is_dropped() -> None:
    result = parse_categorization('{"category":"Home","priority":"Medium","reasoning":"","suggestedTime":"midnight"}')
    assert result.suggested_time is None


def test_suggestions_are_cleaned_and_capped() -> None:
    text = 'Ideas: {"suggestions": ["a", " b ", "", 3, "c", "d", "e", "f"]}'
    assert parse_suggestions(text) == ["a", "b", "c", "d", "e"]


def test_suggestions_need_a_list() -> None:
    with pytest.raises(UnparsableModelReply):
        parse_suggestions('{"suggestions": "do stuff"}')


@pytest.mark.parametrize(
    "body",
    [{}, {"content": []}, {"content": [{"type": "text"}]}, {"content": [{"text": 5}]}, None],
)
def test_reply_text_rejects_malformed_bodies(body) -> None:
    with pytest.raises(UnparsableModelReply):
        reply_text(body)
