# src/smart_todo/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

PLACEHOLDER_CATEGORY = "Processing..."
FALLBACK_CATEGORY = "Other"


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: Any) -> Priority | None:
        """Case-insensitive lookup; None for anything that is not a known level."""
        if not isinstance(raw, str):
            return None
        s = raw.strip().lower()
        for p in cls:
            if p.value.lower() == s:
                return p
        return None


class SuggestedTime(StrEnum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"

    @classmethod
    def parse(cls, raw: Any) -> SuggestedTime | None:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


@dataclass(slots=True)
class Task:
    """
    A single to-do item.

    Stored with the camelCase keys of the browser app's localStorage format so an
    exported list stays readable by both clients.
    """

    id: int
    text: str
    category: str
    priority: Priority
    completed: bool
    created_at: str

    ai_reasoning: str | None = None
    suggested_time: SuggestedTime | None = None
    is_routine: bool | None = None
    from_suggestion: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "priority": self.priority.value,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        if self.ai_reasoning is not None:
            out["aiReasoning"] = self.ai_reasoning
        if self.suggested_time is not None:
            out["suggestedTime"] = self.suggested_time.value
        if self.is_routine is not None:
            out["isRoutine"] = self.is_routine
        if self.from_suggestion is not None:
            out["fromSuggestion"] = self.from_suggestion
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        """Raises (KeyError/TypeError/ValueError) on records without a usable id or text."""
        task_id = data["id"]
        if isinstance(task_id, bool) or not isinstance(task_id, (int, float)):
            raise TypeError(f"task id must be a number, got {type(task_id).__name__}")
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError("task text must be a string")

        reasoning = data.get("aiReasoning")
        is_routine = data.get("isRoutine")
        from_suggestion = data.get("fromSuggestion")

        return cls(
            id=int(task_id),
            text=text,
            category=str(data.get("category") or FALLBACK_CATEGORY),
            priority=Priority.parse(data.get("priority")) or Priority.MEDIUM,
            completed=bool(data.get("completed", False)),
            created_at=str(data.get("createdAt", "")),
            ai_reasoning=reasoning if isinstance(reasoning, str) else None,
            suggested_time=SuggestedTime.parse(data.get("suggestedTime")),
            is_routine=is_routine if isinstance(is_routine, bool) else None,
            from_suggestion=from_suggestion if isinstance(from_suggestion, bool) else None,
        )


@dataclass(slots=True)
class Profile:
    name: str = ""
    work_hours: str = "9-17"
    categories: list[str] = field(default_factory=list)
    routine_tasks: list[str] = field(default_factory=list)
    priorities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "workHours": self.work_hours,
            "categories": list(self.categories),
            "routineTasks": list(self.routine_tasks),
            "priorities": list(self.priorities),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        def str_list(raw: Any) -> list[str]:
            if not isinstance(raw, list):
                return []
            return [str(x) for x in raw if isinstance(x, str)]

        return cls(
            name=str(data.get("name") or ""),
            work_hours=str(data.get("workHours", "9-17") or ""),
            categories=str_list(data.get("categories")),
            routine_tasks=str_list(data.get("routineTasks")),
            priorities=str_list(data.get("priorities")),
        )


@dataclass(slots=True)
class CategorizationResult:
    category: str
    priority: Priority
    reasoning: str
    is_routine: bool | None = None
    suggested_time: SuggestedTime | None = None


def default_categorization() -> CategorizationResult:
    """Result used whenever categorization fails for any reason."""
    return CategorizationResult(
        category=FALLBACK_CATEGORY,
        priority=Priority.MEDIUM,
        reasoning="AI categorization failed, using defaults",
        is_routine=False,
        suggested_time=SuggestedTime.ANYTIME,
    )


@dataclass(slots=True, frozen=True)
class SuggestionContext:
    """
    Read-only snapshot assembled right before a suggestion request.

    weekday follows datetime.weekday(): Monday == 0.
    """

    profile: Profile
    recent_completed: list[str]
    incomplete: list[str]
    hour: int
    weekday: int


@dataclass(slots=True)
class SuggestionsResult:
    suggestions: list[str] = field(default_factory=list)
