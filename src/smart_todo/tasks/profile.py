# src/smart_todo/tasks/profile.py

from __future__ import annotations

from dataclasses import replace
from typing import Literal

from .task_models import Profile

ProfileListField = Literal["categories", "routine_tasks", "priorities"]

LIST_FIELDS: tuple[ProfileListField, ...] = ("categories", "routine_tasks", "priorities")


def add_item(profile: Profile, field: ProfileListField, value: str) -> Profile:
    """Append a trimmed value to one of the profile lists. Blank values are ignored."""
    item = (value or "").strip()
    if not item:
        return profile
    items = [*getattr(profile, field), item]
    return replace(profile, **{field: items})


def remove_item(profile: Profile, field: ProfileListField, index: int) -> Profile:
    items = list(getattr(profile, field))
    if not 0 <= index < len(items):
        return profile
    del items[index]
    return replace(profile, **{field: items})


def with_updates(
    profile: Profile,
    *,
    name: str | None = None,
    work_hours: str | None = None,
) -> Profile:
    changes: dict[str, str] = {}
    if name is not None:
        changes["name"] = name.strip()
    if work_hours is not None:
        changes["work_hours"] = work_hours.strip()
    return replace(profile, **changes) if changes else profile
