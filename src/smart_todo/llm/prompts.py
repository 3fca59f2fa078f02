# src/smart_todo/llm/prompts.py

"""
Prompt builders for categorization and suggestions.

Both prompts end with a strict "respond with ONLY a JSON object" instruction;
the reply is still parsed leniently (see parsing.py) because models tend to
wrap the object in conversational text anyway.
"""

from __future__ import annotations

import calendar

from ..tasks.task_models import Profile, SuggestionContext

STANDARD_CATEGORIES = ["Work", "Personal", "Health", "Shopping", "Education", "Finance", "Home"]


def _join_or_none(items: list[str]) -> str:
    joined = ", ".join(i for i in items if i)
    return joined or "None"


def time_of_day_label(hour: int) -> str:
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def build_categorization_prompt(task_text: str, profile: Profile) -> str:
    categories = list(profile.categories)
    keywords = list(profile.priorities)
    routine = list(profile.routine_tasks)

    category_choices = "|".join([*STANDARD_CATEGORIES, *categories, "Other"])

    return f"""Analyze this todo item for {profile.name or 'the user'} and categorize it appropriately with their personal context.

Todo: "{task_text}"

User's Custom Categories: {_join_or_none(categories)}
User's Priority Keywords: {_join_or_none(keywords)}
User's Routine Tasks: {_join_or_none(routine)}
User's Work Hours: {profile.work_hours or 'Not specified'}

Please respond with ONLY a JSON object in this exact format:
{{
  "category": "{category_choices}",
  "priority": "High|Medium|Low",
  "reasoning": "Brief explanation considering user's personal context",
  "isRoutine": false,
  "suggestedTime": "morning|afternoon|evening|anytime"
}}

Priority Logic:
- High if contains user's priority keywords: {_join_or_none(keywords)}
- High if it's work-related and during user's work hours
- Medium/Low based on urgency and user patterns

Category Logic:
- Use user's custom categories when appropriate: {_join_or_none(categories)}
- Check if this matches any of their routine tasks: {_join_or_none(routine)}
- Default to standard categories if no custom match"""


def build_suggestions_prompt(context: SuggestionContext) -> str:
    profile = context.profile
    name = profile.name or "the user"
    weekday = calendar.day_name[context.weekday % 7]

    return f"""Generate 3-5 personalized task suggestions for {name} based on their context.

User Profile:
- Name: {name}
- Work Hours: {profile.work_hours or 'Not specified'}
- Custom Categories: {_join_or_none(profile.categories)}
- Routine Tasks: {_join_or_none(profile.routine_tasks)}
- Priority Keywords: {_join_or_none(profile.priorities)}

Recent Context:
- Recently completed: {_join_or_none(context.recent_completed)}
- Current incomplete tasks: {_join_or_none(context.incomplete)}
- Current time: {context.hour}:00 ({time_of_day_label(context.hour)})
- Day of week: {weekday}

Please suggest tasks that:
1. Complement their incomplete tasks
2. Match their routine tasks if appropriate for the time
3. Consider the time of day and day of week
4. Are realistic and actionable
5. Fit their work schedule and personal patterns

Respond with ONLY a JSON object:
{{
  "suggestions": ["task1", "task2", "task3", "task4", "task5"]
}}"""
