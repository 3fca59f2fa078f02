# src/smart_todo/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..core.todo import accept_suggestion, can_suggest, refresh_suggestions, submit_task
from ..tasks.profile import LIST_FIELDS, ProfileListField, add_item, remove_item, with_updates
from ..tasks.task_models import PLACEHOLDER_CATEGORY, SuggestedTime, Task

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[
    [AppState, list[str], CommandEmitter | None], str | Awaitable[str]
]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        result = handler(state, args, emit)
        if inspect.isawaitable(result):
            result = await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (any text without a leading / adds a task)")
        return "\n".join(lines)


registry = CommandRegistry()

_FIELD_ALIASES: dict[str, ProfileListField] = {
    "categories": "categories",
    "category": "categories",
    "routine": "routine_tasks",
    "routines": "routine_tasks",
    "keywords": "priorities",
    "keyword": "priorities",
    "priorities": "priorities",
}

_FIELD_LABELS: dict[ProfileListField, str] = {
    "categories": "Custom categories",
    "routine_tasks": "Routine tasks",
    "priorities": "Priority keywords",
}


def format_task(position: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    badges = [task.category, f"{task.priority.value} Priority"]
    if task.is_routine:
        badges.append("Routine")
    if task.suggested_time is not None and task.suggested_time != SuggestedTime.ANYTIME:
        badges.append(task.suggested_time.value)
    if task.from_suggestion:
        badges.append("AI Suggested")
    line = f"{position:>3}. [{mark}] {task.text}  ({' | '.join(badges)})"
    if task.ai_reasoning and task.category != PLACEHOLDER_CATEGORY:
        line += f"\n       AI: {task.ai_reasoning}"
    return line


def _resolve_task(state: AppState, raw: str) -> Task | None:
    """Accept a 1-based position from /list or a raw task id."""
    try:
        n = int(raw)
    except ValueError:
        return None
    tasks = state.tasks.tasks
    if 1 <= n <= len(tasks):
        return tasks[n - 1]
    return state.tasks.get(n)


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <task text>"
    task = submit_task(state, text)
    if state.ai is None:
        return f"Added: {task.text}"
    return f"Added: {task.text} (AI is analyzing it...)"


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    tasks = state.tasks.tasks
    if not tasks:
        hint = (
            "AI categorization is ready to help organize your tasks."
            if state.ai is not None
            else "Set up your API key with /key <api-key> to enable AI-powered categorization."
        )
        return f"No tasks yet. Type something to add your first task.\n{hint}"
    lines = [f"Your tasks ({len(tasks)} total):"]
    lines.extend(format_task(i, t) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    s = state.tasks.stats()
    if not s["total"]:
        return "No tasks yet."
    return f"{s['completed']} completed | {s['remaining']} remaining | {s['percent_done']}% done"


def cmd_done(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /done <n> (number from /list)"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    updated = state.tasks.toggle(task.id)
    if updated is None:
        return f"No such task: {args[0]}"
    return f"{'Completed' if updated.completed else 'Reopened'}: {updated.text}"


def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /delete <n> (number from /list)"
    task = _resolve_task(state, args[0])
    if task is None or not state.tasks.delete(task.id):
        return f"No such task: {args[0]}"
    return f"Deleted: {task.text}"


def _show_profile(state: AppState) -> str:
    p = state.profile
    lines = [f"Profile: {p.name or 'Anonymous'}", f"  Work hours: {p.work_hours or 'Not specified'}"]
    for field_name in LIST_FIELDS:
        items = getattr(p, field_name)
        label = _FIELD_LABELS[field_name]
        if items:
            lines.append(f"  {label}:")
            lines.extend(f"    {i}. {item}" for i, item in enumerate(items, start=1))
        else:
            lines.append(f"  {label}: none")
    return "\n".join(lines)


def cmd_profile(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /profile                                   -> show profile
    /profile name <name>                       -> set name
    /profile hours <descriptor>                -> set work hours (e.g. 9-17)
    /profile add <categories|routine|keywords> <value>
    /profile remove <categories|routine|keywords> <n>
    """
    usage = (
        "Usage:\n"
        "  /profile                                  - show profile\n"
        "  /profile name <name>\n"
        "  /profile hours <work hours>\n"
        "  /profile add <categories|routine|keywords> <value>\n"
        "  /profile remove <categories|routine|keywords> <n>"
    )
    if not args:
        return _show_profile(state)

    sub = args[0].lower()

    if sub == "name":
        state.update_profile(with_updates(state.profile, name=" ".join(args[1:])))
        return f"Profile name set to: {state.profile.name or 'Anonymous'}"

    if sub == "hours":
        state.update_profile(with_updates(state.profile, work_hours=" ".join(args[1:])))
        return f"Work hours set to: {state.profile.work_hours or 'Not specified'}"

    if sub in ("add", "remove") and len(args) >= 3:
        field_name = _FIELD_ALIASES.get(args[1].lower())
        if field_name is None:
            return usage
        if sub == "add":
            value = " ".join(args[2:])
            updated = add_item(state.profile, field_name, value)
            if updated is state.profile:
                return "Nothing to add."
            state.update_profile(updated)
            return f"Added to {_FIELD_LABELS[field_name].lower()}: {value.strip()}"

        try:
            index = int(args[2]) - 1
        except ValueError:
            return usage
        updated = remove_item(state.profile, field_name, index)
        if updated is state.profile:
            return f"No item #{args[2]} in {_FIELD_LABELS[field_name].lower()}."
        state.update_profile(updated)
        return f"Removed item #{args[2]} from {_FIELD_LABELS[field_name].lower()}."

    return usage


def cmd_key(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /key            -> show whether AI is enabled
    /key <api-key>  -> store key, enable AI
    /key clear      -> forget key, disable AI
    """
    if not args:
        return "AI categorization enabled." if state.ai is not None else "No API key set. Use /key <api-key>."
    if args[0].lower() == "clear":
        state.set_credential(None)
        return "API key cleared. AI categorization disabled."
    state.set_credential(args[0])
    return "API key saved. AI categorization enabled."


async def cmd_suggest(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if state.ai is None:
        return "Smart suggestions need an API key. Use /key <api-key>."
    if not can_suggest(state):
        return "Smart suggestions need a profile name. Use /profile name <name>."

    if emit:
        emit("Generating personalized suggestions...")
    suggestions = await refresh_suggestions(state)
    if not suggestions:
        return "No suggestions available right now."
    lines = ["Smart suggestions (use /accept <n> to add one):"]
    lines.extend(f"  {i}. {s}" for i, s in enumerate(suggestions, start=1))
    return "\n".join(lines)


def cmd_accept(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /accept <n> (number from /suggest)"
    try:
        index = int(args[0]) - 1
    except ValueError:
        return "Usage: /accept <n> (number from /suggest)"
    if not 0 <= index < len(state.suggestions):
        return f"No suggestion #{args[0]}. Use /suggest to refresh."
    task = accept_suggestion(state, state.suggestions[index])
    return f"Added suggestion: {task.text}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Completed / remaining / % done.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <n>.", aliases=["rm"])
registry.register("profile", cmd_profile, help_text="Show or edit your profile (/profile for usage).")
registry.register("key", cmd_key, help_text="Set or clear the model API key: /key <api-key> | /key clear.")
registry.register("suggest", cmd_suggest, help_text="Generate smart task suggestions.")
registry.register("accept", cmd_accept, help_text="Add a suggestion as a task: /accept <n>.")
