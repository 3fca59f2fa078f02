# src/smart_todo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..core.todo import submit_task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _read_line(prompt: str) -> str:
    # input() blocks; run it off-loop so background categorization keeps progressing.
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (ai=%s).", state.ai is not None)
    app_name = str(getattr(state.settings, "app_name", "smart-todo"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    if state.ai is None:
        _print_ts("Set up your API key with /key <api-key> to enable AI-powered categorization.")

    while True:
        try:
            user_input = (await _read_line(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, emit=_print_ts)
            if reply is None:
                task = submit_task(state, user_input)
                reply = (
                    f"Added: {task.text} (AI is analyzing it...)"
                    if state.ai is not None
                    else f"Added: {task.text}"
                )
        except ValueError as e:
            reply = str(e)
        except Exception as e:
            logger.exception("Console command handler crashed.")
            reply = f"Internal error: {str(e).strip() or e.__class__.__name__}"

        _print_ts(reply)

    logger.info("Console connector finished.")
