# src/smart_todo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL on a single
asyncio event loop. In-flight categorizations are drained before exit so their
results are persisted.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import close_state, create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.todo import drain
from ..logging_setup import level_from_name, setup_logging

logger = logging.getLogger(__name__)

DRAIN_TIMEOUT_SECONDS = 30.0


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        await run_console_loop(state)
    finally:
        if state.pending:
            logger.info("Waiting for %d in-flight categorization(s)...", len(state.pending))
            try:
                await asyncio.wait_for(drain(state), timeout=DRAIN_TIMEOUT_SECONDS)
            except TimeoutError:
                logger.warning("Gave up waiting for in-flight categorizations.")
        await close_state(state)


def main() -> None:
    settings = get_settings()

    console_level = level_from_name(getattr(settings, "log_level", "INFO"))
    setup_logging(log_dir=settings.data_dir, console_level=max(console_level, logging.WARNING))

    logger.info("Starting %s...", getattr(settings, "app_name", "smart-todo"))

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")


if __name__ == "__main__":
    main()
