# src/tasktrack/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, signs the owner in, loads their
board and runs the console REPL.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_app_state, open_board
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..errors import PersistenceError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def run(settings) -> int:
    try:
        state = create_app_state(settings=settings)
        board = await open_board(state)
    except PersistenceError:
        logger.exception("Failed to load tasks.")
        print("Could not load your tasks. See the log file for details.")
        return 1

    if board is None:
        # No login flow in the console: the owner comes from configuration.
        print("Not signed in. Set TASKTRACK_OWNER_ID (in the environment or .env) and restart.")
        return 2

    logger.info("Signed in owner=%s", board.owner_id)
    await run_console_loop(state)
    return 0


def main() -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/tasktrack")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "tasktrack"))

    try:
        code = asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
        code = 130

    logger.info("Bye.")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
