# src/day_planner/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (date=%s tab=%s).", state.viewed_date, state.tab)
    _print_ts("[CONSOLE] Use /help for commands. Plain text adds a task. Use /exit to quit.\n")
    print(render_view(state))

    def emit(text: str) -> None:
        # Busy indicator for network operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("> ").strip()
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

        # Bare text is shorthand for /add.
        if not user_input.startswith("/"):
            user_input = f"/add {user_input}"

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply)

    logger.info("Console connector finished.")
