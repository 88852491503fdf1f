# src/cron_todotxt/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then dispatches one sub-command.
Also usable as a todo.sh add-on (actions.d/schedule): todo.sh passes the
action name as the first argument, which is dropped here.
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.commands import EXIT_ERROR, registry
from ..config import get_settings
from ..core.errors import CronTodoTxtError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)

ADDON_ACTION = "schedule"


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_dir = settings.log_dir if settings.log_to_file else None
    setup_logging(log_dir=log_dir, console_level=console_level)

    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] == ADDON_ACTION:
        args = args[1:]

    logger.debug("Starting %s args=%s", settings.app_name, args)

    try:
        state = create_initial_state(settings=settings)
        return registry.handle(state, args)
    except CronTodoTxtError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
