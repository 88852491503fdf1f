# src/cron_todotxt/connectors/console_connector.py

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)


def ask_confirm(prompt: str, input_fn: Callable[[str], str] = input) -> bool:
    """Ask a [yN] question; anything but y/yes (or EOF) means no."""
    try:
        answer = input_fn(f"{prompt} [yN] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def open_editor(path: str | Path, editor: str = "editor") -> int:
    """Open `path` in the user's editor and wait for it to exit."""
    argv = [*shlex.split(editor), str(path)]
    logger.debug("Launching editor %s", argv)
    try:
        return subprocess.call(argv)
    except OSError:
        logger.exception("Could not launch editor %r", editor)
        return 1
