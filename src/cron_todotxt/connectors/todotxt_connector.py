# src/cron_todotxt/connectors/todotxt_connector.py

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..core.errors import TaskAdderError

logger = logging.getLogger(__name__)


class TodoTxtCli:
    """
    TaskAdder backed by the todo.txt CLI (todo.sh / todo-txt).

    The task text is passed as a single argv item, so no shell quoting is involved.
    """

    def __init__(self, todo_sh: str | Path = "/usr/bin/todo-txt", *, timeout: float = 30.0) -> None:
        self._todo_sh = str(todo_sh)
        self._timeout = timeout

    def run_command(self, command: str, *values: str) -> str:
        argv = [self._todo_sh, command, *values]
        logger.debug("Running %s", argv)
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                check=True,
                timeout=self._timeout,
            )
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or e.stdout or "").strip()
            raise TaskAdderError(f"{self._todo_sh} {command} exited with {e.returncode}: {detail}") from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise TaskAdderError(f"could not run {self._todo_sh}: {e}") from e
        return proc.stdout.strip()

    def add(self, text: str) -> str:
        return self.run_command("add", text)
