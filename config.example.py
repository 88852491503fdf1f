# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
When run as a todo.sh add-on, todo.sh already exports TODO_DIR, TODO_FILE and TODO_FULL_SH.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # todo.txt (exported by todo.sh to add-ons)
    "TODO_DIR": "todo.txt directory (default: ~/.todo).",
    "TODO_FILE": "Live task list (default: <TODO_DIR>/todo.txt).",
    "TODO_FULL_SH": "todo.txt CLI used to add activated tasks (default: /usr/bin/todo-txt).",
    # Scheduled file
    "CRON_TODOTXT_SCHEDULED_FILE": "Scheduled tasks file (default: <TODO_DIR>/scheduled.txt).",
    "CRON_TODOTXT_TODO_SH": "Fallback for TODO_FULL_SH when not run from todo.sh.",
    # Interactive
    "CRON_TODOTXT_EDITOR": "Editor for `edit` (falls back to VISUAL, EDITOR, then `editor`).",
    # App / logging
    "CRON_TODOTXT_APP_NAME": "App display name (default: cron-todotxt).",
    "CRON_TODOTXT_LOG_LEVEL": "Console logging level (default: INFO; DEBUG shows every line decision).",
    "CRON_TODOTXT_LOG_DIR": "Directory for cron-todotxt.log (default: ~/.local/state/cron-todotxt).",
    "CRON_TODOTXT_LOG_TO_FILE": "Write the debug log file (true/false, default: true).",
}

# Example crontab entry (runs every 15 minutes, applies changes):
#   */15 * * * * cron-todotxt process live
