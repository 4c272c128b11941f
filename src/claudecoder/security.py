"""Log helpers for untrusted prompt text and host commands."""

from __future__ import annotations

import shlex

DEFAULT_LOG_TRUNCATE_LIMIT: int = 700
PROMPT_LOG_TRUNCATE_LIMIT: int = 120


def truncate_log(value: str, limit: int = DEFAULT_LOG_TRUNCATE_LIMIT) -> str:
    """Truncate log text to the specified limit with ellipsis."""
    value = value.strip()
    if len(value) <= limit:
        return value
    return value[: max(0, limit - 3)] + "..."


def prompt_for_log(prompt: str) -> str:
    """Collapse a multi-line prompt into one bounded log-friendly line."""
    if not prompt:
        return ""
    single_line = " ".join(prompt.split())
    return truncate_log(single_line, PROMPT_LOG_TRUNCATE_LIMIT)


def command_for_log(args: list[str]) -> str:
    """Return a shell-safe command string bounded for logging."""
    if not args:
        return ""
    return truncate_log(" ".join(shlex.quote(part) for part in args))
