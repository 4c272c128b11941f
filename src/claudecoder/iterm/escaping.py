"""Quoting for the two layers a spawned command passes through.

A command typed into iTerm2 is first a POSIX shell command line and then an
AppleScript string literal. Each layer has its own escaping function; callers
apply shell escaping while composing and AppleScript escaping while
synthesizing the script, never both in one pass.
"""

from __future__ import annotations

_SHELL_QUOTE_REPLACEMENT = "'\"'\"'"


def escape_for_applescript(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted AppleScript literal.

    Backslashes go first so the escapes inserted for quotes and newlines are
    not escaped a second time.
    """
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def escape_for_shell(value: str) -> str:
    """Quote ``value`` as exactly one POSIX shell word.

    The result is single-quoted, so ``$``, backticks and ``&&`` stay literal.
    An embedded single quote closes the span, emits ``"'"`` and reopens it.
    """
    return f"'{value.replace(chr(39), _SHELL_QUOTE_REPLACEMENT)}'"
