"""Parsing and display of the iTerm2 window listing.

The listing script emits ``WINDOW:<id>`` lines, each followed by zero or more
``SESSION:<name>|<tty>`` lines. Fields are not quoted, so a session name that
contains ``|`` is split at its first ``|``.
"""

from __future__ import annotations

import logging as py_logging

from claudecoder.iterm.models import ItermSession, ItermWindow
from claudecoder.iterm.script import SESSION_FIELD_SEPARATOR, SESSION_PREFIX, WINDOW_PREFIX

logger = py_logging.getLogger(__name__)

NO_WINDOWS_MESSAGE = "No iTerm2 windows found."


def _parse_session(payload: str) -> ItermSession:
    name, _, tty = payload.partition(SESSION_FIELD_SEPARATOR)
    return ItermSession(name=name, tty=tty)


def parse_window_list(output: str) -> list[ItermWindow]:
    windows: list[ItermWindow] = []
    current_id: str | None = None
    current_sessions: list[ItermSession] = []

    for line in output.split("\n"):
        if not line.strip():
            continue
        if line.startswith(WINDOW_PREFIX):
            if current_id is not None:
                windows.append(ItermWindow(id=current_id, sessions=tuple(current_sessions)))
            current_id = line[len(WINDOW_PREFIX) :]
            current_sessions = []
        elif line.startswith(SESSION_PREFIX):
            if current_id is None:
                logger.debug("listing orphan-session-dropped line=%r", line)
                continue
            current_sessions.append(_parse_session(line[len(SESSION_PREFIX) :]))

    if current_id is not None:
        windows.append(ItermWindow(id=current_id, sessions=tuple(current_sessions)))
    return windows


def format_window_list(windows: list[ItermWindow]) -> str:
    if not windows:
        return NO_WINDOWS_MESSAGE

    lines: list[str] = []
    for window in windows:
        lines.append(f"Window: {window.id}")
        for session in window.sessions:
            lines.append(f"  Session: {session.name} - {session.tty}")
    return "\n".join(lines)
