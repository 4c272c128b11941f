"""AppleScript templates driving iTerm2."""

from __future__ import annotations

from claudecoder.config import DEFAULT_ITERM_APPLICATION
from claudecoder.iterm.escaping import escape_for_applescript

WINDOW_PREFIX = "WINDOW:"
SESSION_PREFIX = "SESSION:"
SESSION_FIELD_SEPARATOR = "|"


def build_spawn_applescript(
    command: str,
    window_title: str,
    *,
    application: str = DEFAULT_ITERM_APPLICATION,
) -> str:
    """Return a script opening a new iTerm2 window that runs ``command``.

    ``command`` must already be shell-escaped; it is escaped again here for
    the AppleScript literal it is written into. ``write text`` submits the
    line with a trailing newline.
    """
    return f"""
tell application "{application}"
  activate
  set newWindow to (create window with default profile)
  tell current session of newWindow
    set name to "{escape_for_applescript(window_title)}"
    write text "{escape_for_applescript(command)}"
  end tell
end tell
"""


def build_list_windows_applescript(*, application: str = DEFAULT_ITERM_APPLICATION) -> str:
    """Return a script printing one line per window and per session."""
    return f"""
tell application "{application}"
  set output to ""
  repeat with w in windows
    set output to output & "{WINDOW_PREFIX}" & (id of w) & linefeed
    repeat with t in tabs of w
      repeat with s in sessions of t
        set output to output & "{SESSION_PREFIX}" & (name of s) & "{SESSION_FIELD_SEPARATOR}" & (tty of s) & linefeed
      end repeat
    end repeat
  end repeat
  return output
end tell
"""


LIST_WINDOWS_APPLESCRIPT = build_list_windows_applescript()
