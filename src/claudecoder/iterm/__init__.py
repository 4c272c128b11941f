"""iTerm2 command synthesis and window listing package."""

from .command import build_claude_command, build_full_command
from .escaping import escape_for_applescript, escape_for_shell
from .host import list_iterm_windows, run_applescript
from .listing import format_window_list, parse_window_list
from .models import ItermSession, ItermWindow, SpawnRequest, SpawnResult
from .script import LIST_WINDOWS_APPLESCRIPT, build_list_windows_applescript, build_spawn_applescript

__all__ = [
    "build_claude_command",
    "build_full_command",
    "build_list_windows_applescript",
    "build_spawn_applescript",
    "escape_for_applescript",
    "escape_for_shell",
    "format_window_list",
    "ItermSession",
    "ItermWindow",
    "LIST_WINDOWS_APPLESCRIPT",
    "list_iterm_windows",
    "parse_window_list",
    "run_applescript",
    "SpawnRequest",
    "SpawnResult",
]
