"""Exit codes and the single exception type surfaced by the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    # osascript failed, timed out or iTerm2 refused the script
    HOST_ERROR = 5
    SPAWN_ERROR = 6
    VALIDATION_ERROR = 7
    # no osascript on PATH, i.e. not macOS
    UNSUPPORTED_PLATFORM = 8


@dataclass
class ClaudeCoderError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message

    @classmethod
    def for_config(cls, path: Path, reason: str) -> ClaudeCoderError:
        """Error for a config file the user named explicitly but that cannot be used."""
        return cls(
            message=f"Cannot read config file {path}: {reason}",
            code=ExitCode.CONFIG_ERROR,
            hint="Fix the file, save it as UTF-8 TOML, or drop --config to use defaults",
        )


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
