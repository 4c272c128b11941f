"""XDG config loading."""

from __future__ import annotations

import logging as py_logging
import os
import re
import sys
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from claudecoder.errors import ClaudeCoderError

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

logger = py_logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/claude-coder/config.toml").expanduser()
DEFAULT_CLAUDE_BINARY = "claude"
DEFAULT_SKIP_PERMISSIONS_FLAG = "--dangerously-skip-permissions"
DEFAULT_WINDOW_TITLE = "Claude Coder"
DEFAULT_ITERM_APPLICATION = "iTerm"
DEFAULT_OSASCRIPT_TIMEOUT_SECONDS = 30
CONFIG_PATH_ENV = "CLAUDE_CODER_CONFIG"
CLAUDE_BINARY_ENV = "CLAUDE_CODER_BINARY"

# Both values are inserted into the shell command unquoted.
_SHELL_WORD = re.compile(r"^[A-Za-z0-9_./~+-]+$")
_CLI_FLAG = re.compile(r"^--?[A-Za-z0-9][A-Za-z0-9-]*$")
_APPLICATION_NAME = re.compile(r"^[A-Za-z0-9 ._-]+$")


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    claude_binary: str = DEFAULT_CLAUDE_BINARY
    skip_permissions_flag: str = DEFAULT_SKIP_PERMISSIONS_FLAG
    default_window_title: str = DEFAULT_WINDOW_TITLE
    default_working_directory: str = ""
    iterm_application: str = DEFAULT_ITERM_APPLICATION
    osascript_timeout_seconds: int = Field(default=DEFAULT_OSASCRIPT_TIMEOUT_SECONDS, ge=1, le=600)
    dangerously_skip_permissions: bool = False

    @field_validator("claude_binary")
    @classmethod
    def _validate_binary(cls, value: str) -> str:
        if not _SHELL_WORD.match(value):
            raise ValueError(f"Invalid claude binary: {value!r}")
        return value

    @field_validator("skip_permissions_flag")
    @classmethod
    def _validate_flag(cls, value: str) -> str:
        if not _CLI_FLAG.match(value):
            raise ValueError(f"Invalid skip-permissions flag: {value!r}")
        return value

    @field_validator("iterm_application")
    @classmethod
    def _validate_application(cls, value: str) -> str:
        if not _APPLICATION_NAME.match(value):
            raise ValueError(f"Invalid iTerm application name: {value!r}")
        return value


def get_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env_path = os.getenv(CONFIG_PATH_ENV, "").strip()
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    claude_binary = raw.get("claude_binary", cfg.claude_binary)
    if isinstance(claude_binary, str) and _SHELL_WORD.match(claude_binary):
        cfg.claude_binary = claude_binary
    env_binary = os.getenv(CLAUDE_BINARY_ENV, "").strip()
    if env_binary and _SHELL_WORD.match(env_binary):
        cfg.claude_binary = env_binary

    flag = raw.get("skip_permissions_flag", cfg.skip_permissions_flag)
    if isinstance(flag, str) and _CLI_FLAG.match(flag):
        cfg.skip_permissions_flag = flag

    window_title = raw.get("default_window_title", cfg.default_window_title)
    if isinstance(window_title, str) and window_title.strip():
        cfg.default_window_title = window_title

    working_directory = raw.get("default_working_directory", cfg.default_working_directory)
    if isinstance(working_directory, str):
        cfg.default_working_directory = working_directory

    application = raw.get("iterm_application", cfg.iterm_application)
    if isinstance(application, str) and _APPLICATION_NAME.match(application):
        cfg.iterm_application = application

    timeout = raw.get("osascript_timeout_seconds", cfg.osascript_timeout_seconds)
    if isinstance(timeout, int) and not isinstance(timeout, bool) and 1 <= timeout <= 600:
        cfg.osascript_timeout_seconds = timeout

    skip_permissions = raw.get("dangerously_skip_permissions", cfg.dangerously_skip_permissions)
    if isinstance(skip_permissions, bool):
        cfg.dangerously_skip_permissions = skip_permissions

    return cfg


def load_config(path: str | Path | None = None, *, strict: bool = False) -> AppConfig:
    """Load the config file, falling back to defaults when it is absent or unreadable.

    With ``strict`` an explicitly named file that is missing, unreadable or not
    valid UTF-8 TOML raises a CONFIG_ERROR instead.
    """
    resolved = get_config_path(path)
    if not resolved.exists():
        if strict:
            raise ClaudeCoderError.for_config(resolved, "file does not exist")
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("config unreadable path=%s error=%s", resolved, exc)
        if strict:
            raise ClaudeCoderError.for_config(resolved, str(exc)) from exc
        return _sanitize({})
    if not isinstance(raw, dict):
        return _sanitize({})
    return _sanitize(raw)


def _expand_directory(value: str) -> str:
    # The directory is single-quoted in the shell command, so ~ must be expanded here.
    try:
        return str(Path(value).expanduser())
    except RuntimeError:
        return value


def resolve_working_directory(config: AppConfig, value: str | None = None) -> str:
    if value:
        return _expand_directory(value)
    if config.default_working_directory:
        return _expand_directory(config.default_working_directory)
    try:
        return str(Path.home())
    except RuntimeError:
        return str(Path.cwd())


def resolve_window_title(config: AppConfig, value: str | None = None) -> str:
    if value:
        return value
    return config.default_window_title
