"""Shell command builders for spawned Claude Code sessions."""

from __future__ import annotations

from claudecoder.config import DEFAULT_CLAUDE_BINARY, DEFAULT_SKIP_PERMISSIONS_FLAG
from claudecoder.iterm.escaping import escape_for_shell


def build_claude_command(
    prompt: str,
    dangerously_skip_permissions: bool,
    *,
    binary: str = DEFAULT_CLAUDE_BINARY,
    skip_permissions_flag: str = DEFAULT_SKIP_PERMISSIONS_FLAG,
) -> str:
    # binary and flag are trusted configuration and stay unquoted.
    flags = f"{skip_permissions_flag} " if dangerously_skip_permissions else ""
    return f"{binary} {flags}{escape_for_shell(prompt)}"


def build_full_command(
    prompt: str,
    working_directory: str,
    dangerously_skip_permissions: bool,
    *,
    binary: str = DEFAULT_CLAUDE_BINARY,
    skip_permissions_flag: str = DEFAULT_SKIP_PERMISSIONS_FLAG,
) -> str:
    claude_command = build_claude_command(
        prompt,
        dangerously_skip_permissions,
        binary=binary,
        skip_permissions_flag=skip_permissions_flag,
    )
    return f"cd {escape_for_shell(working_directory)} && {claude_command}"
