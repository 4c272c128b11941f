"""Spawn Claude Code instances in new iTerm2 windows."""

from __future__ import annotations

import logging as py_logging
import subprocess

from claudecoder.config import AppConfig, resolve_window_title, resolve_working_directory
from claudecoder.errors import ClaudeCoderError
from claudecoder.iterm.command import build_full_command
from claudecoder.iterm.host import Runner, run_applescript
from claudecoder.iterm.models import SpawnRequest, SpawnResult
from claudecoder.iterm.script import build_spawn_applescript
from claudecoder.security import prompt_for_log

logger = py_logging.getLogger(__name__)


def mode_label(dangerously_skip_permissions: bool) -> str:
    if dangerously_skip_permissions:
        return "with --dangerously-skip-permissions"
    return "in normal mode"


def resolve_spawn_request(
    prompt: str,
    *,
    config: AppConfig,
    working_directory: str | None = None,
    window_title: str | None = None,
    dangerously_skip_permissions: bool | None = None,
) -> SpawnRequest:
    """Fill in the configured defaults for omitted or empty fields."""
    skip_permissions = (
        config.dangerously_skip_permissions
        if dangerously_skip_permissions is None
        else dangerously_skip_permissions
    )
    return SpawnRequest(
        prompt=prompt,
        working_directory=resolve_working_directory(config, working_directory),
        window_title=resolve_window_title(config, window_title),
        dangerously_skip_permissions=skip_permissions,
    )


def build_request_applescript(request: SpawnRequest, *, config: AppConfig) -> str:
    command = build_full_command(
        request.prompt,
        request.working_directory,
        request.dangerously_skip_permissions,
        binary=config.claude_binary,
        skip_permissions_flag=config.skip_permissions_flag,
    )
    return build_spawn_applescript(
        command,
        request.window_title,
        application=config.iterm_application,
    )


def spawn_claude_coder(
    request: SpawnRequest,
    *,
    config: AppConfig,
    runner: Runner = subprocess.run,
) -> SpawnResult:
    logger.info(
        "spawn start title=%s cwd=%s mode=%s prompt=%s",
        request.window_title,
        request.working_directory,
        "autonomous" if request.dangerously_skip_permissions else "interactive",
        prompt_for_log(request.prompt),
    )
    script = build_request_applescript(request, config=config)
    try:
        run_applescript(script, runner=runner, timeout_seconds=config.osascript_timeout_seconds)
    except ClaudeCoderError as exc:
        logger.error("spawn failed title=%s error=%s", request.window_title, exc.message)
        return SpawnResult.for_request(request, success=False, error=exc.message)

    logger.info("spawn submitted title=%s", request.window_title)
    return SpawnResult.for_request(request, success=True)
