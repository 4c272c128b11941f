"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import logging as py_logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from .check import format_check_results, run_all_checks
from .config import AppConfig, load_config
from .errors import ClaudeCoderError, ExitCode, user_facing_error
from .iterm.host import Runner, list_iterm_windows
from .iterm.listing import format_window_list
from .logging import configure_logging, default_log_path
from .server import ServerOptions, start_server
from .spawn import mode_label, resolve_spawn_request, spawn_claude_coder

PROG = "claude-coder-mac-mcp"
VERSION = "1.0.0"
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")

ServerLauncher = Callable[[ServerOptions, AppConfig], None]


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def _add_skip_permissions_flag(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "--dangerously-skip-permissions",
        dest="dangerously_skip_permissions",
        action="store_true",
        default=None,
        help=help_text,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Spawn Claude Code instances from Claude Desktop via MCP",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--log-level", type=_log_level_type, default="INFO")
    parser.add_argument("--log-file", type=Path, default=None)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")

    subparsers = parser.add_subparsers(dest="command")

    mcp_parser = subparsers.add_parser(
        "mcp",
        aliases=["serve"],
        help="Start the MCP server (for Claude Desktop)",
    )
    _add_skip_permissions_flag(
        mcp_parser,
        "Pass --dangerously-skip-permissions to spawned Claude instances",
    )
    mcp_parser.set_defaults(action_name="mcp")

    spawn_parser = subparsers.add_parser(
        "spawn",
        help="Test spawning a Claude Code instance in iTerm2",
    )
    spawn_parser.add_argument("prompt", help="The prompt/task to give to Claude Code")
    spawn_parser.add_argument("-d", "--directory", default=None, help="Working directory")
    spawn_parser.add_argument("-t", "--title", default=None, help="Window title")
    _add_skip_permissions_flag(
        spawn_parser,
        "Pass --dangerously-skip-permissions to the Claude instance",
    )
    spawn_parser.set_defaults(action_name="spawn")

    list_parser = subparsers.add_parser(
        "list",
        aliases=["ls"],
        help="List iTerm2 windows and sessions",
    )
    list_parser.set_defaults(action_name="list")

    check_parser = subparsers.add_parser(
        "check",
        aliases=["doctor"],
        help="Check that macOS, iTerm2, Claude Code and automation permissions are ready",
    )
    check_parser.set_defaults(action_name="check")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def _skip_permissions(namespace: argparse.Namespace, config: AppConfig) -> bool:
    if namespace.dangerously_skip_permissions is None:
        return config.dangerously_skip_permissions
    return bool(namespace.dangerously_skip_permissions)


def run_spawn(namespace: argparse.Namespace, config: AppConfig, runner: Runner) -> int:
    request = resolve_spawn_request(
        namespace.prompt,
        config=config,
        working_directory=namespace.directory,
        window_title=namespace.title,
        dangerously_skip_permissions=_skip_permissions(namespace, config),
    )
    label = mode_label(request.dangerously_skip_permissions)
    print(f"Spawning Claude Code instance ({label})...")

    result = spawn_claude_coder(request, config=config, runner=runner)
    if not result.success:
        print(f"Failed: {result.error}", file=sys.stderr)
        return int(ExitCode.SPAWN_ERROR)

    print("Success!")
    print(f"  Window title: {result.window_title}")
    print(f"  Working directory: {result.working_directory}")
    print(f"  Mode: {label}")
    print(f"  Prompt: {result.prompt}")
    return int(ExitCode.SUCCESS)


def run_list(config: AppConfig, runner: Runner) -> int:
    windows = list_iterm_windows(
        runner=runner,
        timeout_seconds=config.osascript_timeout_seconds,
        application=config.iterm_application,
    )
    print(format_window_list(windows))
    return int(ExitCode.SUCCESS)


def run_check(config: AppConfig, runner: Runner) -> int:
    result = run_all_checks(binary=config.claude_binary, runner=runner)
    print(format_check_results(result))
    if result.all_passed:
        return int(ExitCode.SUCCESS)
    return int(ExitCode.VALIDATION_ERROR)


def _launch_server(options: ServerOptions, config: AppConfig) -> None:
    start_server(options, config=config)


def main(
    argv: Sequence[str] | None = None,
    *,
    runner: Runner | None = None,
    server_launcher: ServerLauncher | None = None,
    config: AppConfig | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level, log_file=log_path)

    action = getattr(namespace, "action_name", None)
    if action is None:
        parser.print_help(sys.stderr)
        return int(ExitCode.INVALID_ARGS)

    resolved_runner = runner or subprocess.run
    try:
        resolved_config = config
        if resolved_config is None:
            resolved_config = load_config(namespace.config, strict=namespace.config is not None)
        if action == "mcp":
            options = ServerOptions(
                dangerously_skip_permissions=_skip_permissions(namespace, resolved_config)
            )
            launcher = server_launcher or _launch_server
            logger.debug("Starting MCP server flow")
            launcher(options, resolved_config)
            return int(ExitCode.SUCCESS)
        if action == "spawn":
            logger.debug("Starting spawn flow")
            return run_spawn(namespace, resolved_config, resolved_runner)
        if action == "list":
            logger.debug("Starting list flow")
            return run_list(resolved_config, resolved_runner)
        logger.debug("Starting environment check flow")
        return run_check(resolved_config, resolved_runner)
    except ClaudeCoderError as exc:
        logger.error(
            "Handled ClaudeCoderError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
