"""MCP server exposing Claude Code spawning and iTerm2 window listing."""

from __future__ import annotations

import asyncio
import logging as py_logging
import subprocess
from dataclasses import dataclass
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import Field

from claudecoder.config import AppConfig, load_config
from claudecoder.errors import ClaudeCoderError
from claudecoder.iterm.host import AUTOMATION_HINT, Runner, list_iterm_windows
from claudecoder.iterm.listing import format_window_list
from claudecoder.spawn import mode_label, resolve_spawn_request, spawn_claude_coder

logger = py_logging.getLogger(__name__)

SERVER_NAME = "claude-coder-mac-mcp"
SPAWN_TOOL_NAME = "spawn_claude_coder"
LIST_TOOL_NAME = "list_iterm_windows"

_AUTONOMOUS_MODE_TEXT = (
    "AUTONOMOUS MODE (--dangerously-skip-permissions): Claude will act without user approval. "
    "Be specific to prevent unintended actions."
)
_INTERACTIVE_MODE_TEXT = "INTERACTIVE MODE: User must approve each action in the spawned terminal."

_PROMPT_GUIDANCE = """PROMPT BEST PRACTICES:
- Be specific: "Run npm test, fix any failing tests" not "fix tests"
- Include context Claude can't see: "This is a Next.js app using Prisma and PostgreSQL"
- Set success criteria: "Done when all tests pass and npm run build succeeds"
- Mention key files: "The API routes are in src/app/api/"
- One focused task works better than multiple vague ones

EXAMPLE PROMPT:
"In this TypeScript Express project, add a new GET /api/health endpoint that returns {status: 'ok', timestamp: Date.now()}. Follow the pattern in src/routes/users.ts. Run npm test when done."

ALWAYS specify workingDirectory so Claude starts in the correct project folder. If you do not know the correct working directory, specify as the first instruction in your prompt that claude should find the project and cd into its directory first."""


@dataclass(frozen=True)
class ServerOptions:
    dangerously_skip_permissions: bool = False


def build_spawn_tool_description(dangerously_skip_permissions: bool) -> str:
    mode_text = _AUTONOMOUS_MODE_TEXT if dangerously_skip_permissions else _INTERACTIVE_MODE_TEXT
    return (
        "Spawn a new Claude Code instance in an iTerm2 window to work on a task.\n\n"
        f"{mode_text}\n\n{_PROMPT_GUIDANCE}"
    )


def run_spawn_tool(
    prompt: str,
    working_directory: str | None,
    window_title: str | None,
    *,
    options: ServerOptions,
    config: AppConfig,
    runner: Runner = subprocess.run,
) -> str:
    """Spawn one instance and return the tool text, raising ToolError on failure."""
    request = resolve_spawn_request(
        prompt,
        config=config,
        working_directory=working_directory,
        window_title=window_title,
        dangerously_skip_permissions=options.dangerously_skip_permissions,
    )
    result = spawn_claude_coder(request, config=config, runner=runner)
    if not result.success:
        raise ToolError(f"Failed to spawn Claude Code: {result.error}\n\n{AUTOMATION_HINT}")

    return (
        f"Successfully spawned Claude Code in iTerm2 ({mode_label(result.dangerously_skip_permissions)})!\n\n"
        f"Window title: {result.window_title}\n"
        f"Working directory: {result.working_directory}\n"
        f"Prompt: {result.prompt}\n\n"
        "The Claude Code instance is now running interactively in iTerm2."
    )


def run_list_tool(*, config: AppConfig, runner: Runner = subprocess.run) -> str:
    try:
        windows = list_iterm_windows(
            runner=runner,
            timeout_seconds=config.osascript_timeout_seconds,
            application=config.iterm_application,
        )
    except ClaudeCoderError as exc:
        raise ToolError(f"Failed to list iTerm windows: {exc.message}") from exc
    return format_window_list(windows)


def register_tools(
    server: FastMCP,
    options: ServerOptions,
    *,
    config: AppConfig,
    runner: Runner = subprocess.run,
) -> None:
    skip_permissions = options.dangerously_skip_permissions

    @server.tool(
        name=SPAWN_TOOL_NAME,
        title="Spawn Claude Coder",
        description=build_spawn_tool_description(skip_permissions),
        annotations=ToolAnnotations(
            title="Spawn Claude Coder",
            readOnlyHint=False,
            destructiveHint=skip_permissions,
            idempotentHint=False,
            openWorldHint=True,
        ),
    )
    async def spawn_claude_coder_tool(
        prompt: Annotated[
            str,
            Field(description="The prompt/task to give to the new Claude Code instance"),
        ],
        workingDirectory: Annotated[  # noqa: N803
            str | None,
            Field(
                description="The working directory for the Claude Code instance "
                "(defaults to home directory)"
            ),
        ] = None,
        windowTitle: Annotated[  # noqa: N803
            str | None,
            Field(description="Custom title for the iTerm2 window (defaults to 'Claude Coder')"),
        ] = None,
    ) -> str:
        return await asyncio.to_thread(
            run_spawn_tool,
            prompt,
            workingDirectory,
            windowTitle,
            options=options,
            config=config,
            runner=runner,
        )

    @server.tool(
        name=LIST_TOOL_NAME,
        title="List iTerm2 Windows",
        description=(
            "List all iTerm2 windows and their sessions "
            "(useful to see running Claude instances)"
        ),
        annotations=ToolAnnotations(
            title="List iTerm2 Windows",
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=True,
        ),
    )
    async def list_iterm_windows_tool() -> str:
        return await asyncio.to_thread(run_list_tool, config=config, runner=runner)


def create_server(
    options: ServerOptions,
    *,
    config: AppConfig | None = None,
    runner: Runner = subprocess.run,
) -> FastMCP:
    server = FastMCP(SERVER_NAME)
    register_tools(server, options, config=config or load_config(), runner=runner)
    return server


def start_server(options: ServerOptions, *, config: AppConfig | None = None) -> None:
    server = create_server(options, config=config)
    logger.info(
        "Claude Coder Mac MCP server running on stdio (%s)",
        mode_label(options.dangerously_skip_permissions),
    )
    server.run(transport="stdio")
