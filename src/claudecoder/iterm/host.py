"""osascript execution against the iTerm2 host."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable

from claudecoder.config import DEFAULT_ITERM_APPLICATION, DEFAULT_OSASCRIPT_TIMEOUT_SECONDS
from claudecoder.errors import ClaudeCoderError, ExitCode
from claudecoder.iterm.listing import parse_window_list
from claudecoder.iterm.models import ItermWindow
from claudecoder.iterm.script import build_list_windows_applescript
from claudecoder.security import truncate_log

logger = py_logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]

OSASCRIPT_COMMAND = ["osascript", "-"]
AUTOMATION_HINT = (
    "Make sure iTerm2 is installed and you have granted automation permissions "
    "in System Settings > Privacy & Security > Automation."
)


def run_applescript(
    script: str,
    *,
    runner: Runner = subprocess.run,
    timeout_seconds: int = DEFAULT_OSASCRIPT_TIMEOUT_SECONDS,
) -> str:
    """Run ``script`` through osascript (read from stdin) and return stdout."""
    logger.debug("osascript start bytes=%s timeout=%ss", len(script), timeout_seconds)
    try:
        result = runner(
            OSASCRIPT_COMMAND,
            input=script,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        logger.error("osascript not found on PATH")
        raise ClaudeCoderError(
            "osascript is not available.",
            code=ExitCode.UNSUPPORTED_PLATFORM,
            hint="This tool requires macOS with iTerm2.",
        ) from exc
    except subprocess.TimeoutExpired as exc:
        logger.error("osascript timed out after %ss", timeout_seconds)
        raise ClaudeCoderError(
            f"osascript timed out after {timeout_seconds}s.",
            code=ExitCode.HOST_ERROR,
            hint="Check that iTerm2 is responsive and not waiting on a dialog.",
        ) from exc

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        logger.warning(
            "osascript failed code=%s stderr=%s",
            result.returncode,
            truncate_log(stderr, 300),
        )
        raise ClaudeCoderError(
            stderr or f"osascript exited with code {result.returncode}",
            code=ExitCode.HOST_ERROR,
            hint=AUTOMATION_HINT,
        )
    return result.stdout or ""


def list_iterm_windows(
    *,
    runner: Runner = subprocess.run,
    timeout_seconds: int = DEFAULT_OSASCRIPT_TIMEOUT_SECONDS,
    application: str = DEFAULT_ITERM_APPLICATION,
) -> list[ItermWindow]:
    stdout = run_applescript(
        build_list_windows_applescript(application=application),
        runner=runner,
        timeout_seconds=timeout_seconds,
    )
    windows = parse_window_list(stdout)
    logger.debug("listing parsed windows=%s", len(windows))
    return windows
