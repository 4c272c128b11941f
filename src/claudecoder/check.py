"""Environment checks for running Claude Code through iTerm2 on macOS."""

from __future__ import annotations

import logging as py_logging
import platform
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from claudecoder.config import DEFAULT_CLAUDE_BINARY
from claudecoder.iterm.host import Runner
from claudecoder.security import command_for_log

logger = py_logging.getLogger(__name__)

ITERM_APP_PATH = Path("/Applications/iTerm.app")
MIN_PYTHON_VERSION = (3, 10)
AUTOMATION_PROBE_SCRIPT = 'tell application "iTerm2" to get name'
_PROBE_TIMEOUT_SECONDS = 15
_REPORT_RULE = "=" * 50


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


_STATUS_ICONS = {
    CheckStatus.PASS: "[OK]",
    CheckStatus.WARN: "[!!]",
    CheckStatus.FAIL: "[X]",
}


@dataclass(frozen=True)
class CheckResult:
    name: str
    status: CheckStatus
    message: str


@dataclass
class EnvironmentCheckResult:
    all_passed: bool
    checks: list[CheckResult] = field(default_factory=list)


def check_macos(platform_name: str | None = None, release: str | None = None) -> CheckResult:
    platform_value = platform_name if platform_name is not None else sys.platform
    if platform_value == "darwin":
        if release is None:
            release = platform.release()
        return CheckResult("macOS", CheckStatus.PASS, f"Running on macOS (Darwin {release})")
    return CheckResult(
        "macOS",
        CheckStatus.FAIL,
        f"This tool requires macOS. Current platform: {platform_value}",
    )


def check_python_version(version_info: Sequence[int] | None = None) -> CheckResult:
    version = tuple(version_info if version_info is not None else sys.version_info[:3])
    rendered = ".".join(str(part) for part in version)
    minimum = ".".join(str(part) for part in MIN_PYTHON_VERSION)
    if version[:2] >= MIN_PYTHON_VERSION:
        return CheckResult(
            "Python",
            CheckStatus.PASS,
            f"Python {rendered} meets minimum requirement (>={minimum})",
        )
    return CheckResult(
        "Python",
        CheckStatus.FAIL,
        f"Python {rendered} is below minimum requirement (>={minimum})",
    )


def check_iterm2(app_path: Path = ITERM_APP_PATH) -> CheckResult:
    if app_path.is_dir():
        return CheckResult("iTerm2", CheckStatus.PASS, f"iTerm2 is installed at {app_path}")
    return CheckResult(
        "iTerm2",
        CheckStatus.FAIL,
        "iTerm2 is not installed. Download from https://iterm2.com/ "
        "or install via: brew install --cask iterm2",
    )


def check_claude_code(
    *,
    binary: str = DEFAULT_CLAUDE_BINARY,
    which: Callable[[str], str | None] = shutil.which,
    runner: Runner = subprocess.run,
) -> CheckResult:
    path = which(binary)
    if not path:
        return CheckResult(
            "Claude Code CLI",
            CheckStatus.FAIL,
            "Claude Code CLI is not installed. Install from https://claude.ai/code",
        )
    try:
        result = runner(
            [path, "--version"],
            capture_output=True,
            text=True,
            check=False,
            timeout=_PROBE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired):
        logger.debug("check claude-version-probe-failed path=%s", path, exc_info=True)
        return CheckResult("Claude Code CLI", CheckStatus.PASS, f"Claude Code CLI found at {path}")

    version = (result.stdout or "").strip()
    if result.returncode != 0 or not version:
        return CheckResult("Claude Code CLI", CheckStatus.PASS, f"Claude Code CLI found at {path}")
    return CheckResult(
        "Claude Code CLI",
        CheckStatus.PASS,
        f"Claude Code CLI found at {path} ({version})",
    )


def _classify_automation_error(error_text: str) -> CheckResult:
    if "not allowed" in error_text or "1743" in error_text:
        return CheckResult(
            "Automation Permissions",
            CheckStatus.FAIL,
            "Automation permissions not granted. Go to System Settings > Privacy & Security > "
            "Automation and enable iTerm2 for your terminal/app.",
        )
    if "not running" in error_text or "(-600)" in error_text:
        return CheckResult(
            "Automation Permissions",
            CheckStatus.WARN,
            "Could not verify automation permissions (iTerm2 is not running). "
            "Permissions will be requested on first use.",
        )
    return CheckResult(
        "Automation Permissions",
        CheckStatus.WARN,
        f"Could not verify automation permissions: {error_text}",
    )


def check_automation_permissions(*, runner: Runner = subprocess.run) -> CheckResult:
    command = ["osascript", "-e", AUTOMATION_PROBE_SCRIPT]
    logger.debug("check automation-probe command=%s", command_for_log(command))
    try:
        result = runner(
            command,
            capture_output=True,
            text=True,
            check=False,
            timeout=_PROBE_TIMEOUT_SECONDS,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        return _classify_automation_error(str(exc))

    if result.returncode == 0:
        return CheckResult(
            "Automation Permissions",
            CheckStatus.PASS,
            "Automation permissions for iTerm2 are granted",
        )
    error_text = (result.stderr or "").strip() or f"osascript exited with code {result.returncode}"
    return _classify_automation_error(error_text)


def run_all_checks(
    *,
    binary: str = DEFAULT_CLAUDE_BINARY,
    runner: Runner = subprocess.run,
    which: Callable[[str], str | None] = shutil.which,
    platform_name: str | None = None,
    app_path: Path = ITERM_APP_PATH,
) -> EnvironmentCheckResult:
    checks = [
        check_macos(platform_name),
        check_python_version(),
        check_iterm2(app_path),
        check_claude_code(binary=binary, which=which, runner=runner),
        check_automation_permissions(runner=runner),
    ]
    for check in checks:
        logger.debug("check %s status=%s", check.name, check.status.value)
    all_passed = all(check.status != CheckStatus.FAIL for check in checks)
    return EnvironmentCheckResult(all_passed=all_passed, checks=checks)


def format_check_results(result: EnvironmentCheckResult) -> str:
    lines = ["Environment Check Results", _REPORT_RULE, ""]
    for check in result.checks:
        lines.append(f"{_STATUS_ICONS[check.status]} {check.name}")
        lines.append(f"    {check.message}")
        lines.append("")

    lines.append(_REPORT_RULE)
    if result.all_passed:
        lines.append("All checks passed! Environment is ready.")
    else:
        lines.append("Some checks failed. Please fix the issues above.")
    return "\n".join(lines)
