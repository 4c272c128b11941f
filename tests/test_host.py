from __future__ import annotations

import subprocess

import pytest

from claudecoder.errors import ClaudeCoderError, ExitCode
from claudecoder.iterm.host import OSASCRIPT_COMMAND, list_iterm_windows, run_applescript
from claudecoder.iterm.models import ItermSession, ItermWindow


def _cp(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_run_applescript_passes_script_on_stdin() -> None:
    seen: dict[str, object] = {}

    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        seen["cmd"] = cmd
        seen.update(kwargs)
        return _cp(0, "ok\n")

    assert run_applescript('tell application "iTerm" to activate', runner=runner, timeout_seconds=5) == "ok\n"
    assert seen["cmd"] == OSASCRIPT_COMMAND
    assert seen["input"] == 'tell application "iTerm" to activate'
    assert seen["timeout"] == 5
    assert seen["check"] is False


def test_run_applescript_raises_host_error_on_failure() -> None:
    runner = lambda *args, **kwargs: _cp(1, stderr="execution error: Not authorized (-1743)")

    with pytest.raises(ClaudeCoderError) as exc:
        run_applescript("script", runner=runner)

    assert exc.value.code == ExitCode.HOST_ERROR
    assert "-1743" in exc.value.message
    assert "Automation" in exc.value.hint


def test_run_applescript_reports_exit_code_without_stderr() -> None:
    runner = lambda *args, **kwargs: _cp(3)

    with pytest.raises(ClaudeCoderError) as exc:
        run_applescript("script", runner=runner)

    assert exc.value.message == "osascript exited with code 3"


def test_run_applescript_missing_osascript_is_unsupported_platform() -> None:
    def runner(*args: object, **kwargs: object) -> subprocess.CompletedProcess:
        raise FileNotFoundError("osascript")

    with pytest.raises(ClaudeCoderError) as exc:
        run_applescript("script", runner=runner)

    assert exc.value.code == ExitCode.UNSUPPORTED_PLATFORM


def test_run_applescript_timeout_is_host_error() -> None:
    def runner(*args: object, **kwargs: object) -> subprocess.CompletedProcess:
        raise subprocess.TimeoutExpired(cmd="osascript", timeout=1)

    with pytest.raises(ClaudeCoderError) as exc:
        run_applescript("script", runner=runner, timeout_seconds=1)

    assert exc.value.code == ExitCode.HOST_ERROR
    assert "timed out" in exc.value.message


def test_list_iterm_windows_parses_host_output() -> None:
    seen: dict[str, object] = {}

    def runner(cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        seen.update(kwargs)
        return _cp(0, "WINDOW:42\nSESSION:claude|/dev/ttys004\n")

    windows = list_iterm_windows(runner=runner)

    assert windows == [ItermWindow(id="42", sessions=(ItermSession("claude", "/dev/ttys004"),))]
    assert "WINDOW:" in str(seen["input"])


def test_list_iterm_windows_propagates_host_errors() -> None:
    runner = lambda *args, **kwargs: _cp(1, stderr="iTerm got an error")

    with pytest.raises(ClaudeCoderError):
        list_iterm_windows(runner=runner)
