from __future__ import annotations

import claudecoder.security as security


def test_truncate_log_keeps_short_values() -> None:
    assert security.truncate_log("  short  ") == "short"


def test_truncate_log_adds_ellipsis() -> None:
    assert security.truncate_log("x" * 20, limit=10) == "xxxxxxx..."


def test_prompt_for_log_collapses_whitespace_and_bounds_length() -> None:
    prompt = "Fix the tests.\n\nThen run   the build. " + "y" * 400
    rendered = security.prompt_for_log(prompt)

    assert "\n" not in rendered
    assert rendered.startswith("Fix the tests. Then run the build. ")
    assert len(rendered) == security.PROMPT_LOG_TRUNCATE_LIMIT
    assert rendered.endswith("...")


def test_prompt_for_log_empty() -> None:
    assert security.prompt_for_log("") == ""


def test_command_for_log_quotes_arguments() -> None:
    rendered = security.command_for_log(["osascript", "-e", 'tell application "iTerm2" to get name'])
    assert rendered == "osascript -e 'tell application \"iTerm2\" to get name'"
    assert security.command_for_log([]) == ""
