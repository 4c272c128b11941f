from __future__ import annotations

import shlex

from claudecoder.iterm.command import build_claude_command, build_full_command

FLAG = "--dangerously-skip-permissions"


def test_claude_command_without_flag_by_default() -> None:
    cmd = build_claude_command("test prompt", False)
    assert cmd == "claude 'test prompt'"
    assert FLAG not in cmd


def test_claude_command_includes_flag_when_enabled() -> None:
    assert build_claude_command("test prompt", True) == f"claude {FLAG} 'test prompt'"


def test_claude_command_escapes_prompt() -> None:
    cmd = build_claude_command("it's a test", True)
    assert "'it'\"'\"'s a test'" in cmd


def test_flag_text_inside_prompt_is_not_a_token() -> None:
    cmd = build_claude_command(FLAG, False)
    assert shlex.split(cmd) == ["claude", FLAG]
    assert cmd == f"claude '{FLAG}'"


def test_claude_command_uses_configured_binary_and_flag() -> None:
    cmd = build_claude_command("go", True, binary="/opt/bin/claude", skip_permissions_flag="--yolo")
    assert cmd == "/opt/bin/claude --yolo 'go'"


def test_full_command_combines_cd_and_claude() -> None:
    cmd = build_full_command("test", "/home/user", True)
    assert cmd == f"cd '/home/user' && claude {FLAG} 'test'"


def test_full_command_escapes_directory_with_spaces() -> None:
    cmd = build_full_command("test", "/path/with spaces", False)
    assert "cd '/path/with spaces'" in cmd


def test_full_command_quotes_each_field_independently() -> None:
    cmd = build_full_command("it's", "/a b", False)
    assert cmd == "cd '/a b' && claude 'it'\"'\"'s'"
    assert shlex.split(cmd) == ["cd", "/a b", "&&", "claude", "it's"]


def test_directory_cannot_break_out_into_command() -> None:
    cmd = build_full_command("task", "/tmp' && touch /tmp/pwned && echo '", False)
    tokens = shlex.split(cmd)
    assert tokens[0] == "cd"
    assert tokens[1] == "/tmp' && touch /tmp/pwned && echo '"
    assert tokens[2:] == ["&&", "claude", "task"]
