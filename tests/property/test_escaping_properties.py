from __future__ import annotations

import re
import shlex

from hypothesis import given
from hypothesis import strategies as st

from claudecoder.iterm.command import build_full_command
from claudecoder.iterm.escaping import escape_for_applescript, escape_for_shell

_NO_NUL_TEXT = st.text(alphabet=st.characters(exclude_characters="\x00"))
_APPLESCRIPT_ESCAPE = re.compile(r'\\(.)', re.DOTALL)
_APPLESCRIPT_SEQUENCES = {"\\": "\\", '"': '"', "n": "\n"}


def _read_applescript_literal(body: str) -> str:
    """Decode the body of a double-quoted AppleScript string literal."""
    # A bare quote or newline would end the literal early.
    assert "\n" not in body
    assert '"' not in _APPLESCRIPT_ESCAPE.sub("", body)
    assert not _APPLESCRIPT_ESCAPE.sub("", body).endswith("\\")
    return _APPLESCRIPT_ESCAPE.sub(lambda match: _APPLESCRIPT_SEQUENCES[match.group(1)], body)


@given(_NO_NUL_TEXT)
def test_shell_escaping_round_trips_as_one_word(value: str) -> None:
    assert shlex.split(escape_for_shell(value)) == [value]


@given(_NO_NUL_TEXT)
def test_applescript_escaping_round_trips_through_literal(value: str) -> None:
    assert _read_applescript_literal(escape_for_applescript(value)) == value


@given(_NO_NUL_TEXT, _NO_NUL_TEXT, st.booleans())
def test_composed_command_keeps_structure(prompt: str, directory: str, autonomous: bool) -> None:
    tokens = shlex.split(build_full_command(prompt, directory, autonomous))

    expected_flags = ["--dangerously-skip-permissions"] if autonomous else []
    assert tokens == ["cd", directory, "&&", "claude", *expected_flags, prompt]


@given(_NO_NUL_TEXT, _NO_NUL_TEXT)
def test_two_layers_decode_back_to_the_original_prompt(prompt: str, directory: str) -> None:
    command = build_full_command(prompt, directory, False)

    typed_text = _read_applescript_literal(escape_for_applescript(command))

    assert typed_text == command
    assert shlex.split(typed_text)[-1] == prompt
