import pytest
import typer

from pgops.cli.common.prompts import Prompter
from pgops.core.validators import one_of, validate_port, validate_username


class _ScriptedOut:
    def __init__(self, answers):
        self.answers = list(answers)
        self.errors: list[str] = []
        self.masked: list[bool] = []

    def text(self, message, *, default=None, masked=False):
        self.masked.append(masked)
        return self.answers.pop(0)

    def error(self, msg):
        self.errors.append(msg)


def test_ask_reprompts_until_port_is_valid():
    scripted = _ScriptedOut(["0", "65536", "abc", "5433"])

    value = Prompter(scripted).ask("Port:", default="5432", validate=validate_port)

    assert value == "5433"
    assert len(scripted.errors) == 3
    assert scripted.answers == []


def test_ask_uses_default_for_blank_answer():
    scripted = _ScriptedOut(["   "])

    assert Prompter(scripted).ask("Host:", default="localhost") == "localhost"
    assert scripted.errors == []


def test_ask_rejects_blank_without_default():
    scripted = _ScriptedOut(["", "alice"])

    assert Prompter(scripted).ask("User:") == "alice"
    assert scripted.errors == ["A value is required."]


def test_ask_allows_blank_when_requested():
    scripted = _ScriptedOut([""])

    assert Prompter(scripted).ask("Optional:", allow_empty=True) == ""


def test_ask_masked_keeps_answer_verbatim():
    scripted = _ScriptedOut([" pass word "])

    assert Prompter(scripted).ask("Password:", masked=True) == " pass word "
    assert scripted.masked == [True]


def test_cancelled_prompt_ends_session():
    scripted = _ScriptedOut([None])

    with pytest.raises(typer.Exit) as exc_info:
        Prompter(scripted).ask("Host:")

    assert exc_info.value.exit_code == 1


def test_ask_without_strip_passes_raw_answer_to_validator():
    scripted = _ScriptedOut([" bob", "bob"])

    value = Prompter(scripted).ask("User:", validate=validate_username, strip=False)

    assert value == "bob"
    assert len(scripted.errors) == 1


def test_rejection_reason_is_escaped_for_the_console():
    scripted = _ScriptedOut(["x[/y]", "bob"])

    value = Prompter(scripted).ask("User:", validate=one_of(["bob"], noun="user"))

    assert value == "bob"
    assert scripted.errors == [
        "Unknown user 'x\\[/y]'. Pick one from the list above."
    ]
