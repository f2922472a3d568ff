"""Input predicates used by interactive prompts.

Each validator takes the raw answer and returns None when it is acceptable,
or a short, user-facing rejection reason otherwise. Validators are pure so
they can be reused by any frontend and tested without a terminal.
"""

from __future__ import annotations

import re
from typing import Callable, Collection

Validator = Callable[[str], "str | None"]

_USERNAME_RE = re.compile(r"[A-Za-z0-9_]+")


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def validate_port(value: str) -> str | None:
    """Accept integers in the range 1-65535."""
    text = value.strip()
    if not _is_number(text):
        return "Port must be a number."
    if not 1 <= int(text) <= 65535:
        return "Port must be between 1 and 65535."
    return None


def validate_username(value: str) -> str | None:
    """Accept letters, digits and underscores only."""
    if not _USERNAME_RE.fullmatch(value):
        return "Username may only contain letters, digits and underscores."
    return None


def one_of(known: Collection[str], *, noun: str = "value") -> Validator:
    """Build a validator that accepts only members of `known`."""

    def _validate(value: str) -> str | None:
        if value not in known:
            return f"Unknown {noun} '{value}'. Pick one from the list above."
        return None

    return _validate


def parse_number_list(text: str) -> list[int]:
    """
    Parse a comma-separated list of positive integers.

    Empty entries are ignored and duplicates collapse, keeping first-seen
    order.

    Raises:
        ValueError: If any entry is not a positive integer or the list is empty.
    """
    numbers: list[int] = []
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        if not _is_number(part) or int(part) < 1:
            raise ValueError(f"'{part}' is not a valid number.")
        n = int(part)
        if n not in numbers:
            numbers.append(n)
    if not numbers:
        raise ValueError("Enter at least one number.")
    return numbers


def numbers_in_range(upper: int) -> Validator:
    """Validator for comma-separated numbers that must all be within 1..upper."""

    def _validate(value: str) -> str | None:
        try:
            numbers = parse_number_list(value)
        except ValueError as exc:
            return str(exc)
        bad = [n for n in numbers if n > upper]
        if bad:
            listed = ", ".join(str(n) for n in bad)
            return f"Out of range: {listed} (valid: 1-{upper})."
        return None

    return _validate


def number_in_range(upper: int) -> Validator:
    """Validator for a single number within 1..upper."""

    def _validate(value: str) -> str | None:
        text = value.strip()
        if not _is_number(text) or not 1 <= int(text) <= upper:
            return f"Enter a number between 1 and {upper}."
        return None

    return _validate
