"""Questionary / prompt_toolkit theme for PG-OPS.

Questionary uses prompt_toolkit under the hood. This module defines the
central styles so all interactive prompts (text/password/select/confirm)
look consistent.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_INPUT = Style.from_dict(
    {
        "qmark": "bold ansibrightcyan",
        "question": "bold ansibrightblue",
        "answer": "bold ansibrightyellow",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
    }
)

QUESTIONARY_STYLE_SELECT = Style.from_dict(
    {
        "qmark": "bold ansibrightcyan",
        "question": "bold ansibrightblue",
        "answer": "bold ansibrightyellow",
        "pointer": "bold ansibrightyellow",
        "highlighted": "bold ansibrightyellow",
        "selected": "bold ansibrightyellow",
        "separator": "ansibrightblack",
        "instruction": "ansibrightblack",
        "disabled": "ansibrightblack",
    }
)

QUESTIONARY_STYLE_CONFIRM = Style.from_dict(
    {
        "qmark": "bold ansibrightred",
        "question": "bold ansibrightred",
        "answer": "bold ansibrightred",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
    }
)
