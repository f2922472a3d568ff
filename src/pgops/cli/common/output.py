"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from pgops.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_INPUT,
    QUESTIONARY_STYLE_SELECT,
)

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages, prompts and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "instruction", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be PG-OPS consistent."""
        return f"[PG-OPS] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs; values are printed literally."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {escape(str(v))}")

    def text(
        self, message: str, *, default: str | None = None, masked: bool = False
    ) -> str | None:
        """
        Read one line of input.

        The default is shown in the question but not pre-filled, so a blank
        answer stays blank and the caller decides what it means.

        Returns:
            The raw answer, or None if the prompt was cancelled (Ctrl-C).
        """
        question = self._q(message)
        if default is not None:
            question = f"{question} [{default}]"
        fn = questionary.password if masked else questionary.text
        prompt = self._q_try(fn, question, style=QUESTIONARY_STYLE_INPUT, qmark="✦")
        return prompt.ask()

    def select_one(self, message: str, choices: list[str]) -> str | None:
        """
        Prompt the user to select a single item from a list (radio list).

        Returns:
            The selected value, or None if cancelled.
        """
        if not choices:
            return None

        prompt = self._q_try(
            questionary.select,
            self._q(message),
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark="✦",
            instruction="Use ↑/↓ then Enter",
            pointer="❯",
        )
        return prompt.ask()

    def confirm(self, message: str, *, default: bool = False) -> bool | None:
        """
        Ask the user for a yes/no answer using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True or False, or None if the prompt was cancelled.
        """
        # Questionary renders `instruction=...` inline, next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return prompt.ask()

    def names_table(self, names: Iterable[str], *, title: str, column: str) -> None:
        """Render a numbered single-column listing (databases, users, schemas)."""
        t = Table(title=title, show_lines=False)
        t.add_column("#", style="meta", justify="right", no_wrap=True)
        t.add_column(column, style="ok")

        for i, name in enumerate(names, start=1):
            t.add_row(str(i), escape(name))

        console.print(t)

    def scan_table(self, found: Iterable[Any], title: str = "Databases") -> None:
        """
        Render databases that contain owned tables.

        Expects objects with .number .database .table_count
        (like pgops.core.models.DatabaseOwnership)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("#", style="meta", justify="right", no_wrap=True)
        t.add_column("Database", style="ok")
        t.add_column("Owned tables", justify="right")

        for entry in found:
            t.add_row(
                str(entry.number), escape(entry.database), str(entry.table_count)
            )

        console.print(t)

    def ownership_table(
        self, records: Iterable[Any], title: str = "Owned tables"
    ) -> None:
        """
        Render the ownership inventory.

        Expects objects with .seq .database .schema .table .owner
        (like pgops.core.models.OwnershipRecord)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("#", style="meta", justify="right", no_wrap=True)
        t.add_column("Database", style="ok")
        t.add_column("Schema")
        t.add_column("Table", style="ok")
        t.add_column("Owner", style="meta")

        for r in records:
            t.add_row(
                str(r.seq),
                escape(r.database),
                escape(r.schema),
                escape(r.table),
                escape(r.owner),
            )

        console.print(t)

    def owner_change_results_table(
        self, results: Iterable[Any], title: str = "Owner change results"
    ) -> None:
        """Render results of ownership changes (success/fail per table)."""
        t = Table(title=title, show_lines=False)
        t.add_column("Object", style="ok")
        t.add_column("New owner", style="meta")
        t.add_column("Result")

        for r in results:
            name = str(getattr(r, "full_name", "") or "")
            owner = str(getattr(r, "new_owner", "") or "")
            ok = bool(getattr(r, "ok", False))
            err = escape(str(getattr(r, "error", "") or ""))
            result = "[ok]OK[/]" if ok else f"[err]FAIL[/] {err}"
            t.add_row(escape(name), escape(owner), result)

        console.print(t)


out = Out()
