"""Scope selection for the final ownership query.

A scope is either every known database (no schema filter) or one database,
optionally narrowed to a set of schemas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pgops.core.models import DatabaseOwnership
from pgops.core.validators import parse_number_list


@dataclass(frozen=True)
class OwnershipScope:
    """Which databases and schemas the ownership query covers."""

    database: str | None = None
    schemas: tuple[str, ...] = ()

    @property
    def all_databases(self) -> bool:
        return self.database is None

    def databases(self, known: Sequence[str]) -> list[str]:
        """Return the databases to query, in processing order."""
        if self.database is None:
            return list(known)
        return [self.database]

    def describe(self) -> str:
        """Human-readable one-liner, e.g. `app (schemas: public, sales)`."""
        if self.database is None:
            return "all databases"
        if not self.schemas:
            return f"{self.database} (all schemas)"
        return f"{self.database} (schemas: {', '.join(self.schemas)})"


def pick_database(found: Sequence[DatabaseOwnership], number: int) -> str:
    """Resolve a display number from a scan result to a database name."""
    for entry in found:
        if entry.number == number:
            return entry.database
    raise ValueError(f"No database with number {number}.")


def pick_schemas(schemas: Sequence[str], text: str) -> tuple[str, ...]:
    """
    Resolve comma-separated display numbers (1-based) to schema names.

    Raises:
        ValueError: If any number is outside 1..len(schemas); nothing is
            selected in that case.
    """
    numbers = parse_number_list(text)
    bad = [n for n in numbers if n > len(schemas)]
    if bad:
        listed = ", ".join(str(n) for n in bad)
        raise ValueError(f"Schema number(s) out of range: {listed}.")
    return tuple(schemas[n - 1] for n in numbers)
