"""Catalog discovery: databases, users and table ownership inventories.

Functions here compose PostgresAdapter calls into the discovery steps of an
ownership session. They never print; skipped databases and malformed rows
are returned alongside the results so a frontend can report them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pgops.core.adapters.postgres import PostgresAdapter, StatementError
from pgops.core.adapters.psql import FIELD_SEPARATOR
from pgops.core.models import DatabaseOwnership, Inventory, OwnershipRecord

OWNERSHIP_COLUMNS = 4


class CatalogError(RuntimeError):
    """Raised when server-wide enumeration fails and the session cannot go on."""


@dataclass(frozen=True)
class InventoryBuild:
    """Inventory plus what was left out while building it."""

    inventory: Inventory
    skipped_databases: tuple[str, ...] = ()
    malformed_rows: tuple[str, ...] = ()


def parse_rows(
    lines: Iterable[str], arity: int
) -> tuple[list[tuple[str, ...]], list[str]]:
    """
    Split delimited result lines into fixed-arity rows.

    Returns (rows, rejected) where `rejected` holds the lines whose field
    count did not match `arity`.
    """
    rows: list[tuple[str, ...]] = []
    rejected: list[str] = []
    for line in lines:
        if not line.strip():
            continue
        parts = tuple(p.strip() for p in line.split(FIELD_SEPARATOR))
        if len(parts) != arity:
            rejected.append(line)
            continue
        rows.append(parts)
    return rows, rejected


def load_databases(adapter: PostgresAdapter) -> list[str]:
    """Return non-template database names, or raise CatalogError."""
    try:
        databases = [d for d in adapter.list_databases() if d]
    except StatementError as exc:
        raise CatalogError(f"Could not list databases: {exc}") from exc
    if not databases:
        raise CatalogError("No databases found on the server.")
    return databases


def load_users(adapter: PostgresAdapter) -> list[str]:
    """Return all user names, or raise CatalogError."""
    try:
        return [u for u in adapter.list_users() if u]
    except StatementError as exc:
        raise CatalogError(f"Could not list users: {exc}") from exc


def scan_databases(
    adapter: PostgresAdapter, databases: Iterable[str], owner: str
) -> list[DatabaseOwnership]:
    """
    Count tables owned by `owner` in each database.

    Only databases with a non-zero count are returned, numbered from 1 in
    the order given. Databases that cannot be queried contribute nothing.
    """
    found: list[DatabaseOwnership] = []
    for database in databases:
        try:
            count = adapter.count_owned_tables(database, owner)
        except StatementError:
            continue
        if count > 0:
            found.append(
                DatabaseOwnership(
                    number=len(found) + 1, database=database, table_count=count
                )
            )
    return found


def list_schemas(adapter: PostgresAdapter, database: str, owner: str) -> list[str]:
    """Distinct schemas in `database` holding tables owned by `owner`."""
    return [s for s in adapter.list_owned_schemas(database, owner) if s]


def build_inventory(
    adapter: PostgresAdapter,
    databases: Iterable[str],
    owner: str,
    *,
    schemas: Iterable[str] = (),
) -> InventoryBuild:
    """
    Build the sequence-numbered ownership inventory.

    For each database:
      1) probe with `SELECT current_database()`; skip it if unreachable
      2) fetch owned tables (optionally restricted to `schemas`)
      3) append rows, continuing the sequence across databases
    """
    schema_filter = tuple(schemas)
    records: list[OwnershipRecord] = []
    skipped: list[str] = []
    malformed: list[str] = []

    for database in databases:
        if not adapter.probe(database):
            skipped.append(database)
            continue
        try:
            lines = adapter.list_owned_tables(database, owner, schema_filter)
        except StatementError:
            skipped.append(database)
            continue

        rows, rejected = parse_rows(lines, OWNERSHIP_COLUMNS)
        malformed.extend(rejected)
        for db_name, schema, table, table_owner in rows:
            records.append(
                OwnershipRecord(
                    seq=len(records) + 1,
                    database=db_name,
                    schema=schema,
                    table=table,
                    owner=table_owner,
                )
            )

    return InventoryBuild(
        inventory=Inventory(records),
        skipped_databases=tuple(skipped),
        malformed_rows=tuple(malformed),
    )
