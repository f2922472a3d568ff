"""Core domain models for PostgreSQL ownership operations.

These models represent connection settings and ownership inventory entries
in a simple, immutable form. They are intentionally free of subprocess and
UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432
MAINTENANCE_DATABASE = "postgres"


@dataclass(frozen=True)
class ConnectionParams:
    """
    Connection settings for one interactive session.

    Attributes:
        host: Server host name or address.
        port: Server TCP port (1-65535).
        username: Login role used for every statement.
        password: Login password. Never included in repr().
    """

    host: str
    port: int
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class OwnershipRecord:
    """
    One addressable row of the ownership inventory.

    Attributes:
        seq: 1-based sequence number, unique across the whole inventory.
        database: Database that holds the table.
        schema: Schema that holds the table.
        table: Table name.
        owner: Owner at the time the inventory was built.
    """

    seq: int
    database: str
    schema: str
    table: str
    owner: str

    @property
    def qualified_name(self) -> str:
        """Return `schema.table` for display."""
        return f"{self.schema}.{self.table}"


class Inventory:
    """Immutable, sequence-numbered collection of ownership records."""

    def __init__(self, records: Iterable[OwnershipRecord] = ()) -> None:
        self._records = tuple(records)
        self._by_seq = {r.seq: r for r in self._records}
        if len(self._by_seq) != len(self._records):
            raise ValueError("Inventory sequence numbers must be unique.")

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[OwnershipRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def get(self, seq: int) -> OwnershipRecord | None:
        """Return the record with the given sequence number, if any."""
        return self._by_seq.get(seq)


@dataclass(frozen=True)
class DatabaseOwnership:
    """Number of tables a principal owns in one database (scan result)."""

    number: int
    database: str
    table_count: int


@dataclass(frozen=True)
class OwnerChangeResult:
    """Result of an ownership change for a single table."""

    record: OwnershipRecord
    new_owner: str
    ok: bool
    error: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.record.database}.{self.record.qualified_name}"


@dataclass(frozen=True)
class TransferSummary:
    """Aggregate counts for an all-mode transfer."""

    results: tuple[OwnerChangeResult, ...]

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)
