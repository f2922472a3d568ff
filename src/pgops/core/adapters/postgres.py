from __future__ import annotations

from typing import Iterable, Protocol

from pgops.core import sql
from pgops.core.adapters.psql import QueryResult
from pgops.core.models import MAINTENANCE_DATABASE, ConnectionParams


class StatementExecutor(Protocol):
    """Interface for running one statement against one database."""

    def execute(
        self, statement: str, params: ConnectionParams, database: str
    ) -> QueryResult:
        """Run the statement and return its textual result."""
        ...


class StatementError(RuntimeError):
    """Raised when a statement fails on the server or in the client."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class PostgresAdapter:
    """Adapter around psql for catalog lookups and ownership changes."""

    def __init__(self, executor: StatementExecutor, params: ConnectionParams) -> None:
        self.executor = executor
        self.params = params

    def run(
        self, statement: str, database: str = MAINTENANCE_DATABASE
    ) -> tuple[str, ...]:
        """Execute a statement and return its row lines, raising on failure."""
        result = self.executor.execute(statement, self.params, database)
        if not result.ok:
            detail = result.first_error_line or "psql exited with an error"
            raise StatementError(detail, output=result.output)
        return result.lines

    def ping(self) -> bool:
        """Return True if the server answers a trivial query."""
        return self.executor.execute(sql.PING_SQL, self.params, MAINTENANCE_DATABASE).ok

    def probe(self, database: str) -> bool:
        """Return True if `database` is reachable with the session credentials."""
        return self.executor.execute(sql.CURRENT_DATABASE_SQL, self.params, database).ok

    def list_databases(self) -> list[str]:
        """List non-template databases."""
        return [line.strip() for line in self.run(sql.LIST_DATABASES_SQL)]

    def list_users(self) -> list[str]:
        """List roles that can log in (`pg_user`), ordered by name."""
        return [line.strip() for line in self.run(sql.LIST_USERS_SQL)]

    def count_owned_tables(self, database: str, owner: str) -> int:
        """Return the number of ordinary tables `owner` owns in `database`."""
        lines = self.run(sql.count_owned_tables_sql(owner), database)
        if not lines:
            return 0
        try:
            return int(lines[0].strip())
        except ValueError as exc:
            raise StatementError(f"Unexpected count result: {lines[0]!r}") from exc

    def list_owned_schemas(self, database: str, owner: str) -> list[str]:
        """Distinct schemas in `database` that hold tables owned by `owner`."""
        lines = self.run(sql.owned_schemas_sql(owner), database)
        return [line.strip() for line in lines]

    def list_owned_tables(
        self, database: str, owner: str, schemas: Iterable[str] = ()
    ) -> tuple[str, ...]:
        """Raw `database|schema|table|owner` lines for tables owned by `owner`."""
        return self.run(sql.owned_tables_sql(owner, schemas), database)

    def set_table_owner(
        self, database: str, schema: str, table: str, owner: str
    ) -> None:
        """Set table owner."""
        self.run(sql.alter_table_owner_sql(schema, table, owner), database)
