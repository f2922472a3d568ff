"""SQL text for catalog queries and ownership changes.

Statements are sent to psql as plain text, so identifiers and literals are
quoted here rather than bound as parameters.
"""

from __future__ import annotations

from typing import Iterable

# pg_class.relkind for ordinary tables
ORDINARY_TABLE = "r"

PING_SQL = "SELECT 1;"
CURRENT_DATABASE_SQL = "SELECT current_database();"

LIST_DATABASES_SQL = (
    "SELECT datname FROM pg_database WHERE NOT datistemplate ORDER BY datname;"
)

LIST_USERS_SQL = "SELECT usename FROM pg_user ORDER BY usename;"

_OWNED_FROM = (
    "FROM pg_class c "
    "JOIN pg_namespace n ON n.oid = c.relnamespace "
    "JOIN pg_user u ON u.usesysid = c.relowner "
)


def quote_ident(name: str) -> str:
    """Double-quote an identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    """Single-quote a string literal, doubling embedded quotes."""
    return "'" + value.replace("'", "''") + "'"


def _owned_where(owner: str, schemas: Iterable[str] = ()) -> str:
    where = (
        f"WHERE c.relkind = {quote_literal(ORDINARY_TABLE)} "
        f"AND u.usename = {quote_literal(owner)}"
    )
    schema_list = list(schemas)
    if schema_list:
        members = ", ".join(quote_literal(s) for s in schema_list)
        where += f" AND n.nspname IN ({members})"
    return where


def count_owned_tables_sql(owner: str) -> str:
    """Count ordinary tables owned by `owner` in the current database."""
    return f"SELECT count(*) {_OWNED_FROM}{_owned_where(owner)};"


def owned_schemas_sql(owner: str) -> str:
    """Distinct schemas holding tables owned by `owner`."""
    return (
        f"SELECT DISTINCT n.nspname {_OWNED_FROM}{_owned_where(owner)} "
        "ORDER BY n.nspname;"
    )


def owned_tables_sql(owner: str, schemas: Iterable[str] = ()) -> str:
    """Rows of (database, schema, table, owner), ordered by schema then table."""
    return (
        "SELECT current_database(), n.nspname, c.relname, u.usename "
        f"{_OWNED_FROM}{_owned_where(owner, schemas)} "
        "ORDER BY n.nspname, c.relname;"
    )


def alter_table_owner_sql(schema: str, table: str, new_owner: str) -> str:
    """ALTER TABLE ... OWNER TO ... for one schema-qualified table."""
    return (
        f"ALTER TABLE {quote_ident(schema)}.{quote_ident(table)} "
        f"OWNER TO {quote_ident(new_owner)};"
    )
