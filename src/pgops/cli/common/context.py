"""Session context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from rich.markup import escape

from pgops.cli.common.exits import fatal
from pgops.cli.common.output import out
from pgops.cli.common.prompts import Prompter
from pgops.core.adapters.postgres import PostgresAdapter, StatementExecutor
from pgops.core.catalog import CatalogError, load_databases, load_users
from pgops.core.models import DEFAULT_HOST, DEFAULT_PORT, ConnectionParams
from pgops.core.validators import validate_port, validate_username


@dataclass
class SessionContext:
    """Session state: verified connection, adapter and server-wide listings."""

    params: ConnectionParams
    adapter: PostgresAdapter
    databases: list[str]
    users: list[str]


def collect_connection_params(prompter: Prompter) -> ConnectionParams:
    """Ask for host, port, username and password (all four, every time)."""
    host = prompter.ask("Host:", default=DEFAULT_HOST)
    port = prompter.ask("Port:", default=str(DEFAULT_PORT), validate=validate_port)
    username = prompter.ask("Username:", validate=validate_username, strip=False)
    password = prompter.ask("Password:", masked=True)
    return ConnectionParams(
        host=host, port=int(port), username=username, password=password
    )


def negotiate_connection(
    prompter: Prompter, executor: StatementExecutor
) -> ConnectionParams:
    """
    Collect connection parameters until `SELECT 1` succeeds.

    A failed probe discards every answer and starts over from the host.
    """
    while True:
        params = collect_connection_params(prompter)
        with out.status(f"Connecting to {escape(params.host)}:{params.port}..."):
            ok = PostgresAdapter(executor, params).ping()
        if ok:
            out.success(
                f"Connected to {escape(params.host)}:{params.port} "
                f"as {params.username}."
            )
            return params
        out.error("Connection failed. Check the details and try again.")


def build_session(prompter: Prompter, executor: StatementExecutor) -> SessionContext:
    """Connect, then load databases and users; enumeration failures are fatal."""
    params = negotiate_connection(prompter, executor)
    adapter = PostgresAdapter(executor, params)
    try:
        with out.status("Loading databases..."):
            databases = load_databases(adapter)
        with out.status("Loading users..."):
            users = load_users(adapter)
    except CatalogError as exc:
        fatal(exc)
    return SessionContext(
        params=params, adapter=adapter, databases=databases, users=users
    )
