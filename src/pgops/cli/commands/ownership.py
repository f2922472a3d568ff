from __future__ import annotations

import typer
from rich.markup import escape

from pgops.cli.common.context import SessionContext, build_session
from pgops.cli.common.exits import die, fatal, ok_exit, warn_exit
from pgops.cli.common.output import out
from pgops.cli.common.prompts import Prompter
from pgops.core.adapters.postgres import StatementError, StatementExecutor
from pgops.core.adapters.psql import ClientNotFoundError, PsqlExecutor
from pgops.core.catalog import build_inventory, list_schemas, scan_databases
from pgops.core.models import Inventory, OwnerChangeResult
from pgops.core.scope import OwnershipScope, pick_database, pick_schemas
from pgops.core.transfer import parse_selection, transfer_all, transfer_selected
from pgops.core.validators import number_in_range, numbers_in_range, one_of

ALL_DATABASES = "All databases"
ONE_DATABASE = "One specific database"
SELECTED_TABLES = "Selected tables (by number)"
ALL_TABLES = "All listed tables"

owner_app = typer.Typer(
    help="Table ownership operations.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@owner_app.callback()
def _init(ctx: typer.Context):
    """Show help when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


def choose_target_owner(session: SessionContext, prompter: Prompter) -> str:
    """Ask whose tables to look for."""
    out.names_table(session.users, title="Users", column="User")
    return prompter.ask(
        "Find tables owned by user:", validate=one_of(session.users, noun="user")
    )


def choose_scope(
    session: SessionContext, prompter: Prompter, owner: str
) -> OwnershipScope:
    """
    Narrow the ownership query to all databases, or one database and
    optionally some of its schemas.
    """
    where = prompter.choose("Where should I look?", [ALL_DATABASES, ONE_DATABASE])
    if where == ALL_DATABASES:
        return OwnershipScope()

    with out.status(f"Scanning {len(session.databases)} database(s)..."):
        found = scan_databases(session.adapter, session.databases, owner)
    if not found:
        warn_exit(f"User '{escape(owner)}' owns no tables in any database.")

    out.scan_table(found, title=f"Databases with tables owned by {escape(owner)}")
    number = prompter.ask("Database number:", validate=number_in_range(len(found)))
    database = pick_database(found, int(number))

    shown = escape(database)
    if not prompter.confirm(f"Filter '{database}' by schema?", default=False):
        return OwnershipScope(database=database)

    try:
        with out.status(f"Loading schemas in {shown}..."):
            schemas = list_schemas(session.adapter, database, owner)
    except StatementError as exc:
        out.warn(
            f"Could not list schemas in '{shown}': {escape(str(exc))}. "
            "Using all schemas."
        )
        return OwnershipScope(database=database)
    if not schemas:
        out.warn(f"No schemas in '{shown}' hold tables owned by {escape(owner)}.")
        return OwnershipScope(database=database)

    out.names_table(schemas, title=f"Schemas in {shown}", column="Schema")
    text = prompter.ask(
        "Schema numbers (comma-separated):", validate=numbers_in_range(len(schemas))
    )
    return OwnershipScope(database=database, schemas=pick_schemas(schemas, text))


def load_inventory(
    session: SessionContext, owner: str, scope: OwnershipScope
) -> Inventory:
    """Run the final ownership query and render the inventory."""
    databases = scope.databases(session.databases)
    where = escape(scope.describe())
    with out.status(f"Looking up tables owned by {escape(owner)} in {where}..."):
        build = build_inventory(
            session.adapter, databases, owner, schemas=scope.schemas
        )

    for database in build.skipped_databases:
        out.warn(f"Skipping database '{escape(database)}': not reachable.")
    for line in build.malformed_rows:
        out.warn(f"Skipping unexpected result row: {escape(repr(line))}")

    if not build.inventory:
        warn_exit(f"No tables owned by '{escape(owner)}' found in {where}.")

    out.header("Owned tables")
    out.kv(
        {
            "Owner": owner,
            "Scope": scope.describe(),
            "Tables": len(build.inventory),
        }
    )
    out.ownership_table(build.inventory, title=f"Tables owned by {escape(owner)}")
    return build.inventory


def _report(result: OwnerChangeResult) -> None:
    record = result.record
    where = f"{escape(record.qualified_name)} in {escape(record.database)}"
    if result.ok:
        out.success(f"{where}: owner set to {escape(result.new_owner)}.")
    else:
        out.error(f"{where}: failed ({escape(result.error or 'unknown error')}).")


def run_transfer(
    session: SessionContext, prompter: Prompter, inventory: Inventory
) -> None:
    """Confirm, pick the new owner and the tables, then change ownership."""
    if not prompter.confirm("Transfer ownership of these tables?", default=False):
        ok_exit("No changes made.")

    new_owner = prompter.ask(
        "New owner:", validate=one_of(session.users, noun="user")
    )
    mode = prompter.choose("Which tables?", [SELECTED_TABLES, ALL_TABLES])

    if mode == SELECTED_TABLES:

        def _valid_selection(value: str) -> str | None:
            try:
                parse_selection(value, inventory)
            except ValueError as exc:
                return str(exc)
            return None

        text = prompter.ask(
            "Table numbers (comma-separated):", validate=_valid_selection
        )
        records = parse_selection(text, inventory)
        with out.status("Updating table owners..."):
            results = transfer_selected(session.adapter, records, new_owner)
        for result in results:
            _report(result)
        out.owner_change_results_table(results, title="Owner change results")
        return

    with out.status(f"Updating owners of {len(inventory)} table(s)..."):
        summary = transfer_all(session.adapter, inventory, new_owner)
    for result in summary.results:
        _report(result)
    out.header("Summary")
    out.success(f"Successfully transferred: {summary.succeeded}")
    if summary.failed:
        out.error(f"Failed to transfer: {summary.failed}")


def run_session(prompter: Prompter, executor: StatementExecutor) -> None:
    """Run one interactive discovery-and-transfer session."""
    try:
        session = build_session(prompter, executor)

        out.header("Databases")
        out.names_table(session.databases, title="Databases", column="Database")

        owner = choose_target_owner(session, prompter)
        scope = choose_scope(session, prompter, owner)
        inventory = load_inventory(session, owner, scope)
        run_transfer(session, prompter, inventory)
    except ClientNotFoundError as exc:
        fatal(exc)


@owner_app.command("transfer")
def transfer():
    """Find tables owned by a user and transfer them to another user."""
    try:
        run_session(Prompter(), PsqlExecutor())
    except KeyboardInterrupt:
        die("Interrupted.", code=130)
