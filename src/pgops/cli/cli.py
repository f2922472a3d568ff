"""CLI application for PostgreSQL ownership tooling."""

import typer

from pgops.cli.commands.ownership import owner_app

app = typer.Typer(
    help="pgops - PostgreSQL table ownership tooling",
    no_args_is_help=True,
)

app.add_typer(
    owner_app,
    name="owner",
    help="Find tables owned by a user and transfer their ownership.",
)


if __name__ == "__main__":
    app()
