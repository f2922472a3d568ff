"""Ways a pgops session can end."""

from typing import NoReturn

import typer
from rich.markup import escape

from pgops.cli.common.output import out


def ok_exit(msg: str | None = None) -> NoReturn:
    """End the session successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def die(msg: str, code: int = 1) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """End the session on an empty result; the exit code stays 0 by default."""
    out.warn(msg)
    raise typer.Exit(code)


def cancelled() -> NoReturn:
    """End the session after the operator aborted a prompt."""
    warn_exit("Cancelled.", code=1)


def fatal(exc: Exception, code: int = 1) -> NoReturn:
    """
    End the session on an unrecoverable fault.

    The exception text may carry server output, so it is printed literally
    and never parsed as console markup. `exc` stays chained as the cause.
    """
    out.error(escape(str(exc)))
    raise typer.Exit(code) from exc
