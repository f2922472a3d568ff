"""Statement execution through the `psql` command-line client.

Every query and statement is sent as one non-interactive `psql` call with
tuples-only, unaligned output so rows can be split on a fixed delimiter.
The password travels to the child process through a transient `PGPASSWORD`
entry that only exists for the duration of the call.
"""

from __future__ import annotations

import os
import subprocess
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, MutableMapping

from pgops.core.models import ConnectionParams

FIELD_SEPARATOR = "|"
PASSWORD_ENV = "PGPASSWORD"


class ClientNotFoundError(RuntimeError):
    """Raised when the psql client binary cannot be found."""


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a single statement: row lines on success, diagnostics on failure."""

    ok: bool
    lines: tuple[str, ...] = ()
    output: str = ""
    returncode: int | None = None

    @property
    def first_error_line(self) -> str:
        """Return the first non-empty diagnostic line (or an empty string)."""
        for line in self.output.splitlines():
            if line.strip():
                return line.strip()
        return ""


@contextmanager
def credential_env(
    password: str, env: MutableMapping[str, str] | None = None
) -> Iterator[MutableMapping[str, str]]:
    """
    Yield a child-process environment carrying the password.

    The password entry is removed when the block exits, whether it
    completes, fails, or raises.
    """
    child_env = env if env is not None else dict(os.environ)
    child_env[PASSWORD_ENV] = password
    try:
        yield child_env
    finally:
        child_env.pop(PASSWORD_ENV, None)


@dataclass
class PsqlExecutor:
    """Adapter that runs SQL statements via the psql client."""

    binary: str = "psql"

    def build_command(
        self, statement: str, params: ConnectionParams, database: str
    ) -> list[str]:
        """Return the argv for one statement (never contains the password)."""
        return [
            self.binary,
            "-h",
            params.host,
            "-p",
            str(params.port),
            "-U",
            params.username,
            "-d",
            database,
            "-X",  # ignore ~/.psqlrc
            "-w",  # never prompt for a password
            "-A",
            "-t",
            "-F",
            FIELD_SEPARATOR,
            "-v",
            "ON_ERROR_STOP=1",
            "-c",
            statement,
        ]

    def execute(
        self, statement: str, params: ConnectionParams, database: str
    ) -> QueryResult:
        """
        Run one statement against `database`.

        Returns a failed QueryResult on a non-zero exit status or on any
        process-level error. Raises ClientNotFoundError if psql is missing.
        """
        cmd = self.build_command(statement, params, database)
        with credential_env(params.password) as env:
            try:
                proc = subprocess.run(
                    cmd,
                    env=env,
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise ClientNotFoundError(
                    f"The '{self.binary}' client was not found on PATH."
                ) from exc
            except (OSError, subprocess.SubprocessError) as exc:
                return QueryResult(ok=False, output=str(exc))

        combined = "\n".join(p for p in (proc.stdout, proc.stderr) if p)
        if proc.returncode != 0:
            return QueryResult(ok=False, output=combined, returncode=proc.returncode)

        lines = tuple(line for line in proc.stdout.splitlines() if line.strip())
        return QueryResult(ok=True, lines=lines, output=combined, returncode=0)
