"""Validated interactive prompts.

`Prompter.ask` keeps asking until the answer satisfies every constraint,
printing the reason for each rejection. There is no attempt limit; the
operator ends the loop by answering correctly or cancelling with Ctrl-C.
"""

from __future__ import annotations

from typing import Callable

from rich.markup import escape

from pgops.cli.common.exits import cancelled
from pgops.cli.common.output import Out, out


class Prompter:
    """Interactive input source used by every session step."""

    def __init__(self, output: Out = out) -> None:
        self.out = output

    def read(
        self, message: str, *, default: str | None = None, masked: bool = False
    ) -> str:
        """Read one raw answer; a cancelled prompt ends the session."""
        answer = self.out.text(message, default=default, masked=masked)
        if answer is None:
            cancelled()
        return answer

    def ask(
        self,
        message: str,
        *,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
        allow_empty: bool = False,
        masked: bool = False,
        strip: bool = True,
    ) -> str:
        """
        Ask until the answer is acceptable.

        Args:
            message: Question shown to the operator.
            default: Value used when the answer is blank.
            validate: Returns None for a valid answer or a rejection reason.
            allow_empty: Accept a blank answer when no default is given.
            masked: Do not echo the answer (passwords).
            strip: Trim surrounding whitespace before the checks. Ignored
                for masked answers, which are always kept verbatim.

        Returns:
            The first answer that passes all checks.
        """
        while True:
            answer = self.read(message, default=default, masked=masked)
            if strip and not masked:
                answer = answer.strip()
            if not answer and default is not None:
                answer = default
            if not answer:
                if allow_empty:
                    return answer
                self.out.error("A value is required.")
                continue
            if validate is not None:
                reason = validate(answer)
                if reason:
                    self.out.error(escape(reason))
                    continue
            return answer

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """Ask a yes/no question; a cancelled prompt ends the session."""
        answer = self.out.confirm(message, default=default)
        if answer is None:
            cancelled()
        return bool(answer)

    def choose(self, message: str, choices: list[str]) -> str:
        """Pick one of `choices`; a cancelled prompt ends the session."""
        answer = self.out.select_one(message, choices)
        if answer is None:
            cancelled()
        return answer
