"""CLI error handling for precondition failures.

Core modules raise plain domain exceptions. Commands convert them into
UserFacingCliError at the CLI boundary so the user sees a single styled
`Error: ...` line and the process exits with status 1.
"""

from __future__ import annotations

from typing import IO, Any

import click

from wrktr_shared.output.output import user_output


class UserFacingCliError(click.ClickException):
    """An error the user can act on; printed without a traceback."""

    exit_code = 1

    def show(self, file: IO[Any] | None = None) -> None:
        user_output(click.style("Error: ", fg="red") + self.format_message())
