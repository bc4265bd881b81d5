"""Output utilities for CLI commands.

Human-readable messages go to stderr so that stdout stays reserved for
structured output that other tools may consume.
"""

from typing import Any

import click


def user_output(message: Any = None, *, nl: bool = True) -> None:
    """Write a message for the user to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = None, *, nl: bool = True) -> None:
    """Write structured output (JSON, paths) to stdout."""
    click.echo(message, nl=nl)
