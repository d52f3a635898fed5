"""Output helpers that keep human messages and machine data on separate streams.

user_output goes to stderr so that stdout carries only data meant for other
programs (JSON from `status --json`, the merged manifest from `resolve`).
"""

from typing import Any

import click


def user_output(message: Any = "", nl: bool = True) -> None:
    """Print a human-facing message to stderr."""
    click.echo(message, nl=nl, err=True)


def machine_output(message: Any = "", nl: bool = True) -> None:
    """Print machine-readable data to stdout."""
    click.echo(message, nl=nl)
