"""Output utilities for CLI commands with clear intent.

user_output() is for messages meant for a person and goes to stderr.
machine_output() is for data meant to be piped and goes to stdout.
"""

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", *, nl: bool = True) -> None:
    click.echo(message, nl=nl)


def error_output(message: str) -> None:
    user_output(click.style("Error: ", fg="red", bold=True) + message)
