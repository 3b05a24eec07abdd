import logging
import os

import click

from mrstack.cli.commands.config import config_group
from mrstack.cli.commands.stack import stack_group
from mrstack.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_LOG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="mrstack")
@click.option("--debug", is_flag=True, help="Log every git and GitLab call to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Manage stacks of dependent branches backed by GitLab merge requests."""
    # Enable debug logging with --debug or the MRSTACK_DEBUG environment variable
    if debug or os.getenv("MRSTACK_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_LOG_FORMAT)

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


# Register all commands
cli.add_command(config_group)
cli.add_command(stack_group)


def main() -> None:
    """CLI entry point used by the `mrstack` console script."""
    cli()
