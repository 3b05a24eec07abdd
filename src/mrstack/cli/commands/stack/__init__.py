"""Stack commands for managing stacked merge requests."""

import click

from mrstack.cli.commands.stack.create_cmd import create_cmd
from mrstack.cli.commands.stack.delete_cmd import delete_cmd
from mrstack.cli.commands.stack.list_cmd import list_stack
from mrstack.cli.commands.stack.reorder_cmd import reorder_cmd
from mrstack.cli.commands.stack.save_cmd import save_cmd
from mrstack.cli.commands.stack.switch_cmd import switch_cmd
from mrstack.cli.commands.stack.sync_cmd import sync_cmd


@click.group("stack")
def stack_group() -> None:
    """Manage stacks of dependent merge requests."""
    pass


# Register subcommands
stack_group.add_command(create_cmd, name="create")
stack_group.add_command(delete_cmd, name="delete")
stack_group.add_command(list_stack, name="list")
stack_group.add_command(reorder_cmd, name="reorder")
stack_group.add_command(save_cmd, name="save")
stack_group.add_command(switch_cmd, name="switch")
stack_group.add_command(sync_cmd, name="sync")
