import click

from mrstack.cli.core import ensure_repo
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext


@click.command("switch")
@click.argument("title", required=False)
@click.pass_obj
def switch_cmd(ctx: MrStackContext, title: str | None) -> None:
    """Select the stack other commands operate on.

    Without TITLE, lists stored stacks and marks the current one.
    """
    ensure_repo(ctx)
    stacks = ctx.stack_store.list_stacks()

    if title is None:
        current = ctx.stack_store.current_stack_title()
        if not stacks:
            user_output("No stacks found.")
            return
        for name in stacks:
            marker = click.style("*", fg="green", bold=True) if name == current else " "
            user_output(f"{marker} {name}")
        return

    if title not in stacks:
        error_output(f"No stack named '{title}'")
        raise SystemExit(1)

    ctx.stack_store.set_current_stack(title)
    user_output(f"✓ Switched to stack {click.style(title, fg='cyan', bold=True)}")
