import click

from mrstack.cli.core import ensure_repo
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import StackValidationError
from mrstack.core.stack import Stack


@click.command("create")
@click.argument("title")
@click.option("--base", "base_branch", help="Branch the head merge request targets.")
@click.pass_obj
def create_cmd(ctx: MrStackContext, title: str, base_branch: str | None) -> None:
    """Start an empty stack named TITLE and make it the current stack."""
    ensure_repo(ctx)

    if title in ctx.stack_store.list_stacks():
        error_output(f"A stack named '{title}' already exists")
        raise SystemExit(1)

    try:
        ctx.stack_store.save_stack(Stack(title=title, base_branch=base_branch))
    except StackValidationError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    ctx.stack_store.set_current_stack(title)

    user_output(f"✓ Created stack {click.style(title, fg='cyan', bold=True)}")
    user_output("Commit on a new branch, then run 'mrstack stack save' to add it.")
