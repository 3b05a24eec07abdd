import click

from mrstack.cli.core import ensure_repo, resolve_stack_title
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import StackNotFoundError


@click.command("delete")
@click.argument("title", required=False)
@click.option("-f", "--force", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def delete_cmd(ctx: MrStackContext, title: str | None, force: bool) -> None:
    """Forget a stack (default: the current one).

    Branches and merge requests are left untouched.
    """
    ensure_repo(ctx)
    resolved = resolve_stack_title(ctx, title)

    if not force and not click.confirm(f"Delete stack '{resolved}'?", default=False, err=True):
        user_output("Aborted.")
        return

    try:
        ctx.stack_store.delete_stack(resolved)
    except StackNotFoundError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    user_output(f"✓ Deleted stack {click.style(resolved, fg='cyan', bold=True)}")
