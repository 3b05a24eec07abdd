import click

from mrstack.cli.core import load_stack_or_exit
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import GitCommandError, StackValidationError


@click.command("save")
@click.option("--stack", "stack_title", help="Stack to add to (default: current stack).")
@click.pass_obj
def save_cmd(ctx: MrStackContext, stack_title: str | None) -> None:
    """Add the commit at HEAD to the end of a stack.

    The checked-out branch becomes the new ref's branch and the commit
    message its description (and later its merge request title and body).
    """
    stack = load_stack_or_exit(ctx, stack_title, allow_empty=True)

    try:
        sha = ctx.git.git(["rev-parse", "HEAD"])
        branch = ctx.git.git(["branch", "--show-current"])
        description = ctx.git.git(["log", "-1", "--format=%B", sha])
    except GitCommandError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    if not branch:
        error_output("HEAD is detached. Check out the branch holding the commit first.")
        raise SystemExit(1)

    try:
        stack.append(sha, branch, description)
    except StackValidationError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    ctx.stack_store.save_stack(stack)

    user_output(
        f"✓ Saved {click.style(branch, fg='yellow')} ({sha[:8]}) as change {len(stack)} "
        f"of {click.style(stack.title, fg='cyan', bold=True)}"
    )
