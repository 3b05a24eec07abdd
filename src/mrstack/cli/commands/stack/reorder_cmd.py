import click

from mrstack.cli.core import load_stack_or_exit
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import (
    DefaultBranchNotFoundError,
    GitCommandError,
    MissingBranchesError,
    StackOperationError,
)
from mrstack.core.mr_updater import update_mrs
from mrstack.core.reorder import reorder_stack
from mrstack.core.stack import Stack
from mrstack.core.sync import resolve_base_branch

EDITOR_HELP = """
# Reorder the branches of stack '{title}'.
# The first line is the head (it targets the base branch), the last line is the tail.
# Lines starting with '#' and empty lines are ignored.
# Every branch must appear exactly once.
"""


def parse_branch_order(text: str) -> list[str]:
    """Branch names from editor text, one per line, skipping comments and blanks."""
    branches: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        branches.append(stripped)
    return branches


def _edit_order(stack: Stack) -> list[str] | None:
    content = "\n".join(stack.branches()) + "\n" + EDITOR_HELP.format(title=stack.title)
    edited = click.edit(content, extension=".txt")
    if edited is None:
        return None
    return parse_branch_order(edited)


@click.command("reorder")
@click.argument("branches", nargs=-1)
@click.option("--stack", "stack_title", help="Stack to reorder (default: current stack).")
@click.option("--base", "base_branch", help="Branch the head merge request targets.")
@click.pass_obj
def reorder_cmd(
    ctx: MrStackContext,
    branches: tuple[str, ...],
    stack_title: str | None,
    base_branch: str | None,
) -> None:
    """Reorder a stack and retarget its merge requests.

    BRANCHES lists every branch of the stack in the new order, head first.
    Without BRANCHES an editor opens with the current order.
    """
    stack = load_stack_or_exit(ctx, stack_title)

    order = list(branches) if branches else _edit_order(stack)
    if order is None:
        user_output("Reorder cancelled.")
        return

    try:
        new_stack = reorder_stack(stack, order)
    except MissingBranchesError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    if new_stack.branches() == stack.branches():
        user_output("Stack order unchanged.")
        return

    try:
        base = resolve_base_branch(ctx, stack, base_branch)
    except (GitCommandError, DefaultBranchNotFoundError) as e:
        error_output(f"Could not resolve the base branch: {e}")
        raise SystemExit(1) from e

    try:
        updated = update_mrs(ctx, stack, new_stack, base)
    except StackOperationError as e:
        error_output(f"stopped at branch '{e.branch}'\n{e}")
        user_output("The new order was not saved. Fix the problem and run the same reorder again.")
        raise SystemExit(1) from e

    ctx.stack_store.save_stack(new_stack)
    user_output("✓ New order: " + " → ".join(click.style(b, fg="yellow") for b in order))

    for mr in updated:
        user_output(f"✓ !{mr.iid} ({mr.source_branch}) now targets {mr.target_branch}")
    user_output("Next step: run 'mrstack stack sync' to rebase the branches.")
