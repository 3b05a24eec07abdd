import click

from mrstack.cli.core import load_stack_or_exit
from mrstack.cli.output import error_output, user_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import GitCommandError, StackOperationError
from mrstack.core.sync import SyncState, sync_stack

_STATE_LABELS = {
    SyncState.NOTHING_TO_COMMIT: click.style("up to date", fg="green"),
    SyncState.BRANCH_IS_BEHIND: click.style("fast-forwarded", fg="cyan"),
    SyncState.BRANCH_HAS_DIVERGED: click.style("rebased", fg="magenta"),
}


@click.command("sync")
@click.option("--stack", "stack_title", help="Stack to sync (default: current stack).")
@click.option("--base", "base_branch", help="Branch the head merge request targets.")
@click.pass_obj
def sync_cmd(ctx: MrStackContext, stack_title: str | None, base_branch: str | None) -> None:
    """Sync branches with the remote and open missing merge requests.

    Steps:
    1. Fetch from origin
    2. Fast-forward branches that are behind, rebase branches that diverged
    3. Push branches that have no merge request yet
    4. Create merge requests for those branches
    5. Force-push (with lease) if any history changed
    """
    stack = load_stack_or_exit(ctx, stack_title)

    try:
        result = sync_stack(ctx, stack, base_branch)
    except StackOperationError as e:
        error_output(f"sync stopped at branch '{e.branch}'\n{e}")
        user_output("Branches before it were synced. Fix the problem and run sync again.")
        raise SystemExit(1) from e
    except GitCommandError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    for branch, state in result.states.items():
        user_output(f"  {click.style(branch, fg='yellow')}: {_STATE_LABELS[state]}")
    for ref in result.removed:
        user_output(f"✓ Removed merged branch {click.style(ref.branch, fg='yellow')} from stack")
    for mr in result.created:
        user_output(
            f"✓ Created !{mr.iid} {mr.source_branch} → {mr.target_branch} "
            f"{click.style(mr.web_url, fg='blue')}"
        )
    if result.deleted:
        title = click.style(stack.title, fg="cyan", bold=True)
        user_output(f"✓ Every merge request was merged, deleted stack {title}")
        return
    if result.force_pushed:
        user_output("✓ Force-pushed stack branches (with lease)")
    user_output(f"✓ Stack {click.style(stack.title, fg='cyan', bold=True)} is in sync")
