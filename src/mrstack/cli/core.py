"""Shared helpers for commands that operate on a stored stack."""

from mrstack.cli.output import error_output
from mrstack.core.context import MrStackContext
from mrstack.core.errors import StackNotFoundError, StackValidationError
from mrstack.core.repo_discovery import NoRepoSentinel, RepoContext
from mrstack.core.stack import Stack


def ensure_repo(ctx: MrStackContext) -> RepoContext:
    """Return the repository context or exit when run outside a repository."""
    if isinstance(ctx.repo, NoRepoSentinel):
        error_output(ctx.repo.message)
        raise SystemExit(1)
    return ctx.repo


def resolve_stack_title(ctx: MrStackContext, title: str | None) -> str:
    """The given title, or the current stack's title; exits if neither exists."""
    resolved = title if title is not None else ctx.stack_store.current_stack_title()
    if resolved is None:
        error_output("No current stack. Pass --stack, or start one with 'mrstack stack create'.")
        raise SystemExit(1)
    return resolved


def load_stack_or_exit(
    ctx: MrStackContext, title: str | None, *, allow_empty: bool = False
) -> Stack:
    """Load the named stack, or the current one, and check its invariants.

    Stacks without refs are rejected unless ``allow_empty`` is set, for
    commands that add the first ref.
    """
    ensure_repo(ctx)
    resolved = resolve_stack_title(ctx, title)

    try:
        stack = ctx.stack_store.load_stack(resolved)
        if stack.refs:
            stack.validate()
    except StackNotFoundError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    except StackValidationError as e:
        error_output(f"Stack '{resolved}' is inconsistent: {e}")
        raise SystemExit(1) from e

    if not stack.refs and not allow_empty:
        error_output(f"Stack '{resolved}' has no branches. Add one with 'mrstack stack save'.")
        raise SystemExit(1)

    return stack
