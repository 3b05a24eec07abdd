"""Synchronize a stack's local branches and merge requests with the remote.

Refs are processed strictly from head to tail: a ref can only be brought up
to date once every ref before it has been.

Per ref:
1. Check out the branch and read ``git status -uno`` once.
2. Act on that state: fast-forward when behind, rebase the tail onto
   the branch (moving dependent branches with ``--update-refs``) when diverged.
3. Push branches that have no merge request yet, resolving and verifying the
   base branch when the ref is the head.

After the walk, merge requests are created for refs that still lack one, and
a single force-with-lease push publishes any history that was rewritten.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from mrstack.core.context import MrStackContext
from mrstack.core.errors import (
    DefaultBranchNotFoundError,
    GitCommandError,
    GitLabApiError,
    StackOperationError,
)
from mrstack.core.gitlab.parsing import parse_mr_iid_from_url
from mrstack.core.gitlab.types import GitLabUser, MergeRequest
from mrstack.core.stack import Stack, StackRef

logger = logging.getLogger(__name__)

REMOTE = "origin"

_HEAD_BRANCH_PATTERN = re.compile(r"HEAD branch:\s*(\S+)")


class SyncState(Enum):
    """State of a local branch relative to its upstream."""

    NOTHING_TO_COMMIT = "nothing to commit"
    BRANCH_IS_BEHIND = "Your branch is behind"
    BRANCH_HAS_DIVERGED = "have diverged"


def classify_status(status_output: str) -> SyncState:
    """Map ``git status -uno`` output to a SyncState.

    Anything that is neither behind nor diverged needs no local action.
    """
    if SyncState.BRANCH_HAS_DIVERGED.value in status_output:
        return SyncState.BRANCH_HAS_DIVERGED
    if SyncState.BRANCH_IS_BEHIND.value in status_output:
        return SyncState.BRANCH_IS_BEHIND
    return SyncState.NOTHING_TO_COMMIT


def split_description(description: str) -> tuple[str, str]:
    """Split a ref description into merge request title and body.

    A single line becomes the title with an empty body. Otherwise the first
    line is the title and the rest, without leading blank lines, the body.
    """
    title, sep, rest = description.strip().partition("\n")
    if not sep:
        return title.strip(), ""
    return title.strip(), rest.lstrip("\r\n").rstrip()


def parse_default_branch(remote_show_output: str) -> str | None:
    """Extract the default branch from ``git remote show <remote>`` output."""
    match = _HEAD_BRANCH_PATTERN.search(remote_show_output)
    if match is None or match.group(1) == "(unknown)":
        return None
    return match.group(1)


@dataclass
class SyncResult:
    """Outcome of a sync run."""

    stack: Stack
    base_branch: str | None = None
    states: dict[str, SyncState] = field(default_factory=dict)
    created: list[MergeRequest] = field(default_factory=list)
    removed: list[StackRef] = field(default_factory=list)
    force_pushed: bool = False
    deleted: bool = False


def resolve_base_branch(ctx: MrStackContext, stack: Stack, override: str | None) -> str:
    """Determine the head's target branch and verify it exists on the remote.

    Precedence: explicit override, the stack's stored base branch, the
    configured base branch, then the remote's default branch.

    Raises:
        DefaultBranchNotFoundError: If the remote reports no default branch
        GitCommandError: If the branch does not exist on the remote
    """
    base = override or stack.base_branch or ctx.config.base_branch
    if base is None:
        output = ctx.git.git(["remote", "show", REMOTE])
        base = parse_default_branch(output)
        if base is None:
            raise DefaultBranchNotFoundError(
                f"Could not determine the default branch of remote '{REMOTE}'"
            )
        logger.debug("Default branch of %s is %s", REMOTE, base)

    ctx.git.git(["ls-remote", "--exit-code", "--heads", REMOTE, base])
    return base


def sync_stack(
    ctx: MrStackContext, stack: Stack, base_branch_override: str | None = None
) -> SyncResult:
    """Reconcile every branch of ``stack`` with the remote and open missing MRs.

    The stack is updated in place: created merge requests are recorded on
    their refs (and persisted immediately), refs whose merge request was
    merged are removed. A stack left with no refs is deleted from storage.

    Raises:
        StackOperationError: On the first git or API failure, naming the
            branch being processed. Work done before the failure is kept.
        GitCommandError: If the initial fetch fails
    """
    stack.validate()
    result = SyncResult(stack=stack)
    tail_branch = stack.last().branch
    push_needed = False
    merged: list[StackRef] = []

    logger.debug("Syncing stack '%s': %s", stack.title, " -> ".join(stack.branches()))
    ctx.git.git(["fetch", REMOTE])

    for ref in list(stack.iter()):
        try:
            state = _sync_branch(ctx, ref, tail_branch)
            result.states[ref.branch] = state
            if state is not SyncState.NOTHING_TO_COMMIT:
                push_needed = True

            if ref.mr == "":
                if ref.is_first():
                    result.base_branch = resolve_base_branch(ctx, stack, base_branch_override)
                ctx.git.git(["push", "--set-upstream", REMOTE, ref.branch])
            elif _is_merged(ctx, ref):
                merged.append(ref)
        except (GitCommandError, GitLabApiError, DefaultBranchNotFoundError) as e:
            raise StackOperationError(
                f"Failed to sync branch '{ref.branch}': {e}", branch=ref.branch, sha=ref.sha
            ) from e

    if merged:
        for ref in merged:
            logger.debug("Merge request for %s was merged, removing it from the stack", ref.branch)
            stack.remove(ref.sha)
            ctx.stack_store.remove_ref(stack.title, ref.sha)
        result.removed = merged
        if stack.refs:
            ctx.stack_store.save_stack(stack)
        else:
            logger.debug("Every merge request of '%s' was merged, deleting it", stack.title)
            ctx.stack_store.delete_stack(stack.title)
            result.deleted = True

    if stack.refs:
        result.created = _create_missing_mrs(ctx, stack, result, base_branch_override)

    if push_needed and stack.refs:
        branches = stack.branches()
        try:
            ctx.git.git(["push", REMOTE, "--force-with-lease", *branches])
        except GitCommandError as e:
            raise StackOperationError(
                f"Failed to force-push stack branches: {e}", branch=branches[-1]
            ) from e
        result.force_pushed = True

    return result


def _sync_branch(ctx: MrStackContext, ref: StackRef, tail_branch: str) -> SyncState:
    ctx.git.git(["checkout", ref.branch])
    state = classify_status(ctx.git.git(["status", "-uno"]))
    logger.debug("  - %s: %s", ref.branch, state.name)

    match state:
        case SyncState.BRANCH_IS_BEHIND:
            ctx.git.git(["pull"])
        case SyncState.BRANCH_HAS_DIVERGED:
            ctx.git.git(["checkout", tail_branch])
            ctx.git.git(["rebase", "--fork-point", "--update-refs", ref.branch])
            if tail_branch != ref.branch:
                ctx.git.git(["checkout", ref.branch])
        case SyncState.NOTHING_TO_COMMIT:
            pass

    return state


def _is_merged(ctx: MrStackContext, ref: StackRef) -> bool:
    """Whether the ref's merge request has been merged.

    Only consulted when no open merge request exists for the branch.
    """
    if ctx.gitlab.list_open_merge_requests_by_source_branch(ctx.project, ref.branch):
        return False

    iid = parse_mr_iid_from_url(ref.mr)
    if iid is None:
        logger.debug("  - %s: cannot parse merge request URL %r", ref.branch, ref.mr)
        return False

    return ctx.gitlab.get_merge_request(ctx.project, iid).state == "merged"


def _create_missing_mrs(
    ctx: MrStackContext, stack: Stack, result: SyncResult, base_branch_override: str | None
) -> list[MergeRequest]:
    created: list[MergeRequest] = []
    user: GitLabUser | None = None

    for ref in list(stack.iter()):
        if ref.mr != "":
            continue

        try:
            if ref.is_first():
                if result.base_branch is None:
                    result.base_branch = resolve_base_branch(ctx, stack, base_branch_override)
                target = result.base_branch
            else:
                target = stack.refs[ref.prev].branch

            if ctx.config.assign_to_self and user is None:
                user = ctx.gitlab.get_current_user()

            title, description = split_description(ref.description)
            mr = ctx.gitlab.create_merge_request(
                ctx.project,
                source_branch=ref.branch,
                target_branch=target,
                title=title or ref.branch,
                description=description,
                assignee_id=user.id if user is not None else None,
                remove_source_branch=ctx.config.remove_source_branch,
            )
        except (GitCommandError, GitLabApiError, DefaultBranchNotFoundError) as e:
            raise StackOperationError(
                f"Failed to create merge request for branch '{ref.branch}': {e}",
                branch=ref.branch,
                sha=ref.sha,
            ) from e

        logger.debug("  - %s: created !%d targeting %s", ref.branch, mr.iid, target)
        updated = stack.with_mr(ref.sha, mr.web_url)
        ctx.stack_store.save_ref(stack.title, updated)
        created.append(mr)

    return created
