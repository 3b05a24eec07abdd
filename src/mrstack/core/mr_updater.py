"""Retarget merge requests after a stack has been reordered.

Each merge request targets the branch of the ref before it, or the stack's
base branch for the head. After a reorder only the refs whose predecessor
changed need their merge request touched.
"""

import logging

from mrstack.core.context import MrStackContext
from mrstack.core.errors import GitLabApiError, StackOperationError
from mrstack.core.gitlab.types import MergeRequest
from mrstack.core.stack import Stack, StackRef

logger = logging.getLogger(__name__)


def target_branch_for(stack: Stack, ref: StackRef, base_branch: str) -> str:
    """Branch a ref's merge request should target within ``stack``."""
    prev_branch = stack.branch_of(ref.prev)
    return prev_branch if prev_branch is not None else base_branch


def update_mrs(
    ctx: MrStackContext, old_stack: Stack, new_stack: Stack, base_branch: str
) -> list[MergeRequest]:
    """Point each merge request at its new target branch.

    Both stacks must hold the same refs. Refs without a merge request, refs
    whose target is unchanged, and refs with no open merge request on their
    source branch are skipped.

    Returns:
        The merge requests that were updated, in stack order

    Raises:
        StackOperationError: On the first API failure; refs already updated
            keep their new target.
    """
    updated: list[MergeRequest] = []

    for ref in new_stack.iter():
        old_ref = old_stack.refs.get(ref.sha)
        if old_ref is None:
            raise StackOperationError(
                f"Ref {ref.sha} ({ref.branch}) is not part of the original stack",
                branch=ref.branch,
                sha=ref.sha,
            )

        new_target = target_branch_for(new_stack, ref, base_branch)
        old_target = target_branch_for(old_stack, old_ref, base_branch)

        if new_target == old_target:
            logger.debug("  - %s: target unchanged (%s)", ref.branch, new_target)
            continue
        if ref.mr == "":
            logger.debug("  - %s: no merge request, skipping", ref.branch)
            continue

        try:
            mr = _retarget(ctx, ref, new_target)
        except GitLabApiError as e:
            raise StackOperationError(
                f"Failed to retarget merge request for branch '{ref.branch}' "
                f"to '{new_target}': {e}",
                branch=ref.branch,
                sha=ref.sha,
            ) from e

        if mr is not None:
            updated.append(mr)

    return updated


def _retarget(ctx: MrStackContext, ref: StackRef, new_target: str) -> MergeRequest | None:
    open_mrs = ctx.gitlab.list_open_merge_requests_by_source_branch(ctx.project, ref.branch)
    if not open_mrs:
        logger.debug("  - %s: no open merge request found, skipping", ref.branch)
        return None

    mr = ctx.gitlab.get_merge_request(ctx.project, open_mrs[0].iid)
    logger.debug(
        "  - %s: retargeting !%d from %s to %s", ref.branch, mr.iid, mr.target_branch, new_target
    )
    return ctx.gitlab.update_merge_request(ctx.project, mr.iid, target_branch=new_target)
