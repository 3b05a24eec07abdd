"""Rebuild a stack's links to follow a new branch order."""

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import replace

from mrstack.core.errors import MissingBranchesError
from mrstack.core.stack import Stack, StackRef

logger = logging.getLogger(__name__)


def check_branch_permutation(stack: Stack, branches: Sequence[str]) -> None:
    """Raise MissingBranchesError unless ``branches`` is a permutation of the stack's."""
    stack_branches = Counter(ref.branch for ref in stack.refs.values())
    requested = Counter(branches)

    if requested == stack_branches:
        return

    missing = sorted(b for b in stack_branches if b not in requested)
    extra = sorted(b for b in requested if b not in stack_branches)
    duplicates = sorted(b for b, count in requested.items() if count > 1)
    raise MissingBranchesError(missing=missing, extra=extra, duplicates=duplicates)


def reorder_stack(stack: Stack, branches: Sequence[str]) -> Stack:
    """Return a new stack whose traversal order equals ``branches``.

    Ref content (sha, branch, description, mr) is copied verbatim; only
    prev/next change. The input stack is left untouched.

    Raises:
        MissingBranchesError: If ``branches`` is not a permutation of the
            stack's branch names.
    """
    check_branch_permutation(stack, branches)

    by_branch: dict[str, StackRef] = {ref.branch: ref for ref in stack.refs.values()}
    ordered = [by_branch[branch] for branch in branches]

    refs: dict[str, StackRef] = {}
    for index, ref in enumerate(ordered):
        prev_sha = ordered[index - 1].sha if index > 0 else ""
        next_sha = ordered[index + 1].sha if index < len(ordered) - 1 else ""
        refs[ref.sha] = replace(ref, prev=prev_sha, next=next_sha)

    logger.debug("Reordered stack '%s': %s", stack.title, " -> ".join(branches))
    return Stack(title=stack.title, refs=refs, base_branch=stack.base_branch)
