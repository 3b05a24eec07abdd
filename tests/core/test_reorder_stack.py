"""Tests for rebuilding stack links in a new branch order."""

import pytest

from mrstack.core.errors import MissingBranchesError
from mrstack.core.reorder import reorder_stack
from tests.test_utils.stacks import make_stack, sha_for


def test_reorder_three_branches() -> None:
    stack = make_stack(["b1", "b2", "b3"], mrs={"b1": 1, "b2": 2, "b3": 3})

    reordered = reorder_stack(stack, ["b3", "b1", "b2"])

    assert reordered.branches() == ["b3", "b1", "b2"]
    assert reordered.first().sha == sha_for("b3")
    assert reordered.last().sha == sha_for("b2")
    reordered.validate()


def test_reorder_keeps_ref_content_and_stack_metadata() -> None:
    stack = make_stack(
        ["b1", "b2"],
        title="my-stack",
        mrs={"b2": 9},
        descriptions={"b1": "first change", "b2": "second\n\nbody"},
        base_branch="develop",
    )

    reordered = reorder_stack(stack, ["b2", "b1"])

    assert reordered.title == "my-stack"
    assert reordered.base_branch == "develop"
    for sha, ref in reordered.refs.items():
        original = stack.refs[sha]
        assert (ref.sha, ref.branch, ref.description, ref.mr) == (
            original.sha,
            original.branch,
            original.description,
            original.mr,
        )


def test_reorder_leaves_input_untouched() -> None:
    stack = make_stack(["b1", "b2", "b3"])
    before = dict(stack.refs)

    reorder_stack(stack, ["b2", "b3", "b1"])

    assert stack.refs == before
    assert stack.branches() == ["b1", "b2", "b3"]


def test_reorder_thirteen_branch_permutation() -> None:
    branches = [f"Branch{i}" for i in range(1, 14)]
    stack = make_stack(branches, mrs={f"Branch{i}": i for i in range(1, 11)})
    order = [f"Branch{i}" for i in [12, 1, 2, 8, 11, 3, 6, 9, 7, 5, 10, 13, 4]]

    reordered = reorder_stack(stack, order)

    assert reordered.branches() == order
    assert reordered.first().branch == "Branch12"
    assert reordered.last().branch == "Branch4"
    for index, branch in enumerate(order):
        ref = reordered.refs[sha_for(branch)]
        expected_prev = sha_for(order[index - 1]) if index > 0 else ""
        expected_next = sha_for(order[index + 1]) if index < len(order) - 1 else ""
        assert ref.prev == expected_prev
        assert ref.next == expected_next
        assert ref.mr == stack.refs[ref.sha].mr
    reordered.validate()


def test_reorder_missing_branch_fails() -> None:
    stack = make_stack(["b1", "b2", "b3"])

    with pytest.raises(MissingBranchesError) as exc_info:
        reorder_stack(stack, ["b1", "b2"])

    assert exc_info.value.missing == ["b3"]
    assert "missing branches" in str(exc_info.value)
    assert stack.branches() == ["b1", "b2", "b3"]


def test_reorder_unknown_branch_fails() -> None:
    stack = make_stack(["b1", "b2"])

    with pytest.raises(MissingBranchesError) as exc_info:
        reorder_stack(stack, ["b1", "b2", "b9"])

    assert exc_info.value.extra == ["b9"]


def test_reorder_duplicated_branch_fails() -> None:
    stack = make_stack(["b1", "b2"])

    with pytest.raises(MissingBranchesError) as exc_info:
        reorder_stack(stack, ["b1", "b1"])

    assert exc_info.value.duplicates == ["b1"]
    assert exc_info.value.missing == ["b2"]
