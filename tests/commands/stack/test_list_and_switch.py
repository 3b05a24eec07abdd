"""Tests for `mrstack stack list` and `mrstack stack switch`."""

from click.testing import CliRunner

from mrstack.cli.cli import cli
from mrstack.core.context import MrStackContext
from mrstack.core.stack import Stack, StackRef
from mrstack.core.stack_store.fake import FakeStackStore
from tests.test_utils.stacks import make_stack


def test_list_prints_branches_head_first() -> None:
    stack = make_stack(["b1", "b2", "b3"], mrs={"b1": 11})
    store = FakeStackStore(stacks=[stack], current="feature")
    ctx = MrStackContext.for_test(stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "list"], obj=ctx)

    assert result.exit_code == 0, result.output
    positions = [result.output.index(branch) for branch in ["b1", "b2", "b3"]]
    assert positions == sorted(positions)
    assert "/merge_requests/11" in result.output
    assert "no MR" in result.output


def test_list_rejects_corrupted_stack() -> None:
    broken = Stack(
        title="feature",
        refs={
            "a": StackRef(sha="a", branch="b1"),
            "b": StackRef(sha="b", branch="b2"),
        },
    )
    ctx = MrStackContext.for_test(stack_store=FakeStackStore(stacks=[broken], current="feature"))
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "list"], obj=ctx)

    assert result.exit_code == 1
    assert "inconsistent" in result.output


def test_list_unknown_stack() -> None:
    ctx = MrStackContext.for_test(stack_store=FakeStackStore())
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "list", "--stack", "nope"], obj=ctx)

    assert result.exit_code == 1
    assert "No stack named 'nope'" in result.output


def test_switch_sets_current_stack() -> None:
    store = FakeStackStore(
        stacks=[make_stack(["b1"], title="one"), make_stack(["b2"], title="two")]
    )
    ctx = MrStackContext.for_test(stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "switch", "two"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert store.current_stack_title() == "two"


def test_switch_without_title_lists_stacks() -> None:
    store = FakeStackStore(
        stacks=[make_stack(["b1"], title="one"), make_stack(["b2"], title="two")], current="one"
    )
    ctx = MrStackContext.for_test(stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "switch"], obj=ctx)

    assert result.exit_code == 0
    assert "* one" in result.output
    assert "  two" in result.output


def test_switch_to_unknown_stack_fails() -> None:
    store = FakeStackStore(stacks=[make_stack(["b1"], title="one")], current="one")
    ctx = MrStackContext.for_test(stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "switch", "missing"], obj=ctx)

    assert result.exit_code == 1
    assert store.current_stack_title() == "one"
