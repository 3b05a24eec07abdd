"""Tests for the `mrstack stack sync` command."""

from click.testing import CliRunner

from mrstack.cli.cli import cli
from mrstack.core.context import MrStackContext
from mrstack.core.errors import GitCommandError
from mrstack.core.git.fake import FakeGitRunner
from mrstack.core.gitlab.fake import FakeGitLabOps
from mrstack.core.stack_store.fake import FakeStackStore
from tests.test_utils.stacks import make_mr, make_stack, sha_for

CLEAN = "nothing to commit (use -u to show untracked files)"
DIVERGED = "Your branch and 'origin/Branch2' have diverged"


def test_sync_reports_created_merge_requests() -> None:
    stack = make_stack(
        ["Branch1", "Branch2"],
        mrs={"Branch1": 1},
        descriptions={"Branch2": "multi line desc\n\ndescription, bark!"},
    )
    git = FakeGitRunner(outputs={("status", "-uno"): CLEAN})
    gitlab = FakeGitLabOps(merge_requests=[make_mr(1, "Branch1", "main")])
    store = FakeStackStore(stacks=[stack], current="feature")
    ctx = MrStackContext.for_test(git=git, gitlab=gitlab, stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Created !100 Branch2 → Branch1" in result.output
    assert "Force-pushed" not in result.output
    assert store.stacks["feature"].refs[sha_for("Branch2")].mr.endswith("/merge_requests/100")


def test_sync_conflict_names_branch_and_exits() -> None:
    stack = make_stack(["Branch1", "Branch2", "Branch3"], mrs={"Branch1": 1})
    rebase = ("rebase", "--fork-point", "--update-refs", "Branch2")
    git = FakeGitRunner(
        outputs={("status", "-uno"): [CLEAN, DIVERGED]},
        failures={rebase: GitCommandError(list(rebase), 1, "", "CONFLICT (content): a.txt")},
    )
    gitlab = FakeGitLabOps(merge_requests=[make_mr(1, "Branch1", "main")])
    store = FakeStackStore(stacks=[stack], current="feature")
    ctx = MrStackContext.for_test(git=git, gitlab=gitlab, stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "sync"], obj=ctx)

    assert result.exit_code == 1
    assert "sync stopped at branch 'Branch2'" in result.output
    assert "CONFLICT (content): a.txt" in result.output


def test_sync_fetch_failure_exits() -> None:
    stack = make_stack(["Branch1"], mrs={"Branch1": 1})
    fetch = GitCommandError(["fetch", "origin"], 128, "", "fatal: unable to access remote")
    git = FakeGitRunner(failures={("fetch", "origin"): fetch})
    store = FakeStackStore(stacks=[stack], current="feature")
    ctx = MrStackContext.for_test(git=git, stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "sync"], obj=ctx)

    assert result.exit_code == 1
    assert "git fetch origin failed with exit code 128" in result.output


def test_sync_reports_deleted_stack_when_everything_merged() -> None:
    stack = make_stack(["Branch1"], mrs={"Branch1": 1})
    git = FakeGitRunner(outputs={("status", "-uno"): CLEAN})
    gitlab = FakeGitLabOps(merge_requests=[make_mr(1, "Branch1", "main", state="merged")])
    store = FakeStackStore(stacks=[stack], current="feature")
    ctx = MrStackContext.for_test(git=git, gitlab=gitlab, stack_store=store)
    runner = CliRunner()

    result = runner.invoke(cli, ["stack", "sync"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "deleted stack feature" in result.output
    assert store.stacks == {}
