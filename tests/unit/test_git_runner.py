"""Tests for the real and fake git runners."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from mrstack.core.errors import GitCommandError
from mrstack.core.git.fake import FakeGitRunner
from mrstack.core.git.real import RealGitRunner


def _completed(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=["git"], returncode=returncode, stdout=stdout, stderr=stderr
    )


def test_real_runner_returns_stripped_stdout() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(0, stdout="On branch Branch1\n\n")

        output = RealGitRunner(Path("/repo")).git(["status", "-uno"])

    assert output == "On branch Branch1"
    assert mock_run.call_args.args[0] == ["git", "status", "-uno"]
    assert mock_run.call_args.kwargs["cwd"] == Path("/repo")
    assert mock_run.call_args.kwargs["check"] is False


def test_real_runner_raises_with_verbatim_output() -> None:
    stderr = (
        "error: could not apply 1a2b3c4... change\n"
        "CONFLICT (content): Merge conflict in a.txt\n"
    )
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(1, stdout="Auto-merging a.txt\n", stderr=stderr)

        with pytest.raises(GitCommandError) as exc_info:
            RealGitRunner(Path("/repo")).git(["rebase", "--fork-point", "--update-refs", "b1"])

    error = exc_info.value
    assert error.git_args == ["rebase", "--fork-point", "--update-refs", "b1"]
    assert error.returncode == 1
    assert error.stderr == stderr
    assert error.stdout == "Auto-merging a.txt\n"
    assert str(error).startswith("git rebase --fork-point --update-refs b1 failed with exit code 1")
    assert "CONFLICT (content)" in str(error)


def test_real_runner_missing_git_raises_git_command_error() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")

        with pytest.raises(GitCommandError) as exc_info:
            RealGitRunner(Path("/repo")).git(["fetch", "origin"])

    assert exc_info.value.returncode == 127
    assert "Command not found while trying to run git fetch: git" in exc_info.value.stderr


def test_fake_runner_records_calls_and_replays_outputs() -> None:
    git = FakeGitRunner(outputs={("status", "-uno"): ["first", "second"]})

    assert git.git(["status", "-uno"]) == "first"
    assert git.git(["status", "-uno"]) == "second"
    assert git.git(["status", "-uno"]) == "second"
    assert git.git(["fetch", "origin"]) == ""
    assert git.calls == [
        ["status", "-uno"],
        ["status", "-uno"],
        ["status", "-uno"],
        ["fetch", "origin"],
    ]


def test_fake_runner_raises_configured_failure() -> None:
    failure = GitCommandError(["pull"], 1, "", "fatal: Not possible to fast-forward")
    git = FakeGitRunner(failures={("pull",): failure})

    with pytest.raises(GitCommandError) as exc_info:
        git.git(["pull"])

    assert exc_info.value is failure
    assert git.calls == [["pull"]]
