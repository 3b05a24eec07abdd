"""Tests for RealGitLabOps command construction and error handling."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from mrstack.core.errors import GitLabApiError
from mrstack.core.gitlab.real import RealGitLabOps, project_path_segment

MR_JSON = json.dumps(
    {
        "iid": 5,
        "project_id": 3,
        "state": "opened",
        "source_branch": "Branch5",
        "target_branch": "Branch7",
        "title": "five",
        "description": "",
        "web_url": "https://gitlab.com/stack_guy/stackproject/-/merge_requests/5",
    }
)


def _completed(
    stdout: str = "", returncode: int = 0, stderr: str = ""
) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(
        args=["glab"], returncode=returncode, stdout=stdout, stderr=stderr
    )


def test_project_path_segment() -> None:
    assert project_path_segment(":id") == ":id"
    assert project_path_segment("stack_guy/stackproject") == "stack_guy%2Fstackproject"


def test_list_open_merge_requests_by_source_branch() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout=f"[{MR_JSON}]")

        mrs = RealGitLabOps(Path("/repo")).list_open_merge_requests_by_source_branch(
            "stack_guy/stackproject", "Branch5"
        )

    assert [mr.iid for mr in mrs] == [5]
    cmd = mock_run.call_args.args[0]
    assert cmd == [
        "glab",
        "api",
        "--method",
        "GET",
        "projects/stack_guy%2Fstackproject/merge_requests?source_branch=Branch5&state=opened",
    ]
    assert mock_run.call_args.kwargs["cwd"] == Path("/repo")


def test_update_merge_request_sends_target_branch() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout=MR_JSON)

        mr = RealGitLabOps(Path("/repo")).update_merge_request(":id", 5, target_branch="Branch7")

    assert mr.target_branch == "Branch7"
    assert mock_run.call_args.args[0] == [
        "glab",
        "api",
        "--method",
        "PUT",
        "projects/:id/merge_requests/5",
        "--raw-field",
        "target_branch=Branch7",
    ]


def test_create_merge_request_fields() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout=MR_JSON)

        RealGitLabOps(Path("/repo")).create_merge_request(
            ":id",
            source_branch="Branch5",
            target_branch="Branch7",
            title="five",
            description="line one\nline two",
            assignee_id=1,
            remove_source_branch=False,
        )

    cmd = mock_run.call_args.args[0]
    assert cmd[:5] == ["glab", "api", "--method", "POST", "projects/:id/merge_requests"]
    fields = [cmd[i + 1] for i, arg in enumerate(cmd) if arg == "--raw-field"]
    assert fields == [
        "source_branch=Branch5",
        "target_branch=Branch7",
        "title=five",
        "description=line one\nline two",
        "remove_source_branch=false",
        "assignee_id=1",
    ]


def test_get_current_user() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout='{"id": 12, "username": "stack_guy"}')

        user = RealGitLabOps(Path("/repo")).get_current_user()

    assert user.id == 12
    assert mock_run.call_args.args[0] == ["glab", "api", "--method", "GET", "user"]


def test_failed_request_raises_with_glab_message() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(returncode=1, stderr="glab: 404 Not Found (HTTP 404)\n")

        with pytest.raises(GitLabApiError) as exc_info:
            RealGitLabOps(Path("/repo")).get_merge_request(":id", 99)

    assert "GitLab API request failed" in str(exc_info.value)
    assert "404 Not Found" in str(exc_info.value)


def test_missing_glab_binary() -> None:
    with patch("mrstack.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError(2, "No such file or directory")

        with pytest.raises(GitLabApiError, match="Command not found: glab"):
            RealGitLabOps(Path("/repo")).get_current_user()
