"""Production GitLab implementation using the glab CLI.

All requests go through ``glab api``, which handles host selection and
authentication and resolves the ``:id`` placeholder to the current project.
"""

import logging
from pathlib import Path
from urllib.parse import quote, urlencode

from mrstack.core.errors import CommandNotFoundError, GitLabApiError
from mrstack.core.gitlab.abc import GitLabOps
from mrstack.core.gitlab.parsing import parse_merge_request, parse_merge_request_list, parse_user
from mrstack.core.gitlab.types import GitLabUser, MergeRequest
from mrstack.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)


def execute_glab_command(cmd: list[str], cwd: Path) -> str:
    """Execute a glab CLI command and return stdout.

    Args:
        cmd: Command and arguments to execute
        cwd: Working directory for command execution

    Returns:
        stdout from the command

    Raises:
        GitLabApiError: If the command fails or glab is not installed
    """
    logger.debug("%s", " ".join(cmd))
    try:
        result = run_subprocess_with_context(cmd, operation_context="call the GitLab API", cwd=cwd)
    except CommandNotFoundError as e:
        raise GitLabApiError(f"Command not found: {e.command}") from e

    if result.returncode != 0:
        error_msg = f"GitLab API request failed: {' '.join(cmd[1:])}"
        if result.stderr and result.stderr.strip():
            error_msg += f"\n{result.stderr.strip()}"
        raise GitLabApiError(error_msg)

    return result.stdout


def project_path_segment(project: str) -> str:
    """URL-encode a project path, leaving glab placeholders untouched."""
    if project.startswith(":"):
        return project
    return quote(project, safe="")


class RealGitLabOps(GitLabOps):
    """Production implementation using ``glab api``."""

    def __init__(self, cwd: Path, glab: str = "glab") -> None:
        self._cwd = cwd
        self._glab = glab

    def _api(self, endpoint: str, *, method: str = "GET", fields: list[str] | None = None) -> str:
        cmd = [self._glab, "api", "--method", method, endpoint]
        for field in fields or []:
            cmd.extend(["--raw-field", field])
        return execute_glab_command(cmd, self._cwd)

    def list_open_merge_requests_by_source_branch(
        self, project: str, branch: str
    ) -> list[MergeRequest]:
        query = urlencode({"source_branch": branch, "state": "opened"})
        endpoint = f"projects/{project_path_segment(project)}/merge_requests?{query}"
        return parse_merge_request_list(self._api(endpoint))

    def get_merge_request(self, project: str, iid: int) -> MergeRequest:
        endpoint = f"projects/{project_path_segment(project)}/merge_requests/{iid}"
        return parse_merge_request(self._api(endpoint))

    def update_merge_request(self, project: str, iid: int, *, target_branch: str) -> MergeRequest:
        endpoint = f"projects/{project_path_segment(project)}/merge_requests/{iid}"
        stdout = self._api(endpoint, method="PUT", fields=[f"target_branch={target_branch}"])
        return parse_merge_request(stdout)

    def create_merge_request(
        self,
        project: str,
        *,
        source_branch: str,
        target_branch: str,
        title: str,
        description: str,
        assignee_id: int | None = None,
        remove_source_branch: bool = True,
    ) -> MergeRequest:
        fields = [
            f"source_branch={source_branch}",
            f"target_branch={target_branch}",
            f"title={title}",
            f"description={description}",
            f"remove_source_branch={str(remove_source_branch).lower()}",
        ]
        if assignee_id is not None:
            fields.append(f"assignee_id={assignee_id}")

        endpoint = f"projects/{project_path_segment(project)}/merge_requests"
        return parse_merge_request(self._api(endpoint, method="POST", fields=fields))

    def get_current_user(self) -> GitLabUser:
        return parse_user(self._api("user"))
