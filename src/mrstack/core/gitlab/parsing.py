"""Parsing helpers for GitLab API responses and merge request URLs."""

import json
import re
from typing import Any

from mrstack.core.errors import GitLabApiError
from mrstack.core.gitlab.types import GitLabUser, MergeRequest

_MR_URL_PATTERN = re.compile(r"/-/merge_requests/(\d+)/?$")


def parse_mr_iid_from_url(url: str) -> int | None:
    """Extract the IID from a merge request web URL.

    Example:
        >>> parse_mr_iid_from_url("https://gitlab.com/group/proj/-/merge_requests/7")
        7
    """
    match = _MR_URL_PATTERN.search(url.strip())
    if match is None:
        return None
    return int(match.group(1))


def merge_request_from_json(data: dict[str, Any]) -> MergeRequest:
    """Build a MergeRequest from a REST API merge request object."""
    try:
        return MergeRequest(
            iid=int(data["iid"]),
            project_id=int(data["project_id"]),
            source_branch=data["source_branch"],
            target_branch=data["target_branch"],
            state=data["state"],
            title=data.get("title") or "",
            description=data.get("description") or "",
            web_url=data.get("web_url") or "",
        )
    except (KeyError, TypeError, ValueError) as e:
        raise GitLabApiError(f"Unexpected merge request payload: {e}") from e


def parse_merge_request(json_str: str) -> MergeRequest:
    data = _loads(json_str)
    if not isinstance(data, dict):
        raise GitLabApiError("Expected a merge request object in API response")
    return merge_request_from_json(data)


def parse_merge_request_list(json_str: str) -> list[MergeRequest]:
    data = _loads(json_str)
    if not isinstance(data, list):
        raise GitLabApiError("Expected a list of merge requests in API response")
    return [merge_request_from_json(item) for item in data]


def parse_user(json_str: str) -> GitLabUser:
    data = _loads(json_str)
    try:
        return GitLabUser(id=int(data["id"]), username=data["username"])
    except (KeyError, TypeError, ValueError) as e:
        raise GitLabApiError(f"Unexpected user payload: {e}") from e


def _loads(json_str: str) -> Any:
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise GitLabApiError(f"Invalid JSON from GitLab API: {e}") from e
