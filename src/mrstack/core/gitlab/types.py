"""Type definitions for GitLab operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MergeRequest:
    """A GitLab merge request."""

    iid: int
    project_id: int
    source_branch: str
    target_branch: str
    state: str  # "opened", "closed", "locked", "merged"
    title: str = ""
    description: str = ""
    web_url: str = ""


@dataclass(frozen=True)
class GitLabUser:
    """The authenticated GitLab user."""

    id: int
    username: str
