"""GitLab merge request operations subpackage."""

from mrstack.core.gitlab.abc import GitLabOps
from mrstack.core.gitlab.fake import FakeGitLabOps
from mrstack.core.gitlab.real import RealGitLabOps
from mrstack.core.gitlab.types import GitLabUser, MergeRequest

__all__ = [
    "GitLabOps",
    "RealGitLabOps",
    "FakeGitLabOps",
    "GitLabUser",
    "MergeRequest",
]
