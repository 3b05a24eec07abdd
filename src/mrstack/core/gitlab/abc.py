"""Abstract base class for GitLab merge request operations."""

from abc import ABC, abstractmethod

from mrstack.core.gitlab.types import GitLabUser, MergeRequest


class GitLabOps(ABC):
    """Abstract interface for the merge request API.

    All implementations (real and fake) must implement this interface.
    ``project`` is a numeric ID, a ``group/name`` path, or glab's ``:id``
    placeholder for the current repository.
    """

    @abstractmethod
    def list_open_merge_requests_by_source_branch(
        self, project: str, branch: str
    ) -> list[MergeRequest]:
        """List open merge requests whose source branch is ``branch``."""
        ...

    @abstractmethod
    def get_merge_request(self, project: str, iid: int) -> MergeRequest:
        """Fetch a single merge request by its project-scoped IID.

        Raises:
            GitLabApiError: If the merge request cannot be fetched
        """
        ...

    @abstractmethod
    def update_merge_request(self, project: str, iid: int, *, target_branch: str) -> MergeRequest:
        """Change the target branch of a merge request.

        Raises:
            GitLabApiError: If the update fails
        """
        ...

    @abstractmethod
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
        """Open a new merge request.

        Raises:
            GitLabApiError: If creation fails
        """
        ...

    @abstractmethod
    def get_current_user(self) -> GitLabUser:
        """Return the authenticated user.

        Raises:
            GitLabApiError: If the user cannot be fetched
        """
        ...
