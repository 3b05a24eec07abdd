"""Fake GitLab operations for testing.

FakeGitLabOps is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from dataclasses import replace

from mrstack.core.errors import GitLabApiError
from mrstack.core.gitlab.abc import GitLabOps
from mrstack.core.gitlab.types import GitLabUser, MergeRequest


class FakeGitLabOps(GitLabOps):
    """In-memory fake implementation of GitLab operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty collections).
    """

    def __init__(
        self,
        *,
        merge_requests: list[MergeRequest] | None = None,
        current_user: GitLabUser | None = None,
        failing_branches: set[str] | None = None,
        next_iid: int = 100,
        web_url_prefix: str = "https://gitlab.com/group/project/-/merge_requests",
    ) -> None:
        """Create FakeGitLabOps with pre-configured state.

        Args:
            merge_requests: Existing merge requests (any state)
            current_user: User returned by get_current_user
            failing_branches: Source branches whose API calls raise GitLabApiError
            next_iid: IID assigned to the first created merge request
            web_url_prefix: Prefix for web URLs of created merge requests
        """
        self._merge_requests: dict[int, MergeRequest] = {
            mr.iid: mr for mr in merge_requests or []
        }
        self._current_user = current_user or GitLabUser(id=1, username="stack_guy")
        self._failing_branches = failing_branches or set()
        self._next_iid = next_iid
        self._web_url_prefix = web_url_prefix

        self._listed_branches: list[tuple[str, str]] = []
        self._fetched_iids: list[tuple[str, int]] = []
        self._updated_targets: list[tuple[int, str]] = []
        self._created: list[MergeRequest] = []
        self._create_options: list[tuple[int | None, bool]] = []

    @property
    def merge_requests(self) -> dict[int, MergeRequest]:
        """Current state of all merge requests keyed by IID."""
        return self._merge_requests

    @property
    def listed_branches(self) -> list[tuple[str, str]]:
        """Tracked list calls as (project, source_branch) tuples."""
        return self._listed_branches

    @property
    def fetched_iids(self) -> list[tuple[str, int]]:
        """Tracked get calls as (project, iid) tuples."""
        return self._fetched_iids

    @property
    def updated_targets(self) -> list[tuple[int, str]]:
        """Tracked target branch updates as (iid, target_branch) tuples."""
        return self._updated_targets

    @property
    def created_merge_requests(self) -> list[MergeRequest]:
        """Merge requests created through create_merge_request, in order."""
        return self._created

    @property
    def create_options(self) -> list[tuple[int | None, bool]]:
        """Tracked (assignee_id, remove_source_branch) pairs, one per created MR."""
        return self._create_options

    def _check_branch(self, branch: str) -> None:
        if branch in self._failing_branches:
            raise GitLabApiError(f"500 Internal Server Error for source branch '{branch}'")

    def list_open_merge_requests_by_source_branch(
        self, project: str, branch: str
    ) -> list[MergeRequest]:
        self._listed_branches.append((project, branch))
        self._check_branch(branch)
        return [
            mr
            for mr in self._merge_requests.values()
            if mr.source_branch == branch and mr.state == "opened"
        ]

    def get_merge_request(self, project: str, iid: int) -> MergeRequest:
        self._fetched_iids.append((project, iid))
        mr = self._merge_requests.get(iid)
        if mr is None:
            raise GitLabApiError(f"404 Merge Request {iid} Not Found")
        self._check_branch(mr.source_branch)
        return mr

    def update_merge_request(self, project: str, iid: int, *, target_branch: str) -> MergeRequest:
        mr = self._merge_requests.get(iid)
        if mr is None:
            raise GitLabApiError(f"404 Merge Request {iid} Not Found")
        self._check_branch(mr.source_branch)
        updated = replace(mr, target_branch=target_branch)
        self._merge_requests[iid] = updated
        self._updated_targets.append((iid, target_branch))
        return updated

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
        self._check_branch(source_branch)
        iid = self._next_iid
        self._next_iid += 1
        mr = MergeRequest(
            iid=iid,
            project_id=3,
            source_branch=source_branch,
            target_branch=target_branch,
            state="opened",
            title=title,
            description=description,
            web_url=f"{self._web_url_prefix}/{iid}",
        )
        self._merge_requests[iid] = mr
        self._created.append(mr)
        self._create_options.append((assignee_id, remove_source_branch))
        return mr

    def get_current_user(self) -> GitLabUser:
        return self._current_user
