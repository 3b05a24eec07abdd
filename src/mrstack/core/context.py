"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from mrstack.cli.config import LoadedConfig, config_dir_for, load_config
from mrstack.core.git.abc import GitRunner
from mrstack.core.git.real import RealGitRunner
from mrstack.core.gitlab.abc import GitLabOps
from mrstack.core.gitlab.real import RealGitLabOps
from mrstack.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from mrstack.core.stack_store.abc import StackStore
from mrstack.core.stack_store.real import RealStackStore


@dataclass(frozen=True)
class MrStackContext:
    """Immutable context holding all dependencies for mrstack operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    git: GitRunner
    gitlab: GitLabOps
    stack_store: StackStore
    config: LoadedConfig
    cwd: Path  # Current working directory at CLI invocation
    repo: RepoContext | NoRepoSentinel

    @property
    def project(self) -> str:
        return self.config.project

    @staticmethod
    def for_test(
        git: GitRunner | None = None,
        gitlab: GitLabOps | None = None,
        stack_store: StackStore | None = None,
        config: LoadedConfig | None = None,
        cwd: Path | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
    ) -> "MrStackContext":
        """Create a context with fake implementations for every omitted dependency.

        Example:
            >>> git = FakeGitRunner(outputs={("status", "-uno"): "nothing to commit"})
            >>> ctx = MrStackContext.for_test(git=git)
        """
        from mrstack.core.git.fake import FakeGitRunner
        from mrstack.core.gitlab.fake import FakeGitLabOps
        from mrstack.core.stack_store.fake import FakeStackStore

        resolved_cwd = cwd if cwd is not None else Path("/test/default/cwd")
        return MrStackContext(
            git=git if git is not None else FakeGitRunner(),
            gitlab=gitlab if gitlab is not None else FakeGitLabOps(),
            stack_store=stack_store if stack_store is not None else FakeStackStore(),
            config=config if config is not None else LoadedConfig.defaults(),
            cwd=resolved_cwd,
            repo=(
                repo
                if repo is not None
                else RepoContext(root=resolved_cwd, git_dir=resolved_cwd / ".git")
            ),
        )


def create_context() -> MrStackContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    # 1. Capture cwd (no deps)
    cwd = Path.cwd()

    # 2. Discover repo (only needs cwd)
    repo = discover_repo_or_sentinel(cwd)

    # 3. Load repo config (or defaults if no repo)
    if isinstance(repo, NoRepoSentinel):
        config = LoadedConfig.defaults()
        work_dir = cwd
        git_dir = cwd / ".git"
    else:
        config = load_config(config_dir_for(repo.root))
        work_dir = repo.root
        git_dir = repo.git_dir

    # 4. Create integrations rooted at the working copy
    return MrStackContext(
        git=RealGitRunner(work_dir),
        gitlab=RealGitLabOps(work_dir),
        stack_store=RealStackStore(git_dir),
        config=config,
        cwd=cwd,
        repo=repo,
    )
