"""Repository discovery functionality.

Discovers git repository information from a given path without requiring
a full MrStackContext (enables config loading before context creation).
"""

from dataclasses import dataclass
from pathlib import Path

from mrstack.core.errors import CommandNotFoundError
from mrstack.core.subprocess import run_subprocess_with_context


@dataclass(frozen=True)
class RepoContext:
    """Represents a git repo root and its git directory."""

    root: Path
    git_dir: Path  # <root>/.git, or the common dir when run from a worktree


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a git repository.

    Commands that require repo context check for this sentinel and fail fast.
    """

    message: str = "Not inside a git repository"


def discover_repo_or_sentinel(cwd: Path) -> RepoContext | NoRepoSentinel:
    """Ask git for the repository root and common git directory of ``cwd``.

    Stacks are stored in the common git directory so every worktree of a
    repository sees the same stacks.
    """
    if not cwd.exists():
        return NoRepoSentinel(message=f"Start path '{cwd}' does not exist")

    try:
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel", "--git-common-dir"],
            operation_context="discover repository root",
            cwd=cwd,
        )
    except CommandNotFoundError as e:
        return NoRepoSentinel(message=str(e))

    if result.returncode != 0:
        return NoRepoSentinel(message="Not inside a git repository (git rev-parse failed)")

    lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    if len(lines) < 2:
        return NoRepoSentinel(message="Not inside a git repository (no work tree)")

    root = Path(lines[0]).resolve()
    git_dir = Path(lines[1])
    if not git_dir.is_absolute():
        git_dir = (cwd / git_dir).resolve()

    return RepoContext(root=root, git_dir=git_dir)
