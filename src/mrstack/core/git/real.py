"""Production git runner using subprocess."""

import logging
from pathlib import Path

from mrstack.core.errors import CommandNotFoundError, GitCommandError
from mrstack.core.git.abc import GitRunner
from mrstack.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

# Exit status a shell reports for a missing executable
COMMAND_NOT_FOUND_EXIT = 127


class RealGitRunner(GitRunner):
    """Runs actual git commands in ``cwd``."""

    def __init__(self, cwd: Path) -> None:
        self._cwd = cwd

    def git(self, args: list[str]) -> str:
        logger.debug("git %s", " ".join(args))
        try:
            result = run_subprocess_with_context(
                ["git", *args],
                operation_context=f"run git {args[0] if args else ''}".rstrip(),
                cwd=self._cwd,
            )
        except CommandNotFoundError as e:
            raise GitCommandError(args, COMMAND_NOT_FOUND_EXIT, "", str(e)) from e

        if result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stdout or "", result.stderr or "")
        return (result.stdout or "").strip()
