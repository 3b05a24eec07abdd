"""Exception types raised by mrstack operations.

Every operation aborts on the first error. Nothing is rolled back, so errors
raised while walking a stack carry the branch that was being processed.
"""

from collections.abc import Sequence


class MrStackError(Exception):
    """Base class for all mrstack errors."""


class StackValidationError(MrStackError):
    """A stack or a requested change to it violates the stack invariants."""


class MissingBranchesError(StackValidationError):
    """Requested branch order is not a permutation of the stack's branches."""

    def __init__(self, missing: Sequence[str], extra: Sequence[str], duplicates: Sequence[str]):
        self.missing = list(missing)
        self.extra = list(extra)
        self.duplicates = list(duplicates)

        parts: list[str] = []
        if self.missing:
            parts.append(f"missing: {', '.join(self.missing)}")
        if self.extra:
            parts.append(f"not in stack: {', '.join(self.extra)}")
        if self.duplicates:
            parts.append(f"duplicated: {', '.join(self.duplicates)}")
        detail = "; ".join(parts) if parts else "branch count does not match"
        super().__init__(f"missing branches: reordered list must match the stack ({detail})")


class StackCorruptedError(StackValidationError):
    """The Prev/Next links of a stack do not form a single chain."""


class EmptyStackError(StackValidationError):
    """Operation needs at least one ref but the stack has none."""


class StackNotFoundError(MrStackError):
    """No stored stack matches the requested title."""


class DefaultBranchNotFoundError(MrStackError):
    """The remote's default branch could not be determined."""


class GitCommandError(MrStackError):
    """A git command exited with a non-zero status.

    Output is kept verbatim so rebase conflicts reach the user unchanged.
    """

    def __init__(self, args: Sequence[str], returncode: int, stdout: str, stderr: str):
        self.git_args = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        msg = f"git {' '.join(self.git_args)} failed with exit code {returncode}"
        if stdout.strip():
            msg += f"\nstdout: {stdout.strip()}"
        if stderr.strip():
            msg += f"\nstderr: {stderr.strip()}"
        super().__init__(msg)


class GitLabApiError(MrStackError):
    """A merge request API call failed (not found, auth, rate limit, ...)."""


class CommandNotFoundError(MrStackError):
    """An external executable such as git or glab is not installed."""

    def __init__(self, command: str, operation_context: str):
        self.command = command
        self.operation_context = operation_context
        super().__init__(f"Command not found while trying to {operation_context}: {command}")


class StackOperationError(MrStackError):
    """Wraps a failure with the branch and ref being processed when it happened."""

    def __init__(self, message: str, *, branch: str, sha: str | None = None):
        self.branch = branch
        self.sha = sha
        super().__init__(message)
