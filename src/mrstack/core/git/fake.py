"""Fake git runner for testing.

FakeGitRunner records every argument vector it receives and answers from
pre-configured outputs. Construct instances directly with keyword arguments.
"""

from collections.abc import Mapping, Sequence

from mrstack.core.errors import GitCommandError
from mrstack.core.git.abc import GitRunner


class FakeGitRunner(GitRunner):
    """In-memory fake implementation of the git runner.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.
    """

    def __init__(
        self,
        *,
        outputs: Mapping[tuple[str, ...], str | Sequence[str]] | None = None,
        failures: Mapping[tuple[str, ...], GitCommandError] | None = None,
    ) -> None:
        """Create FakeGitRunner with pre-configured responses.

        Args:
            outputs: Mapping of argument tuple -> stdout. A sequence value is
                consumed one entry per call, the last entry repeating.
            failures: Mapping of argument tuple -> error raised when called
        """
        self._outputs: dict[tuple[str, ...], list[str]] = {}
        for args, value in (outputs or {}).items():
            self._outputs[args] = [value] if isinstance(value, str) else list(value)
        self._failures = dict(failures or {})
        self._calls: list[list[str]] = []

    @property
    def calls(self) -> list[list[str]]:
        """Read-only access to every argument vector received, in order."""
        return self._calls

    def git(self, args: list[str]) -> str:
        self._calls.append(list(args))
        key = tuple(args)

        failure = self._failures.get(key)
        if failure is not None:
            raise failure

        queued = self._outputs.get(key)
        if not queued:
            return ""
        if len(queued) > 1:
            return queued.pop(0)
        return queued[0]
