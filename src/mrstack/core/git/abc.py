"""Abstract git runner interface."""

from abc import ABC, abstractmethod


class GitRunner(ABC):
    """Executes git argument vectors in the working copy.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def git(self, args: list[str]) -> str:
        """Run ``git <args>`` and return its stripped stdout.

        Args:
            args: Arguments after the ``git`` executable, e.g. ["status", "-uno"]

        Returns:
            Standard output of the command

        Raises:
            GitCommandError: If git exits with a non-zero status
        """
        ...
