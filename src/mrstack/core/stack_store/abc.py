"""Abstract interface for stack storage."""

from abc import ABC, abstractmethod

from mrstack.core.stack import Stack, StackRef


class StackStore(ABC):
    """Reads and writes stacks and tracks which stack is current.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def current_stack_title(self) -> str | None:
        """Title of the stack being worked on, or None if none is selected."""
        ...

    @abstractmethod
    def set_current_stack(self, title: str) -> None:
        ...

    @abstractmethod
    def list_stacks(self) -> list[str]:
        """Titles of all stored stacks, sorted."""
        ...

    @abstractmethod
    def load_stack(self, title: str) -> Stack:
        """Load a stack with all of its refs.

        Raises:
            StackNotFoundError: If no stack with this title exists
        """
        ...

    @abstractmethod
    def save_stack(self, stack: Stack) -> None:
        """Replace the stored refs and metadata of ``stack.title`` with ``stack``."""
        ...

    @abstractmethod
    def save_ref(self, title: str, ref: StackRef) -> None:
        """Write a single ref, e.g. after its merge request was created."""
        ...

    @abstractmethod
    def remove_ref(self, title: str, sha: str) -> None:
        ...

    @abstractmethod
    def delete_stack(self, title: str) -> None:
        ...
