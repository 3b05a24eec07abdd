"""In-memory stack storage for tests."""

from copy import deepcopy

from mrstack.core.errors import StackNotFoundError
from mrstack.core.stack import Stack, StackRef
from mrstack.core.stack_store.abc import StackStore


class FakeStackStore(StackStore):
    """In-memory fake implementation of stack storage.

    All state is provided via constructor. Stored stacks are copied on the way
    in and out so tests observe only what was explicitly saved.
    """

    def __init__(
        self,
        *,
        stacks: list[Stack] | None = None,
        current: str | None = None,
    ) -> None:
        self._stacks: dict[str, Stack] = {s.title: deepcopy(s) for s in stacks or []}
        self._current = current
        self._saved_refs: list[tuple[str, StackRef]] = []
        self._removed_refs: list[tuple[str, str]] = []

    @property
    def stacks(self) -> dict[str, Stack]:
        """Stored stacks keyed by title."""
        return self._stacks

    @property
    def saved_refs(self) -> list[tuple[str, StackRef]]:
        """Tracked save_ref() calls as (title, ref) tuples."""
        return self._saved_refs

    @property
    def removed_refs(self) -> list[tuple[str, str]]:
        """Tracked remove_ref() calls as (title, sha) tuples."""
        return self._removed_refs

    def current_stack_title(self) -> str | None:
        return self._current

    def set_current_stack(self, title: str) -> None:
        self._current = title

    def list_stacks(self) -> list[str]:
        return sorted(self._stacks)

    def load_stack(self, title: str) -> Stack:
        stack = self._stacks.get(title)
        if stack is None:
            raise StackNotFoundError(f"No stack named '{title}'")
        return deepcopy(stack)

    def save_stack(self, stack: Stack) -> None:
        self._stacks[stack.title] = deepcopy(stack)

    def save_ref(self, title: str, ref: StackRef) -> None:
        stack = self._stacks.get(title)
        if stack is None:
            raise StackNotFoundError(f"No stack named '{title}'")
        stack.refs[ref.sha] = ref
        self._saved_refs.append((title, ref))

    def remove_ref(self, title: str, sha: str) -> None:
        stack = self._stacks.get(title)
        if stack is not None:
            stack.refs.pop(sha, None)
        self._removed_refs.append((title, sha))

    def delete_stack(self, title: str) -> None:
        if title not in self._stacks:
            raise StackNotFoundError(f"No stack named '{title}'")
        del self._stacks[title]
        if self._current == title:
            self._current = None
