"""Stack data model.

A stack is a flat map of refs keyed by commit SHA. Each ref names its
neighbours by SHA through ``prev``/``next``, so the chain is an index into the
map rather than a graph of objects. An empty string means "no neighbour".
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from mrstack.core.errors import EmptyStackError, StackCorruptedError, StackValidationError


@dataclass(frozen=True)
class StackRef:
    """One changeset in a stack, bound to a branch and optionally a merge request."""

    sha: str
    branch: str
    prev: str = ""
    next: str = ""
    description: str = ""
    mr: str = ""

    def is_first(self) -> bool:
        return self.prev == ""

    def is_last(self) -> bool:
        return self.next == ""


@dataclass
class Stack:
    """Ordered chain of refs.

    ``refs`` is owned by the stack for the duration of one operation; callers
    must not mutate it concurrently.
    """

    title: str
    refs: dict[str, StackRef] = field(default_factory=dict)
    base_branch: str | None = None

    def __len__(self) -> int:
        return len(self.refs)

    def __iter__(self) -> Iterator[StackRef]:
        return self.iter()

    def first(self) -> StackRef:
        """Return the head (the only ref without a ``prev``)."""
        return self._single_end("prev", "head")

    def last(self) -> StackRef:
        """Return the tail (the only ref without a ``next``)."""
        return self._single_end("next", "tail")

    def _single_end(self, attr: str, label: str) -> StackRef:
        if not self.refs:
            raise EmptyStackError(f"Stack '{self.title}' has no refs")

        candidates = [ref for ref in self.refs.values() if getattr(ref, attr) == ""]
        if len(candidates) != 1:
            shas = ", ".join(sorted(ref.sha for ref in candidates)) or "none"
            raise StackCorruptedError(
                f"Stack '{self.title}' must have exactly one {label}, found {len(candidates)} "
                f"({shas})"
            )
        return candidates[0]

    def iter(self) -> Iterator[StackRef]:
        """Yield refs from head to tail.

        The walk is bounded to ``len(refs)`` steps. Cycles, dangling links,
        broken back-links and orphaned refs raise StackCorruptedError.
        """
        if not self.refs:
            return

        current = self.first()
        seen: set[str] = set()
        for _ in range(len(self.refs)):
            seen.add(current.sha)
            yield current

            if current.next == "":
                break

            following = self.refs.get(current.next)
            if following is None:
                raise StackCorruptedError(
                    f"Ref {current.sha} ({current.branch}) points to unknown ref {current.next}"
                )
            if following.prev != current.sha:
                raise StackCorruptedError(
                    f"Ref {following.sha} ({following.branch}) has prev={following.prev!r}, "
                    f"expected {current.sha!r}"
                )
            if following.sha in seen:
                raise StackCorruptedError(f"Cycle detected at ref {following.sha}")
            current = following
        else:
            raise StackCorruptedError(
                f"Walk of stack '{self.title}' exceeded {len(self.refs)} steps"
            )

        if len(seen) != len(self.refs):
            orphans = ", ".join(sorted(set(self.refs) - seen))
            raise StackCorruptedError(f"Refs not reachable from the head: {orphans}")

    def branches(self) -> list[str]:
        return [ref.branch for ref in self.iter()]

    def validate(self) -> None:
        """Check every stack invariant, raising StackValidationError on failure."""
        for sha, ref in self.refs.items():
            if sha != ref.sha:
                raise StackCorruptedError(f"Ref keyed by {sha} has sha {ref.sha}")

        branches = [ref.branch for ref in self.refs.values()]
        duplicates = sorted({b for b in branches if branches.count(b) > 1})
        if duplicates:
            raise StackValidationError(f"Duplicate branches in stack: {', '.join(duplicates)}")

        # Consuming the walk runs the head/tail, link and reachability checks
        for _ in self.iter():
            pass
        self.last()

    def find_by_branch(self, branch: str) -> StackRef | None:
        for ref in self.refs.values():
            if ref.branch == branch:
                return ref
        return None

    def branch_of(self, sha: str) -> str | None:
        """Branch name of the ref keyed by ``sha``, or None for an empty link."""
        if sha == "":
            return None
        ref = self.refs.get(sha)
        if ref is None:
            raise StackCorruptedError(f"Stack '{self.title}' has no ref {sha}")
        return ref.branch

    def append(self, sha: str, branch: str, description: str = "") -> StackRef:
        """Add a new tail ref and return it."""
        if sha in self.refs:
            raise StackValidationError(f"Ref {sha} is already in the stack")
        if self.find_by_branch(branch) is not None:
            raise StackValidationError(f"Branch '{branch}' is already in the stack")

        if not self.refs:
            ref = StackRef(sha=sha, branch=branch, description=description)
            self.refs[sha] = ref
            return ref

        tail = self.last()
        ref = StackRef(sha=sha, branch=branch, prev=tail.sha, description=description)
        self.refs[tail.sha] = replace(tail, next=sha)
        self.refs[sha] = ref
        return ref

    def remove(self, sha: str) -> StackRef:
        """Unlink a ref, joining its neighbours, and return the removed ref."""
        ref = self.refs.get(sha)
        if ref is None:
            raise StackCorruptedError(f"Stack '{self.title}' has no ref {sha}")

        if ref.prev:
            before = self.refs[ref.prev]
            self.refs[before.sha] = replace(before, next=ref.next)
        if ref.next:
            after = self.refs[ref.next]
            self.refs[after.sha] = replace(after, prev=ref.prev)

        del self.refs[sha]
        return ref

    def with_mr(self, sha: str, mr: str) -> StackRef:
        """Record the merge request URL for a ref."""
        updated = replace(self.refs[sha], mr=mr)
        self.refs[sha] = updated
        return updated
