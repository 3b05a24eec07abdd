"""Stack storage in the repository's git directory.

Layout::

    <git-dir>/stacked/CURRENT              title of the current stack
    <git-dir>/stacked/<title>/_stack.json  {"title": ..., "base_branch": ...}
    <git-dir>/stacked/<title>/<sha>.json   one StackRef per file
"""

import json
import logging
import shutil
from dataclasses import asdict
from pathlib import Path
from typing import Any
from urllib.parse import quote

from mrstack.core.errors import StackNotFoundError, StackValidationError
from mrstack.core.stack import Stack, StackRef
from mrstack.core.stack_store.abc import StackStore

logger = logging.getLogger(__name__)

METADATA_FILE = "_stack.json"
CURRENT_FILE = "CURRENT"


def stack_dir_name(title: str) -> str:
    """Directory name for a stack title.

    Titles are percent-encoded, so distinct titles never share a directory.
    """
    name = quote(title, safe="")
    if not title.strip() or name.startswith("."):
        raise StackValidationError(f"Invalid stack title: {title!r}")
    return name


def ref_to_json(ref: StackRef) -> dict[str, Any]:
    return asdict(ref)


def ref_from_json(data: dict[str, Any]) -> StackRef:
    return StackRef(
        sha=data["sha"],
        branch=data["branch"],
        prev=data.get("prev", ""),
        next=data.get("next", ""),
        description=data.get("description", ""),
        mr=data.get("mr", ""),
    )


class RealStackStore(StackStore):
    """JSON-file implementation rooted at ``<git_dir>/stacked``."""

    def __init__(self, git_dir: Path) -> None:
        self._root = git_dir / "stacked"

    def _stack_path(self, title: str) -> Path:
        return self._root / stack_dir_name(title)

    def current_stack_title(self) -> str | None:
        path = self._root / CURRENT_FILE
        if not path.exists():
            return None
        title = path.read_text(encoding="utf-8").strip()
        return title or None

    def set_current_stack(self, title: str) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        (self._root / CURRENT_FILE).write_text(f"{title}\n", encoding="utf-8")

    def list_stacks(self) -> list[str]:
        if not self._root.exists():
            return []
        titles: list[str] = []
        for path in sorted(self._root.iterdir()):
            metadata = path / METADATA_FILE
            if path.is_dir() and metadata.exists():
                data = json.loads(metadata.read_text(encoding="utf-8"))
                titles.append(data.get("title", path.name))
        return sorted(titles)

    def load_stack(self, title: str) -> Stack:
        path = self._stack_path(title)
        metadata_path = path / METADATA_FILE
        if not metadata_path.exists():
            raise StackNotFoundError(f"No stack named '{title}'")

        metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
        refs: dict[str, StackRef] = {}
        for ref_path in sorted(path.glob("*.json")):
            if ref_path.name == METADATA_FILE:
                continue
            ref = ref_from_json(json.loads(ref_path.read_text(encoding="utf-8")))
            refs[ref.sha] = ref

        logger.debug("Loaded stack '%s' with %d refs from %s", title, len(refs), path)
        return Stack(title=title, refs=refs, base_branch=metadata.get("base_branch"))

    def save_stack(self, stack: Stack) -> None:
        path = self._stack_path(stack.title)
        path.mkdir(parents=True, exist_ok=True)

        metadata = {"title": stack.title, "base_branch": stack.base_branch}
        (path / METADATA_FILE).write_text(json.dumps(metadata, indent=2) + "\n", encoding="utf-8")

        for ref_path in path.glob("*.json"):
            if ref_path.name != METADATA_FILE and ref_path.stem not in stack.refs:
                ref_path.unlink()
        for ref in stack.refs.values():
            self._write_ref(path, ref)

    def save_ref(self, title: str, ref: StackRef) -> None:
        path = self._stack_path(title)
        if not (path / METADATA_FILE).exists():
            raise StackNotFoundError(f"No stack named '{title}'")
        self._write_ref(path, ref)

    def _write_ref(self, path: Path, ref: StackRef) -> None:
        (path / f"{ref.sha}.json").write_text(
            json.dumps(ref_to_json(ref), indent=2) + "\n", encoding="utf-8"
        )

    def remove_ref(self, title: str, sha: str) -> None:
        ref_path = self._stack_path(title) / f"{sha}.json"
        if ref_path.exists():
            ref_path.unlink()

    def delete_stack(self, title: str) -> None:
        path = self._stack_path(title)
        if not path.exists():
            raise StackNotFoundError(f"No stack named '{title}'")
        shutil.rmtree(path)
        if self.current_stack_title() == title:
            (self._root / CURRENT_FILE).unlink()
