import tomllib
from dataclasses import dataclass
from pathlib import Path

import tomlkit

DEFAULT_PROJECT = ":id"


@dataclass(frozen=True)
class LoadedConfig:
    """In-memory representation of `.mrstack/config.toml`."""

    project: str
    base_branch: str | None
    remove_source_branch: bool
    assign_to_self: bool

    @staticmethod
    def defaults() -> "LoadedConfig":
        return LoadedConfig(
            project=DEFAULT_PROJECT,
            base_branch=None,
            remove_source_branch=True,
            assign_to_self=True,
        )


def config_dir_for(repo_root: Path) -> Path:
    return repo_root / ".mrstack"


def load_config(config_dir: Path) -> LoadedConfig:
    """Load config.toml from the given directory if present; otherwise return defaults.

    Example config:
      project = "group/project"
      base_branch = "develop"

      [merge_requests]
      remove_source_branch = true
      assign_to_self = false
    """

    cfg_path = config_dir / "config.toml"
    if not cfg_path.exists():
        return LoadedConfig.defaults()

    data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    project = str(data.get("project", DEFAULT_PROJECT))
    base_branch = data.get("base_branch")
    if base_branch is not None:
        base_branch = str(base_branch)
    mrs = data.get("merge_requests", {})
    return LoadedConfig(
        project=project,
        base_branch=base_branch,
        remove_source_branch=bool(mrs.get("remove_source_branch", True)),
        assign_to_self=bool(mrs.get("assign_to_self", True)),
    )


def save_config(config_dir: Path, config: LoadedConfig) -> None:
    """Save LoadedConfig to config.toml, preserving formatting.

    Creates the config directory if it doesn't exist.
    Uses tomlkit to preserve TOML formatting and comments.
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    cfg_path = config_dir / "config.toml"

    if cfg_path.exists():
        doc = tomlkit.parse(cfg_path.read_text(encoding="utf-8"))
    else:
        doc = tomlkit.document()

    doc["project"] = config.project
    if config.base_branch is not None:
        doc["base_branch"] = config.base_branch
    elif "base_branch" in doc:
        del doc["base_branch"]

    if "merge_requests" not in doc:
        doc["merge_requests"] = tomlkit.table()
    mrs = doc["merge_requests"]
    mrs["remove_source_branch"] = config.remove_source_branch  # type: ignore[index]
    mrs["assign_to_self"] = config.assign_to_self  # type: ignore[index]

    cfg_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
