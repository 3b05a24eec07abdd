from dataclasses import replace

import click

from mrstack.cli.config import LoadedConfig, config_dir_for, save_config
from mrstack.cli.core import ensure_repo
from mrstack.cli.output import error_output, machine_output, user_output
from mrstack.core.context import MrStackContext

CONFIG_KEYS = (
    "project",
    "base_branch",
    "merge_requests.remove_source_branch",
    "merge_requests.assign_to_self",
)


def _parse_boolean_value(value: str, field_name: str) -> bool:
    """Parse a boolean value from a string.

    Args:
        value: The string value to parse ("true" or "false", case-insensitive)
        field_name: The name of the field being set (for error messages)

    Returns:
        The parsed boolean value

    Raises:
        SystemExit: If the value is not "true" or "false"
    """
    if value.lower() not in ("true", "false"):
        error_output(f"Invalid boolean value for {field_name}: {value}")
        raise SystemExit(1)
    return value.lower() == "true"


def _format_value(cfg: LoadedConfig, key: str) -> str:
    match key:
        case "project":
            return cfg.project
        case "base_branch":
            return cfg.base_branch or ""
        case "merge_requests.remove_source_branch":
            return str(cfg.remove_source_branch).lower()
        case "merge_requests.assign_to_self":
            return str(cfg.assign_to_self).lower()
        case _:
            error_output(f"Invalid key: {key}")
            raise SystemExit(1)


def _update_config_field(cfg: LoadedConfig, key: str, value: str) -> LoadedConfig:
    """Return a copy of ``cfg`` with ``key`` set to ``value``.

    An empty value for base_branch clears it, so the remote default is used.
    """
    match key:
        case "project":
            if not value:
                error_output("project cannot be empty")
                raise SystemExit(1)
            return replace(cfg, project=value)
        case "base_branch":
            return replace(cfg, base_branch=value or None)
        case "merge_requests.remove_source_branch":
            return replace(cfg, remove_source_branch=_parse_boolean_value(value, key))
        case "merge_requests.assign_to_self":
            return replace(cfg, assign_to_self=_parse_boolean_value(value, key))
        case _:
            error_output(f"Invalid key: {key}")
            raise SystemExit(1)


@click.group("config")
def config_group() -> None:
    """Manage mrstack configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: MrStackContext) -> None:
    """Print a list of configuration keys and values."""
    user_output(click.style("Repository configuration:", bold=True))
    for key in CONFIG_KEYS:
        machine_output(f"  {key}={_format_value(ctx.config, key)}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: MrStackContext, key: str) -> None:
    """Print the value of a given configuration key."""
    value = _format_value(ctx.config, key)
    if key == "base_branch" and not value:
        error_output(f"Key not found: {key}")
        raise SystemExit(1)
    machine_output(value)


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: MrStackContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key."""
    repo = ensure_repo(ctx)
    updated = _update_config_field(ctx.config, key, value)
    save_config(config_dir_for(repo.root), updated)
    user_output(f"Set {key}={_format_value(updated, key)}")
