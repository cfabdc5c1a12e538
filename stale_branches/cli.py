"""CLI entry point for stale-branches.

Reads branch documents from a JSON file, resolves which of them a change
makes stale, and prints those documents as a JSON array on stdout.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from .config import ConfigError, StaleBranchesConfig, load_config
from .models import Branch, GroupingConfigDiff
from .ranges import InvalidRangeError
from .resolver import get_dependency_branches_to_delete, get_group_branches_to_delete
from .store import MemoryBranchStore
from .versions import InvalidVersionError

_INPUT_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _read_json(path: Path, *, arg_name: str) -> Any:
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON for {arg_name}: {exc}") from exc


def _load_store(path: Path) -> MemoryBranchStore:
    docs = _read_json(path, arg_name="--branches")
    if not isinstance(docs, list):
        raise click.ClickException("--branches must be a JSON array of branch documents")
    return MemoryBranchStore(docs)


def _load_config(path: Path | None) -> StaleBranchesConfig:
    try:
        return load_config(path)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_branches(branches: list[Branch]) -> None:
    click.echo(json.dumps([branch.to_doc() for branch in branches], indent=2))


@click.group()
@click.version_option(package_name="stale-branches")
@click.option("-v", "--verbose", is_flag=True, help="Log every resolution step.")
def cli(verbose: bool) -> None:
    """Find update branches made stale by dependency or grouping changes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--changes",
    "changes_path",
    type=_INPUT_FILE,
    required=True,
    help="JSON object: dependency type → dependency → change.",
)
@click.option(
    "--branches",
    "branches_path",
    type=_INPUT_FILE,
    required=True,
    help="JSON array of branch documents.",
)
@click.option("--repository-id", required=True, help="Repository the changes belong to.")
@click.option(
    "--config",
    "config_path",
    type=_INPUT_FILE,
    default=None,
    help="TOML config file or pyproject.toml with [tool.stale-branches].",
)
def dependencies(
    changes_path: Path,
    branches_path: Path,
    repository_id: str,
    config_path: Path | None,
) -> None:
    """Print the branches made stale by a dependency diff."""
    config = _load_config(config_path)
    changes = _read_json(changes_path, arg_name="--changes")
    if not isinstance(changes, dict):
        raise click.ClickException("--changes must be a JSON object")
    store = _load_store(branches_path)

    try:
        branches = asyncio.run(
            get_dependency_branches_to_delete(changes, store, repository_id, config)
        )
    except (InvalidVersionError, InvalidRangeError, ValidationError) as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_branches(branches)


@cli.command()
@click.option(
    "--branches",
    "branches_path",
    type=_INPUT_FILE,
    required=True,
    help="JSON array of branch documents.",
)
@click.option("--repository-id", required=True, help="Repository the groups belong to.")
@click.option("--removed", multiple=True, help="Group removed from the config (repeatable).")
@click.option("--modified", multiple=True, help="Group modified in the config (repeatable).")
def groups(
    branches_path: Path,
    repository_id: str,
    removed: tuple[str, ...],
    modified: tuple[str, ...],
) -> None:
    """Print the branches of removed or modified groups."""
    store = _load_store(branches_path)
    config_changes = GroupingConfigDiff(removed=list(removed), modified=list(modified))
    branches = asyncio.run(get_group_branches_to_delete(config_changes, store, repository_id))
    _echo_branches(branches)
