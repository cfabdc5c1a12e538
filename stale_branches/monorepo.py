"""Monorepo release groups.

Some packages are published together under one version (all "@babel/*"
packages of a release, all "react" + "react-dom" releases). Branches for
them are tracked per release group rather than per package, so change
records for such packages are tagged with their group name before
resolution.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Protocol

from .models import DependencyChange

logger = logging.getLogger(__name__)


class MonorepoRegistry(Protocol):
    """Looks up which release group, if any, a package is published in."""

    async def is_part_of_monorepo(self, dependency: str) -> bool: ...

    async def get_monorepo_group_name(self, dependency: str) -> str: ...


class MonorepoDefinitions:
    """Registry backed by a static release group → packages table.

    A package listed under several groups belongs to the first one.

    Example:
        MonorepoDefinitions({"babel7": ["@babel/core", "@babel/cli"]})
    """

    def __init__(self, groups: Mapping[str, Iterable[str]] | None = None) -> None:
        self.groups: dict[str, list[str]] = {
            name: list(packages) for name, packages in (groups or {}).items()
        }
        self._group_by_package: dict[str, str] = {}
        for name, packages in self.groups.items():
            for package in packages:
                self._group_by_package.setdefault(package, name)

    async def is_part_of_monorepo(self, dependency: str) -> bool:
        return dependency in self._group_by_package

    async def get_monorepo_group_name(self, dependency: str) -> str:
        try:
            return self._group_by_package[dependency]
        except KeyError:
            raise LookupError(f"{dependency} is not part of a monorepo release group") from None


async def tag_monorepo_change(
    change: DependencyChange, monorepos: MonorepoRegistry
) -> DependencyChange:
    """Attach the monorepo release group to a change record, if it has one.

    Returns a tagged copy; the record passed in is left untouched. Errors
    from the registry propagate.
    """
    if not await monorepos.is_part_of_monorepo(change.dependency):
        return change
    group_name = await monorepos.get_monorepo_group_name(change.dependency)
    logger.debug("%s is part of monorepo %s", change.dependency, group_name)
    return change.model_copy(update={"monorepo_group_name": group_name})
