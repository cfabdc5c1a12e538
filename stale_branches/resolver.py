"""Stale branch resolution: manifest diff → branches to delete.

When a manifest changes, every open update branch for a changed dependency
is checked against the new version range:

1. Classify the diff into change records (added dependencies are dropped)
2. Tag records whose dependency is published in a monorepo release group
3. Look up the branches of each record, by dependency or by release group
4. Keep the stale ones whose branch name belongs to the record
5. Concatenate everything into one list for the caller to delete

A branch is stale if its dependency was removed, if the new range already
allows the version the branch proposes, or if the range moved past it
(e.g. a major bump the branch never offered).

Grouping-config changes are resolved separately: every branch of a removed
or modified group is stale.

Nothing here writes to the store.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Mapping, Sequence
from typing import TypeVar

from .branch_names import BranchName
from .changes import DependencyChangeSet, get_dependency_changes
from .config import StaleBranchesConfig
from .models import Branch, DependencyChange, GroupingConfigDiff
from .monorepo import MonorepoRegistry, tag_monorepo_change
from .ranges import RangeMatcher, SemverRanges
from .store import (
    BRANCH_BY_DEPENDENCY,
    BRANCH_BY_GROUP,
    BRANCH_BY_MONOREPO_RELEASE_GROUP,
    BranchStore,
    fetch_branches,
)

logger = logging.getLogger(__name__)

DEFAULT_RANGES: RangeMatcher = SemverRanges()

T = TypeVar("T")


async def _gather(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run awaitables concurrently; on the first failure cancel the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # Let the cancelled lookups unwind before the error reaches the caller
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def is_stale(branch: Branch, change: DependencyChange, ranges: RangeMatcher) -> bool:
    """Decide whether a branch is outdated by a dependency change.

    Raises:
        InvalidVersionError: If the branch version cannot be parsed.
    """
    if change.removed:
        return True
    if branch.version is None:
        logger.warning("Branch %s has no version, skipping", branch.head)
        return False
    return ranges.satisfies(branch.version, change.after) or ranges.ltr(
        branch.version, change.after
    )


def _select(
    branches: Sequence[Branch],
    change: DependencyChange,
    name: BranchName,
    ranges: RangeMatcher,
) -> list[Branch]:
    selected = []
    for branch in branches:
        if branch.head is None:
            logger.warning("Branch document without head for %s, skipping", change.dependency)
            continue
        if is_stale(branch, change, ranges) and name.matches(branch.head):
            selected.append(branch)
    return selected


def _can_evaluate(change: DependencyChange, ranges: RangeMatcher) -> bool:
    if change.removed or ranges.valid_range(change.after):
        return True
    logger.debug(
        "%s: %r is not a valid range, keeping its branches", change.dependency, change.after
    )
    return False


async def get_single_dependency_branches_to_delete(
    change: DependencyChange,
    store: BranchStore,
    repository_id: str,
    config: StaleBranchesConfig,
    ranges: RangeMatcher = DEFAULT_RANGES,
) -> list[Branch]:
    """Find the stale branches of a dependency that is not in a monorepo.

    Only branches named for this dependency (in this record's group, or
    ungrouped if it has none) are returned.
    """
    if not _can_evaluate(change, ranges):
        return []
    branches = await fetch_branches(
        store, BRANCH_BY_DEPENDENCY, [repository_id, change.dependency, change.dependency_type]
    )
    name = BranchName.for_dependency(config.branch_prefix, change.dependency, change.group_name)
    return _select(branches, change, name, ranges)


async def get_monorepo_branches_to_delete(
    change: DependencyChange,
    store: BranchStore,
    repository_id: str,
    config: StaleBranchesConfig,
    ranges: RangeMatcher = DEFAULT_RANGES,
) -> list[Branch]:
    """Find the stale branches of the release group a dependency belongs to.

    The record must have been tagged with its monorepo group name.
    """
    if change.monorepo_group_name is None:
        raise ValueError(f"{change.dependency} is not tagged with a monorepo group")
    if not _can_evaluate(change, ranges):
        return []
    branches = await fetch_branches(
        store, BRANCH_BY_MONOREPO_RELEASE_GROUP, [repository_id, change.monorepo_group_name]
    )
    name = BranchName.for_monorepo(
        config.branch_prefix, change.monorepo_group_name, change.group_name
    )
    return _select(branches, change, name, ranges)


async def get_dependency_branches_to_delete(
    changes: DependencyChangeSet,
    store: BranchStore,
    repository_id: str,
    config: StaleBranchesConfig,
    monorepos: MonorepoRegistry | None = None,
    ranges: RangeMatcher = DEFAULT_RANGES,
) -> list[Branch]:
    """Find every branch made stale by a manifest diff.

    All lookups run concurrently. If any of them fails the whole call
    fails and the lookups still running are cancelled; there are no partial
    results.

    Args:
        changes: Dependency change set, dependency type → name → change.
        store: Branch store to query.
        repository_id: Repository whose branches are considered.
        config: Branch prefix and monorepo definitions.
        monorepos: Release group registry; defaults to the one in config.
        ranges: Version range engine.

    Returns:
        Monorepo branches first, then single-dependency branches.
    """
    if monorepos is None:
        monorepos = config.monorepo_definitions()

    # Every membership check completes before records are partitioned
    tagged = await _gather(
        tag_monorepo_change(change, monorepos) for change in get_dependency_changes(changes)
    )
    monorepo_changes = [change for change in tagged if change.is_monorepo]
    single_changes = [change for change in tagged if not change.is_monorepo]

    results = await _gather(
        [
            *(
                get_monorepo_branches_to_delete(change, store, repository_id, config, ranges)
                for change in monorepo_changes
            ),
            *(
                get_single_dependency_branches_to_delete(
                    change, store, repository_id, config, ranges
                )
                for change in single_changes
            ),
        ]
    )
    branches = [branch for found in results for branch in found]
    logger.info(
        "%s: %d stale branch(es) from %d monorepo and %d single change(s)",
        repository_id,
        len(branches),
        len(monorepo_changes),
        len(single_changes),
    )
    return branches


async def get_group_branches_to_delete(
    config_changes: GroupingConfigDiff | Mapping[str, Sequence[str]],
    store: BranchStore,
    repository_id: str,
) -> list[Branch]:
    """Find every branch of the groups a grouping-config change touched.

    A removed or redefined group invalidates all of its branches, whatever
    version they propose.
    """
    if not isinstance(config_changes, GroupingConfigDiff):
        config_changes = GroupingConfigDiff.model_validate(config_changes)
    if config_changes.empty:
        return []
    groups = config_changes.affected_groups()
    results = await _gather(
        fetch_branches(store, BRANCH_BY_GROUP, [repository_id, group]) for group in groups
    )
    branches = [branch for found in results for branch in found]
    logger.info(
        "%s: %d branch(es) in changed group(s) %s", repository_id, len(branches), groups
    )
    return branches
