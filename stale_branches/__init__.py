"""Decide which dependency update branches a manifest or grouping change made stale."""

from .changes import get_dependency_changes
from .config import StaleBranchesConfig, load_config
from .models import Branch, ChangeKind, DependencyChange, GroupingConfigDiff
from .monorepo import MonorepoDefinitions, MonorepoRegistry
from .resolver import get_dependency_branches_to_delete, get_group_branches_to_delete
from .store import BranchStore, MemoryBranchStore

__all__ = [
    "Branch",
    "BranchStore",
    "ChangeKind",
    "DependencyChange",
    "GroupingConfigDiff",
    "MemoryBranchStore",
    "MonorepoDefinitions",
    "MonorepoRegistry",
    "StaleBranchesConfig",
    "get_dependency_branches_to_delete",
    "get_dependency_changes",
    "get_group_branches_to_delete",
    "load_config",
]
