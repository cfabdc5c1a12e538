"""Dependency change classification.

Flattens a manifest diff keyed by dependency type into a list of
DependencyChange records.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import ChangeKind, DependencyChange

# dependency type → dependency name → {"change", "before", "after", ...}
DependencyChangeSet = Mapping[str, Mapping[str, Mapping[str, Any]]]


def get_dependency_changes(changes: DependencyChangeSet) -> list[DependencyChange]:
    """Flatten a dependency change set into change records.

    Added dependencies are skipped: a new dependency cannot make an
    existing branch stale.

    Example:
        {"devDependencies": {"mocha": {"change": "modified", "after": "^6.0.0"}}}
        → [DependencyChange(dependency="mocha", dependency_type="devDependencies", ...)]
    """
    return [
        DependencyChange.model_validate(
            {"dependency": dependency, "dependencyType": dependency_type, **entry}
        )
        for dependency_type, entries in changes.items()
        for dependency, entry in entries.items()
        if entry.get("change") != ChangeKind.ADDED.value
    ]
