"""Data models for stale-branches.

These Pydantic models represent the records that flow through branch
resolution: dependency changes coming from a manifest diff, branch
documents coming from the store, and grouping-config diffs.

Field names are snake_case in Python and camelCase on the wire, matching
the documents the store and the callers exchange.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class ChangeKind(str, Enum):
    """How a dependency entry changed between two manifest versions."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


class DependencyChange(BaseModel):
    """One dependency entry of a manifest diff.

    Built from a single leaf of a dependency change set. Any extra fields
    present on the original entry are preserved.

    Attributes:
        dependency: Package name, e.g. "lodash" or "@babel/core".
        dependency_type: Manifest section, e.g. "dependencies".
        change: Whether the entry was added, removed or modified.
        before: Version range before the change, if any.
        after: Version range after the change, if any.
        group_name: User-defined group the dependency belongs to.
        monorepo_group_name: Monorepo release group, set by tagging.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    dependency: str
    dependency_type: str = Field(alias="dependencyType")
    change: ChangeKind
    before: str | None = None
    after: str | None = None
    group_name: str | None = Field(default=None, alias="groupName")
    monorepo_group_name: str | None = Field(default=None, alias="monorepoGroupName")

    @property
    def removed(self) -> bool:
        return self.change is ChangeKind.REMOVED

    @property
    def is_monorepo(self) -> bool:
        return self.monorepo_group_name is not None


class Branch(BaseModel):
    """An open update branch as stored in the branch store.

    Only the fields used for resolution are declared. A branch built with
    from_doc keeps the whole document (ids, revisions, timestamps) so the
    caller can delete the exact document it received.

    head and version are optional because documents written by older
    versions of the bot may lack them. Such branches never match a branch
    name (no head) or a version range (no version).

    Store ids are often numeric (e.g. GitHub repository ids), so numbers are
    read as strings instead of failing the document.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    repository_id: str | None = Field(default=None, alias="repositoryId")
    head: str | None = None
    version: str | None = None
    dependency: str | None = None
    dependency_type: str | None = Field(default=None, alias="dependencyType")
    monorepo_group_name: str | None = Field(default=None, alias="monorepoGroupName")
    group: str | None = None

    _doc: dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def from_doc(cls, doc: Mapping[str, Any]) -> Branch:
        branch = cls.model_validate(doc)
        branch._doc = dict(doc)
        return branch

    def to_doc(self) -> dict[str, Any]:
        """Return the document in its stored (camelCase) shape."""
        if self._doc:
            return dict(self._doc)
        return self.model_dump(by_alias=True, exclude_none=True)


class GroupingConfigDiff(BaseModel):
    """Group names whose definition was removed or modified.

    Attributes:
        removed: Groups deleted from the grouping configuration.
        modified: Groups whose definition changed.
    """

    removed: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.removed and not self.modified

    def affected_groups(self) -> list[str]:
        """Removed and modified group names, deduplicated in order."""
        return list(dict.fromkeys(self.removed + self.modified))
