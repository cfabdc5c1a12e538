"""Tests for stale_branches.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from stale_branches.models import Branch, ChangeKind, DependencyChange, GroupingConfigDiff


class TestDependencyChange:
    def test_create_from_wire_names(self) -> None:
        change = DependencyChange.model_validate(
            {
                "dependency": "lodash",
                "dependencyType": "dependencies",
                "change": "modified",
                "before": "^3.0.0",
                "after": "^4.0.0",
                "groupName": "frontend",
            }
        )
        assert change.dependency_type == "dependencies"
        assert change.change is ChangeKind.MODIFIED
        assert change.group_name == "frontend"
        assert change.monorepo_group_name is None

    def test_removed(self) -> None:
        change = DependencyChange(dependency="a", dependency_type="dependencies", change="removed")
        assert change.removed
        assert not change.is_monorepo

    def test_extra_fields_preserved(self) -> None:
        change = DependencyChange.model_validate(
            {"dependency": "a", "dependencyType": "dependencies", "change": "modified", "x": 1}
        )
        assert change.model_dump()["x"] == 1

    def test_unknown_change_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DependencyChange(dependency="a", dependency_type="dependencies", change="renamed")


class TestBranch:
    def test_round_trips_document(self) -> None:
        doc = {
            "_id": "repo1:branch:abc",
            "_rev": "3-xyz",
            "type": "branch",
            "repositoryId": "repo1",
            "head": "greenkeeper/lodash-4.17.5",
            "version": "4.17.5",
            "dependency": "lodash",
            "dependencyType": "dependencies",
        }
        branch = Branch.from_doc(doc)
        assert branch.repository_id == "repo1"
        assert branch.to_doc() == doc

    def test_numeric_ids_accepted(self) -> None:
        doc = {"_id": 7, "repositoryId": 42, "head": "greenkeeper/g/lodash", "group": "g"}
        branch = Branch.from_doc(doc)
        assert branch.repository_id == "42"
        assert branch.to_doc() == doc

    def test_missing_head_and_version_allowed(self) -> None:
        branch = Branch.from_doc({"repositoryId": "repo1"})
        assert branch.head is None
        assert branch.version is None


class TestGroupingConfigDiff:
    def test_defaults_empty(self) -> None:
        assert GroupingConfigDiff().empty

    def test_affected_groups_deduplicated_in_order(self) -> None:
        diff = GroupingConfigDiff(removed=["b", "a"], modified=["a", "c"])
        assert not diff.empty
        assert diff.affected_groups() == ["b", "a", "c"]
