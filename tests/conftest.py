"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from stale_branches.config import StaleBranchesConfig
from stale_branches.monorepo import MonorepoDefinitions
from stale_branches.store import MemoryBranchStore


def _branch_doc(head: str, version: str | None, **fields: Any) -> dict[str, Any]:
    """Build a branch document for repo1 with sensible defaults."""
    doc: dict[str, Any] = {
        "_id": f"repo1:branch:{head}",
        "type": "branch",
        "repositoryId": "repo1",
        "head": head,
    }
    if version is not None:
        doc["version"] = version
    doc.update(fields)
    return doc


@pytest.fixture
def branch_doc() -> Callable[..., dict[str, Any]]:
    """Factory for branch documents, see _branch_doc."""
    return _branch_doc


@pytest.fixture
def config() -> StaleBranchesConfig:
    return StaleBranchesConfig(branch_prefix="greenkeeper/")


@pytest.fixture
def monorepos() -> MonorepoDefinitions:
    return MonorepoDefinitions(
        {
            "babel7": ["@babel/core", "@babel/preset-env", "@babel/cli"],
            "react": ["react", "react-dom"],
        }
    )


@pytest.fixture
def sample_docs() -> list[dict[str, Any]]:
    """Open branches of repo1 (and one of repo2) across all naming forms."""
    return [
        _branch_doc(
            "greenkeeper/lodash-4.17.5",
            "4.17.5",
            dependency="lodash",
            dependencyType="dependencies",
        ),
        _branch_doc(
            "greenkeeper/frontend/lodash-4.17.5",
            "4.17.5",
            dependency="lodash",
            dependencyType="dependencies",
            group="frontend",
        ),
        _branch_doc(
            "greenkeeper/mocha-6.0.0",
            "6.0.0",
            dependency="mocha",
            dependencyType="devDependencies",
        ),
        _branch_doc(
            "greenkeeper/monorepo.babel7-7.1.0",
            "7.1.0",
            dependency="@babel/core",
            dependencyType="devDependencies",
            monorepoGroupName="babel7",
        ),
        _branch_doc(
            "greenkeeper/frontend/monorepo.babel7-7.1.0",
            "7.1.0",
            dependency="@babel/core",
            dependencyType="devDependencies",
            monorepoGroupName="babel7",
            group="frontend",
        ),
        {
            "_id": "repo2:branch:lodash",
            "type": "branch",
            "repositoryId": "repo2",
            "head": "greenkeeper/lodash-4.17.5",
            "version": "4.17.5",
            "dependency": "lodash",
            "dependencyType": "dependencies",
        },
    ]


@pytest.fixture
def store(sample_docs: list[dict[str, Any]]) -> MemoryBranchStore:
    return MemoryBranchStore(sample_docs)
