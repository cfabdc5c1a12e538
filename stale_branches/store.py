"""Branch store interface.

Branches live in a document store queried through secondary indexes (views).
Resolution only needs three of them, each returning
{"rows": [{"doc": {...}}, ...]} for a key, with no rows when nothing matches.

MemoryBranchStore implements those indexes over an in-memory list of
documents, for the CLI and for tests.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol

from .models import Branch

logger = logging.getLogger(__name__)

BRANCH_BY_DEPENDENCY = "branch_by_dependency"
BRANCH_BY_MONOREPO_RELEASE_GROUP = "branch_by_monorepo_release_group"
BRANCH_BY_GROUP = "branch_by_group"


class BranchStore(Protocol):
    async def query(
        self, index: str, *, key: Sequence[str], include_docs: bool = True
    ) -> Mapping[str, Any]: ...


async def fetch_branches(store: BranchStore, index: str, key: Sequence[str]) -> list[Branch]:
    """Query an index and return the matching branch documents."""
    result = await store.query(index, key=list(key), include_docs=True)
    rows = result.get("rows", [])
    logger.debug("%s %s → %d branch(es)", index, list(key), len(rows))
    return [Branch.from_doc(row["doc"]) for row in rows]


# Index name → function computing the key a document is emitted under
_INDEXES: dict[str, Callable[[Mapping[str, Any]], tuple[Any, ...] | None]] = {
    BRANCH_BY_DEPENDENCY: lambda doc: (
        (doc.get("repositoryId"), doc.get("dependency"), doc.get("dependencyType"))
        if doc.get("dependency")
        else None
    ),
    BRANCH_BY_MONOREPO_RELEASE_GROUP: lambda doc: (
        (doc.get("repositoryId"), doc.get("monorepoGroupName"))
        if doc.get("monorepoGroupName")
        else None
    ),
    BRANCH_BY_GROUP: lambda doc: (
        (doc.get("repositoryId"), doc.get("group")) if doc.get("group") else None
    ),
}


class MemoryBranchStore:
    """Branch store backed by a list of branch documents.

    Only documents with "type": "branch" (or no type at all) are indexed,
    mirroring a store that keeps other document kinds in the same database.
    """

    def __init__(self, docs: Iterable[Mapping[str, Any]] = ()) -> None:
        self.docs: list[dict[str, Any]] = [
            dict(doc) for doc in docs if doc.get("type", "branch") == "branch"
        ]

    @classmethod
    def from_json(cls, path: Path) -> MemoryBranchStore:
        """Load branch documents from a JSON array file."""
        docs = json.loads(Path(path).read_text())
        if not isinstance(docs, list):
            raise ValueError(f"{path}: expected a JSON array of branch documents")
        return cls(docs)

    async def query(
        self, index: str, *, key: Sequence[str], include_docs: bool = True
    ) -> dict[str, Any]:
        try:
            emit = _INDEXES[index]
        except KeyError:
            raise KeyError(f"Unknown index: {index}") from None

        wanted = tuple(key)
        rows = []
        for doc in self.docs:
            doc_key = emit(doc)
            if doc_key == wanted:
                row: dict[str, Any] = {"id": doc.get("_id"), "key": list(wanted)}
                if include_docs:
                    row["doc"] = doc
                rows.append(row)
        return {"rows": rows}
