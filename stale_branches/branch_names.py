"""Branch naming conventions.

Update branches are named after what they update:

- {prefix}{dependency}                          single dependency
- {prefix}{group}/{dependency}                  single dependency in a user group
- {prefix}monorepo.{release-group}              monorepo release group
- {prefix}{group}/monorepo.{release-group}      monorepo release group in a user group

Any of these may carry a "-{version}" suffix naming the proposed version
(e.g. "greenkeeper/lodash-4.17.5"). A head matches a BranchName when it equals
the rendered name once that suffix is dropped, so "lodash" never matches
"lodash.merge" and a grouped branch never matches an ungrouped one. Group
names may contain "/" ("team/web"); the known group delimits itself.

parse() works the other way round, from a head alone. Dependency names may
be scoped ("@babel/core"), so it splits a group off at the first slash
unless the rest starts with "@" or "monorepo.".
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from .versions import is_valid_version

MONOREPO_MARKER = "monorepo."


class BranchKind(str, Enum):
    SINGLE = "single"
    MONOREPO = "monorepo"


class BranchName(BaseModel):
    """Parsed identity of an update branch.

    Attributes:
        prefix: Configured branch prefix, e.g. "greenkeeper/".
        group: User-defined group, or None for ungrouped branches.
        kind: Whether the branch updates one dependency or a release group.
        target: The dependency name or monorepo release group name.
    """

    model_config = ConfigDict(frozen=True)

    prefix: str
    group: str | None = None
    kind: BranchKind = BranchKind.SINGLE
    target: str

    @classmethod
    def for_dependency(cls, prefix: str, dependency: str, group: str | None = None) -> BranchName:
        return cls(prefix=prefix, group=group, kind=BranchKind.SINGLE, target=dependency)

    @classmethod
    def for_monorepo(cls, prefix: str, release_group: str, group: str | None = None) -> BranchName:
        return cls(prefix=prefix, group=group, kind=BranchKind.MONOREPO, target=release_group)

    @classmethod
    def parse(cls, head: str | None, prefix: str) -> BranchName | None:
        """Parse a branch head into its identity.

        Returns None if the head does not start with the prefix or does not
        follow any of the naming forms.

        Examples:
            parse("greenkeeper/lodash-4.17.5", "greenkeeper/")
                → single, no group, target "lodash"
            parse("greenkeeper/frontend/monorepo.babel7", "greenkeeper/")
                → monorepo, group "frontend", target "babel7"
        """
        if not head or not head.startswith(prefix):
            return None
        rest = _strip_version_suffix(head[len(prefix) :])
        if not rest:
            return None

        group: str | None = None
        if not rest.startswith((MONOREPO_MARKER, "@")) and "/" in rest:
            group, rest = rest.split("/", 1)
            if not group or not rest:
                return None

        if rest.startswith(MONOREPO_MARKER):
            target = rest[len(MONOREPO_MARKER) :]
            if not target or "/" in target:
                return None
            return cls.for_monorepo(prefix, target, group)

        if not _is_package_name(rest):
            return None
        return cls.for_dependency(prefix, rest, group)

    def render(self) -> str:
        """Format the identity back into a branch head (without version)."""
        group = f"{self.group}/" if self.group else ""
        target = f"{MONOREPO_MARKER}{self.target}" if self.kind is BranchKind.MONOREPO else self.target
        return f"{self.prefix}{group}{target}"

    def matches(self, head: str | None) -> bool:
        """Return True if the head names exactly this branch.

        Examples:
            for_dependency("greenkeeper/", "lodash", "team/web")
                .matches("greenkeeper/team/web/lodash-1.0.0") → True
        """
        if not head or not head.startswith(self.prefix):
            return False
        # "{prefix}monorepo.x" always names a release group
        if self.kind is BranchKind.SINGLE and self.target.startswith(MONOREPO_MARKER):
            return False
        return _strip_version_suffix(head) == self.render()


def _strip_version_suffix(name: str) -> str:
    # Package names may contain "-", so only a trailing valid version counts
    # ("lodash-es" stays, "lodash-4.17.5" → "lodash")
    stem, sep, suffix = name.rpartition("-")
    while sep:
        if is_valid_version(suffix) and stem:
            return stem
        stem, sep, rest = stem.rpartition("-")
        suffix = f"{rest}-{suffix}"
    return name


def _is_package_name(name: str) -> bool:
    if name.startswith("@"):
        scope, _, package = name[1:].partition("/")
        return bool(scope) and bool(package) and "/" not in package
    return "/" not in name
