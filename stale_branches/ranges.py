"""npm-style version ranges on top of semver.Version.

Manifests express dependency constraints as npm ranges ("^2.0.0",
"~1.4", "1.x || >=3.0.0 <3.2.0"). A range is parsed into a union of
comparator sets; a version satisfies the range if it satisfies every
comparator of at least one set.

Supported syntax:
- primitive comparators: <, <=, >, >=, = and bare versions
- X-ranges: *, x, X, 1.x, 1.2.*, and the empty string (any version)
- tilde ranges: ~1.2.3, ~1.2, ~1
- caret ranges: ^1.2.3, ^0.2.3, ^0.0.3, ^1.x
- hyphen ranges: 1.2.3 - 2.3.4
- unions joined by ||

The resolver only talks to the RangeMatcher protocol, so the engine can be
swapped out per call.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import NamedTuple, Protocol

import semver

from .versions import InvalidVersionError, parse_version


class InvalidRangeError(ValueError):
    """Raised when a string cannot be read as a version range."""


class RangeMatcher(Protocol):
    """The version-range capability the branch resolvers depend on."""

    def valid_range(self, range_str: str | None) -> bool: ...

    def satisfies(self, version: str, range_str: str) -> bool: ...

    def ltr(self, version: str, range_str: str) -> bool: ...


class Comparator(NamedTuple):
    """One bound of a comparator set. A version of None matches anything."""

    operator: str
    version: semver.Version | None

    def test(self, version: semver.Version) -> bool:
        if self.version is None:
            return True
        cmp = version.replace(build=None).compare(self.version)
        if self.operator == "<":
            return cmp < 0
        if self.operator == "<=":
            return cmp <= 0
        if self.operator == ">":
            return cmp > 0
        if self.operator == ">=":
            return cmp >= 0
        return cmp == 0


ANY = Comparator("", None)
# Matches nothing: every version is >= 0.0.0-0.
NOTHING = Comparator("<", semver.Version(0, 0, 0, prerelease="0"))

ComparatorSet = tuple[Comparator, ...]

_NUM = r"0|[1-9]\d*"
_PART = rf"{_NUM}|[xX*]"
_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_PARTIAL_RE = re.compile(
    rf"^v?(?P<major>{_PART})"
    rf"(?:\.(?P<minor>{_PART})"
    rf"(?:\.(?P<patch>{_PART})"
    rf"(?:-(?P<pre>{_IDENT}))?"
    rf"(?:\+(?P<build>{_IDENT}))?)?)?$"
)
_TOKEN_RE = re.compile(r"^(?P<op><=|>=|<|>|=|~>|~|\^)?(?P<version>.*)$")
_HYPHEN_RE = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")
_OPERATOR_SPACE_RE = re.compile(r"(<=|>=|<|>|=|~>|~|\^)\s+")


class Partial(NamedTuple):
    """A possibly incomplete version; wildcard or missing parts are None."""

    major: int | None
    minor: int | None
    patch: int | None
    prerelease: str | None

    @property
    def complete(self) -> bool:
        return self.patch is not None


def _parse_partial(text: str) -> Partial:
    match = _PARTIAL_RE.match(text)
    if not match:
        raise InvalidRangeError(f"Invalid version in range: {text!r}")

    parts: list[int | None] = []
    for name in ("major", "minor", "patch"):
        value = match.group(name)
        # Everything after a wildcard is a wildcard too ("1.x.3" → "1.x.x")
        if value is None or value in "xX*" or (parts and parts[-1] is None):
            parts.append(None)
        else:
            parts.append(int(value))
    major, minor, patch = parts
    prerelease = match.group("pre") if patch is not None else None
    return Partial(major, minor, patch, prerelease)


def _version(major: int, minor: int, patch: int, prerelease: str | None = None) -> semver.Version:
    return semver.Version(major, minor, patch, prerelease=prerelease)


def _floor(p: Partial) -> semver.Version:
    """Lowest version the partial can stand for."""
    return _version(p.major or 0, p.minor or 0, p.patch or 0, p.prerelease)


def _tilde(p: Partial) -> list[Comparator]:
    if p.major is None:
        return [ANY]
    if p.minor is None:
        ceiling = _version(p.major + 1, 0, 0, "0")
    else:
        ceiling = _version(p.major, p.minor + 1, 0, "0")
    return [Comparator(">=", _floor(p)), Comparator("<", ceiling)]


def _caret(p: Partial) -> list[Comparator]:
    if p.major is None:
        return [ANY]
    if p.minor is None or p.major != 0:
        ceiling = _version(p.major + 1, 0, 0, "0")
    elif p.patch is None or p.minor != 0:
        ceiling = _version(0, p.minor + 1, 0, "0")
    else:
        ceiling = _version(0, 0, p.patch + 1, "0")
    return [Comparator(">=", _floor(p)), Comparator("<", ceiling)]


def _primitive(op: str, p: Partial) -> list[Comparator]:
    if op == "=":
        op = ""
    if p.complete:
        return [Comparator(op, _floor(p))]
    if p.major is None:
        return [NOTHING] if op in ("<", ">") else [ANY]

    major, minor = p.major, p.minor
    if op == ">":
        # >1 → >=2.0.0, >1.2 → >=1.3.0
        if minor is None:
            return [Comparator(">=", _version(major + 1, 0, 0))]
        return [Comparator(">=", _version(major, minor + 1, 0))]
    if op == "<=":
        # <=1 → <2.0.0-0, <=1.2 → <1.3.0-0
        if minor is None:
            return [Comparator("<", _version(major + 1, 0, 0, "0"))]
        return [Comparator("<", _version(major, minor + 1, 0, "0"))]
    if op == "<":
        return [Comparator("<", _version(major, minor or 0, 0, "0"))]
    if op == ">=":
        return [Comparator(">=", _floor(p))]
    # Bare partial: 1 → 1.x, 1.2 → 1.2.x
    return _tilde(p)


def _hyphen(low: Partial, high: Partial) -> list[Comparator]:
    comparators: list[Comparator] = []
    if low.major is not None:
        comparators.append(Comparator(">=", _floor(low)))
    if high.major is None:
        pass
    elif high.complete:
        comparators.append(Comparator("<=", _floor(high)))
    elif high.minor is None:
        comparators.append(Comparator("<", _version(high.major + 1, 0, 0, "0")))
    else:
        comparators.append(Comparator("<", _version(high.major, high.minor + 1, 0, "0")))
    return comparators or [ANY]


def _parse_token(token: str) -> list[Comparator]:
    match = _TOKEN_RE.match(token)
    assert match is not None  # the pattern accepts any string
    op = match.group("op") or ""
    partial = _parse_partial(match.group("version"))
    if op in ("~", "~>"):
        return _tilde(partial)
    if op == "^":
        return _caret(partial)
    return _primitive(op, partial)


def _parse_set(text: str) -> ComparatorSet:
    text = text.strip()
    hyphen = _HYPHEN_RE.match(text)
    if hyphen:
        return tuple(
            _hyphen(_parse_partial(hyphen.group("low")), _parse_partial(hyphen.group("high")))
        )

    text = _OPERATOR_SPACE_RE.sub(r"\1", text)
    comparators: list[Comparator] = []
    for token in text.split():
        comparators.extend(_parse_token(token))
    return tuple(comparators) or (ANY,)


@lru_cache(maxsize=512)
def parse_range(range_str: str) -> tuple[ComparatorSet, ...]:
    """Parse a range into its union of comparator sets.

    Raises:
        InvalidRangeError: If any part of the range is malformed.
    """
    if not isinstance(range_str, str):
        raise InvalidRangeError(f"Invalid range: {range_str!r}")
    return tuple(_parse_set(part) for part in range_str.split("||"))


def valid_range(range_str: str | None) -> bool:
    """Return True if the string parses as a range."""
    if range_str is None:
        return False
    try:
        parse_range(range_str)
    except InvalidRangeError:
        return False
    return True


def _set_allows(comparators: ComparatorSet, version: semver.Version) -> bool:
    if not all(c.test(version) for c in comparators):
        return False
    if not version.prerelease:
        return True
    # A prerelease only satisfies a set that opts into prereleases of the
    # same major.minor.patch ("^1.2.3-beta.1" allows "1.2.3-beta.4")
    release = version.to_tuple()[:3]
    return any(
        c.version is not None
        and c.version.prerelease
        and c.version.to_tuple()[:3] == release
        for c in comparators
    )


def satisfies(version: str, range_str: str) -> bool:
    """Return True if the version satisfies the range.

    Raises:
        InvalidVersionError: If the version cannot be parsed.
        InvalidRangeError: If the range cannot be parsed.
    """
    v = parse_version(version)
    return any(_set_allows(s, v) for s in parse_range(range_str))


def ltr(version: str, range_str: str) -> bool:
    """Return True if the version is lower than every version in the range.

    A version inside the range, or one that falls between two parts of a
    union, is not lower than the range.

    Raises:
        InvalidVersionError: If the version cannot be parsed.
        InvalidRangeError: If the range cannot be parsed.
    """
    v = parse_version(version)
    if satisfies(version, range_str):
        return False

    for comparators in parse_range(range_str):
        bounds = [
            Comparator(">=", _version(0, 0, 0)) if c.version is None else c
            for c in comparators
        ]
        lowest = min(bounds, key=lambda c: c.version)
        highest = max(bounds, key=lambda c: c.version)

        # No lower bound: nothing sits below this set
        if lowest.operator in ("<", "<="):
            return False
        if highest.operator in ("", "<") and v.compare(highest.version) >= 0:
            return False
        if highest.operator == "<=" and v.compare(highest.version) > 0:
            return False
    return True


class SemverRanges:
    """Default RangeMatcher: npm range semantics over semver.Version."""

    def valid_range(self, range_str: str | None) -> bool:
        return valid_range(range_str)

    def satisfies(self, version: str, range_str: str) -> bool:
        return satisfies(version, range_str)

    def ltr(self, version: str, range_str: str) -> bool:
        return ltr(version, range_str)


__all__ = [
    "Comparator",
    "InvalidRangeError",
    "InvalidVersionError",
    "RangeMatcher",
    "SemverRanges",
    "ltr",
    "parse_range",
    "satisfies",
    "valid_range",
]
