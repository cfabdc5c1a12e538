"""Version parsing utilities.

Handles conversion between version strings and semver objects, with the
same leniency npm applies to versions found in branch documents and
manifests (e.g., "v1.2.3" → "1.2.3").
"""

from __future__ import annotations

import semver


class InvalidVersionError(ValueError):
    """Raised when a string cannot be read as a semantic version."""


def clean_version(version_str: str) -> str:
    """Strip surrounding whitespace and a single leading "v".

    Anything else (e.g. "=1.2.3", "vv1.2.3") is left for parsing to reject,
    as npm does for strict versions.

    Examples:
        " v1.2.3 " → "1.2.3"
    """
    version_str = version_str.strip()
    return version_str[1:] if version_str.startswith("v") else version_str


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Unlike comparator operands inside a range, versions must be complete
    (major.minor.patch); prerelease and build metadata are supported.

    Raises:
        InvalidVersionError: If the string is not a valid version.
    """
    if not isinstance(version_str, str):
        raise InvalidVersionError(f"Invalid version: {version_str!r}")
    try:
        return semver.Version.parse(clean_version(version_str))
    except ValueError as exc:
        raise InvalidVersionError(f"Invalid version: {version_str!r}") from exc


def is_valid_version(version_str: str) -> bool:
    """Return True if the string parses as a complete version."""
    try:
        parse_version(version_str)
    except InvalidVersionError:
        return False
    return True
