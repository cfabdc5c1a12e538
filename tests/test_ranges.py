"""Tests for stale_branches.ranges."""

from __future__ import annotations

import pytest

from stale_branches.ranges import (
    InvalidRangeError,
    SemverRanges,
    ltr,
    parse_range,
    satisfies,
    valid_range,
)
from stale_branches.versions import InvalidVersionError


class TestValidRange:
    @pytest.mark.parametrize(
        "range_str",
        ["^2.0.0", "~1.4", "1.x", "*", "", ">= 1.2.3 < 2", "1.2.3 - 2.3.4", "^1 || ^2", "v1.0.0"],
    )
    def test_valid(self, range_str: str) -> None:
        assert valid_range(range_str)

    @pytest.mark.parametrize(
        "range_str",
        ["not-a-version", "latest", "git+https://github.com/a/b.git", "1.2.3.4", "^x.y.z!"],
    )
    def test_invalid(self, range_str: str) -> None:
        assert not valid_range(range_str)

    def test_none_is_invalid(self) -> None:
        assert not valid_range(None)

    def test_parse_range_raises(self) -> None:
        with pytest.raises(InvalidRangeError):
            parse_range("latest")


class TestSatisfies:
    @pytest.mark.parametrize(
        ("version", "range_str", "expected"),
        [
            ("2.3.0", "^2.0.0", True),
            ("1.5.0", "^2.0.0", False),
            ("3.0.0", "^2.0.0", False),
            ("0.2.9", "^0.2.3", True),
            ("0.3.0", "^0.2.3", False),
            ("0.0.3", "^0.0.3", True),
            ("0.0.4", "^0.0.3", False),
            ("1.4.9", "~1.4", True),
            ("1.5.0", "~1.4", False),
            ("1.9.0", "~1", True),
            ("1.2.9", "1.2.x", True),
            ("1.3.0", "1.2.x", False),
            ("5.0.0", "*", True),
            ("5.0.0", "", True),
            ("1.2.3", "1.2.3", True),
            ("1.2.4", "=1.2.3", False),
            ("2.0.0", ">1", True),
            ("1.9.9", ">1", False),
            ("1.9.9", "<=1", True),
            ("2.0.0", "<=1", False),
            ("1.5.0", ">= 1.2.3 < 2", True),
            ("2.3.4", "1.2.3 - 2.3.4", True),
            ("2.3.5", "1.2.3 - 2.3.4", False),
            ("2.9.0", "1.2.3 - 2", True),
            ("1.5.0", "^1 || ^3", True),
            ("2.5.0", "^1 || ^3", False),
            ("3.1.0", "^1 || ^3", True),
        ],
    )
    def test_satisfies(self, version: str, range_str: str, expected: bool) -> None:
        assert satisfies(version, range_str) is expected

    def test_prerelease_excluded_from_plain_range(self) -> None:
        assert not satisfies("2.1.0-beta.1", "^2.0.0")

    def test_prerelease_allowed_on_same_release(self) -> None:
        assert satisfies("2.0.0-beta.4", "^2.0.0-beta.1")
        assert not satisfies("2.0.0-alpha.1", "^2.0.0-beta.1")

    def test_invalid_version_raises(self) -> None:
        with pytest.raises(InvalidVersionError):
            satisfies("banana", "^1.0.0")

    def test_invalid_range_raises(self) -> None:
        with pytest.raises(InvalidRangeError):
            satisfies("1.0.0", "latest")


class TestLtr:
    @pytest.mark.parametrize(
        ("version", "range_str", "expected"),
        [
            ("1.5.0", "^2.0.0", True),
            ("2.3.0", "^2.0.0", False),
            ("3.0.0", "^2.0.0", False),
            ("1.0.0", ">=2.0.0", True),
            ("1.0.0", "<2.0.0", False),
            ("1.0.0", "2.0.0", True),
            ("2.0.1", "2.0.0", False),
            ("0.1.0", "1.2.3 - 2.3.4", True),
            ("3.0.0", "1.2.3 - 2.3.4", False),
            ("1.0.0", "*", False),
            ("1.0.0", "^2 || ^3", True),
            ("2.5.0", "~2.0.0 || ^3", False),
        ],
    )
    def test_ltr(self, version: str, range_str: str, expected: bool) -> None:
        assert ltr(version, range_str) is expected

    def test_invalid_version_raises(self) -> None:
        with pytest.raises(InvalidVersionError):
            ltr("", "^1.0.0")


class TestSemverRanges:
    def test_delegates(self) -> None:
        ranges = SemverRanges()
        assert ranges.valid_range("^1.0.0")
        assert not ranges.valid_range("nope")
        assert ranges.satisfies("1.2.0", "^1.0.0")
        assert ranges.ltr("0.9.0", "^1.0.0")
