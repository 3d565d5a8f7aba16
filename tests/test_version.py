"""Tests for bundleconsole.core.version."""

from __future__ import annotations

import pytest

from bundleconsole.core.exceptions import VersionFormatError
from bundleconsole.core.version import EMPTY_VERSION, Version, VersionRange


class TestVersion:
    """Tests for Version parsing and ordering."""

    def test_missing_parts_default_to_zero(self):
        assert Version.parse("1") == Version(1, 0, 0)
        assert Version.parse("1.2") == Version(1, 2, 0)

    def test_canonical_string(self):
        assert str(Version.parse("1.2")) == "1.2.0"
        assert str(Version.parse("1.2.3.RC1")) == "1.2.3.RC1"

    def test_empty_is_zero_version(self):
        assert Version.parse("") == EMPTY_VERSION
        assert Version.parse(None) == EMPTY_VERSION
        assert str(EMPTY_VERSION) == "0.0.0"

    def test_ordering_is_numeric_then_qualifier(self):
        assert Version.parse("1.10") > Version.parse("1.9")
        assert Version.parse("1.0.0.b") > Version.parse("1.0.0.a")
        assert Version.parse("1.0.0") < Version.parse("1.0.0.a")

    @pytest.mark.parametrize("text", ["a.b", "1.-2", "1..2", "1.0.0.bad qualifier"])
    def test_rejects_malformed(self, text):
        with pytest.raises(VersionFormatError):
            Version.parse(text)

    def test_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Version.parse("x")


class TestVersionRange:
    """Tests for VersionRange parsing and containment."""

    def test_bare_version_is_open_ended(self):
        r = VersionRange.parse("1.2")
        assert r.contains("1.2.0")
        assert r.contains("99.0")
        assert not r.contains("1.1.9")
        assert str(r) == "1.2.0"

    def test_half_open_interval(self):
        r = VersionRange.parse("[1.0,2.0)")
        assert "1.0" in r
        assert "1.9.9" in r
        assert "2.0" not in r
        assert str(r) == "[1.0.0,2.0.0)"

    def test_exclusive_floor_inclusive_ceiling(self):
        r = VersionRange.parse("(1.0,2.0]")
        assert not r.contains("1.0")
        assert r.contains("2.0")

    def test_default_accepts_everything(self):
        r = VersionRange.parse(None)
        assert r.floor == EMPTY_VERSION
        assert r.contains("0.0.0")

    @pytest.mark.parametrize(
        "text",
        ["[1.0", "[1.0]", "(a,b)", "[1.0,)", "[,2.0)", "[ , ]", "[2.0,1.0]", "(1.0.1,1.0.0)"],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(VersionFormatError):
            VersionRange.parse(text)

    def test_single_version_interval(self):
        r = VersionRange.parse("[1.0,1.0]")
        assert r.contains("1.0.0")
        assert not r.contains("1.0.0.a")
