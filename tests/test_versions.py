"""
Version expression tests

Tests dotted-version parsing and comparison, and the shapes produced by
versionEntry_parse for each lifecycle entry form.
"""

import pytest

from docscheck.lib.versions import (
    bound_compare,
    entry_isImplicit,
    entry_isValid,
    version_format,
    version_parse,
    versionEntry_parse,
    versions_compare,
)
from docscheck.models import Lifecycle


class TestVersionParse:
    """Test dotted version parsing"""

    @pytest.mark.parametrize("text,expected", [
        ("9", (9,)),
        ("9.1", (9, 1)),
        ("8.17.2", (8, 17, 2)),
        ("10.0", (10, 0)),
    ])
    def test_valid(self, text, expected):
        assert version_parse(text) == expected

    @pytest.mark.parametrize("text", ["", None, "9.x", "9..1", "v9", "9.1-beta", "-1"])
    def test_invalid(self, text):
        assert version_parse(text) is None

    def test_format(self):
        assert version_format((9, 1, 0)) == "9.1.0"


class TestVersionCompare:
    """Test component-wise comparison"""

    def test_trailing_zero_is_equal(self):
        assert versions_compare((9, 1), (9, 1, 0)) == 0

    def test_greater_minor_beats_patch(self):
        assert versions_compare((9, 2), (9, 1, 5)) == 1

    def test_numeric_not_lexical(self):
        assert versions_compare((9, 10), (9, 9)) == 1
        assert versions_compare((9, 9), (9, 10)) == -1

    def test_unbounded(self):
        """A None bound is above everything"""
        assert bound_compare((999, 999), None) == -1
        assert bound_compare((9, 1), (9, 0)) == 1


class TestEntryParse:
    """Test each entry shape"""

    def test_unbound_plus(self):
        entry = versionEntry_parse("ga 9.1+")

        assert entry.lifecycle is Lifecycle.GA
        assert entry.is_unbound
        assert entry.start_version == (9, 1)
        assert entry.end_version is None
        assert not entry.is_range
        assert not entry.is_exact

    def test_exact(self):
        entry = versionEntry_parse("removed =9.2")

        assert entry.lifecycle is Lifecycle.REMOVED
        assert entry.is_exact
        assert entry.start_version == (9, 2)
        assert entry.end_version == (9, 2)
        assert not entry.is_unbound

    def test_range(self):
        entry = versionEntry_parse("preview 9.0-9.1")

        assert entry.is_range
        assert entry.start_version == (9, 0)
        assert entry.end_version == (9, 1)
        assert entry.version_spec == "9.0-9.1"

    def test_implicit_is_unbound(self):
        entry = versionEntry_parse("beta 9.1")
        assert entry.is_unbound
        assert entry.start_version == (9, 1)

    @pytest.mark.parametrize("text", ["ga", "ga all"])
    def test_all_versions(self, text):
        """Bare lifecycle and `all` have no bounds"""
        entry = versionEntry_parse(text)

        assert entry.is_unbound
        assert entry.start_version is None
        assert entry.end_version is None

    def test_surrounding_whitespace(self):
        entry = versionEntry_parse("  deprecated 8.0+ ")
        assert entry.original_entry == "deprecated 8.0+"
        assert entry.lifecycle is Lifecycle.DEPRECATED

    @pytest.mark.parametrize("text", ["", "   ", "available 9.1", "GA 9.1", "9.1"])
    def test_not_an_entry(self, text):
        assert versionEntry_parse(text) is None

    def test_half_range_is_not_a_range(self):
        """One empty side falls through to the unbound shape"""
        entry = versionEntry_parse("ga 9.0-")
        assert not entry.is_range
        assert entry.start_version is None


class TestEntryGrammar:
    """Test syntax checks used before semantic analysis"""

    @pytest.mark.parametrize("text", [
        "", "ga", "beta all", "ga 9.1", "ga 9.1+", "removed =9.2",
        "preview 9.0-9.1", "discontinued 8.17.2",
    ])
    def test_valid(self, text):
        assert entry_isValid(text)

    @pytest.mark.parametrize("text", [
        "all", "ga 9.x", "ga 9.1-", "available", "ga =9.1+", "ga  9.1 extra",
    ])
    def test_invalid(self, text):
        assert not entry_isValid(text)

    def test_implicit(self):
        assert entry_isImplicit("ga 9.1")
        assert not entry_isImplicit("ga 9.1+")
        assert not entry_isImplicit("ga =9.1")
        assert not entry_isImplicit("ga 9.0-9.1")
        assert not entry_isImplicit("ga")
