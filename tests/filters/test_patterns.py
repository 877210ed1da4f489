#!/usr/bin/env python3
"""Tests for the node name PatternMatcher."""

import re

import pytest

from stagetree.filters.patterns import PatternMatcher, PatternType


class TestGlobMatching:
    """Whole-name glob semantics."""

    @pytest.mark.parametrize(
        "pattern, name, expected",
        [
            ("*.tmp", "a.tmp", True),
            ("*.tmp", "a.tmp.bak", False),
            ("excluded*", "excluded_dir", True),
            ("excluded*", "not_excluded", False),
            ("*excluded*", "not_excluded", True),
            ("excluded", "excluded_dir", False),
            ("excluded", "excluded", True),
            ("?.ps1", "a.ps1", True),
            ("?.ps1", "ab.ps1", False),
            ("[ab].txt", "b.txt", True),
            ("[ab].txt", "c.txt", False),
        ],
    )
    def test_glob(self, pattern, name, expected):
        assert PatternMatcher.from_pattern(pattern).matches(name) is expected

    def test_case_insensitive_by_default(self):
        matcher = PatternMatcher.from_pattern("*.tmp")
        assert matcher.matches("BUILD.TMP")

    def test_case_sensitive(self):
        matcher = PatternMatcher.from_pattern("*.tmp", case_sensitive=True)
        assert matcher.matches("a.tmp")
        assert not matcher.matches("A.TMP")

    def test_per_pattern_override(self):
        matcher = PatternMatcher(case_sensitive=False)
        matcher.add_glob_pattern("*.LOG", case_sensitive=True)
        assert matcher.matches("x.LOG")
        assert not matcher.matches("x.log")


class TestRegexMatching:
    """Regex patterns use search semantics."""

    def test_prefix(self):
        matcher = PatternMatcher.from_pattern(r"regex:^\d{4}-")
        assert matcher.get_patterns()[0].pattern_type == PatternType.REGEX
        assert matcher.matches("2024-report.txt")
        assert not matcher.matches("report-2024.txt")

    def test_search_not_anchored(self):
        matcher = PatternMatcher()
        matcher.add_regex_pattern("tmp")
        assert matcher.matches("my_tmp_file")

    def test_invalid_regex(self):
        with pytest.raises(re.error):
            PatternMatcher.from_pattern("regex:[unclosed")


class TestPatternMatcherManagement:
    """Adding, naming and removing patterns."""

    def test_or_logic(self):
        matcher = PatternMatcher()
        matcher.add_pattern("*.tmp", name="temp")
        matcher.add_pattern("*.bak", name="backup")

        assert matcher.matches("a.bak")
        assert matcher.get_matching_patterns("a.tmp") == ["temp"]
        assert len(matcher) == 2

    def test_unnamed_pattern_reports_itself(self):
        matcher = PatternMatcher.from_pattern("*.tmp")
        assert matcher.get_matching_patterns("x.tmp") == ["*.tmp"]

    def test_remove_pattern(self):
        matcher = PatternMatcher()
        matcher.add_pattern("*.tmp", name="temp")

        assert matcher.remove_pattern("temp") is True
        assert matcher.remove_pattern("temp") is False
        assert not matcher
        assert not matcher.matches("a.tmp")

    def test_clear(self):
        matcher = PatternMatcher.from_pattern("*")
        matcher.clear()
        assert len(matcher) == 0

    def test_from_pattern_passes_matcher_through(self):
        matcher = PatternMatcher.from_pattern("*.tmp")
        assert PatternMatcher.from_pattern(matcher) is matcher

    def test_repr(self):
        assert repr(PatternMatcher.from_pattern("*.tmp")) == "PatternMatcher([*.tmp])"
