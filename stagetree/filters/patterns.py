#!/usr/bin/env python3
r"""Name pattern matching for virtual tree filtering.

Glob dialect: whole-name fnmatch-style wildcards (``*``, ``?``, ``[seq]``),
case-insensitive by default. There is no substring matching: ``excluded``
matches only a node named ``excluded``; use ``excluded*`` or ``*excluded*``
for prefix or substring matches. Patterns are matched against a single node
name, never a path, so ``*`` and ``**`` behave the same.

Regex patterns use search semantics and may be added explicitly or through a
``regex:`` prefix.

Example:
    >>> matcher = PatternMatcher()
    >>> matcher.add_glob_pattern("*.tmp")
    >>> matcher.matches("Build.TMP")
    True
"""

import fnmatch
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Pattern, Union

REGEX_PREFIX = "regex:"


class PatternType(Enum):
    """Pattern matching type."""

    GLOB = "glob"  # Shell-style wildcards (*.tmp, excluded*)
    REGEX = "regex"  # Regular expressions


@dataclass
class PatternEntry:
    """A single pattern entry with metadata."""

    pattern: str
    pattern_type: PatternType
    compiled: Optional[Pattern] = None
    case_sensitive: bool = False
    name: Optional[str] = None


class PatternMatcher:
    """Matches node names against glob and regex patterns (OR logic)."""

    def __init__(self, case_sensitive: bool = False):
        """Initialize pattern matcher.

        Args:
            case_sensitive: Whether patterns are case-sensitive
        """
        self._patterns: List[PatternEntry] = []
        self._case_sensitive = case_sensitive

    @classmethod
    def from_pattern(
        cls, pattern: Union[str, "PatternMatcher"], case_sensitive: bool = False
    ) -> "PatternMatcher":
        """Coerce a pattern string (or an existing matcher) into a matcher.

        Strings prefixed with ``regex:`` become regex patterns, anything else
        is a glob.
        """
        if isinstance(pattern, PatternMatcher):
            return pattern
        matcher = cls(case_sensitive=case_sensitive)
        matcher.add_pattern(pattern)
        return matcher

    def add_pattern(self, pattern: str, name: Optional[str] = None) -> None:
        """Add a glob pattern, or a regex pattern if prefixed with ``regex:``."""
        if pattern.startswith(REGEX_PREFIX):
            self.add_regex_pattern(pattern[len(REGEX_PREFIX):], name)
        else:
            self.add_glob_pattern(pattern, name)

    def add_glob_pattern(
        self, pattern: str, name: Optional[str] = None, case_sensitive: Optional[bool] = None
    ) -> None:
        """Add glob pattern.

        Args:
            pattern: Glob pattern (e.g., "*.tmp", "excluded*")
            name: Optional name for this pattern
            case_sensitive: Override default case sensitivity
        """
        is_case_sensitive = case_sensitive if case_sensitive is not None else self._case_sensitive
        flags = 0 if is_case_sensitive else re.IGNORECASE
        compiled = re.compile(fnmatch.translate(pattern), flags)

        self._patterns.append(
            PatternEntry(
                pattern=pattern,
                pattern_type=PatternType.GLOB,
                compiled=compiled,
                case_sensitive=is_case_sensitive,
                name=name,
            )
        )

    def add_regex_pattern(
        self, pattern: str, name: Optional[str] = None, case_sensitive: Optional[bool] = None
    ) -> None:
        """Add regex pattern.

        Args:
            pattern: Regular expression pattern
            name: Optional name for this pattern
            case_sensitive: Override default case sensitivity
        """
        is_case_sensitive = case_sensitive if case_sensitive is not None else self._case_sensitive
        flags = 0 if is_case_sensitive else re.IGNORECASE

        self._patterns.append(
            PatternEntry(
                pattern=pattern,
                pattern_type=PatternType.REGEX,
                compiled=re.compile(pattern, flags),
                case_sensitive=is_case_sensitive,
                name=name,
            )
        )

    def matches(self, name: str) -> bool:
        """Check if a node name matches any pattern."""
        return any(self._matches_entry(name, entry) for entry in self._patterns)

    def _matches_entry(self, name: str, entry: PatternEntry) -> bool:
        if entry.pattern_type == PatternType.GLOB:
            return entry.compiled.match(name) is not None
        return entry.compiled.search(name) is not None

    def get_matching_patterns(self, name: str) -> List[str]:
        """Get all pattern names (or pattern strings) that match the name."""
        return [
            entry.name or entry.pattern
            for entry in self._patterns
            if self._matches_entry(name, entry)
        ]

    def clear(self) -> None:
        """Clear all patterns."""
        self._patterns.clear()

    def remove_pattern(self, name: str) -> bool:
        """Remove pattern by name.

        Returns:
            True if pattern was found and removed
        """
        for i, entry in enumerate(self._patterns):
            if entry.name == name:
                self._patterns.pop(i)
                return True
        return False

    def get_patterns(self) -> List[PatternEntry]:
        """Get all registered patterns (copy)."""
        return self._patterns.copy()

    def __len__(self) -> int:
        return len(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def __repr__(self) -> str:
        patterns = ", ".join(entry.pattern for entry in self._patterns)
        return f"PatternMatcher([{patterns}])"
