"""StageTree Filters - Node name pattern matching."""

from .patterns import PatternEntry, PatternMatcher, PatternType

__all__ = [
    "PatternEntry",
    "PatternMatcher",
    "PatternType",
]
