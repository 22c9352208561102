"""
Pattern Matcher - Handles regex pattern matching for extraction
"""
import re
from typing import List, Optional, Match, Pattern, Iterable


class PatternMatcher:
    """Handles regex pattern matching operations for ticket extraction."""

    def __init__(self):
        self.cache = {}  # Cache compiled patterns for performance

    def compile_pattern(self, pattern_str: str, flags: int = re.IGNORECASE) -> Pattern:
        """Compile and cache regex pattern."""
        cache_key = f"{pattern_str}_{flags}"
        if cache_key not in self.cache:
            self.cache[cache_key] = re.compile(pattern_str, flags)
        return self.cache[cache_key]

    def search_pattern(self, text: str, pattern_str: str, flags: int = re.IGNORECASE) -> Optional[Match]:
        """Search for pattern in text (first match)."""
        pattern = self.compile_pattern(pattern_str, flags)
        return pattern.search(text)

    def full_match(self, text: str, pattern_str: str, flags: int = re.IGNORECASE) -> bool:
        """True when the whole of text matches the pattern."""
        pattern = self.compile_pattern(pattern_str, flags)
        return pattern.fullmatch(text) is not None

    def findall_matches(self, text: str, pattern_str: str, flags: int = re.IGNORECASE) -> List[str]:
        """All non-overlapping full-match strings (group 0) for a pattern."""
        pattern = self.compile_pattern(pattern_str, flags)
        return [m.group(0) for m in pattern.finditer(text)]

    def first_match(self, text: str, pattern_list: Iterable[str],
                    flags: int = re.IGNORECASE) -> Optional[Match]:
        """
        Try each pattern in order and return the first match.

        Args:
            text: Text to search
            pattern_list: Regex pattern strings in priority order
            flags: Regex flags

        Returns:
            Match object of the first pattern that hits, or None
        """
        for pattern_str in pattern_list:
            match = self.search_pattern(text, pattern_str, flags)
            if match:
                return match
        return None

    def matches_any(self, text: str, pattern_list: Iterable[str], flags: int = re.IGNORECASE) -> bool:
        """True if text fully matches any of the validation patterns."""
        cleaned = text.strip()
        return any(self.full_match(cleaned, p, flags) for p in pattern_list)


_shared_matcher = None


def get_pattern_matcher() -> PatternMatcher:
    """Process-wide matcher so every extractor shares one compiled-pattern cache."""
    global _shared_matcher
    if _shared_matcher is None:
        _shared_matcher = PatternMatcher()
    return _shared_matcher
