"""
Show Time Extractor - Extracts the screening time from ticket text
"""
from typing import Optional

from .base_extractor import FieldExtractor

MERIDIEM = r"(?:am|pm|a\.m\.|p\.m\.)"


class ShowTimeExtractor(FieldExtractor):
    """Extracts the show time (7:30pm, 19:30, 7 pm)."""

    field_name = "show_time"

    TIME_PREFIXES = ['time:', 'showtime:', 'show time:', 'starts:', 'beginning:', 'starting:']

    TIME_PATTERNS = [
        rf"\b(1[0-2]|0?[1-9])[:.](0[0-9]|[1-5][0-9])\s*{MERIDIEM}",
        rf"\b(1[0-2]|0?[1-9])\s*{MERIDIEM}",
        r"\b([01]?[0-9]|2[0-3])[:.](0[0-9]|[1-5][0-9])\b",  # 24-hour
    ]

    VALID_FORMATS = [
        rf"\d{{1,2}}[:.]\d{{2}}\s*{MERIDIEM}?",
        rf"\d{{1,2}}\s*{MERIDIEM}",
    ]

    CONTEXT_WORDS = ['show', 'screening', 'performance', 'showing', 'start']

    def get_strategies(self):
        return [self._from_prefix, self._from_patterns, self._from_context]

    def is_valid_time_format(self, value: str) -> bool:
        return self.pattern_matcher.matches_any(value.lower(), self.VALID_FORMATS)

    def _from_prefix(self, text: str) -> Optional[str]:
        return self._extract_with_prefixes(text, self.TIME_PREFIXES,
                                           validator=self.is_valid_time_format)

    def _from_patterns(self, text: str) -> Optional[str]:
        match = self.pattern_matcher.first_match(text, self.TIME_PATTERNS)
        return self.clean_text(match.group(0)) if match else None

    def _from_context(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if not any(word in line for word in self.CONTEXT_WORDS):
                continue
            match = self.pattern_matcher.first_match(line, [
                rf"\b(1[0-2]|0?[1-9])[:.](0[0-9]|[1-5][0-9])\s*(?:{MERIDIEM}|h)?",
                r"\b([01]?[0-9]|2[0-3])[:.](0[0-9]|[1-5][0-9])\b",
            ])
            if match:
                return self.clean_text(match.group(0))
        return None
