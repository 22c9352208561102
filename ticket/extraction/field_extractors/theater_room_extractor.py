"""
Theater Room Extractor - Extracts auditorium / screen designation
"""
import re
from typing import Optional

from .base_extractor import FieldExtractor

ROOM_WORDS = ('auditorium', 'theater', 'theatre', 'screen', 'cinema', 'room')
PREMIUM_FORMATS = r"\b(imax|rpx|vip|xd|prime|dolby|d-box)\b"


def format_room(value: str) -> str:
    """Numbers and single letters become "Theater N", anything else is title-cased."""
    value = value.strip()
    if re.fullmatch(r"\d+[a-z]?|[a-z]", value, re.IGNORECASE):
        return f"Theater {value.upper()}"
    if re.fullmatch(PREMIUM_FORMATS, value, re.IGNORECASE):
        return value.upper()
    return value.title()


class TheaterRoomExtractor(FieldExtractor):
    """Extracts the theater room ("Theater 4", "Theater B", "IMAX")."""

    field_name = "theater_room"

    ROOM_PREFIXES = ['room:', 'theater:', 'theatre:', 'auditorium:', 'cinema:', 'screen:']
    PREFIX_DELIMITERS = [',', '|', '-', 'seat:', 'time:']

    AUDITORIUM_PATTERNS = [
        r"\bscr(?:een)?\s*#?\s*(\d+[a-z]?)\b",
        r"\baud(?:itorium)?\s*#?\s*(\d+[a-z]?)\b",
        r"\btheat(?:er|re)?\s*#?\s*(\d+[a-z]?)\b",
        r"\broom\s*#?\s*(\d+[a-z]?)\b",
        r"\b(?:theater|theatre|auditorium|screen|room)\s+([a-z])\b",
    ]

    def get_strategies(self):
        return [self._from_prefix, self._from_auditorium_pattern, self._from_context]

    def _from_prefix(self, text: str) -> Optional[str]:
        value = self._extract_with_prefixes(
            text, self.ROOM_PREFIXES, self.PREFIX_DELIMITERS,
            validator=lambda v: 0 < len(v) < 20)
        return format_room(value) if value else None

    def _from_auditorium_pattern(self, text: str) -> Optional[str]:
        match = self.pattern_matcher.first_match(text, self.AUDITORIUM_PATTERNS)
        if match:
            return format_room(match.group(1))

        # Standalone numbers such as "#7" on a line naming the room
        for line in self._lines(text):
            if not any(word in line for word in ROOM_WORDS):
                continue
            number = self.pattern_matcher.search_pattern(line, r"(?:#\s*)?\b(\d+)\b")
            if number:
                return f"Theater {number.group(1)}"
        return None

    def _from_context(self, text: str) -> Optional[str]:
        lines = self._lines(text)
        for line in lines:
            if any(word in line for word in ROOM_WORDS):
                trailing = self.pattern_matcher.search_pattern(line, r"\s([a-z]|[0-9]+[a-z]?)\s*$")
                if trailing:
                    return f"Theater {trailing.group(1).upper()}"

        for line in lines:
            premium = self.pattern_matcher.search_pattern(line, PREMIUM_FORMATS)
            if premium:
                return premium.group(1).upper()
        return None
