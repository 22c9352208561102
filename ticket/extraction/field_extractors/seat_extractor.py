"""
Seat Extractor - Extracts seat assignment from ticket text
"""
from typing import Optional

from .base_extractor import FieldExtractor


class SeatExtractor(FieldExtractor):
    """Extracts the seat, formatted as "Row X, Seat Y" or "X-Y"."""

    field_name = "seat_number"

    SEAT_PREFIXES = ['seat:', 'seat #:', 'seat no:', 'seat number:', 'seating:']
    PREFIX_DELIMITERS = [',', '|', '-', 'row:', 'section:']

    ROW_SEAT_PATTERNS = [
        r"row\s+([a-z0-9]+)[,\s]+seat\s+([a-z0-9]+)",
        r"row[:\s]+([a-z0-9]+)[,\s]+([a-z0-9]+)",
        r"\b([a-z])[:\-]\s*(\d{1,3})\b",  # "a-12" or "a: 12"
    ]

    def get_strategies(self):
        return [self._from_prefix, self._from_row_seat_pattern, self._from_common_formats]

    def _from_prefix(self, text: str) -> Optional[str]:
        value = self._extract_with_prefixes(text, self.SEAT_PREFIXES, self.PREFIX_DELIMITERS)
        return value.upper() if value else None

    def _from_row_seat_pattern(self, text: str) -> Optional[str]:
        for pattern in self.ROW_SEAT_PATTERNS:
            match = self.pattern_matcher.search_pattern(text, pattern)
            if not match:
                continue
            row, seat = match.group(1).upper(), match.group(2).upper()
            if 'row' in match.group(0):
                return f"Row {row}, Seat {seat}"
            return f"{row}-{seat}"
        return None

    def _from_common_formats(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if not any(word in line for word in ('seat', 'row', 'section')):
                continue
            # Letter then number (a12)
            match = self.pattern_matcher.search_pattern(line, r"\b([a-z])[- ]?(\d{1,3})\b")
            if match:
                return f"{match.group(1).upper()}-{match.group(2)}"
            # Number then letter (12a)
            match = self.pattern_matcher.search_pattern(line, r"\b(\d{1,3})[- ]?([a-z])\b")
            if match:
                return f"{match.group(1)}-{match.group(2).upper()}"
        return None
