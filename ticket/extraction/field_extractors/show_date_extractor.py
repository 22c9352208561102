"""
Show Date Extractor - Extracts the screening date from ticket text
"""
from typing import Optional

from .base_extractor import FieldExtractor

MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)"
WEEKDAYS = r"(?:mon|tue|wed|thu|fri|sat|sun)"


class ShowDateExtractor(FieldExtractor):
    """Extracts the show date: labelled value, then date patterns, then weekday lines."""

    field_name = "show_date"

    DATE_PREFIXES = ['date:', 'show date:', 'screening date:', 'performance date:', 'showing on:']
    PREFIX_DELIMITERS = [',', '|', '-', 'time:']

    DATE_PATTERNS = [
        # MM/DD/YYYY or MM-DD-YYYY
        r"\b(0?[1-9]|1[0-2])[/\-](0?[1-9]|[12]\d|3[01])[/\-](20\d{2}|\d{2})\b",
        # DD/MM/YYYY or DD-MM-YYYY
        r"\b(0?[1-9]|[12]\d|3[01])[/\-](0?[1-9]|1[0-2])[/\-](20\d{2}|\d{2})\b",
        # Month DD, YYYY
        rf"\b{MONTHS}[a-z]*\.?\s+(0?[1-9]|[12]\d|3[01])(?:st|nd|rd|th)?,?\s*(20\d{{2}})?\b",
        # DD Month YYYY
        rf"\b(0?[1-9]|[12]\d|3[01])(?:st|nd|rd|th)?\s+{MONTHS}[a-z]*\.?\s*,?\s*(20\d{{2}})?\b",
    ]

    VALID_FORMATS = [
        r"\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}",
        rf"{MONTHS}[a-z]*\.?\s+\d{{1,2}}(st|nd|rd|th)?(\s*,?\s*\d{{4}})?",
        rf"\d{{1,2}}(st|nd|rd|th)?\s+{MONTHS}[a-z]*\.?\s*,?\s*(\d{{4}})?",
        rf"{WEEKDAYS}[a-z]*\.?\s+\d{{1,2}}(st|nd|rd|th)?\s+{MONTHS}[a-z]*\.?\s*,?\s*(\d{{4}})?",
    ]

    def get_strategies(self):
        return [self._from_prefix, self._from_patterns, self._from_day_of_week]

    def is_valid_date_format(self, value: str) -> bool:
        return self.pattern_matcher.matches_any(value.lower(), self.VALID_FORMATS)

    def _from_prefix(self, text: str) -> Optional[str]:
        return self._extract_with_prefixes(text, self.DATE_PREFIXES, self.PREFIX_DELIMITERS,
                                           fallback_length=15, validator=self.is_valid_date_format)

    def _from_patterns(self, text: str) -> Optional[str]:
        match = self.pattern_matcher.first_match(text, self.DATE_PATTERNS)
        return self.clean_text(match.group(0)) if match else None

    def _from_day_of_week(self, text: str) -> Optional[str]:
        day_pattern = (rf"\b{WEEKDAYS}[a-z]*\.?\s+(0?[1-9]|[12]\d|3[01])(?:st|nd|rd|th)?\s+"
                       rf"{MONTHS}[a-z]*\.?\s*,?\s*(20\d{{2}})?\b")
        match = self.pattern_matcher.search_pattern(text, day_pattern)
        if match:
            return self.clean_text(match.group(0))

        # Standalone dates on a line that names a weekday
        for line in self._lines(text):
            if not self.pattern_matcher.search_pattern(line, rf"\b{WEEKDAYS}[a-z]*\b"):
                continue
            date_match = self.pattern_matcher.first_match(line, [
                r"\b(0?[1-9]|[12]\d|3[01])[/\-.](0?[1-9]|1[0-2])[/\-.](?:20\d{2}|\d{2})\b",
                rf"\b{MONTHS}[a-z]*\.?\s+(0?[1-9]|[12]\d|3[01])\b",
            ])
            if date_match:
                return self.clean_text(date_match.group(0))
        return None
