"""
Ticket Type Extractor - Extracts the admission category (Adult, Child, Senior...)
"""
from typing import Optional

from .base_extractor import FieldExtractor

TICKET_TYPES = {
    'adult': 'Adult',
    'child': 'Child',
    'kid': 'Child',
    'senior': 'Senior',
    'student': 'Student',
    'military': 'Military',
    'matinee': 'Matinee',
    'member': 'Member',
    'general admission': 'General Admission',
    'complimentary': 'Complimentary',
}


class TicketTypeExtractor(FieldExtractor):
    """Extracts the ticket type."""

    field_name = "ticket_type"

    TYPE_PREFIXES = ['ticket type:', 'admission type:', 'type:', 'category:']

    def get_strategies(self):
        return [self._from_prefix, self._from_known_types]

    def _from_prefix(self, text: str) -> Optional[str]:
        value = self._extract_with_prefixes(text, self.TYPE_PREFIXES, fallback_length=20)
        if not value:
            return None
        return self._standard_type(value) or value.title()

    def _standard_type(self, value: str) -> Optional[str]:
        for key, label in TICKET_TYPES.items():
            if self.pattern_matcher.search_pattern(value, rf"\b{key}s?\b"):
                return label
        return None

    def _from_known_types(self, text: str) -> Optional[str]:
        # Type names next to a price or admit line are the most reliable
        lines = self._lines(text)
        ranked = sorted(lines, key=lambda line: not any(
            marker in line for marker in ('$', 'admit', 'admission', 'ticket')))
        for line in ranked:
            label = self._standard_type(line)
            if label:
                return label
        return None
