"""
Ticket Number Extractor - Extracts confirmation / ticket identifiers
"""
from typing import Optional

from .base_extractor import FieldExtractor
from ..shared_utils.strategy_chain import extract_after_prefix

# Identifiers carry at least one digit, which keeps words like "ticket" out
ALNUM_ID = r"(?=[a-z]*\d)[a-z0-9]"


class TicketNumberExtractor(FieldExtractor):
    """Extracts the ticket number."""

    field_name = "ticket_number"

    TICKET_PREFIXES = [
        'ticket #', 'ticket no', 'ticket number', 'confirmation #', 'confirmation no',
        'confirmation number', 'order #', 'order no', 'reference #', 'ref #',
        'ticket:', 'receipt #',
    ]
    PREFIX_DELIMITERS = [',', '|', '-', ' ']

    VALID_FORMATS = [
        r"\d{6,15}",
        rf"{ALNUM_ID}{{6,15}}",
        r"[\d-]{8,17}",
    ]

    COMMON_FORMATS = [
        r"\b(\d{3,4}-\d{3,4}-\d{3,4})\b",
        rf"\b({ALNUM_ID}{{6,12}})\b",
    ]

    CONTEXT_WORDS = ['ticket', 'confirmation', 'order', 'reference', 'transaction']
    BARCODE_WORDS = ['barcode', 'bar code', 'qr code', 'scan']

    def get_strategies(self):
        return [self._from_prefix, self._from_common_formats, self._from_barcode_context]

    def is_valid_ticket_number(self, value: str) -> bool:
        return bool(value.strip()) and self.pattern_matcher.matches_any(value, self.VALID_FORMATS)

    def _from_prefix(self, text: str) -> Optional[str]:
        for prefix in self.TICKET_PREFIXES:
            # Skip the ":" or "." after the label and require four characters before any delimiter
            value = extract_after_prefix(text, prefix, self.PREFIX_DELIMITERS, fallback_length=20,
                                         skip_chars=":. ", delimiter_offset=4)
            if value and self.is_valid_ticket_number(value):
                return self.clean_text(value).upper()
        return None

    def _from_common_formats(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if not any(word in line for word in self.CONTEXT_WORDS):
                continue
            match = self.pattern_matcher.first_match(line, self.COMMON_FORMATS)
            if match:
                return self.clean_text(match.group(1)).upper()
        return None

    def _from_barcode_context(self, text: str) -> Optional[str]:
        lines = self._lines(text)
        for index, line in enumerate(lines):
            if not any(word in line for word in self.BARCODE_WORDS):
                continue
            # The barcode line plus two lines either side
            for nearby in lines[max(0, index - 2):index + 3]:
                match = self.pattern_matcher.search_pattern(nearby, rf"\b({ALNUM_ID}{{6,15}})\b")
                if match:
                    return self.clean_text(match.group(1)).upper()
        return None
