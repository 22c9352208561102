"""
Price Extractor - Extracts the ticket price from ticket text
"""
from typing import Optional

from .base_extractor import FieldExtractor


class PriceExtractor(FieldExtractor):
    """Extracts the ticket price, keeping its currency symbol."""

    field_name = "price"

    PRICE_PREFIXES = ['price:', 'total:', 'amount:', 'cost:', 'paid:', 'ticket price:']

    VALID_FORMATS = [
        r"[$€£¥]\s*\d+(?:\.\d{2})?",
        r"\d+(?:\.\d{2})?\s*[$€£¥]",
        r"\d+\.\d{2}",
    ]

    CURRENCY_PATTERN = r"(?:[$€£¥]\s*\d+(?:\.\d{2})?)|(?:\d+(?:\.\d{2})?\s*[$€£¥])"
    CONTEXT_WORDS = ['ticket', 'admission', 'total', 'amount', 'payment']

    def get_strategies(self):
        return [self._from_prefix, self._from_currency_symbol, self._from_context]

    def is_valid_price_format(self, value: str) -> bool:
        return self.pattern_matcher.matches_any(value, self.VALID_FORMATS)

    def _from_prefix(self, text: str) -> Optional[str]:
        return self._extract_with_prefixes(text, self.PRICE_PREFIXES,
                                           validator=self.is_valid_price_format)

    def _from_currency_symbol(self, text: str) -> Optional[str]:
        matches = self.pattern_matcher.findall_matches(text, self.CURRENCY_PATTERN)
        if not matches:
            return None
        # Amounts with cents look most like ticket prices
        for match in matches:
            if self.pattern_matcher.search_pattern(match, r"\.\d{2}"):
                return self.clean_text(match)
        return self.clean_text(matches[0])

    def _from_context(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if not any(word in line for word in self.CONTEXT_WORDS):
                continue
            match = self.pattern_matcher.first_match(line, [r"\d+\.\d{2}", r"\$\s*\d+(?:\.\d{2})?"])
            if match:
                return self.clean_text(match.group(0))
        return None
