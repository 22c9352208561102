"""
Theater Chain Extractor - Identifies the cinema chain operating the venue
"""
import string
from typing import Optional

from .base_extractor import FieldExtractor

KNOWN_CHAINS = [
    'amc', 'regal', 'cinemark', 'fandango', 'alamo', 'drafthouse',
    'marquee', 'harkins', 'studio', 'showtimes', 'landmark', 'angelika',
]

CHAIN_DISPLAY_NAMES = {
    'amc': 'AMC',
    'regal': 'Regal',
    'cinemark': 'Cinemark',
    'fandango': 'Fandango',
    'alamo': 'Alamo Drafthouse',
    'drafthouse': 'Alamo Drafthouse',
    'marquee': 'Marquee Cinemas',
    'harkins': 'Harkins',
    'studio': 'Studio Movie Grill',
    'showtimes': 'Showtimes',
    'landmark': 'Landmark',
    'angelika': 'Angelika',
}

HEADER_FOOTER_KEYWORDS = [
    'ticket', 'receipt', 'admission', 'cinema', 'theater',
    'welcome', 'thank you', 'enjoy', 'presents', 'admit one',
    'www.', '.com', '.org', 'barcode', 'qr code', 'ticket number',
    'cinema chain', 'theater network', 'location', 'address',
]


def is_header_footer_content(line: str) -> bool:
    """Short boilerplate lines (welcome, admit one, urls) that carry no venue info."""
    line = line.lower()
    return len(line) < 30 and any(keyword in line for keyword in HEADER_FOOTER_KEYWORDS)


def display_name(value: str) -> str:
    """Capitalize words, keeping known acronyms upper-case."""
    words = string.capwords(value).split(" ")
    return " ".join(w.upper() if w.lower() in ('amc', 'imax', 'vip') else w for w in words)


class TheaterChainExtractor(FieldExtractor):
    """Extracts the theater chain."""

    field_name = "theater_chain"

    CHAIN_PREFIXES = ['chain:', 'theater chain:', 'cinema chain:', 'network:', 'brand:']
    PREFIX_DELIMITERS = [',', '|', '-', '(', 'theater name:', 'location:']

    def get_strategies(self):
        return [self._from_known_chains, self._from_prefix, self._from_branded_suffix]

    def find_chain_key(self, text: str) -> Optional[str]:
        """Lower-case key of the first known chain named on a content line."""
        for line in self._lines(text.lower()):
            if is_header_footer_content(line):
                continue
            for chain in KNOWN_CHAINS:
                if chain in line:
                    return chain
        return None

    def _from_known_chains(self, text: str) -> Optional[str]:
        chain = self.find_chain_key(text)
        return CHAIN_DISPLAY_NAMES[chain] if chain else None

    def _from_prefix(self, text: str) -> Optional[str]:
        value = self._extract_with_prefixes(text, self.CHAIN_PREFIXES, self.PREFIX_DELIMITERS,
                                            fallback_length=30)
        return display_name(value) if value else None

    def _from_branded_suffix(self, text: str) -> Optional[str]:
        # Chains brand themselves in the plural: "Coolidge Corner Cinemas", "Showcase Theatres"
        for line in self._lines(text):
            line = line.strip()
            if len(line) >= 40:
                continue
            match = self.pattern_matcher.search_pattern(
                line, r"^([a-z][a-z&' ]+?\s(?:cinemas|theatres|theaters|multiplex|megaplex))\b")
            if match:
                return display_name(match.group(1))
        return None
