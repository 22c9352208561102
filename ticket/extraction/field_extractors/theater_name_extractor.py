"""
Theater Name Extractor - Extracts the venue name from ticket text
"""
import re
from typing import Optional

from .base_extractor import FieldExtractor
from .theater_chain_extractor import (
    TheaterChainExtractor, KNOWN_CHAINS, is_header_footer_content, display_name
)

KNOWN_THEATERS = [
    'amc empire', 'amc loews', 'amc classic', 'regal union square', 'cinemark palace',
    'amc theaters', 'regal cinemas', 'cinemark theatres', 'studio movie grill',
    'harkins premium', 'landmark theaters', 'angelika film center', 'alamo draft house',
    'marquee cinemas', 'showtimes theaters', 'megaplex cinemas', 'stubs theaters',
]

# Venue names commonly printed next to a given chain
CHAIN_THEATER_PATTERNS = {
    'amc': ['empire', 'loews', 'classic', 'dine', 'megaplex', 'studio', 'marquee'],
    'regal': ['union square', 'royal', 'south beach', 'greenacres', 'delray', 'palm beach'],
    'cinemark': ['palace', 'premiere', 'grand', 'plaza', 'prime', 'delray', 'boca'],
    'alamo': ['drafthouse', 'atx', 'village', 'silo', 'ritz', 'cary', 'dallas'],
    'landmark': ['nu art', 'westwood', 'courthouse', 'shelby', 'columbia', 'harvard'],
    'angelika': ['film center', 'ny', 'dallas', 'houston', 'philly', 'atlanta'],
    'showtimes': ['asbury', 'jersey', 'new york', 'los angeles', 'chicago', 'seattle'],
    'harkins': ['premium', 'superstar', 'christie', 'dine', 'deluxe', 'platinum'],
    'studio': ['movie grill', 'cinema', 'theater', 'screen', 'showcase', 'deluxe'],
}


class TheaterNameExtractor(FieldExtractor):
    """Extracts the theater name ("AMC Assembly Row", "Regal Union Square")."""

    field_name = "theater_name"

    LOCATION_PREFIXES = ['location:', 'theater name:', 'cinema name:', 'venue:', 'theater:']
    PREFIX_DELIMITERS = [',', '|', '-', '(', 'show time:', 'date:']

    def __init__(self, chain_extractor: Optional[TheaterChainExtractor] = None, **kwargs):
        super().__init__(**kwargs)
        self.chain_extractor = chain_extractor or TheaterChainExtractor(
            pattern_matcher=self.pattern_matcher, text_cleaner=self.text_cleaner)

    def get_strategies(self):
        return [self._from_known_theaters, self._from_location_prefix,
                self._from_chain_context, self._from_header_lines]

    def _generic_venue(self, line: str) -> Optional[str]:
        """Line naming a theater or cinema, with that word removed."""
        if len(line) >= 50:
            return None
        for word in ('theater', 'cinema'):
            if word in line:
                remainder = self.clean_text(line.replace(word, '', 1))
                # "theater 4" is a room, not a venue
                if len(re.findall(r"[a-z]", remainder)) >= 3:
                    return display_name(remainder)
        return None

    def _from_known_theaters(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if is_header_footer_content(line):
                continue
            for theater in KNOWN_THEATERS:
                if theater in line:
                    return display_name(theater)
            venue = self._generic_venue(line)
            if venue:
                return venue
        return None

    def _from_location_prefix(self, text: str) -> Optional[str]:
        # "theater: 4" labels a room, so venue names need some letters
        value = self._extract_with_prefixes(text, self.LOCATION_PREFIXES, self.PREFIX_DELIMITERS,
                                            fallback_length=50,
                                            validator=lambda v: len(re.findall(r"[a-z]", v)) >= 3)
        return display_name(value) if value else None

    def _from_chain_context(self, text: str) -> Optional[str]:
        chain = self.chain_extractor.find_chain_key(text)
        if not chain:
            return None
        for line in self._lines(text):
            if is_header_footer_content(line):
                continue
            for pattern in CHAIN_THEATER_PATTERNS.get(chain, []):
                if pattern in line:
                    return display_name(f"{chain} {pattern}")
        return None

    def _from_header_lines(self, text: str) -> Optional[str]:
        lines = [line.strip() for line in self._lines(text) if line.strip()]
        for line in lines[:3] + lines[-3:]:
            if is_header_footer_content(line):
                continue
            if any(chain in line for chain in KNOWN_CHAINS):
                return display_name(self.clean_text(line))
        return None
