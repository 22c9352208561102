"""
Movie Rating Extractor - Extracts the MPA rating (G, PG, PG-13, R, NC-17)
"""
import re
from typing import Optional

from .base_extractor import FieldExtractor

# Longest alternatives first so "pg-13" is not read as "pg"
RATINGS = r"(nc-17|pg-13|pg|g|r)"

RATING_MAP = {
    'G': 'G',
    'PG': 'PG',
    'PG13': 'PG-13',
    'PG-13': 'PG-13',
    'R': 'R',
    'NC17': 'NC-17',
    'NC-17': 'NC-17',
}


def standardize_rating(rating: Optional[str]) -> Optional[str]:
    """Map loose spellings (pg13, (R), nc 17) to the canonical rating or None."""
    if not rating:
        return None
    clean_rating = re.sub(r"[^A-Z0-9-]", "", rating.strip().upper())
    return RATING_MAP.get(clean_rating)


class MovieRatingExtractor(FieldExtractor):
    """Extracts the movie rating."""

    field_name = "movie_rating"

    RATING_PREFIXES = ['rating:', 'rated:', 'film rating:', 'movie rating:']

    def get_strategies(self):
        return [self._from_prefix, self._from_standard_ratings, self._from_context]

    def _from_prefix(self, text: str) -> Optional[str]:
        for prefix in self.RATING_PREFIXES:
            start = text.find(prefix)
            if start == -1:
                continue
            # The rating itself may contain a dash, so only the line bounds it
            value = text[start + len(prefix):].split("\n", 1)[0].strip()
            token = value.split(" ", 1)[0] if value else ""
            rating = standardize_rating(token)
            if rating:
                return rating
        return None

    def _from_standard_ratings(self, text: str) -> Optional[str]:
        match = self.pattern_matcher.first_match(text, [
            rf"\brated\s+{RATINGS}(?![\w-])",
            rf"\({RATINGS}\)",
            rf"\b{RATINGS}(?![\w-])",
        ])
        return standardize_rating(match.group(1)) if match else None

    def _from_context(self, text: str) -> Optional[str]:
        for line in self._lines(text):
            if 'rating' not in line:
                continue
            match = self.pattern_matcher.search_pattern(line, rf"\b{RATINGS}(?![\w-])")
            if match:
                return standardize_rating(match.group(1))
        return None
