"""
Catalog Matcher - Fuzzy matches OCR'd or model-read titles to canonical catalog titles
"""
import logging
import re
from datetime import date
from typing import Callable, List, Optional

from rapidfuzz import fuzz

from ..errors import CatalogError
from ..models import CatalogCandidate

logger = logging.getLogger(__name__)

SIMILARITY_THRESHOLD = 0.6
POPULARITY_THRESHOLD = 20
RECENCY_BONUS = 0.1
POPULARITY_BONUS = 0.1

# Characters OCR commonly confuses inside titles
OCR_SUBSTITUTIONS = {'0': 'o', '1': 'l', '5': 's'}


class CatalogMatcher:
    """
    Resolves a noisy title to the catalog's canonical one.

    Each result is scored by normalized string similarity, with small bonuses
    for films released this year or next and for popular films. The best
    score wins if it clears the similarity threshold.
    """

    def __init__(self, catalog_client, similarity_threshold: float = SIMILARITY_THRESHOLD,
                 popularity_threshold: float = POPULARITY_THRESHOLD,
                 today: Optional[Callable[[], date]] = None):
        self.catalog_client = catalog_client
        self.similarity_threshold = similarity_threshold
        self.popularity_threshold = popularity_threshold
        self.today = today or date.today

    def find_best_match(self, query: Optional[str]) -> Optional[CatalogCandidate]:
        """Best catalog candidate for the query, or None when nothing is confident enough."""
        if not query or not query.strip():
            return None

        match = self._search_and_score(query, query)
        if match:
            return match

        for variation in self.generate_variations(query):
            match = self._search_and_score(variation, query)
            if match:
                logger.info(f"Matched '{query}' via variation '{variation}' -> '{match.title}'")
                return match

        logger.info(f"No catalog match for '{query}'")
        return None

    def score_candidate(self, query: str, candidate: CatalogCandidate) -> float:
        """Similarity in [0, 1] plus recency and popularity bonuses."""
        score = fuzz.ratio(query.lower(), (candidate.title or '').lower()) / 100.0

        current_year = self.today().year
        if candidate.release_year in (current_year, current_year + 1):
            score += RECENCY_BONUS
        if candidate.popularity > self.popularity_threshold:
            score += POPULARITY_BONUS
        return score

    def generate_variations(self, query: str) -> List[str]:
        """Alternate spellings to search when the raw query finds nothing."""
        variations = []

        cleaned = re.sub(r"\s+", " ", re.sub(r"[^a-z0-9\s]", " ", query.lower())).strip()
        variations.append(cleaned)

        # Main title and subtitle on their own
        variations.extend(part.strip() for part in re.split(r"[-:]", query))

        substituted = query.lower()
        for wrong, right in OCR_SUBSTITUTIONS.items():
            substituted = substituted.replace(wrong, right)
        variations.append(substituted)

        unique = []
        for variation in variations:
            if len(variation) > 2 and variation != query and variation not in unique:
                unique.append(variation)
        return unique

    def _search_and_score(self, search_text: str, original_query: str) -> Optional[CatalogCandidate]:
        try:
            candidates = self.catalog_client.search(search_text)
        except CatalogError as e:
            logger.warning(f"Catalog search failed for '{search_text}': {e}")
            return None

        best, best_score = None, 0.0
        for candidate in candidates:
            score = self.score_candidate(original_query, candidate)
            if score > best_score:
                best, best_score = candidate, score

        if best and best_score >= self.similarity_threshold:
            logger.debug(f"Catalog match '{original_query}' -> '{best.title}' ({best_score:.2f})")
            return best
        return None
