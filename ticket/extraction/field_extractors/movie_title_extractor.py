"""
Movie Title Extractor - Finds the film title and confirms it against the movie catalog

Title lines on tickets are noisy: chain banners, seat rows and prices all look
like text. Candidates are gathered from several heuristics, ranked by how much
they look like a title, then confirmed one by one with the catalog.
"""
import logging
import re
from typing import List, Optional, Sequence, Tuple

from .base_extractor import FieldExtractor

logger = logging.getLogger(__name__)

# Titles OCR reliably mangles, recognised by pattern and mapped to the canonical name
KNOWN_TITLE_PATTERNS = [
    (r"a quiet place:\s*day\s*(?:day\s*)?one", "A Quiet Place: Day One"),
]

TITLE_PATTERNS = [
    r"([A-Z][A-Za-z0-9\s&:'.-]+):\s*([A-Z][A-Za-z0-9\s&'.-]+)",
    r"([A-Z][A-Za-z0-9\s&:'.-]+)\s*-\s*([A-Z][A-Za-z0-9\s&'.-]+)",
    r"([A-Z][A-Za-z0-9\s&:'.-]+)\s+(?:PART|CHAPTER|EPISODE)\s+([0-9IVX]+)",
    r"([A-Z][A-Za-z0-9\s&:'.-]+):\s*(?:DAY ONE|PART TWO|THE BEGINNING|THE END|FINAL CHAPTER)",
    r"\b[A-Z][A-Z0-9\s&:'.-]{2,}(?:\s+[A-Z][A-Za-z0-9\s&:'.-]+)*\b",
]

TITLE_PREFIXES = [
    'movie:', 'title:', 'feature:', 'presenting:', 'showing:', 'now showing:',
    'feature film:', 'film:', 'picture:',
]
TITLE_PREFIX_DELIMITERS = [
    ',', '|', '-', '(', 'rated', 'rating:', 'runtime:', 'time:', 'price:', 'seat:', 'row:', 'screen:',
]

GENERIC_HEADERS = [
    'ticket', 'receipt', 'admission', 'cinema', 'theater', 'welcome', 'thank you',
    'enjoy', 'presents', 'admit one', 'confirmation', 'purchase', 'order',
    'transaction', 'showtime', 'show time', 'date', 'time', 'price',
]

MIN_CANDIDATE_SCORE = 0.5


class MovieTitleExtractor(FieldExtractor):
    """
    Extracts the movie title in two passes.

    1. Known title patterns and the structured title patterns on each line,
       validated with the catalog as soon as they appear.
    2. Candidates from every heuristic, ranked with score_movie_title and
       validated in score order (only those scoring at least 0.5).

    Without a catalog confirmation nothing is returned, unless
    accept_unvalidated is set, in which case the best-ranked candidate is used.
    """

    field_name = "movie_title"

    def __init__(self, catalog_matcher=None, accept_unvalidated: bool = False,
                 known_titles: Optional[Sequence[Tuple[str, str]]] = None, **kwargs):
        super().__init__(**kwargs)
        self.catalog_matcher = catalog_matcher
        self.accept_unvalidated = accept_unvalidated
        self.known_titles = list(KNOWN_TITLE_PATTERNS if known_titles is None else known_titles)

    def extract(self, ocr_text: str) -> Optional[str]:
        if not ocr_text or not ocr_text.strip():
            logger.debug("Empty OCR text received")
            return None

        # Title heuristics depend on capitalisation, so lines keep their case
        lines = [line.strip() for line in ocr_text.split("\n") if line.strip()]

        # First pass: exact and structured title patterns
        for line in lines:
            for candidate in (self.match_known_title(line), self.find_title_pattern(line)):
                if candidate:
                    validated = self.validate_with_catalog(candidate)
                    if validated:
                        return validated

        # Second pass: rank every candidate and confirm in score order
        scored = self.rank_candidates(self.collect_candidates(lines))
        logger.debug(f"Scored title candidates: {scored}")
        for candidate, score in scored:
            if score < MIN_CANDIDATE_SCORE:
                break
            validated = self.validate_with_catalog(candidate)
            if validated:
                return validated

        for line in lines:
            if self.looks_like_movie_title(line):
                validated = self.validate_with_catalog(self.clean_text(line))
                if validated:
                    return validated

        if self.accept_unvalidated and scored and scored[0][1] >= MIN_CANDIDATE_SCORE:
            logger.info(f"Using unvalidated title candidate: {scored[0][0]}")
            return scored[0][0]
        return None

    def validate_with_catalog(self, title: str) -> Optional[str]:
        """Canonical catalog title for a candidate, or None."""
        if not self.catalog_matcher or not title:
            return None
        match = self.catalog_matcher.find_best_match(title)
        return match.title if match else None

    def match_known_title(self, line: str) -> Optional[str]:
        for pattern, title in self.known_titles:
            if self.pattern_matcher.search_pattern(line, pattern):
                return title
        return None

    def find_title_pattern(self, line: str) -> Optional[str]:
        """Structured title on a single line ("Dune: Part Two", "ALIEN ROMULUS")."""
        for pattern in TITLE_PATTERNS:
            match = self.pattern_matcher.search_pattern(line, pattern, flags=0)
            if not match:
                continue
            groups = [g for g in match.groups() if g]
            title = f"{groups[0]}: {groups[1]}" if len(groups) > 1 else (groups[0] if groups else match.group(0))
            cleaned = self.clean_text(title)
            if cleaned:
                return cleaned
        return None

    def collect_candidates(self, lines: List[str]) -> List[str]:
        candidates = []
        for line in lines:
            # Lines naming a film or written in title / upper case
            if re.search(r"movie|film|feature|showing", line, re.IGNORECASE):
                candidates.append(self.clean_text(line))
            if re.fullmatch(r"[A-Z][A-Za-z0-9\s&:'.-]+", line):
                candidates.append(self.clean_text(line))
        for heuristic in (self.extract_using_title_prefix, self.extract_using_line_shape,
                          self.extract_using_movie_keyword):
            candidates.extend(heuristic(line) for line in lines)

        unique = []
        for candidate in candidates:
            if candidate and candidate not in unique:
                unique.append(candidate)
        return unique

    def rank_candidates(self, candidates: List[str]) -> List[Tuple[str, float]]:
        scored = [(candidate, self.score_movie_title(candidate)) for candidate in candidates]
        # Stable sort keeps discovery order among equal scores
        return sorted(scored, key=lambda pair: pair[1], reverse=True)

    def extract_using_title_prefix(self, line: str) -> Optional[str]:
        lower = line.lower()
        for prefix in TITLE_PREFIXES:
            index = lower.find(prefix)
            if index == -1:
                continue
            start = index + len(prefix)
            end = min(start + 50, len(line))
            # First delimiter in list order, not the nearest one
            for delimiter in TITLE_PREFIX_DELIMITERS:
                delimiter_index = lower.find(delimiter, start)
                if delimiter_index != -1:
                    end = delimiter_index
                    break
            return self.clean_text(line[start:end]) or None
        return None

    def extract_using_line_shape(self, line: str) -> Optional[str]:
        if len(line) <= 3 or self.is_generic_header(line):
            return None
        rated = re.match(r"(.+?)\s+\(?(PG-13|NC-17|PG|G|R)\)?$", line, re.IGNORECASE)
        if rated:
            return self.clean_text(rated.group(1)) or None
        if self.looks_like_movie_title(line):
            return self.clean_text(line) or None
        return None

    def extract_using_movie_keyword(self, line: str) -> Optional[str]:
        index = line.lower().find('movie')
        if index == -1:
            return None
        if 0 < index < 5:
            return self.clean_text(line[index + 5:]) or None
        if index > 5:
            return self.clean_text(line[:index]) or None
        return self.clean_text(line) or None

    def score_movie_title(self, title: str) -> float:
        """Heuristic title likelihood. Known titles score 1.0."""
        if self.match_known_title(title):
            return 1.0

        score = 0.0
        if re.match(r"[A-Z]", title):
            score += 0.2
        if re.fullmatch(r"[A-Z\s]+", title):
            score += 0.1
        if ':' in title:
            score += 0.2
        if re.search(r"Part|Chapter|Volume|Day One", title, re.IGNORECASE):
            score += 0.2
        if re.search(r"[0-9IVX]+$", title):
            score += 0.1

        length = len(title)
        if 10 <= length <= 50:
            score += 0.2
        elif length > 50:
            score -= 0.1
        elif length < 5:
            score -= 0.2

        # Noise penalties
        if re.fullmatch(r"[0-9\s]+", title):
            score -= 0.3
        if re.search(r"ticket|receipt|admit|cinema|theatre", title, re.IGNORECASE):
            score -= 0.2
        if not re.search(r"[a-zA-Z]", title):
            score -= 0.4
        return round(score, 4)

    def is_generic_header(self, line: str) -> bool:
        lower = line.lower()
        return len(lower) < 20 and any(header in lower for header in GENERIC_HEADERS)

    def looks_like_movie_title(self, line: str) -> bool:
        clean_line = re.sub(
            r"\b(rated|rating|runtime|duration|price|seat|row|time|date|screen|theatre|theater|cinema)\b.*$",
            '', line.lower()).strip()
        return (
            3 < len(clean_line) < 50
            and not re.fullmatch(r"\d+", clean_line)
            and not re.fullmatch(r"(row|seat|aisle|screen|theater|theatre|cinema)\s*\d*", clean_line)
            and not re.match(r"[$£€]\d+", clean_line)
            and not re.match(r"(adult|child|senior|student)", clean_line)
            and re.search(r"[a-z]", clean_line) is not None
        )
