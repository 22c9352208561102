"""
Base Extractor - Shared behaviour for per-field ticket extractors
"""
import logging
from typing import Callable, List, Optional, Sequence

from ..shared_utils.pattern_matcher import PatternMatcher, get_pattern_matcher
from ..shared_utils.text_cleaner import TextCleaner
from ..shared_utils.strategy_chain import first_valid, extract_after_prefix

logger = logging.getLogger(__name__)


class FieldExtractor:
    """
    One ticket field, extracted by an ordered list of strategies.

    Subclasses set field_name and return their strategies from
    get_strategies(). Each strategy receives the lowercased OCR text and
    returns a value or None. The first strategy that answers wins.
    """

    field_name = ""

    def __init__(self, pattern_matcher: Optional[PatternMatcher] = None,
                 text_cleaner: Optional[TextCleaner] = None):
        self.pattern_matcher = pattern_matcher or get_pattern_matcher()
        self.text_cleaner = text_cleaner or TextCleaner()

    def get_strategies(self) -> List[Callable[[str], Optional[str]]]:
        raise NotImplementedError

    def extract(self, ocr_text: str) -> Optional[str]:
        if not ocr_text or not ocr_text.strip():
            return None
        value = first_valid(self.get_strategies(), ocr_text.lower())
        logger.debug(f"{self.field_name}: {value!r}")
        return value

    def clean_text(self, text: str) -> str:
        return self.text_cleaner.clean_text(text)

    def _extract_with_prefixes(self, text: str, prefixes: Sequence[str],
                               delimiters: Sequence[str] = (",", "|", "-"),
                               fallback_length: int = 10,
                               validator: Optional[Callable[[str], bool]] = None) -> Optional[str]:
        """Value following the first prefix present, cleaned and optionally validated."""
        for prefix in prefixes:
            value = extract_after_prefix(text, prefix, delimiters, fallback_length)
            if value is None:
                continue
            if validator is None or validator(value):
                cleaned = self.clean_text(value)
                if cleaned:
                    return cleaned
        return None

    @staticmethod
    def _lines(text: str) -> List[str]:
        return text.split("\n")
