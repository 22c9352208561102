"""
Text Cleaner - Handles OCR text cleaning and normalization
"""
import re
from typing import List


class TextCleaner:
    """Cleans and normalizes text for extraction."""

    # Characters kept by clean_text besides word characters and whitespace
    KEPT_PUNCTUATION = "&:'.\\-/$€£¥#"

    def clean_text(self, text):
        """
        Normalize an extracted value: collapse whitespace and drop stray symbols.
        Currency symbols and date separators survive so "$14.99" and "05/13/2025" stay intact.
        """
        if not text:
            return ""

        text = self.normalize_dashes(text)
        text = re.sub(r"\s+", " ", text)
        text = re.sub(rf"[^\w\s{self.KEPT_PUNCTUATION}]", "", text)
        return text.strip()

    def normalize_dashes(self, line):
        """Replace all dash variants with standard dash."""
        return re.sub(r"[\u2010-\u2015\u2212]", "-", line)

    def split_lines(self, text, keep_empty=False) -> List[str]:
        """Split OCR text into stripped lines."""
        lines = [line.strip() for line in (text or "").split("\n")]
        if keep_empty:
            return lines
        return [line for line in lines if line]
