"""
OCR Service - Local ticket image preprocessing and Tesseract text recognition

Usage:
    service = OcrService()
    prepared = service.preprocess_image("ticket.jpg")
    text = service.perform_ocr(prepared)
    if service.is_likely_ticket(text):
        ...
"""
import logging
import re
from pathlib import Path
from typing import Optional, Tuple, Union

import pytesseract
from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

from ..errors import ImageReadError

logger = logging.getLogger(__name__)

CHAR_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    ".,!?@#$%&*()-_+=:;\"'/ "
)

TICKET_KEYWORDS = [
    'ticket', 'cinema', 'theater', 'theatre', 'admit', 'admission',
    'seat', 'row', 'showtime', 'show time', 'screening', 'auditorium',
    'movie', 'film', 'feature', 'presentation', 'showing',
]

MIN_TICKET_KEYWORDS = 2


class OcrService:
    """Prepares ticket photos and reads their text with Tesseract."""

    def __init__(self, tesseract_cmd: Optional[str] = None,
                 max_size: Tuple[int, int] = (1500, 2000), psm: int = 3):
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.max_size = tuple(max_size)
        # pytesseract shlex-splits the config; the whitelist holds a space and quotes
        whitelist = CHAR_WHITELIST.replace('"', '\\"')
        self.tesseract_config = f'--oem 3 --psm {psm} -c tessedit_char_whitelist="{whitelist}"'

    def preprocess_image(self, image_path: Union[str, Path]) -> Path:
        """
        Grayscale, contrast-stretch and sharpen the image, shrinking it to fit max_size.

        Returns:
            Path of the processed copy, saved beside the original as preprocessed_<name>
        """
        source = Path(image_path)
        output_path = source.parent / f"preprocessed_{source.name}"
        logger.info(f"Preprocessing image: {source}")

        try:
            with Image.open(source) as img:
                processed = ImageOps.grayscale(img)
                processed = ImageOps.autocontrast(processed)
                processed = processed.filter(ImageFilter.SHARPEN)
                # thumbnail keeps aspect ratio and never enlarges
                processed.thumbnail(self.max_size, Image.LANCZOS)
                processed.save(output_path)
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise ImageReadError(f"Could not preprocess {source}: {e}") from e

        logger.debug(f"Preprocessed image saved to {output_path}")
        return output_path

    def perform_ocr(self, image_path: Union[str, Path]) -> str:
        """Recognise text in the image and return it cleaned, line breaks kept."""
        logger.info(f"Starting OCR on image: {image_path}")
        try:
            with Image.open(image_path) as img:
                raw_text = pytesseract.image_to_string(img, lang="eng", config=self.tesseract_config)
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise ImageReadError(f"Could not read {image_path} for OCR: {e}") from e
        except pytesseract.TesseractError as e:
            raise ImageReadError(f"Tesseract failed on {image_path}: {e}") from e

        logger.debug(f"Raw OCR output: {raw_text!r}")
        cleaned = self.clean_ocr_text(raw_text)
        logger.info(f"OCR extracted {len(cleaned)} chars from {Path(image_path).name}")
        return cleaned

    def clean_ocr_text(self, text: str) -> str:
        """Collapse runs of spaces, drop blank lines and characters outside the OCR alphabet."""
        if not text:
            return ""
        text = re.sub(r"[^A-Za-z0-9\s.,!?@#$%&*()\-_+=:;\"'/]", "", text, flags=re.ASCII)
        lines = [re.sub(r"[ \t\f\v\r]+", " ", line).strip() for line in text.split("\n")]
        return "\n".join(line for line in lines if line)

    def is_likely_ticket(self, text: str) -> bool:
        """At least two movie-ticket keywords in the text."""
        lowercase_text = (text or "").lower()
        found = []
        for keyword in TICKET_KEYWORDS:
            if keyword in lowercase_text:
                found.append(keyword)
                if len(found) >= MIN_TICKET_KEYWORDS:
                    logger.info(f"Confirmed movie ticket - found keywords: {found}")
                    return True
        logger.info(f"Not enough movie ticket keywords found. Found: {found}")
        return False
