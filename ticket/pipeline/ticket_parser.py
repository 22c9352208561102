"""
Ticket Parser - Deterministic OCR pipeline for movie tickets

Preprocess -> OCR -> ticket keyword check -> per-field extractors.
Used as the offline fallback when no vision provider produced a result.
"""
import logging
from typing import Any, Dict, Optional

from ..models import ScanOutcome, ScanStatus, TicketFields, validate_ticket_fields
from ..ocr import OcrService
from ..extraction.field_extractors import (
    MovieTitleExtractor,
    ShowTimeExtractor,
    ShowDateExtractor,
    PriceExtractor,
    SeatExtractor,
    MovieRatingExtractor,
    TheaterRoomExtractor,
    TicketNumberExtractor,
    TheaterNameExtractor,
    TheaterChainExtractor,
    TicketTypeExtractor,
)

logger = logging.getLogger(__name__)

UNKNOWN_MOVIE = "Unknown Movie"


def build_default_extractors(catalog_matcher=None, accept_unvalidated: bool = False) -> Dict[str, Any]:
    """One extractor per ticket field, keyed by TicketFields attribute name."""
    chain_extractor = TheaterChainExtractor()
    return {
        'movie_title': MovieTitleExtractor(catalog_matcher, accept_unvalidated=accept_unvalidated),
        'show_time': ShowTimeExtractor(),
        'show_date': ShowDateExtractor(),
        'price': PriceExtractor(),
        'seat_number': SeatExtractor(),
        'movie_rating': MovieRatingExtractor(),
        'theater_room': TheaterRoomExtractor(),
        'ticket_number': TicketNumberExtractor(),
        'theater_name': TheaterNameExtractor(chain_extractor=chain_extractor),
        'theater_chain': chain_extractor,
        'ticket_type': TicketTypeExtractor(),
    }


class TicketParser:
    """Runs the OCR service and the field extractors over a ticket image."""

    def __init__(self, ocr_service: Optional[OcrService] = None,
                 extractors: Optional[Dict[str, Any]] = None):
        self.ocr_service = ocr_service or OcrService()
        self.extractors = extractors if extractors is not None else build_default_extractors()

    def parse_ticket(self, image_path: str, user_id: Any) -> Optional[ScanOutcome]:
        """
        Process a ticket image into a scan outcome.

        Args:
            image_path: Path to the ticket image
            user_id: Owner of the upload

        Returns:
            ScanOutcome with source="ocr", or None when the text is not a movie ticket

        Raises:
            ImageReadError: the image could not be preprocessed or read
        """
        preprocessed_path = self.ocr_service.preprocess_image(image_path)
        ocr_text = self.ocr_service.perform_ocr(preprocessed_path)

        if not self.ocr_service.is_likely_ticket(ocr_text):
            logger.info("The scanned image does not appear to be a movie ticket")
            return None

        fields = self.parse_text(ocr_text)
        if not fields.movie_title:
            fields = fields.with_changes(movie_title=UNKNOWN_MOVIE)

        valid = self.validate_ticket_data(fields)
        logger.info(f"✅ OCR pipeline extracted {len(fields.supporting_fields())} supporting fields")
        return ScanOutcome(
            user_id=user_id,
            image_path=str(image_path),
            fields=fields,
            raw_response=ocr_text,
            provider_name="Tesseract OCR",
            status=ScanStatus.SUCCESS if valid else ScanStatus.INCOMPLETE,
            message=None if valid else "OCR text did not yield enough ticket fields",
            original_title=fields.movie_title,
            source="ocr",
        )

    def parse_text(self, ocr_text: str) -> TicketFields:
        """Run every extractor over already-recognised text."""
        values = {}
        for attribute, extractor in self.extractors.items():
            values[attribute] = extractor.extract(ocr_text)
        fields = TicketFields.from_dict(values)
        logger.debug(f"Extracted ticket data: {fields.to_dict()}")
        return fields

    def validate_ticket_data(self, fields: TicketFields) -> bool:
        return validate_ticket_fields(fields)
