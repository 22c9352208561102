"""
Tests for the deterministic OCR ticket pipeline
"""
from pathlib import Path

from ticket.models import CatalogCandidate, ScanStatus
from ticket.ocr import OcrService
from ticket.pipeline import TicketParser, build_default_extractors

TICKET_TEXT = """AMC ASSEMBLY ROW 12
DUNE: PART TWO
Rated PG-13
Date: 05/13/2025
Time: 7:30 PM
Theater: 4
Seat: L6
ADULT $14.99
Ticket #: 270410133"""


class FakeOcrService(OcrService):
    """Skips image work and returns canned text."""

    def __init__(self, text):
        super().__init__()
        self.text = text

    def preprocess_image(self, image_path):
        return Path(image_path)

    def perform_ocr(self, image_path):
        return self.text


class FakeCatalogMatcher:
    def find_best_match(self, query):
        if query.lower() == "dune: part two":
            return CatalogCandidate(title="Dune: Part Two")
        return None


class ExplodingExtractor:
    def extract(self, text):
        raise AssertionError("extractors must not run for non-ticket text")


def test_parse_text_fills_every_field():
    parser = TicketParser(FakeOcrService(""), build_default_extractors(FakeCatalogMatcher()))

    fields = parser.parse_text(TICKET_TEXT)

    assert fields.movie_title == "Dune: Part Two"
    assert fields.show_date == "05/13/2025"
    assert fields.show_time == "7:30 pm"
    assert fields.price == "$14.99"
    assert fields.seat_number == "L6"
    assert fields.movie_rating == "PG-13"
    assert fields.theater_room == "Theater 4"
    assert fields.ticket_number == "270410133"
    assert fields.theater_chain == "AMC"
    assert fields.theater_name == "AMC Assembly Row 12"
    assert fields.ticket_type == "Adult"


def test_parse_ticket_returns_ocr_outcome():
    parser = TicketParser(FakeOcrService(TICKET_TEXT), build_default_extractors(FakeCatalogMatcher()))

    outcome = parser.parse_ticket("/tmp/ticket.jpg", user_id=42)

    assert outcome.status == ScanStatus.SUCCESS
    assert outcome.source == "ocr"
    assert outcome.user_id == 42
    assert outcome.raw_response == TICKET_TEXT
    assert outcome.fields.movie_title == "Dune: Part Two"


def test_unconfirmed_title_defaults_to_unknown_movie():
    parser = TicketParser(FakeOcrService(TICKET_TEXT), build_default_extractors())

    outcome = parser.parse_ticket("/tmp/ticket.jpg", user_id=1)

    assert outcome.fields.movie_title == "Unknown Movie"
    assert outcome.status == ScanStatus.INCOMPLETE
    assert parser.validate_ticket_data(outcome.fields) is False


def test_non_ticket_text_short_circuits():
    extractors = {'movie_title': ExplodingExtractor(), 'price': ExplodingExtractor()}
    parser = TicketParser(FakeOcrService("GROCERY RECEIPT\nMilk 2.99"), extractors)

    assert parser.parse_ticket("/tmp/receipt.jpg", user_id=1) is None
