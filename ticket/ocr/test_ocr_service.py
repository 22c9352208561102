"""
Tests for OCR preprocessing, text cleanup and the ticket keyword check
"""
import pytest
import pytesseract
from PIL import Image

from ticket.errors import ImageReadError
from ticket.ocr import OcrService


def make_image(path, size=(60, 40), color=(200, 30, 30)):
    Image.new("RGB", size, color).save(path)
    return path


def test_preprocess_writes_grayscale_copy(tmp_path):
    source = make_image(tmp_path / "ticket.png")

    output = OcrService().preprocess_image(source)

    assert output == tmp_path / "preprocessed_ticket.png"
    with Image.open(output) as img:
        assert img.mode == "L"
        assert img.size == (60, 40)


def test_preprocess_shrinks_to_max_size(tmp_path):
    source = make_image(tmp_path / "large.png", size=(3000, 1000))

    output = OcrService(max_size=(1500, 2000)).preprocess_image(source)

    with Image.open(output) as img:
        assert img.size == (1500, 500)


def test_preprocess_rejects_non_images(tmp_path):
    bogus = tmp_path / "notes.jpg"
    bogus.write_text("not an image")
    with pytest.raises(ImageReadError):
        OcrService().preprocess_image(bogus)


def test_perform_ocr_cleans_tesseract_output(tmp_path, monkeypatch):
    source = make_image(tmp_path / "ticket.png")
    captured = {}

    def fake_image_to_string(img, lang=None, config=None):
        captured['lang'] = lang
        captured['config'] = config
        return "  ADMIT   ONE \n\n Seat: L6 ~\n"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    text = OcrService(psm=6).perform_ocr(source)

    assert text == "ADMIT ONE\nSeat: L6"
    assert captured['lang'] == "eng"
    assert "--psm 6" in captured['config']
    assert "tessedit_char_whitelist" in captured['config']


def test_clean_ocr_text_drops_blank_lines():
    assert OcrService().clean_ocr_text("a\n\n   \nb   c") == "a\nb c"
    assert OcrService().clean_ocr_text("") == ""


def test_clean_ocr_text_keeps_ascii_only():
    assert OcrService().clean_ocr_text("Am\u00e9lie \u2022 Row C") == "Amlie Row C"


def test_tesseract_failure_is_an_image_read_error(tmp_path, monkeypatch):
    source = make_image(tmp_path / "ticket.png")

    def crash(*args, **kwargs):
        raise pytesseract.TesseractError(1, "tesseract crashed")

    monkeypatch.setattr(pytesseract, "image_to_string", crash)

    with pytest.raises(ImageReadError):
        OcrService().perform_ocr(source)


def test_oversized_image_is_an_image_read_error(tmp_path, monkeypatch):
    source = make_image(tmp_path / "huge.png")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

    with pytest.raises(ImageReadError):
        OcrService().preprocess_image(source)
    with pytest.raises(ImageReadError):
        OcrService().perform_ocr(source)


def test_is_likely_ticket_needs_two_keywords():
    service = OcrService()
    assert service.is_likely_ticket("ADMIT ONE\nSeat L6") is True
    assert service.is_likely_ticket("ADMIT ONE") is False
    assert service.is_likely_ticket("GROCERY RECEIPT\nMilk 2.99") is False
