"""
OCR Package
"""
from .ocr_service import OcrService, TICKET_KEYWORDS

__all__ = ['OcrService', 'TICKET_KEYWORDS']
