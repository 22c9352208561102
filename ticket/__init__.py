"""
Movie Ticket Scanner

Reads movie ticket photos with vision-language model providers, confirms the
title against a movie catalog and falls back to a local OCR pipeline.
"""
from .errors import (
    TicketScanError,
    ConfigurationError,
    ImageReadError,
    TransientProviderError,
    ResponseParseError,
    CatalogError
)
from .models import TicketFields, ExtractionResult, ScanOutcome, ScanStatus

__version__ = "1.0.0"

__all__ = [
    'TicketScanError',
    'ConfigurationError',
    'ImageReadError',
    'TransientProviderError',
    'ResponseParseError',
    'CatalogError',
    'TicketFields',
    'ExtractionResult',
    'ScanOutcome',
    'ScanStatus'
]
