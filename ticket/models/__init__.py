"""
Models Package
"""
from .ticket_models import (
    FIELD_KEYS,
    UNKNOWN_TITLES,
    MIN_SUPPORTING_FIELDS,
    TicketFields,
    ExtractionResult,
    ProviderDescriptor,
    CatalogCandidate,
    ScanStatus,
    ScanOutcome,
    validate_ticket_fields
)

__all__ = [
    'FIELD_KEYS',
    'UNKNOWN_TITLES',
    'MIN_SUPPORTING_FIELDS',
    'TicketFields',
    'ExtractionResult',
    'ProviderDescriptor',
    'CatalogCandidate',
    'ScanStatus',
    'ScanOutcome',
    'validate_ticket_fields'
]
