"""
Deterministic Pipeline Package
"""
from .ticket_parser import TicketParser, build_default_extractors, UNKNOWN_MOVIE

__all__ = ['TicketParser', 'build_default_extractors', 'UNKNOWN_MOVIE']
