"""
Ticket field extraction: shared strategy utilities and per-field extractors.
"""
