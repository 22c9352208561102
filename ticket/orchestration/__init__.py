"""
Scan Orchestration Package
"""
from .scan_store import LatestScanStore
from .ticket_scanner import TicketScanner
from .scan_context import ScanContext, get_scan_context, get_ticket_scanner, reset_scan_context

__all__ = [
    'LatestScanStore',
    'TicketScanner',
    'ScanContext',
    'get_scan_context',
    'get_ticket_scanner',
    'reset_scan_context'
]
