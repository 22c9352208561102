"""
Scan Context - Wires the scanner and its collaborators from configuration
"""
import logging
import threading
from typing import Optional

from config.config_manager import ScannerConfig

from ..catalog import CatalogMatcher, TmdbCatalogClient
from ..ocr import OcrService
from ..pipeline import TicketParser, build_default_extractors
from ..vision import VisionProviderRegistry
from .scan_store import LatestScanStore
from .ticket_scanner import TicketScanner

logger = logging.getLogger(__name__)


class ScanContext:
    """Everything a scan needs, built once from a ScannerConfig."""

    def __init__(self, config: Optional[ScannerConfig] = None):
        self.config = config or ScannerConfig()
        self.registry = VisionProviderRegistry(self.config)
        self.catalog_matcher = self._build_catalog_matcher()
        self.fallback_parser = self._build_fallback_parser()
        self.scan_store = LatestScanStore()
        self.scanner = TicketScanner(
            self.registry,
            catalog_matcher=self.catalog_matcher,
            fallback_parser=self.fallback_parser,
            scan_store=self.scan_store,
        )

    def _build_catalog_matcher(self) -> Optional[CatalogMatcher]:
        if not self.config.tmdb_api_key:
            logger.warning("TMDB_API_KEY not set; movie titles will not be checked against the catalog")
            return None
        client = TmdbCatalogClient(
            self.config.tmdb_api_key,
            base_url=self.config.tmdb_base_url,
            timeout=self.config.catalog_timeout,
        )
        return CatalogMatcher(
            client,
            similarity_threshold=self.config.similarity_threshold,
            popularity_threshold=self.config.popularity_threshold,
        )

    def _build_fallback_parser(self) -> Optional[TicketParser]:
        if not self.config.ocr_fallback_enabled:
            return None
        ocr_service = OcrService(
            tesseract_cmd=self.config.tesseract_cmd,
            max_size=tuple(self.config.ocr_max_size),
        )
        return TicketParser(ocr_service, build_default_extractors(self.catalog_matcher))


_scan_context = None
_scan_context_lock = threading.Lock()


def get_scan_context(config: Optional[ScannerConfig] = None) -> ScanContext:
    """Get or create the process-wide scan context."""
    global _scan_context

    with _scan_context_lock:
        if _scan_context is None:
            _scan_context = ScanContext(config)
    return _scan_context


def get_ticket_scanner(config: Optional[ScannerConfig] = None) -> TicketScanner:
    """Get or create the process-wide ticket scanner."""
    return get_scan_context(config).scanner


def reset_scan_context() -> None:
    """Drop the cached context so the next accessor call rebuilds it."""
    global _scan_context

    with _scan_context_lock:
        _scan_context = None
