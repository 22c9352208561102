"""
Ticket Scanner - Orchestrates a ticket scan across vision providers, catalog and OCR fallback

Flow:
    resolve provider -> extract fields -> (OCR fallback on failure)
    -> confirm title with the movie catalog -> validate -> ScanOutcome
"""
import logging
from typing import Any, Dict, List, Optional

from ..errors import ConfigurationError, TicketScanError
from ..models import ScanOutcome, ScanStatus, TicketFields, validate_ticket_fields
from .scan_store import LatestScanStore

logger = logging.getLogger(__name__)


class TicketScanner:
    """
    Entry point for scanning a ticket image.

    Only a missing provider raises (ConfigurationError). Provider failures,
    catalog failures and sparse results all come back as a ScanOutcome whose
    status says what happened, with whatever data was recovered.
    """

    def __init__(self, registry, catalog_matcher=None, fallback_parser=None,
                 scan_store: Optional[LatestScanStore] = None):
        self.registry = registry
        self.catalog_matcher = catalog_matcher
        self.fallback_parser = fallback_parser
        self.scan_store = scan_store if scan_store is not None else LatestScanStore()

    def scan(self, user_id: Any, image_path: str, provider_name: Optional[str] = None) -> ScanOutcome:
        """
        Scan one ticket image.

        Args:
            user_id: Owner of the upload
            image_path: Path of the saved image
            provider_name: Registered provider to use instead of the active one

        Returns:
            ScanOutcome (SUCCESS, INCOMPLETE or FAILED)

        Raises:
            ConfigurationError: no vision provider is available
        """
        provider = self._resolve_provider(provider_name)
        logger.info(f"🎬 Scanning {image_path} with {provider.name}")

        result = provider.extract_ticket_data(image_path)
        if not result.success:
            outcome = self._handle_failure(user_id, image_path, provider.name, result)
        else:
            fields, original_title = self._enhance_ticket_data(result.fields)
            outcome = self._build_outcome(
                user_id, image_path, fields, result.raw_response, provider.name,
                original_title=original_title, source="vision")

        self.scan_store.save(outcome)
        return outcome

    def validate_ticket_data(self, fields: TicketFields) -> bool:
        """Usable title plus at least three other populated fields."""
        return validate_ticket_fields(fields)

    def get_providers_status(self) -> List[Dict[str, Any]]:
        active = self.registry.get_active_provider()
        connection_results = self.registry.test_all_providers()
        return [
            {
                'name': name,
                'isActive': active is not None and active.name == name,
                'isConnected': connection_results.get(name, False),
            }
            for name in self.registry.get_all_provider_names()
        ]

    def set_active_provider(self, provider_name: str) -> bool:
        changed = self.registry.set_active_provider(provider_name)
        if changed:
            logger.info(f"Active vision provider set to {provider_name}")
        else:
            logger.warning(f"Unknown vision provider: {provider_name}")
        return changed

    def test_all_providers(self) -> Dict[str, bool]:
        return self.registry.test_all_providers()

    def get_latest_scan(self, user_id: Any) -> Optional[ScanOutcome]:
        return self.scan_store.get(user_id)

    def _resolve_provider(self, provider_name: Optional[str]):
        provider = None
        if provider_name:
            provider = self.registry.get_provider(provider_name)
            if provider is None:
                logger.warning(f"Provider '{provider_name}' is not registered, using the active provider")
        if provider is None:
            provider = self.registry.get_active_provider()
        if provider is None:
            raise ConfigurationError("No vision provider available for scanning")
        return provider

    def _handle_failure(self, user_id, image_path, provider_name, result) -> ScanOutcome:
        logger.error(f"❌ Ticket scanning failed with {provider_name}: {result.error}")

        if self.fallback_parser is not None:
            logger.info("🔄 Falling back to the OCR pipeline")
            try:
                fallback = self.fallback_parser.parse_ticket(image_path, user_id)
            except TicketScanError as e:
                logger.warning(f"⚠️ OCR fallback failed: {e}")
                fallback = None
            except Exception as e:
                # The fallback never turns a failed scan into a crash
                logger.exception(f"❌ OCR fallback raised unexpectedly: {e}")
                fallback = None
            if fallback is not None:
                note = f"Vision scan with {provider_name} failed ({result.error}); details were read with OCR"
                fallback.message = f"{note}. {fallback.message}" if fallback.message else note
                return fallback

        return ScanOutcome(
            user_id=user_id,
            image_path=str(image_path),
            fields=TicketFields.empty(),
            raw_response=result.raw_response,
            provider_name=provider_name,
            status=ScanStatus.FAILED,
            message=f"Ticket scanning failed: {result.error}",
        )

    def _enhance_ticket_data(self, fields: TicketFields):
        """Swap the title for the catalog's canonical one when the match is confident."""
        original_title = fields.movie_title
        if not original_title or self.catalog_matcher is None:
            return fields, original_title

        try:
            match = self.catalog_matcher.find_best_match(original_title)
        except Exception as e:
            # Catalog trouble never costs the user their scan
            logger.warning(f"⚠️ Could not validate movie title with catalog: {e}")
            return fields, original_title

        if match and match.title:
            logger.info(f"Validated movie title '{original_title}' as '{match.title}'")
            return fields.with_changes(movie_title=match.title), original_title
        return fields, original_title

    def _build_outcome(self, user_id, image_path, fields, raw_response, provider_name,
                       original_title=None, source="vision") -> ScanOutcome:
        valid = self.validate_ticket_data(fields)
        if valid:
            logger.info("✅ Ticket data extracted and validated")
            message = None
        else:
            message = (f"Only {len(fields.supporting_fields())} ticket fields besides the title were read; "
                       f"please review the details")
            if not fields.has_usable_title():
                message = "The movie title could not be read; please review the details"
            logger.warning(f"⚠️ {message}")

        return ScanOutcome(
            user_id=user_id,
            image_path=str(image_path),
            fields=fields,
            raw_response=raw_response,
            provider_name=provider_name,
            status=ScanStatus.SUCCESS if valid else ScanStatus.INCOMPLETE,
            message=message,
            original_title=original_title,
            source=source,
        )
