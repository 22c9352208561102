"""
TMDB Client - Movie catalog search over the TMDB REST API

Usage:
    client = TmdbCatalogClient(api_key="...")
    candidates = client.search("Dune Part Two")
"""
import logging
from typing import List, Optional

import requests

from ..errors import CatalogError
from ..models import CatalogCandidate

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"


class TmdbCatalogClient:
    """Thin search client. Every failure surfaces as CatalogError."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.search_endpoint = "/search/movie"

    def search(self, query: str) -> List[CatalogCandidate]:
        """
        Search movies by title.

        Args:
            query: Free-text title

        Returns:
            Candidates in catalog order (may be empty)

        Raises:
            CatalogError: missing API key, transport failure or bad payload
        """
        if not self.api_key:
            raise CatalogError("TMDB API key is not configured")

        params = {
            'api_key': self.api_key,
            'query': query,
            'include_adult': 'false',
            'language': 'en-US',
        }
        try:
            resp = self.session.get(
                f"{self.base_url}{self.search_endpoint}",
                params=params,
                timeout=self.timeout
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as e:
            raise CatalogError(f"Catalog search failed for '{query}': {e}") from e
        except ValueError as e:
            raise CatalogError(f"Catalog returned invalid JSON for '{query}': {e}") from e

        results = payload.get('results') if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise CatalogError(f"Catalog response for '{query}' has no results list")

        candidates = [CatalogCandidate.from_api(item) for item in results if isinstance(item, dict)]
        logger.debug(f"Catalog search '{query}' returned {len(candidates)} results")
        return candidates
