"""
Movie Catalog Package
"""
from .tmdb_client import TmdbCatalogClient
from .catalog_matcher import CatalogMatcher, SIMILARITY_THRESHOLD

__all__ = [
    'TmdbCatalogClient',
    'CatalogMatcher',
    'SIMILARITY_THRESHOLD'
]
