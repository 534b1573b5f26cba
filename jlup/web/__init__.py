"""
Remote catalog access.
"""

from .catalog_fetcher import CatalogFetcher, load_catalog, parse_catalog

__all__ = ["CatalogFetcher", "load_catalog", "parse_catalog"]
