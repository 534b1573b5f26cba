"""
Fetches and parses the remote version catalog that maps channel names to
Julia versions and versions to their download locations.
"""

import asyncio
import json
import logging
import os

import aiohttp
from pydantic import ValidationError

from jlup.exceptions import CatalogIOError
from jlup.models.catalog import VersionCatalog

log = logging.getLogger(__name__)

DEFAULT_VERSIONDB_URL = (
    "https://julialang-s3.julialang.org/juliaup/versiondb/versiondb.json"
)


def get_versiondb_url() -> str:
    return os.getenv("JLUP_VERSIONDB_URL", DEFAULT_VERSIONDB_URL)


def parse_catalog(document: str) -> VersionCatalog:
    """
    Parses a catalog JSON document.

    Raises:
        CatalogIOError: If the document is not valid JSON or does not match the
        catalog schema.
    """
    try:
        return VersionCatalog.model_validate(json.loads(document))
    except (json.JSONDecodeError, ValidationError) as e:
        raise CatalogIOError(f"Failed to parse the version catalog: {e}") from e


class CatalogFetcher:
    """Downloads the version catalog with retry logic."""

    def __init__(self, url: str, max_retries: int = 3, base_delay: float = 1.0):
        self.url = url
        self.max_retries = max_retries
        self.base_delay = base_delay

    async def fetch(self) -> VersionCatalog:
        timeout = aiohttp.ClientTimeout(total=45, connect=15)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            for attempt in range(1, self.max_retries + 1):
                try:
                    log.debug(
                        f"Attempt {attempt}/{self.max_retries} to fetch version "
                        f"catalog from {self.url}..."
                    )
                    async with session.get(self.url) as response:
                        response.raise_for_status()
                        document = await response.text()
                    catalog = parse_catalog(document)
                    log.debug(
                        f"Fetched catalog with {len(catalog.available_channels)} "
                        f"channels and {len(catalog.available_versions)} versions."
                    )
                    return catalog
                except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                    log.debug(f"Catalog fetch attempt {attempt} failed: {e}")
                    if attempt == self.max_retries:
                        raise CatalogIOError(
                            f"Failed to download the version catalog from "
                            f"'{self.url}' after {self.max_retries} attempts: {e}"
                        ) from e
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))

        raise CatalogIOError("Catalog fetching failed unexpectedly.")


def load_catalog(url: str | None = None) -> VersionCatalog:
    """Fetches the version catalog, blocking until it is available."""
    return asyncio.run(CatalogFetcher(url or get_versiondb_url()).fetch())
