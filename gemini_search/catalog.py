"""
Steam catalog lookup.

Uses httpx against the public store search endpoint. Results are returned
as CatalogEntry records tagged with the requested source.
"""

import logging
from typing import List, Optional

import httpx

from .errors import CatalogError
from .models import CatalogEntry

logger = logging.getLogger(__name__)

STORE_SEARCH_URL = "https://store.steampowered.com/api/storesearch/"
DEFAULT_TIMEOUT = 30.0


class SteamCatalog:
    """Look up games by name in the Steam store.

    Usage:
        async with SteamCatalog() as catalog:
            entries = await catalog.search("Portal 2", "steam")
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        country: str = "US",
        language: str = "english",
    ):
        self.client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)
        self.country = country
        self.language = language

    async def __aenter__(self) -> "SteamCatalog":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def search(self, name: str, source: str) -> List[CatalogEntry]:
        """Search the store for `name`.

        Args:
            name: Game name to look up
            source: Source tag stored on every entry

        Returns:
            Candidates in store order (possibly empty)

        Raises:
            CatalogError: On transport errors or non-2xx responses
        """
        params = {"term": name, "cc": self.country, "l": self.language}
        try:
            response = await self.client.get(STORE_SEARCH_URL, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogError(f"Steam search for '{name}' failed: {e}") from e

        entries = []
        for item in data.get("items", []):
            if "id" not in item or "name" not in item:
                continue
            entries.append(CatalogEntry(
                name=item["name"],
                id=int(item["id"]),
                image=item.get("tiny_image", ""),
                source=source,
            ))
        logger.debug(f"Steam search '{name}': {len(entries)} candidate(s)")
        return entries
