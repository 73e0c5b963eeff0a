# movie_explorer/services/catalog_service.py

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import httpx

logger = logging.getLogger(__name__)


class CatalogUnavailableError(Exception):
    """The catalog provider could not answer a request."""


@dataclass
class DiscoverPage:
    results: List[dict] = field(default_factory=list)
    total_pages: int = 0
    # fallback pages carry the whole dataset; no page follows them
    from_fallback: bool = False


class CatalogProvider:
    """Source of discover listings, movie details and credits."""

    static = False

    async def discover_page(self, page: int) -> dict:
        raise NotImplementedError

    async def movie_details(self, movie_id: int) -> dict:
        raise NotImplementedError

    async def movie_credits(self, movie_id: int) -> dict:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class TMDBCatalog(CatalogProvider):
    """Live TMDB API."""

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict] = None,
        params: Optional[dict] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.params = dict(params or {})
        self.client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TMDBCatalog":
        return cls(
            settings.tmdb_base_url,
            headers=settings.tmdb_headers,
            params=settings.tmdb_params,
            timeout=settings.tmdb_timeout,
            transport=transport,
        )

    async def _get(self, path: str, **params) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = await self.client.get(url, params={**self.params, **params})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogUnavailableError(f"TMDB API error {e.response.status_code} for {path}") from e
        except httpx.RequestError as e:
            raise CatalogUnavailableError(f"TMDB request failed for {path}: {e}") from e
        except ValueError as e:
            raise CatalogUnavailableError(f"TMDB returned an unreadable body for {path}") from e

        if not isinstance(data, dict):
            raise CatalogUnavailableError(f"TMDB returned an unexpected body for {path}")
        return data

    async def discover_page(self, page: int) -> dict:
        data = await self._get("/discover/movie", page=page)
        # error bodies such as {"success": false} come back with status 200
        if not isinstance(data.get("results"), list):
            raise CatalogUnavailableError(f"TMDB discover page {page} has no results list")
        return data

    async def movie_details(self, movie_id: int) -> dict:
        return await self._get(f"/movie/{movie_id}")

    async def movie_credits(self, movie_id: int) -> dict:
        data = await self._get(f"/movie/{movie_id}/credits")
        if not isinstance(data.get("cast", []), list):
            raise CatalogUnavailableError(f"TMDB credits for movie {movie_id} have no cast list")
        return data

    async def aclose(self) -> None:
        await self.client.aclose()


class FixtureCatalog(CatalogProvider):
    """Static dataset shaped like the live responses.

    ``discover.json`` holds a discover response whose ``results`` are the whole
    listing; ``movie_details.json`` and ``credits.json`` hold lists of records
    keyed by ``id``. Lookups for unknown ids return empty records.
    """

    static = True

    def __init__(self, discover: dict, details: List[dict], credits: List[dict]):
        self.discover = discover
        self.details_by_id = {record["id"]: record for record in details if "id" in record}
        self.credits_by_id = {record["id"]: record for record in credits if "id" in record}

    @classmethod
    def from_directory(cls, directory) -> "FixtureCatalog":
        directory = Path(directory)
        with open(directory / "discover.json", encoding="utf-8") as f:
            discover = json.load(f)
        with open(directory / "movie_details.json", encoding="utf-8") as f:
            details = json.load(f)
        with open(directory / "credits.json", encoding="utf-8") as f:
            credits = json.load(f)
        logger.info(
            "Loaded fallback catalog from %s (%d movies)", directory, len(discover.get("results", []))
        )
        return cls(discover, details, credits)

    async def discover_page(self, page: int) -> dict:
        return self.discover_all()

    def discover_all(self) -> dict:
        return {
            "results": list(self.discover.get("results", [])),
            "total_pages": self.discover.get("total_pages", 1),
        }

    async def movie_details(self, movie_id: int) -> dict:
        return self.details_for(movie_id)

    def details_for(self, movie_id: int) -> dict:
        return self.details_by_id.get(movie_id, {})

    async def movie_credits(self, movie_id: int) -> dict:
        return self.credits_for(movie_id)

    def credits_for(self, movie_id: int) -> dict:
        return self.credits_by_id.get(movie_id, {"cast": []})


class CatalogClient:
    """Catalog access that substitutes fallback data when the provider fails."""

    def __init__(self, provider: CatalogProvider, fallback: FixtureCatalog, fetch_timeout: Optional[float] = None):
        self.provider = provider
        self.fallback = fallback
        self.fetch_timeout = fetch_timeout

    async def _call(self, coro):
        if self.fetch_timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout=self.fetch_timeout)

    async def fetch_discover_page(self, page: int) -> DiscoverPage:
        try:
            data = await self._call(self.provider.discover_page(page))
        except (CatalogUnavailableError, asyncio.TimeoutError) as e:
            logger.warning("Discover page %d failed, using fallback dataset: %s", page, e)
            data = self.fallback.discover_all()
            return DiscoverPage(data["results"], data["total_pages"], from_fallback=True)

        return DiscoverPage(
            data.get("results", []),
            data.get("total_pages", 0),
            from_fallback=self.provider.static,
        )

    async def fetch_movie_details(self, movie_id: int) -> dict:
        try:
            return await self._call(self.provider.movie_details(movie_id))
        except (CatalogUnavailableError, asyncio.TimeoutError) as e:
            logger.warning("Details for movie %s failed, using fallback: %s", movie_id, e)
            return self.fallback.details_for(movie_id)

    async def fetch_credits(self, movie_id: int) -> dict:
        try:
            return await self._call(self.provider.movie_credits(movie_id))
        except (CatalogUnavailableError, asyncio.TimeoutError) as e:
            logger.warning("Credits for movie %s failed, using fallback: %s", movie_id, e)
            return self.fallback.credits_for(movie_id)

    async def aclose(self) -> None:
        await self.provider.aclose()


def build_catalog_client(settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> CatalogClient:
    """Pick the primary provider from settings; the fixture is always the fallback."""
    fallback = FixtureCatalog.from_directory(settings.fallback_dir)
    if settings.catalog_source == "fixture":
        provider = fallback
    else:
        provider = TMDBCatalog.from_settings(settings, transport=transport)
    return CatalogClient(provider, fallback, fetch_timeout=settings.tmdb_timeout)
