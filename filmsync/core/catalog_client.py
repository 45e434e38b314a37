# filmsync/core/catalog_client.py
"""
HTTP client for the upstream film catalog (SWAPI).

The catalog is read-only and fetched fresh on every call; there is no
caching and no retry. Any transport error or non-2xx response is raised
as CatalogError so the caller never mistakes an outage for "no films".
"""

import logging
from functools import lru_cache

import httpx
from pydantic import ValidationError

from filmsync.core.config import get_settings
from filmsync.core.errors import CatalogError
from filmsync.schemas.catalog import Film, FilmPage

logger = logging.getLogger(__name__)

# Guard against a catalog that keeps handing out `next` links
MAX_PAGES = 20


class CatalogClient:
    """
    Read access to the film catalog.

    Args:
        http: shared httpx.Client (owned by the caller).
        base_url: films endpoint, e.g. "https://swapi.dev/api/films/".
    """

    def __init__(self, http: httpx.Client, base_url: str):
        self.http = http
        self.base_url = base_url

    def _get_page(self, url: str) -> FilmPage:
        try:
            response = self.http.get(url)
            response.raise_for_status()
            return FilmPage.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            logger.warning("Catalog returned %s for %s", exc.response.status_code, url)
            raise CatalogError(
                f"Catalog request failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Catalog request to %s failed: %s", url, exc)
            raise CatalogError(f"Catalog request failed: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise CatalogError(f"Catalog returned an invalid payload: {exc}") from exc

    def list_films(self) -> list[Film]:
        """
        Fetch every film, following the `next` links of the paginated list.

        Raises:
            CatalogError: on any upstream failure.
        """
        films: list[Film] = []
        url: str | None = self.base_url
        for _ in range(MAX_PAGES):
            if url is None:
                break
            page = self._get_page(url)
            films.extend(page.results)
            url = page.next
        return films

    def get_film(self, episode_id: str) -> Film | None:
        """
        Return the film with the given episode id, or None if the catalog
        does not know it.

        The catalog's own resource ids differ from episode ids, so the
        lookup scans the film list.
        """
        for film in self.list_films():
            if str(film.episode_id) == episode_id:
                return film
        return None

    def close(self) -> None:
        self.http.close()


@lru_cache
def get_catalog_client() -> CatalogClient:
    """
    Process-wide catalog client, built on first use.

    FastAPI dependency; tests override it with a MockTransport-backed client.
    """
    settings = get_settings()
    http = httpx.Client(timeout=settings.CATALOG_TIMEOUT_SECONDS)
    return CatalogClient(http, settings.CATALOG_BASE_URL)
