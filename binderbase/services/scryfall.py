"""
Scryfall card lookup client.

Resolves card names, runs searches and autocompletes through the public
Scryfall API. Responses are mapped onto NormalizedCard; nothing else from
the provider payload leaks past this module.

API docs: https://scryfall.com/docs/api
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import Any

import httpx

from binderbase.config import MIN_AUTOCOMPLETE_LENGTH, settings
from binderbase.models.card import CommanderSummary, NormalizedCard
from binderbase.models.failure import NotFoundError, ProviderError

logger = logging.getLogger(__name__)


class ScryfallClient:
    """
    Async Scryfall client over a shared httpx.AsyncClient.

    The HTTP client is owned by the application lifespan; this class
    never opens or closes it.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None) -> None:
        self._http = http
        self._base_url = (base_url or settings.scryfall_base_url).rstrip("/")

    async def _get(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        try:
            return await self._http.get(url, params=params)
        except httpx.RequestError as e:
            raise ProviderError(f"Scryfall is unreachable: {e}") from e

    async def by_exact_name(self, name: str) -> NormalizedCard:
        """
        Look up a card by its exact name.

        Args:
            name: Card name as typed by the user

        Returns:
            The normalized card, carrying the canonical name

        Raises:
            NotFoundError: If Scryfall has no exact match
            ProviderError: If Scryfall is unreachable or fails
        """
        response = await self._get(f"{self._base_url}/cards/named", params={"exact": name})

        if response.status_code == 404:
            raise NotFoundError(f"Card not found: {name}")
        if response.is_error:
            raise ProviderError(
                f"Scryfall lookup for {name!r} failed: HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"Scryfall returned invalid JSON for {name!r}") from e

        return NormalizedCard.from_scryfall(payload)

    async def _iter_search_pages(self, query: str) -> AsyncGenerator[dict[str, Any], None]:
        url = f"{self._base_url}/cards/search"
        params: dict[str, str] | None = {"q": query}

        while url:
            try:
                response = await self._get(url, params=params)
            except ProviderError as e:
                logger.warning("Search for %r stopped: %s", query, e)
                return

            if response.status_code == 404:
                # Scryfall answers 404 when a query has no matches
                return
            if response.is_error:
                logger.warning(
                    "Search for %r stopped: HTTP %d", query, response.status_code
                )
                return

            try:
                page = response.json()
            except ValueError:
                logger.warning("Search for %r stopped: response was not JSON", query)
                return

            for card in page.get("data", []):
                yield card

            if not page.get("has_more"):
                return
            # next_page already carries the query string
            url = page.get("next_page", "")
            params = None

    async def search(self, query: str) -> AsyncGenerator[NormalizedCard, None]:
        """
        Run a full-text Scryfall search.

        Yields cards lazily, fetching further pages only as the consumer
        reaches them. The sequence is empty when Scryfall finds nothing or
        cannot be reached; search never raises for provider failures.
        """
        async with aclosing(self._iter_search_pages(query)) as pages:
            async for payload in pages:
                try:
                    card = NormalizedCard.from_scryfall(payload)
                except ProviderError:
                    logger.warning("Skipping nameless card in search for %r", query)
                    continue
                yield card

    async def autocomplete(self, partial: str) -> list[str]:
        """
        Suggest card names for a partial name.

        Returns an empty list without calling Scryfall for inputs shorter
        than two characters, and on any provider failure.
        """
        partial = partial.strip()
        if len(partial) < MIN_AUTOCOMPLETE_LENGTH:
            return []

        try:
            response = await self._get(
                f"{self._base_url}/cards/autocomplete", params={"q": partial}
            )
        except ProviderError as e:
            logger.warning("Autocomplete for %r failed: %s", partial, e)
            return []

        if response.is_error:
            logger.warning("Autocomplete for %r failed: HTTP %d", partial, response.status_code)
            return []

        try:
            suggestions = response.json().get("data", [])
        except ValueError:
            logger.warning("Autocomplete for %r failed: response was not JSON", partial)
            return []

        return [str(name) for name in suggestions]

    async def search_commanders(self, query: str, limit: int = 10) -> list[CommanderSummary]:
        """Find cards that can be a commander and match the query."""
        query = query.strip()
        if not query:
            return []

        commanders: list[CommanderSummary] = []
        async with aclosing(self._iter_search_pages(f"{query} is:commander")) as pages:
            async for payload in pages:
                if not payload.get("name"):
                    continue
                commanders.append(CommanderSummary.from_scryfall(payload))
                if len(commanders) >= limit:
                    break

        return commanders
