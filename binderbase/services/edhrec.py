"""
EDHREC recommendation client.

EDHREC has no official API; its site is backed by static JSON pages under
https://json.edhrec.com/pages. Commander pages hold category-tagged card
lists, color identity pages hold a single top-cards list.
"""

import logging
import re
from collections.abc import Iterable
from itertools import combinations
from typing import Any

import httpx

from binderbase.config import MAX_CATEGORY_ENTRIES, MAX_COLOR_ENTRIES, settings
from binderbase.models.card import COLOR_ORDER, sort_colors
from binderbase.models.failure import NotFoundError, ProviderError
from binderbase.models.recommendations import (
    ColorRecommendations,
    CommanderRecommendations,
    RecommendationCategory,
    RecommendationEntry,
)

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")

# Header substring -> bucket. Checked in order, first match wins.
# "sorcer" covers both "Sorcery" and EDHREC's "Sorceries" header.
CATEGORY_TABLE: tuple[tuple[str, RecommendationCategory], ...] = (
    ("top cards", RecommendationCategory.TOP_CARDS),
    ("creature", RecommendationCategory.CREATURES),
    ("instant", RecommendationCategory.INSTANTS),
    ("sorcer", RecommendationCategory.SORCERIES),
    ("artifact", RecommendationCategory.ARTIFACTS),
    ("enchantment", RecommendationCategory.ENCHANTMENTS),
    ("planeswalker", RecommendationCategory.PLANESWALKERS),
    ("land", RecommendationCategory.LANDS),
)

# Every WUBRG-ordered combination -> EDHREC page key, plus colorless
COLOR_IDENTITY_KEYS: dict[str, str] = {"": "colorless"} | {
    "".join(combo): "".join(combo).lower()
    for size in range(1, len(COLOR_ORDER) + 1)
    for combo in combinations(COLOR_ORDER, size)
}


def commander_slug(name: str) -> str:
    """
    Convert a commander display name to its EDHREC page slug.

    Example: "Atraxa, Praetors' Voice" -> "atraxa-praetors-voice"
    """
    slug = _NON_SLUG_CHARS.sub("", name.lower())
    slug = _WHITESPACE_RUN.sub("-", slug)
    return _HYPHEN_RUN.sub("-", slug)


def color_identity_key(colors: Iterable[str]) -> str | None:
    """
    Map a set of color symbols to its EDHREC page key.

    Symbols are uppercased, deduplicated and put in WUBRG order, so
    ["G", "W"] -> "wg". The empty set maps to "colorless". Returns None
    when a symbol is outside WUBRG.
    """
    symbols = {c.strip().upper() for c in colors if c.strip()}
    if not symbols <= set(COLOR_ORDER):
        return None
    return COLOR_IDENTITY_KEYS.get("".join(sort_colors(tuple(symbols))))


def categorize(header: str) -> RecommendationCategory:
    """Bucket a card list by its header text, case-insensitively."""
    lowered = header.lower()
    for needle, category in CATEGORY_TABLE:
        if needle in lowered:
            return category
    return RecommendationCategory.UNRECOGNIZED


def _cardlists(page: dict[str, Any]) -> list[dict[str, Any]]:
    container = page.get("container") or {}
    json_dict = container.get("json_dict") or {}
    return list(json_dict.get("cardlists") or [])


def parse_commander_page(
    page: dict[str, Any], commander: str, slug: str
) -> CommanderRecommendations:
    """
    Bucket the card lists of a commander page.

    A later list replaces an earlier one that mapped to the same bucket.
    Lists with an unrecognized header are kept under their header.
    """
    recommendations = CommanderRecommendations(commander=commander, slug=slug)

    for cardlist in _cardlists(page):
        header = str(cardlist.get("header") or "")
        entries = [
            RecommendationEntry(
                name=str(view.get("name", "")),
                url=view.get("url"),
                inclusion=view.get("inclusion"),
                synergy=view.get("synergy"),
            )
            for view in (cardlist.get("cardviews") or [])[:MAX_CATEGORY_ENTRIES]
        ]

        category = categorize(header)
        if category is RecommendationCategory.UNRECOGNIZED:
            recommendations.unrecognized[header] = entries
        else:
            recommendations.buckets[category] = entries

    return recommendations


def parse_color_page(
    page: dict[str, Any], colors: tuple[str, ...], key: str
) -> ColorRecommendations:
    """Take the top entries of the first card list on a color identity page."""
    lists = _cardlists(page)
    views = (lists[0].get("cardviews") or []) if lists else []

    cards = [
        RecommendationEntry(
            name=str(view.get("name", "")),
            url=view.get("url"),
            num_decks=view.get("num_decks"),
            sanitized=view.get("sanitized"),
        )
        for view in views[:MAX_COLOR_ENTRIES]
    ]
    return ColorRecommendations(colors=colors, key=key, cards=cards)


class EdhrecClient:
    """Async EDHREC client over a shared httpx.AsyncClient."""

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None) -> None:
        self._http = http
        self._base_url = (base_url or settings.edhrec_base_url).rstrip("/")

    async def _get_page(self, path: str) -> httpx.Response:
        try:
            return await self._http.get(f"{self._base_url}/{path}")
        except httpx.RequestError as e:
            raise ProviderError(f"EDHREC is unreachable: {e}") from e

    async def by_commander(self, name: str) -> CommanderRecommendations:
        """
        Fetch card recommendations for a commander.

        Raises:
            NotFoundError: If EDHREC has no page for the commander
            ProviderError: If EDHREC is unreachable or fails
        """
        slug = commander_slug(name)
        if not slug.strip("-"):
            raise NotFoundError(f"Commander not found: {name}")

        response = await self._get_page(f"commanders/{slug}.json")

        if response.status_code == 404:
            raise NotFoundError(f"Commander not found: {name}")
        if response.is_error:
            raise ProviderError(
                f"EDHREC lookup for {name!r} failed: HTTP {response.status_code}"
            )

        try:
            page = response.json()
        except ValueError as e:
            raise ProviderError(f"EDHREC returned invalid JSON for {name!r}") from e

        return parse_commander_page(page, commander=name, slug=slug)

    async def by_color_identity(self, colors: Iterable[str]) -> ColorRecommendations:
        """
        Fetch top cards for a color identity.

        Fails soft: unknown color combinations and provider failures give
        an empty result.
        """
        colors = list(colors)
        key = color_identity_key(colors)
        ordered = sort_colors(tuple(dict.fromkeys(c.strip().upper() for c in colors if c.strip())))

        if key is None:
            logger.warning("Unknown color identity %s", colors)
            return ColorRecommendations(colors=ordered, key=None)

        try:
            response = await self._get_page(f"top/{key}.json")
        except ProviderError as e:
            logger.warning("Color recommendations for %s failed: %s", key, e)
            return ColorRecommendations(colors=ordered, key=key)

        if response.is_error:
            logger.warning(
                "Color recommendations for %s failed: HTTP %d", key, response.status_code
            )
            return ColorRecommendations(colors=ordered, key=key)

        try:
            page = response.json()
        except ValueError:
            logger.warning("Color recommendations for %s failed: response was not JSON", key)
            return ColorRecommendations(colors=ordered, key=key)

        return parse_color_page(page, colors=ordered, key=key)
