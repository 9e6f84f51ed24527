from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RecommendationCategory(str, Enum):
    """Buckets that EDHREC commander card lists are sorted into."""

    TOP_CARDS = "top_cards"
    CREATURES = "creatures"
    INSTANTS = "instants"
    SORCERIES = "sorceries"
    ARTIFACTS = "artifacts"
    ENCHANTMENTS = "enchantments"
    PLANESWALKERS = "planeswalkers"
    LANDS = "lands"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class RecommendationEntry:
    """
    One recommended card.

    Commander pages fill inclusion and synergy; color identity pages fill
    num_decks and sanitized.
    """

    name: str
    url: str | None = None
    inclusion: float | None = None
    synergy: float | None = None
    num_decks: int | None = None
    sanitized: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "url": self.url}
        if self.inclusion is not None:
            payload["inclusion"] = self.inclusion
        if self.synergy is not None:
            payload["synergy"] = self.synergy
        if self.num_decks is not None:
            payload["num_decks"] = self.num_decks
        if self.sanitized is not None:
            payload["sanitized"] = self.sanitized
        return payload


def _empty_buckets() -> dict[RecommendationCategory, list[RecommendationEntry]]:
    return {
        category: []
        for category in RecommendationCategory
        if category is not RecommendationCategory.UNRECOGNIZED
    }


@dataclass
class CommanderRecommendations:
    """
    Card recommendations for one commander, bucketed by category.

    Attributes:
        commander: Commander display name as requested
        slug: EDHREC page slug derived from the name
        buckets: Known categories, always all present
        unrecognized: Lists whose header matched no category, keyed by header
    """

    commander: str
    slug: str
    buckets: dict[RecommendationCategory, list[RecommendationEntry]] = field(
        default_factory=_empty_buckets
    )
    unrecognized: dict[str, list[RecommendationEntry]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"commander": self.commander, "slug": self.slug}
        for category, entries in self.buckets.items():
            payload[category.value] = [entry.to_dict() for entry in entries]
        payload[RecommendationCategory.UNRECOGNIZED.value] = {
            header: [entry.to_dict() for entry in entries]
            for header, entries in self.unrecognized.items()
        }
        return payload


@dataclass
class ColorRecommendations:
    """Top cards for a color identity."""

    colors: tuple[str, ...]
    key: str | None
    cards: list[RecommendationEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "colors": list(self.colors),
            "key": self.key,
            "cards": [entry.to_dict() for entry in self.cards],
        }
