from dataclasses import dataclass
from typing import Any

from binderbase.models.failure import ProviderError

# Canonical color symbol order (W, U, B, R, G)
COLOR_ORDER = "WUBRG"


def sort_colors(colors: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    """Sort color symbols into WUBRG order. Unknown symbols sort last."""
    return tuple(
        sorted(
            colors,
            key=lambda c: COLOR_ORDER.index(c) if c in COLOR_ORDER else len(COLOR_ORDER),
        )
    )


def _image_url(payload: dict[str, Any]) -> str | None:
    """
    Pick the display image for a Scryfall card.

    Multi-faced cards carry no top-level image_uris; the first face is
    used instead.
    """
    image_uris = payload.get("image_uris") or {}
    if image_uris.get("normal"):
        return str(image_uris["normal"])

    faces = payload.get("card_faces") or []
    if faces:
        face_uris = faces[0].get("image_uris") or {}
        if face_uris.get("normal"):
            return str(face_uris["normal"])

    return None


@dataclass(frozen=True, slots=True)
class NormalizedCard:
    """
    A card as returned by Scryfall, reduced to the fields we use.

    Attributes:
        name: Canonical card name, used as the dedup key inside a deck
        image_url: Display image (first face for multi-faced cards)
        scryfall_id: Scryfall's card id
        type_line: Full type line, e.g. "Artifact" or "Creature — Elf Druid"
        mana_cost: Mana cost string, None when Scryfall omits it
        colors: Color symbols in WUBRG order
        oracle_text: Rules text, None when Scryfall omits it
    """

    name: str
    image_url: str | None
    scryfall_id: str | None
    type_line: str | None
    mana_cost: str | None
    colors: tuple[str, ...]
    oracle_text: str | None = None

    @classmethod
    def from_scryfall(cls, payload: dict[str, Any]) -> "NormalizedCard":
        """
        Map a Scryfall card object onto the internal shape.

        Absent optional fields stay None. Everything not listed on the
        dataclass is discarded.

        Raises:
            ProviderError: If the payload has no card name
        """
        name = payload.get("name")
        if not name:
            raise ProviderError("Scryfall returned a card without a name")

        return cls(
            name=str(name),
            image_url=_image_url(payload),
            scryfall_id=payload.get("id"),
            type_line=payload.get("type_line"),
            mana_cost=payload.get("mana_cost"),
            colors=sort_colors(payload.get("colors") or []),
            oracle_text=payload.get("oracle_text"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "image": self.image_url,
            "scryfallId": self.scryfall_id,
            "type": self.type_line,
            "manaCost": self.mana_cost,
            "colors": list(self.colors),
            "oracleText": self.oracle_text,
        }


@dataclass(frozen=True, slots=True)
class CommanderSummary:
    """A legal commander found through Scryfall search."""

    name: str
    color_identity: tuple[str, ...]
    image_url: str | None

    @classmethod
    def from_scryfall(cls, payload: dict[str, Any]) -> "CommanderSummary":
        card = NormalizedCard.from_scryfall(payload)
        return cls(
            name=card.name,
            color_identity=sort_colors(payload.get("color_identity") or []),
            image_url=card.image_url,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "colors": list(self.color_identity),
            "image": self.image_url,
        }
