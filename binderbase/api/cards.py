"""
Card lookup endpoints.

Thin pass-throughs to Scryfall search and autocomplete. Provider failures
come back as empty lists, not errors.
"""

from contextlib import aclosing
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from binderbase.api.dependencies import get_scryfall
from binderbase.models.failure import ValidationError
from binderbase.services.scryfall import ScryfallClient

router = APIRouter(prefix="/cards", tags=["cards"])

Scryfall = Annotated[ScryfallClient, Depends(get_scryfall)]

# One Scryfall search page holds 175 cards
DEFAULT_SEARCH_LIMIT = 175


class CardSearchResponse(BaseModel):
    success: bool = True
    cards: list[dict[str, Any]]


class AutocompleteResponse(BaseModel):
    success: bool = True
    suggestions: list[str]


class CommanderSearchResponse(BaseModel):
    success: bool = True
    commanders: list[dict[str, Any]]


@router.get("/search", response_model=CardSearchResponse)
async def search_cards(
    scryfall: Scryfall,
    q: str | None = None,
    limit: Annotated[int, Query(ge=1, le=500)] = DEFAULT_SEARCH_LIMIT,
) -> CardSearchResponse:
    """Search Scryfall. Stops after ``limit`` cards."""
    if not q or not q.strip():
        raise ValidationError("Search query is required")

    cards: list[dict[str, Any]] = []
    async with aclosing(scryfall.search(q.strip())) as results:
        async for card in results:
            cards.append(card.to_dict())
            if len(cards) >= limit:
                break

    return CardSearchResponse(cards=cards)


@router.get("/autocomplete", response_model=AutocompleteResponse)
async def autocomplete(scryfall: Scryfall, q: str = "") -> AutocompleteResponse:
    """Suggest card names. Queries under two characters return nothing."""
    return AutocompleteResponse(suggestions=await scryfall.autocomplete(q))


@router.get("/commanders", response_model=CommanderSearchResponse)
async def search_commanders(
    scryfall: Scryfall,
    q: str = "",
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> CommanderSearchResponse:
    """Find legal commanders matching a query."""
    commanders = await scryfall.search_commanders(q, limit=limit)
    return CommanderSearchResponse(commanders=[c.to_dict() for c in commanders])
