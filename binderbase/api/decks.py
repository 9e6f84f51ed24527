"""
Deck API endpoints.

Create, read and delete decks, set their commander, and add, update or
remove the cards they hold.
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from binderbase.api.dependencies import get_deck_service
from binderbase.models.failure import NotFoundError
from binderbase.services.deck_service import DeckService

router = APIRouter(prefix="/decks", tags=["decks"])

Service = Annotated[DeckService, Depends(get_deck_service)]


class DeckOut(BaseModel):
    """A deck header."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    format: str
    commander: str | None = None
    created_at: datetime | None = None


class DeckCardOut(BaseModel):
    """A card row inside a deck."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    deck_id: int
    card_name: str
    card_image: str | None = None
    quantity: int


class DeckDetailOut(DeckOut):
    """A deck header with its cards, ordered by card name."""

    cards: list[DeckCardOut] = Field(default_factory=list)


class DeckResponse(BaseModel):
    success: bool = True
    deck: DeckOut


class DeckListResponse(BaseModel):
    success: bool = True
    decks: list[DeckOut]


class DeckDetailResponse(BaseModel):
    success: bool = True
    deck: DeckDetailOut


class CardResponse(BaseModel):
    success: bool = True
    card: DeckCardOut


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class CreateDeckRequest(BaseModel):
    """Request model for creating a deck."""

    name: str | None = Field(default=None, examples=["Atraxa Superfriends"])
    format: str | None = Field(default=None, description="Defaults to Commander")
    commander: str | None = None


class SetCommanderRequest(BaseModel):
    """Request model for setting a deck's commander. Null clears it."""

    commander: str | None = None


class AddCardRequest(BaseModel):
    """Request model for adding a card to a deck."""

    model_config = ConfigDict(populate_by_name=True)

    card_name: str | None = Field(default=None, alias="cardName", examples=["Sol Ring"])
    quantity: int = Field(default=1, description="Copies to add, must be positive")


class UpdateQuantityRequest(BaseModel):
    """Request model for setting a card's quantity. 0 removes the card."""

    quantity: int | None = None


@router.get("", response_model=DeckListResponse)
async def list_decks(service: Service) -> DeckListResponse:
    """List all decks, newest first."""
    decks = await service.list_decks()
    return DeckListResponse(decks=[DeckOut.model_validate(d) for d in decks])


@router.post("", response_model=DeckResponse)
async def create_deck(body: CreateDeckRequest, service: Service) -> DeckResponse:
    """Create a new deck."""
    deck = await service.create_deck(body.name, body.format, body.commander)
    return DeckResponse(deck=DeckOut.model_validate(deck))


@router.get("/{deck_id}", response_model=DeckDetailResponse)
async def get_deck(deck_id: int, service: Service) -> DeckDetailResponse:
    """
    Get a deck with all its cards.

    Returns 404 if the deck does not exist.
    """
    result = await service.get_deck(deck_id)
    detail = DeckDetailOut(
        **DeckOut.model_validate(result.deck).model_dump(),
        cards=[DeckCardOut.model_validate(c) for c in result.cards],
    )
    return DeckDetailResponse(deck=detail)


@router.delete("/{deck_id}", response_model=MessageResponse)
async def delete_deck(deck_id: int, service: Service) -> MessageResponse:
    """
    Delete a deck and all its cards.

    Returns 404 if the deck was already gone.
    """
    if not await service.delete_deck(deck_id):
        raise NotFoundError(f"Deck {deck_id} not found")
    return MessageResponse(message="Deck deleted successfully")


@router.put("/{deck_id}/commander", response_model=DeckResponse)
async def set_commander(
    deck_id: int, body: SetCommanderRequest, service: Service
) -> DeckResponse:
    """Set or clear the deck's commander."""
    deck = await service.set_commander(deck_id, body.commander)
    return DeckResponse(deck=DeckOut.model_validate(deck))


@router.post("/{deck_id}/cards", response_model=CardResponse)
async def add_card(deck_id: int, body: AddCardRequest, service: Service) -> CardResponse:
    """
    Add a card to a deck.

    Adding a card the deck already holds increases its quantity.
    """
    row = await service.add_card(deck_id, body.card_name, body.quantity)
    return CardResponse(card=DeckCardOut.model_validate(row))


@router.put("/{deck_id}/cards/{card_id}", response_model=CardResponse | MessageResponse)
async def update_card_quantity(
    deck_id: int, card_id: int, body: UpdateQuantityRequest, service: Service
) -> CardResponse | MessageResponse:
    """Set a card's quantity. A quantity of 0 removes the card."""
    row = await service.set_card_quantity(deck_id, card_id, body.quantity)
    if row is None:
        return MessageResponse(message="Card removed from deck")
    return CardResponse(card=DeckCardOut.model_validate(row))


@router.delete("/{deck_id}/cards/{card_id}", response_model=MessageResponse)
async def remove_card(deck_id: int, card_id: int, service: Service) -> MessageResponse:
    """Remove a card from a deck. Succeeds even if it was already removed."""
    await service.remove_card(deck_id, card_id)
    return MessageResponse(message="Card removed from deck")
