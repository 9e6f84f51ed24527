"""
Deck reconciliation service.

Keeps a deck's membership rows in sync with the names users type:

1. Card names are resolved through Scryfall; the canonical name is the
   dedup key, so a deck holds at most one row per card
2. Adding a card that is already present increases its quantity
3. Setting a quantity to 0 deletes the row; zero rows are never stored
4. Deleting a deck deletes its rows first, then the header

Every write in one call shares the request's session and is committed
once at the end. A failure rolls back the whole call.

The add path reads then writes without locking. Two concurrent adds of
the same card can lose one increment.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from binderbase.config import settings
from binderbase.db import operations as ops
from binderbase.models.db import DeckCardDB, DeckDB
from binderbase.models.failure import NotFoundError, StoreError, ValidationError
from binderbase.services.scryfall import ScryfallClient

logger = logging.getLogger(__name__)


@dataclass
class DeckWithCards:
    """A deck header merged with its membership rows."""

    deck: DeckDB
    cards: list[DeckCardDB]


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Store failure while trying to %s: %s", action, e)
        raise StoreError(f"Failed to {action}", detail=str(e)) from e


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require_int(value: object, field: str) -> int:
    # bool is an int subclass but never a valid quantity
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    return value


class DeckService:
    """
    Deck and deck-card operations for one request.

    Args:
        session: Request-scoped database session
        scryfall: Card lookup client used to resolve card names
        default_format: Format label for decks created without one
    """

    def __init__(
        self,
        session: AsyncSession,
        scryfall: ScryfallClient,
        default_format: str | None = None,
    ) -> None:
        self._session = session
        self._scryfall = scryfall
        self._default_format = default_format or settings.default_deck_format

    async def _commit(self, action: str) -> None:
        with _store_errors(action):
            await self._session.commit()

    async def _require_deck(self, deck_id: int) -> DeckDB:
        with _store_errors("load deck"):
            deck = await ops.get_deck(self._session, deck_id)
        if deck is None:
            raise NotFoundError(f"Deck {deck_id} not found")
        return deck

    # --- Decks ---

    async def list_decks(self) -> list[DeckDB]:
        """All decks, newest first."""
        with _store_errors("list decks"):
            return await ops.list_decks(self._session)

    async def create_deck(
        self,
        name: str | None,
        format_name: str | None = None,
        commander: str | None = None,
    ) -> DeckDB:
        """
        Create a deck. Duplicate names are allowed.

        Raises:
            ValidationError: If name is missing or blank
        """
        clean_name = _clean(name)
        if clean_name is None:
            raise ValidationError("Deck name is required")

        with _store_errors("create deck"):
            deck = await ops.create_deck(
                self._session,
                name=clean_name,
                format_name=_clean(format_name) or self._default_format,
                commander=_clean(commander),
            )
        await self._commit("create deck")

        logger.info("Created deck %d (%s)", deck.id, deck.name)
        return deck

    async def get_deck(self, deck_id: int) -> DeckWithCards:
        """
        Fetch a deck and its cards ordered by card name.

        Header and rows are read with two separate queries.

        Raises:
            NotFoundError: If the deck does not exist
        """
        deck = await self._require_deck(deck_id)
        with _store_errors("load deck cards"):
            cards = await ops.get_deck_cards(self._session, deck_id)
        return DeckWithCards(deck=deck, cards=cards)

    async def set_commander(self, deck_id: int, commander: str | None) -> DeckDB:
        """
        Set, replace or clear (None or blank) a deck's commander.

        Raises:
            NotFoundError: If the deck does not exist
        """
        deck = await self._require_deck(deck_id)
        with _store_errors("set commander"):
            deck = await ops.set_deck_commander(self._session, deck, _clean(commander))
        await self._commit("set commander")
        return deck

    async def delete_deck(self, deck_id: int) -> bool:
        """
        Delete a deck and all of its cards.

        Rows go first, then the header. If deleting the rows fails the
        header is left alone. Both deletes commit together.

        Returns:
            True if a deck was deleted, False if it did not exist
        """
        with _store_errors("delete deck cards"):
            removed_cards = await ops.delete_deck_cards(self._session, deck_id)
        with _store_errors("delete deck"):
            removed = await ops.delete_deck(self._session, deck_id)
        await self._commit("delete deck")

        if removed:
            logger.info("Deleted deck %d with %d card rows", deck_id, removed_cards)
        return removed > 0

    # --- Deck cards ---

    async def add_card(
        self, deck_id: int, raw_card_name: str | None, quantity: object = 1
    ) -> DeckCardDB:
        """
        Add copies of a card to a deck.

        The name is resolved through Scryfall first. If the deck already
        holds the canonical name its quantity grows by ``quantity``,
        otherwise a new row is inserted.

        Raises:
            ValidationError: If the name is blank or quantity is not positive
            NotFoundError: If the deck does not exist or Scryfall has no match
            ProviderError: If Scryfall fails
            StoreError: If the store fails
        """
        card_name = _clean(raw_card_name)
        if card_name is None:
            raise ValidationError("Card name is required")
        quantity = _require_int(quantity, "quantity")
        if quantity < 1:
            raise ValidationError("quantity must be a positive integer")

        await self._require_deck(deck_id)
        card = await self._scryfall.by_exact_name(card_name)

        with _store_errors("add card"):
            existing = await ops.find_deck_card(self._session, deck_id, card.name)
            if existing is not None:
                row = await ops.update_deck_card_quantity(
                    self._session, existing, existing.quantity + quantity
                )
            else:
                row = await ops.insert_deck_card(
                    self._session,
                    deck_id=deck_id,
                    card_name=card.name,
                    card_image=card.image_url,
                    quantity=quantity,
                )
        await self._commit("add card")

        logger.info("Deck %d now has %d x %s", deck_id, row.quantity, row.card_name)
        return row

    async def set_card_quantity(
        self, deck_id: int, card_id: int, quantity: object
    ) -> DeckCardDB | None:
        """
        Set the quantity of a card row in a deck.

        A quantity of 0 deletes the row and returns None; deleting a row
        that does not exist is not an error. Any other quantity updates
        the row, which must belong to ``deck_id``.

        Raises:
            ValidationError: If quantity is missing, not an integer or negative
            NotFoundError: If quantity > 0 and the deck has no such row
        """
        if quantity is None:
            raise ValidationError("Valid quantity is required")
        quantity = _require_int(quantity, "quantity")
        if quantity < 0:
            raise ValidationError("Valid quantity is required")

        if quantity == 0:
            with _store_errors("remove card"):
                await ops.delete_deck_card(self._session, deck_id, card_id)
            await self._commit("remove card")
            return None

        with _store_errors("update card quantity"):
            row = await ops.get_deck_card(self._session, deck_id, card_id)
            if row is None:
                raise NotFoundError(f"Card {card_id} not found in deck {deck_id}")
            row = await ops.update_deck_card_quantity(self._session, row, quantity)
        await self._commit("update card quantity")
        return row

    async def remove_card(self, deck_id: int, card_id: int) -> None:
        """Remove a card row from a deck. Succeeds even if already absent."""
        await self.set_card_quantity(deck_id, card_id, 0)
