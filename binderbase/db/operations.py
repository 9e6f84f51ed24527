"""
Database CRUD operations.

Filter/insert/update/delete primitives for deck headers and deck
membership rows. Reconciliation rules live in the deck service; these
functions only touch the store.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from binderbase.models.db import DeckCardDB, DeckDB

# --- Deck Operations ---


async def list_decks(session: AsyncSession) -> list[DeckDB]:
    """Get all decks, newest first."""
    result = await session.execute(
        select(DeckDB).order_by(DeckDB.created_at.desc(), DeckDB.id.desc())
    )
    return list(result.scalars().all())


async def get_deck(session: AsyncSession, deck_id: int) -> DeckDB | None:
    """
    Get a deck header by id.

    Returns None if no deck exists with this id.
    """
    result = await session.execute(select(DeckDB).where(DeckDB.id == deck_id))
    return result.scalar_one_or_none()


async def create_deck(
    session: AsyncSession,
    name: str,
    format_name: str,
    commander: str | None = None,
) -> DeckDB:
    """Insert a new deck header. Names are not required to be unique."""
    deck = DeckDB(name=name, format=format_name, commander=commander)
    session.add(deck)
    await session.flush()
    await session.refresh(deck)
    return deck


async def set_deck_commander(
    session: AsyncSession, deck: DeckDB, commander: str | None
) -> DeckDB:
    """Set, replace or clear the commander of a loaded deck."""
    deck.commander = commander
    await session.flush()
    await session.refresh(deck)
    return deck


async def delete_deck(session: AsyncSession, deck_id: int) -> int:
    """
    Delete a deck header.

    Returns the number of deleted records (0 or 1). Membership rows are
    not touched here; see delete_deck_cards.
    """
    result = await session.execute(delete(DeckDB).where(DeckDB.id == deck_id))
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]


# --- Deck Card Operations ---


async def get_deck_cards(session: AsyncSession, deck_id: int) -> list[DeckCardDB]:
    """Get all membership rows for a deck, ordered by card name."""
    result = await session.execute(
        select(DeckCardDB)
        .where(DeckCardDB.deck_id == deck_id)
        .order_by(DeckCardDB.card_name.asc(), DeckCardDB.id.asc())
    )
    return list(result.scalars().all())


async def find_deck_card(session: AsyncSession, deck_id: int, card_name: str) -> DeckCardDB | None:
    """Get the membership row for a card name in a deck, if any."""
    result = await session.execute(
        select(DeckCardDB).where(
            DeckCardDB.deck_id == deck_id,
            DeckCardDB.card_name == card_name,
        )
    )
    return result.scalars().first()


async def get_deck_card(session: AsyncSession, deck_id: int, card_id: int) -> DeckCardDB | None:
    """
    Get a membership row by id, scoped to its deck.

    A row id that belongs to another deck is treated as absent.
    """
    result = await session.execute(
        select(DeckCardDB).where(
            DeckCardDB.id == card_id,
            DeckCardDB.deck_id == deck_id,
        )
    )
    return result.scalar_one_or_none()


async def insert_deck_card(
    session: AsyncSession,
    deck_id: int,
    card_name: str,
    card_image: str | None,
    quantity: int,
) -> DeckCardDB:
    """Insert a new membership row."""
    row = DeckCardDB(
        deck_id=deck_id,
        card_name=card_name,
        card_image=card_image,
        quantity=quantity,
    )
    session.add(row)
    await session.flush()
    return row


async def update_deck_card_quantity(
    session: AsyncSession, row: DeckCardDB, quantity: int
) -> DeckCardDB:
    """Overwrite the quantity of a loaded membership row."""
    row.quantity = quantity
    await session.flush()
    return row


async def delete_deck_card(session: AsyncSession, deck_id: int, card_id: int) -> int:
    """
    Delete one membership row, scoped to its deck.

    Returns the number of deleted records. Deleting a missing row is not
    an error.
    """
    result = await session.execute(
        delete(DeckCardDB).where(
            DeckCardDB.id == card_id,
            DeckCardDB.deck_id == deck_id,
        )
    )
    return int(result.rowcount)  # type: ignore[attr-defined]


async def delete_deck_cards(session: AsyncSession, deck_id: int) -> int:
    """
    Delete every membership row of a deck.

    Returns the number of deleted records.
    """
    result = await session.execute(delete(DeckCardDB).where(DeckCardDB.deck_id == deck_id))
    return int(result.rowcount)  # type: ignore[attr-defined]
