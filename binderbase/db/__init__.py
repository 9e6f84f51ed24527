from binderbase.db.database import Database, get_session
from binderbase.db.operations import (
    create_deck,
    delete_deck,
    delete_deck_card,
    delete_deck_cards,
    find_deck_card,
    get_deck,
    get_deck_card,
    get_deck_cards,
    insert_deck_card,
    list_decks,
    set_deck_commander,
    update_deck_card_quantity,
)

__all__ = [
    "Database",
    "create_deck",
    "delete_deck",
    "delete_deck_card",
    "delete_deck_cards",
    "find_deck_card",
    "get_deck",
    "get_deck_card",
    "get_deck_cards",
    "get_session",
    "insert_deck_card",
    "list_decks",
    "set_deck_commander",
    "update_deck_card_quantity",
]
