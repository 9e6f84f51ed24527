from binderbase.services.deck_service import DeckService, DeckWithCards
from binderbase.services.edhrec import EdhrecClient, color_identity_key, commander_slug
from binderbase.services.scryfall import ScryfallClient

__all__ = [
    "DeckService",
    "DeckWithCards",
    "EdhrecClient",
    "ScryfallClient",
    "color_identity_key",
    "commander_slug",
]
