from binderbase.api.cards import router as cards_router
from binderbase.api.decks import router as decks_router
from binderbase.api.health import router as health_router
from binderbase.api.recommendations import router as recommendations_router

__all__ = [
    "cards_router",
    "decks_router",
    "health_router",
    "recommendations_router",
]
