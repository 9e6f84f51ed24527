"""
FastAPI dependencies.

Provider clients are built once in the application lifespan and kept on
``app.state``; these functions hand them to routes. Tests replace them
through ``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from binderbase.config import settings
from binderbase.db.database import get_session
from binderbase.services.deck_service import DeckService
from binderbase.services.edhrec import EdhrecClient
from binderbase.services.scryfall import ScryfallClient


def get_scryfall(request: Request) -> ScryfallClient:
    return request.app.state.scryfall


def get_edhrec(request: Request) -> EdhrecClient:
    return request.app.state.edhrec


def get_deck_service(
    session: Annotated[AsyncSession, Depends(get_session)],
    scryfall: Annotated[ScryfallClient, Depends(get_scryfall)],
) -> DeckService:
    """Build the per-request deck service."""
    return DeckService(session, scryfall, default_format=settings.default_deck_format)
