"""
Health check endpoints.

``/health`` only says the process is up. ``/ready`` also runs a trivial
query against the record store.
"""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from binderbase.config import settings
from binderbase.db.database import get_session

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    success: bool = True
    status: str
    message: str


class ReadyResponse(BaseModel):
    success: bool
    status: str
    database: str
    timestamp: datetime


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe. Does not touch the database."""
    return HealthResponse(status="ok", message=f"{settings.app_name} API is running")


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={503: {"model": ReadyResponse}},
)
async def ready(
    response: Response,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ReadyResponse:
    """
    Readiness probe.

    Returns 503 if the database cannot be reached.
    """
    now = datetime.now(UTC)
    try:
        await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadyResponse(
            success=False, status="not ready", database="disconnected", timestamp=now
        )
    return ReadyResponse(success=True, status="ready", database="connected", timestamp=now)
