"""
Recommendation endpoints backed by EDHREC.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from binderbase.api.dependencies import get_edhrec
from binderbase.services.edhrec import EdhrecClient

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

Edhrec = Annotated[EdhrecClient, Depends(get_edhrec)]


class RecommendationsResponse(BaseModel):
    success: bool = True
    recommendations: dict[str, Any]


def _parse_colors(raw: str) -> list[str]:
    """Accept "WG", "W,G" or "w g" style color lists."""
    return [c for c in raw if not c.isspace() and c != ","]


@router.get("/commander/{name}", response_model=RecommendationsResponse)
async def commander_recommendations(name: str, edhrec: Edhrec) -> RecommendationsResponse:
    """
    Recommended cards for a commander, bucketed by card type.

    Returns 404 if EDHREC has no page for the commander.
    """
    recommendations = await edhrec.by_commander(name)
    return RecommendationsResponse(recommendations=recommendations.to_dict())


@router.get("/colors", response_model=RecommendationsResponse)
async def color_recommendations(edhrec: Edhrec, colors: str = "") -> RecommendationsResponse:
    """Top cards for a color identity. Unknown identities give an empty list."""
    recommendations = await edhrec.by_color_identity(_parse_colors(colors))
    return RecommendationsResponse(recommendations=recommendations.to_dict())
