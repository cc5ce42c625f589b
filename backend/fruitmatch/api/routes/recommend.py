"""Difficulty tier recommendation API routes."""
from fastapi import APIRouter, HTTPException

from ...models.level import DifficultyTier
from ...models.schemas import RecommendedSettingsResponse, ErrorResponse
from ...core.estimation import get_recommended_settings

router = APIRouter(prefix="/api", tags=["recommend"])


@router.get(
    "/recommend/{tier}",
    response_model=RecommendedSettingsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def recommend_settings(tier: str) -> RecommendedSettingsResponse:
    """Recommended grid size, colours, waiting stand and sink width for a tier."""
    try:
        settings = get_recommended_settings(tier)
    except ValueError:
        valid = [t.value for t in DifficultyTier]
        raise HTTPException(status_code=404, detail=f"Unknown tier '{tier}'. Must be one of: {valid}")

    return RecommendedSettingsResponse(tier=tier, **settings.to_dict())
