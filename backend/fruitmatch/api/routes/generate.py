"""Solvable level generation API routes."""
from fastapi import APIRouter, Depends, HTTPException

from ...config import Settings
from ...models.level import GenerationParams
from ...models.schemas import GenerateRequest, GenerateResponse, ErrorResponse
from ...core.generator import SinkGenerator
from ..deps import get_sink_generator, get_app_settings
from .analyze import parse_level

router = APIRouter(prefix="/api", tags=["generate"])


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_level(
    request: GenerateRequest,
    generator: SinkGenerator = Depends(get_sink_generator),
    settings: Settings = Depends(get_app_settings),
) -> GenerateResponse:
    """
    Generate a solvable sink for a pattern.

    Unset shape parameters fall back to the configured defaults.

    Args:
        request: GenerateRequest with pixel art and sink shape.
        generator: SinkGenerator dependency.
        settings: Application settings for defaults.

    Returns:
        GenerateResponse with the level, its metrics and generation time.
    """
    try:
        pattern = parse_level({"pixelArt": request.pixel_art}).pixel_art
        params = GenerationParams(
            pixel_art=pattern,
            sink_width=request.sink_width or settings.default_sink_width,
            waiting_stand_slots=request.waiting_stand_slots or settings.default_waiting_stand_slots,
            min_stack_height=(
                request.min_stack_height
                if request.min_stack_height is not None
                else settings.default_min_stack_height
            ),
            max_stack_height=(
                request.max_stack_height
                if request.max_stack_height is not None
                else settings.default_max_stack_height
            ),
            seed=request.seed,
            name=request.name,
        )
        result = generator.generate(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Generation failed: {e}")

    return GenerateResponse(**result.to_dict())
