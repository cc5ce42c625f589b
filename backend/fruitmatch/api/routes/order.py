"""Tile-order analysis and reordering API routes."""
import random
from fastapi import APIRouter, Depends, HTTPException

from ...config import Settings
from ...models.schemas import (
    OrderAnalyzeRequest,
    OrderAnalyzeResponse,
    OrderOptimizeRequest,
    OrderOptimizeResponse,
    ErrorResponse,
)
from ...core.capacity import count_fruits, generate_launcher_queue
from ...core.order_difficulty import OrderDifficultyCalculator, optimize_tile_order
from ..deps import get_order_difficulty_calculator, get_app_settings
from .analyze import parse_level

router = APIRouter(prefix="/api", tags=["order"])


@router.post(
    "/analyze/order",
    response_model=OrderAnalyzeResponse,
    responses={400: {"model": ErrorResponse}},
)
async def analyze_order(
    request: OrderAnalyzeRequest,
    calculator: OrderDifficultyCalculator = Depends(get_order_difficulty_calculator),
    settings: Settings = Depends(get_app_settings),
) -> OrderAnalyzeResponse:
    """
    Score how hard the order of tiles in a level's sink makes it.

    Launchers are taken in fruit order. The simulation count falls back to
    the configured default.
    """
    try:
        level = parse_level(request.level_json)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Order analysis failed: {e}")

    metrics = calculator.calculate_level(
        level,
        run_simulation=request.run_simulation,
        simulations=request.simulations or settings.order_simulations,
        rng=random.Random(request.seed),
    )
    return OrderAnalyzeResponse(score=metrics.order_difficulty_score, metrics=metrics.to_dict())


@router.post(
    "/optimize-order",
    response_model=OrderOptimizeResponse,
    responses={400: {"model": ErrorResponse}},
)
async def optimize_order(request: OrderOptimizeRequest) -> OrderOptimizeResponse:
    """Reorder a level's sink towards easy, medium or hard play."""
    try:
        level = parse_level(request.level_json)
        result = optimize_tile_order(
            level.sink_stacks,
            generate_launcher_queue(level.pixel_art, shuffle=False),
            level.waiting_stand_slots,
            sum(1 for c in count_fruits(level.pixel_art).values() if c > 0),
            request.target,
            seed=request.seed,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Reordering failed: {e}")

    level.sink_stacks = result.optimized_stacks
    return OrderOptimizeResponse(
        original_score=result.original_score,
        optimized_score=result.optimized_score,
        improvement=result.improvement,
        strategy=result.strategy,
        level_json=level.to_dict(),
    )
