"""Level analysis API routes."""
import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import Any, Dict, List

from ...models.level import FruitMatchLevel
from ...models.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    SolvabilityRequest,
    SolvabilityResponse,
    EstimateRequest,
    EstimateResponse,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
    BatchAnalyzeResultItem,
    ErrorResponse,
)
from ...core.difficulty import DifficultyCalculator
from ...core.estimation import estimate_completion_time
from ...core.solvability import check_level_solvability
from ...utils.helpers import validate_level_json
from ..deps import get_difficulty_calculator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


def parse_level(level_json: Dict[str, Any]) -> FruitMatchLevel:
    """Validate and parse level JSON, raising ValueError on bad structure."""
    is_valid, error = validate_level_json(level_json)
    if not is_valid:
        raise ValueError(error)
    return FruitMatchLevel.from_dict(level_json)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}},
)
async def analyze_level(
    request: AnalyzeRequest,
    calculator: DifficultyCalculator = Depends(get_difficulty_calculator),
) -> AnalyzeResponse:
    """
    Analyze a level and return difficulty metrics.

    Args:
        request: AnalyzeRequest with level_json.
        calculator: DifficultyCalculator dependency.

    Returns:
        AnalyzeResponse with score, tier, solvability and metrics.
    """
    try:
        level = parse_level(request.level_json)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Analysis failed: {e}")

    metrics = calculator.calculate(level)
    return AnalyzeResponse(
        score=metrics.difficulty_score,
        tier=metrics.difficulty_tier.value,
        is_solvable=metrics.is_solvable,
        issues=metrics.solvability_issues,
        metrics=metrics.to_dict(),
        estimated_minutes=estimate_completion_time(metrics).to_dict(),
    )


@router.post(
    "/solvability",
    response_model=SolvabilityResponse,
    responses={400: {"model": ErrorResponse}},
)
async def check_level(request: SolvabilityRequest) -> SolvabilityResponse:
    """Check whether a level's sink exactly covers its launchers."""
    try:
        level = parse_level(request.level_json)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Solvability check failed: {e}")

    report = check_level_solvability(level)
    return SolvabilityResponse(**report.to_dict())


@router.post(
    "/estimate",
    response_model=EstimateResponse,
    responses={400: {"model": ErrorResponse}},
)
async def estimate_level(
    request: EstimateRequest,
    calculator: DifficultyCalculator = Depends(get_difficulty_calculator),
) -> EstimateResponse:
    """Estimate completion time in minutes for a level."""
    try:
        level = parse_level(request.level_json)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Estimation failed: {e}")

    estimate = estimate_completion_time(calculator.calculate(level))
    return EstimateResponse(**estimate.to_dict())


@router.post("/levels/batch-analyze", response_model=BatchAnalyzeResponse)
async def batch_analyze_levels(
    request: BatchAnalyzeRequest,
    calculator: DifficultyCalculator = Depends(get_difficulty_calculator),
) -> BatchAnalyzeResponse:
    """
    Analyze multiple levels in batch.

    A malformed level is reported in its own result item and does not fail
    the batch.
    """
    results: List[BatchAnalyzeResultItem] = []

    for i, level_json in enumerate(request.levels):
        level_id = str(level_json.get("id") or f"level_{i}")
        try:
            metrics = calculator.calculate(parse_level(level_json))
            results.append(BatchAnalyzeResultItem(
                level_id=level_id,
                score=metrics.difficulty_score,
                tier=metrics.difficulty_tier.value,
                is_solvable=metrics.is_solvable,
            ))
        except Exception as e:
            logger.warning("Batch item %s failed: %s", level_id, e)
            results.append(BatchAnalyzeResultItem(
                level_id=level_id,
                score=0,
                tier="?",
                error=str(e),
            ))

    return BatchAnalyzeResponse(results=results)
