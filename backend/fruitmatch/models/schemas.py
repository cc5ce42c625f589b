"""Pydantic schemas for API request/response validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Any, Optional


class AnalyzeRequest(BaseModel):
    """Request schema for level analysis."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON (pixelArt, sinkStacks, waitingStandSlots)")


class AnalyzeResponse(BaseModel):
    """Response schema for level analysis."""
    score: int = Field(..., ge=0, le=100, description="Difficulty score (0-100)")
    tier: str = Field(..., description="Difficulty tier (trivial..nightmare)")
    is_solvable: bool = Field(..., description="Whether the sink exactly matches launcher requirements")
    issues: List[str] = Field(default=[], description="Solvability issues and advisories")
    metrics: Dict[str, Any] = Field(..., description="Detailed metrics")
    estimated_minutes: Dict[str, float] = Field(default={}, description="Completion time estimate")


class SolvabilityRequest(BaseModel):
    """Request schema for a solvability check."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON to check")


class SolvabilityResponse(BaseModel):
    """Response schema for a solvability check."""
    is_solvable: bool = Field(..., description="Exact tile-count verdict")
    issues: List[str] = Field(default=[], description="Itemised issues")


class GenerateRequest(BaseModel):
    """Request schema for solvable sink generation."""
    pixel_art: List[Dict[str, Any]] = Field(..., description="Pattern cells (row, col, fruitType)")
    sink_width: Optional[int] = Field(default=None, ge=1, le=30, description="Number of sink columns")
    min_stack_height: Optional[int] = Field(default=None, ge=0, le=50, description="Minimum column height")
    max_stack_height: Optional[int] = Field(default=None, ge=0, le=50, description="Maximum column height")
    waiting_stand_slots: Optional[int] = Field(default=None, ge=1, le=20, description="Waiting stand slots")
    seed: Optional[int] = Field(default=None, description="Shuffle seed for reproducible output")
    name: str = Field(default="", description="Level name")


class GenerateResponse(BaseModel):
    """Response schema for solvable sink generation."""
    level_json: Dict[str, Any] = Field(..., description="Generated level JSON")
    metrics: Dict[str, Any] = Field(..., description="Metrics of the generated level")
    generation_time_ms: int = Field(default=0, description="Generation time in milliseconds")


class EstimateRequest(BaseModel):
    """Request schema for completion time estimate."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON to estimate")


class EstimateResponse(BaseModel):
    """Response schema for completion time estimate."""
    min_minutes: float = Field(..., ge=0, description="Optimistic estimate")
    average_minutes: float = Field(..., ge=0, description="Expected play time")
    max_minutes: float = Field(..., ge=0, description="Pessimistic estimate")


class SettingRangeSchema(BaseModel):
    """Min/max/recommended value for one parameter."""
    min: int
    max: int
    recommended: int


class RecommendedSettingsResponse(BaseModel):
    """Response schema for tier recommendations."""
    tier: str = Field(..., description="Difficulty tier")
    grid_size: SettingRangeSchema
    color_count: SettingRangeSchema
    buffer_slots: SettingRangeSchema
    column_count: SettingRangeSchema


class BatchAnalyzeRequest(BaseModel):
    """Request schema for batch analysis."""
    levels: List[Dict[str, Any]] = Field(..., description="List of level JSONs")


class BatchAnalyzeResultItem(BaseModel):
    """Single item in batch analysis result."""
    level_id: str = Field(..., description="Level identifier")
    score: int = Field(..., description="Difficulty score")
    tier: str = Field(..., description="Difficulty tier")
    is_solvable: bool = Field(default=False, description="Solvability verdict")
    error: Optional[str] = Field(default=None, description="Error message if analysis failed")


class BatchAnalyzeResponse(BaseModel):
    """Response schema for batch analysis."""
    results: List[BatchAnalyzeResultItem] = Field(default=[], description="Analysis results")


class OrderAnalyzeRequest(BaseModel):
    """Request schema for tile-order analysis."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON to analyze")
    run_simulation: bool = Field(default=True, description="Measure pressure with random play")
    simulations: Optional[int] = Field(default=None, ge=1, le=1000, description="Random playthroughs")
    seed: Optional[int] = Field(default=None, description="Simulation seed for reproducible output")


class OrderAnalyzeResponse(BaseModel):
    """Response schema for tile-order analysis."""
    score: int = Field(..., ge=0, le=100, description="Order difficulty score (0-100)")
    metrics: Dict[str, Any] = Field(..., description="Order factors and simulation results")


class OrderOptimizeRequest(BaseModel):
    """Request schema for tile reordering."""
    level_json: Dict[str, Any] = Field(..., description="Level JSON whose sink is reordered")
    target: str = Field(default="medium", description="Target difficulty (easy, medium, hard)")
    seed: Optional[int] = Field(default=None, description="Seed for blocking swaps")


class OrderOptimizeResponse(BaseModel):
    """Response schema for tile reordering."""
    original_score: int = Field(..., description="Order score before reordering")
    optimized_score: int = Field(..., description="Order score after reordering")
    improvement: int = Field(..., description="Score drop, negative when the sink got harder")
    strategy: str = Field(..., description="Reordering strategy used")
    level_json: Dict[str, Any] = Field(..., description="Level JSON with the reordered sink")


class ErrorResponse(BaseModel):
    """Error response schema."""
    detail: str = Field(..., description="Error message")
