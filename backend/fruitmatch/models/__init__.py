"""Data models package.

This package contains level data models and API schemas.
"""
from .level import (
    FruitType,
    ALL_FRUITS,
    LAUNCHER_CAPACITIES,
    DifficultyTier,
    PixelCell,
    SinkTile,
    LauncherConfig,
    FruitMatchLevel,
    SolvabilityReport,
    DifficultyMetrics,
    RecommendedSettings,
    CompletionEstimate,
    GenerationParams,
    GenerationResult,
    OrderFactor,
    SimulationResult,
    OrderDifficultyMetrics,
    OrderOptimizationResult,
)
from .schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    SolvabilityRequest,
    SolvabilityResponse,
    GenerateRequest,
    GenerateResponse,
    EstimateRequest,
    EstimateResponse,
    RecommendedSettingsResponse,
    BatchAnalyzeRequest,
    BatchAnalyzeResponse,
    OrderAnalyzeRequest,
    OrderAnalyzeResponse,
    OrderOptimizeRequest,
    OrderOptimizeResponse,
    ErrorResponse,
)

__all__ = [
    # Level models
    "FruitType",
    "ALL_FRUITS",
    "LAUNCHER_CAPACITIES",
    "DifficultyTier",
    "PixelCell",
    "SinkTile",
    "LauncherConfig",
    "FruitMatchLevel",
    "SolvabilityReport",
    "DifficultyMetrics",
    "RecommendedSettings",
    "CompletionEstimate",
    "GenerationParams",
    "GenerationResult",
    "OrderFactor",
    "SimulationResult",
    "OrderDifficultyMetrics",
    "OrderOptimizationResult",
    # API schemas
    "AnalyzeRequest",
    "AnalyzeResponse",
    "SolvabilityRequest",
    "SolvabilityResponse",
    "GenerateRequest",
    "GenerateResponse",
    "EstimateRequest",
    "EstimateResponse",
    "RecommendedSettingsResponse",
    "BatchAnalyzeRequest",
    "BatchAnalyzeResponse",
    "OrderAnalyzeRequest",
    "OrderAnalyzeResponse",
    "OrderOptimizeRequest",
    "OrderOptimizeResponse",
    "ErrorResponse",
]
