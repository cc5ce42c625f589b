"""Recommended level settings and completion time estimates."""
from typing import Dict, Union

from ..models.level import (
    CompletionEstimate,
    DifficultyMetrics,
    DifficultyTier,
    RecommendedSettings,
    SettingRange,
)

# Seconds per tile picked from the sink
SECONDS_PER_TILE = 1.0
# Seconds per pixel shot
SECONDS_PER_PIXEL = 0.5

# grid_size, color_count, buffer_slots, column_count as (min, max, recommended)
_SETTINGS_TABLE: Dict[DifficultyTier, Dict[str, tuple]] = {
    DifficultyTier.TRIVIAL: {
        "grid_size": (20, 25, 20),
        "color_count": (2, 3, 2),
        "buffer_slots": (9, 12, 10),
        "column_count": (4, 6, 5),
    },
    DifficultyTier.EASY: {
        "grid_size": (25, 35, 30),
        "color_count": (3, 4, 3),
        "buffer_slots": (8, 10, 9),
        "column_count": (5, 7, 6),
    },
    DifficultyTier.MEDIUM: {
        "grid_size": (35, 50, 40),
        "color_count": (4, 5, 4),
        "buffer_slots": (7, 9, 8),
        "column_count": (6, 8, 7),
    },
    DifficultyTier.HARD: {
        "grid_size": (50, 70, 60),
        "color_count": (4, 5, 5),
        "buffer_slots": (6, 8, 7),
        "column_count": (7, 10, 8),
    },
    DifficultyTier.EXPERT: {
        "grid_size": (70, 90, 80),
        "color_count": (5, 6, 5),
        "buffer_slots": (5, 7, 6),
        "column_count": (8, 12, 10),
    },
    DifficultyTier.NIGHTMARE: {
        "grid_size": (90, 100, 100),
        "color_count": (5, 6, 6),
        "buffer_slots": (5, 6, 5),
        "column_count": (10, 15, 12),
    },
}


def get_recommended_settings(tier: Union[DifficultyTier, str]) -> RecommendedSettings:
    """
    Look up recommended level parameters for a tier.

    Raises:
        ValueError: If tier is not a known DifficultyTier.
    """
    row = _SETTINGS_TABLE[DifficultyTier(tier)]
    return RecommendedSettings(**{name: SettingRange(*values) for name, values in row.items()})


def estimate_completion_time(metrics: DifficultyMetrics) -> CompletionEstimate:
    """Estimate play time in minutes; harder levels get more thinking time."""
    base_time = (
        metrics.total_tiles_in_sink * SECONDS_PER_TILE
        + metrics.total_pixels * SECONDS_PER_PIXEL
    )
    thinking_multiplier = 1 + metrics.difficulty_score / 100

    average_minutes = base_time * thinking_multiplier / 60
    return CompletionEstimate(
        min_minutes=average_minutes * 0.5,
        average_minutes=average_minutes,
        max_minutes=average_minutes * 2,
    )
