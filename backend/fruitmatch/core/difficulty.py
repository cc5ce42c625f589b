"""Fruit Match difficulty calculator.

Difficulty factors for tile-collection puzzles:
1. Pixels to fill (pattern size)
2. Fruit variety (colours to track)
3. Buffer pressure (waiting stand slots per fruit)
4. Visibility (how deep tiles are stacked in the sink)
5. Distribution evenness across fruits
6. Decision load (sink width and activity)
"""
import math
from typing import Dict, List, Sequence

from ..models.level import (
    DifficultyMetrics,
    DifficultyTier,
    FruitMatchLevel,
    FruitType,
    SinkTile,
    round_half_up,
)
from .capacity import calculate_launchers_per_fruit, count_fruits
from .solvability import check_level_solvability


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(high, max(low, value))


class DifficultyCalculator:
    """Scores a level from its pattern, sink and waiting stand."""

    # Factor weights, sum to 1.0
    WEIGHTS = {
        "pixel_count": 0.15,
        "fruit_types": 0.20,
        "buffer_pressure": 0.25,
        "visibility": 0.15,
        "distribution": 0.10,
        "decision_load": 0.15,
    }

    # Normalisation ranges for the raw metrics
    NORMALIZATION = {
        "pixels_min": 400,       # 20x20 → factor 0
        "pixels_range": 9600,    # 100x100 → factor 1
        "fruits_min": 2,
        "fruits_range": 4,       # 6 fruits → factor 1
        "buffer_ratio_easy": 2.0,  # ratio ≥ 2 → no pressure, ratio 1 → full pressure
        "visible_rows": 3,       # top tiles a player can plan around
        "reference_columns": 10,
        "reference_fruits": 6,
    }

    # Decision complexity sub-term weights
    DECISION_WEIGHTS = {
        "columns": 0.4,
        "fruits": 0.4,
        "activity": 0.2,
    }

    def calculate(self, level: FruitMatchLevel) -> DifficultyMetrics:
        """
        Calculate difficulty metrics for a level.

        Args:
            level: Level to score.

        Returns:
            DifficultyMetrics with score, tier and solvability verdict.
        """
        # Pattern
        fruit_distribution = count_fruits(level.pixel_art)
        total_pixels = sum(fruit_distribution.values())
        unique_fruit_types = sum(1 for c in fruit_distribution.values() if c > 0)

        # Launchers
        launchers_per_fruit = calculate_launchers_per_fruit(level.pixel_art)
        total_launchers = sum(launchers_per_fruit.values())
        average_launcher_capacity = total_pixels / max(total_launchers, 1)

        # Sink
        stack_depths = [len(stack) for stack in level.sink_stacks]
        total_tiles_in_sink = sum(stack_depths)
        sink_columns = len(stack_depths)
        max_stack_depth = max(stack_depths, default=0)
        average_stack_depth = total_tiles_in_sink / sink_columns if sink_columns else 0.0

        # Waiting stand
        buffer_ratio = level.waiting_stand_slots / max(unique_fruit_types, 1)

        # Complexity
        visibility_score = self._visibility_score(level.sink_stacks)
        distribution_evenness = self._distribution_evenness(fruit_distribution)
        decision_complexity = self._decision_complexity(level.sink_stacks, unique_fruit_types)

        solvability = check_level_solvability(level)

        factors = self._factors(
            total_pixels=total_pixels,
            unique_fruit_types=unique_fruit_types,
            buffer_ratio=buffer_ratio,
            visibility_score=visibility_score,
            distribution_evenness=distribution_evenness,
            decision_complexity=decision_complexity,
        )
        breakdown = {name: factors[name] * weight for name, weight in self.WEIGHTS.items()}
        score = int(round_half_up(100 * sum(breakdown.values())))

        return DifficultyMetrics(
            total_pixels=total_pixels,
            unique_fruit_types=unique_fruit_types,
            fruit_distribution=fruit_distribution,
            total_launchers=total_launchers,
            launchers_per_fruit=launchers_per_fruit,
            average_launcher_capacity=average_launcher_capacity,
            total_tiles_in_sink=total_tiles_in_sink,
            sink_columns=sink_columns,
            stack_depths=stack_depths,
            average_stack_depth=average_stack_depth,
            max_stack_depth=max_stack_depth,
            waiting_stand_slots=level.waiting_stand_slots,
            buffer_ratio=buffer_ratio,
            decision_complexity=decision_complexity,
            visibility_score=visibility_score,
            distribution_evenness=distribution_evenness,
            difficulty_score=score,
            difficulty_tier=DifficultyTier.from_score(score),
            factor_breakdown=breakdown,
            is_solvable=solvability.is_solvable,
            solvability_issues=solvability.issues,
        )

    def _visibility_score(self, sink_stacks: Sequence[Sequence[SinkTile]]) -> float:
        """Share of sink tiles within the visible top rows of their column."""
        visible_rows = self.NORMALIZATION["visible_rows"]
        total = sum(len(stack) for stack in sink_stacks)
        if total == 0:
            return 1.0
        visible = sum(min(len(stack), visible_rows) for stack in sink_stacks)
        return visible / total

    def _distribution_evenness(self, distribution: Dict[FruitType, int]) -> float:
        """1 - coefficient of variation over present fruits, floored at 0."""
        counts: List[int] = [c for c in distribution.values() if c > 0]
        if len(counts) <= 1:
            return 1.0

        mean = sum(counts) / len(counts)
        variance = sum((c - mean) ** 2 for c in counts) / len(counts)
        cv = math.sqrt(variance) / mean
        return max(0.0, 1.0 - cv)

    def _decision_complexity(
        self, sink_stacks: Sequence[Sequence[SinkTile]], unique_fruits: int
    ) -> float:
        """Choices per move: sink width, fruit variety and active columns."""
        columns = len(sink_stacks)
        active_columns = sum(1 for stack in sink_stacks if stack)

        column_factor = columns / self.NORMALIZATION["reference_columns"]
        fruit_factor = unique_fruits / self.NORMALIZATION["reference_fruits"]
        activity_factor = active_columns / max(columns, 1)

        return (
            column_factor * self.DECISION_WEIGHTS["columns"]
            + fruit_factor * self.DECISION_WEIGHTS["fruits"]
            + activity_factor * self.DECISION_WEIGHTS["activity"]
        )

    def _factors(
        self,
        total_pixels: int,
        unique_fruit_types: int,
        buffer_ratio: float,
        visibility_score: float,
        distribution_evenness: float,
        decision_complexity: float,
    ) -> Dict[str, float]:
        """Normalise raw metrics into [0, 1] factors, 1 being hardest."""
        norm = self.NORMALIZATION

        pixel_factor = _clamp((total_pixels - norm["pixels_min"]) / norm["pixels_range"])
        fruit_factor = _clamp((unique_fruit_types - norm["fruits_min"]) / norm["fruits_range"])

        # Nothing to hold when the pattern is empty
        if unique_fruit_types == 0:
            buffer_factor = 0.0
        else:
            buffer_factor = _clamp(norm["buffer_ratio_easy"] - buffer_ratio)

        return {
            "pixel_count": pixel_factor,
            "fruit_types": fruit_factor,
            "buffer_pressure": buffer_factor,
            "visibility": _clamp(1.0 - visibility_score),
            "distribution": _clamp(1.0 - distribution_evenness),
            "decision_load": _clamp(decision_complexity),
        }


def calculate_difficulty_metrics(level: FruitMatchLevel) -> DifficultyMetrics:
    """Score a level with the shared calculator."""
    return get_calculator().calculate(level)


# Singleton instance
_calculator = None


def get_calculator() -> DifficultyCalculator:
    """Get or create calculator singleton instance."""
    global _calculator
    if _calculator is None:
        _calculator = DifficultyCalculator()
    return _calculator
