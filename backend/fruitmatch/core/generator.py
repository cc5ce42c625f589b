"""Solvable sink generator.

The sink holds exactly three tiles per launcher the pattern needs, so every
generated sink passes the solvability check by construction. Only the tile
order and column heights are random.
"""
import logging
import random
import time
from typing import List, Optional, Sequence

from ..models.level import (
    ALL_FRUITS,
    TILES_PER_LAUNCHER,
    FruitMatchLevel,
    FruitType,
    GenerationParams,
    GenerationResult,
    PixelCell,
    SinkTile,
)
from .capacity import calculate_launchers_per_fruit
from .difficulty import get_calculator

logger = logging.getLogger(__name__)


def _validate_shape(sink_width: int, min_stack_height: int, max_stack_height: int) -> None:
    if sink_width < 1:
        raise ValueError(f"sink_width must be at least 1, got {sink_width}")
    if min_stack_height < 0 or max_stack_height < 0:
        raise ValueError(
            f"stack heights must be non-negative, got {min_stack_height}..{max_stack_height}"
        )
    if min_stack_height > max_stack_height:
        raise ValueError(
            f"min_stack_height ({min_stack_height}) exceeds max_stack_height ({max_stack_height})"
        )


def _build_tile_pool(pixel_art: Sequence[PixelCell]) -> List[FruitType]:
    """Exactly three tiles per required launcher, in fruit order."""
    pool: List[FruitType] = []
    launchers_per_fruit = calculate_launchers_per_fruit(pixel_art)
    for fruit in ALL_FRUITS:
        pool.extend([fruit] * (launchers_per_fruit[fruit] * TILES_PER_LAUNCHER))
    return pool


def _target_heights(
    total_tiles: int,
    sink_width: int,
    min_stack_height: int,
    max_stack_height: int,
    rng: random.Random,
) -> List[int]:
    """Even split of the tiles, clamped per column, in shuffled column order."""
    base, extra = divmod(total_tiles, sink_width)
    heights = [
        max(min_stack_height, min(max_stack_height, base + (1 if col < extra else 0)))
        for col in range(sink_width)
    ]
    rng.shuffle(heights)
    return heights


def generate_solvable_sink_stacks(
    pixel_art: Sequence[PixelCell],
    sink_width: int,
    min_stack_height: int = 2,
    max_stack_height: int = 5,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> List[List[SinkTile]]:
    """
    Generate sink columns that are guaranteed to be solvable.

    Tiles are shuffled and poured into columns up to their target heights.
    Tiles that do not fit (max_stack_height clamping removed capacity) go one
    at a time onto the shortest column. That overflow pass keeps every tile,
    so columns may end up deeper than max_stack_height.

    Args:
        pixel_art: Target pattern.
        sink_width: Number of sink columns.
        min_stack_height: Lower clamp for column target heights.
        max_stack_height: Upper clamp for column target heights.
        rng: Random source. Takes precedence over seed.
        seed: Seed for a fresh random source when rng is omitted.

    Returns:
        Sink columns; index 0 of each column is the pickable top tile.

    Raises:
        ValueError: If sink_width < 1 or the height bounds are invalid.
    """
    _validate_shape(sink_width, min_stack_height, max_stack_height)
    if rng is None:
        rng = random.Random(seed)

    pool = _build_tile_pool(pixel_art)
    rng.shuffle(pool)

    heights = _target_heights(len(pool), sink_width, min_stack_height, max_stack_height, rng)
    stacks: List[List[SinkTile]] = [[] for _ in range(sink_width)]
    placed = 0

    def place(col: int) -> None:
        nonlocal placed
        stacks[col].append(
            SinkTile(fruit_type=pool[placed], position=col, stack_index=len(stacks[col]))
        )
        placed += 1

    # First pass: fill to target heights
    for col, height in enumerate(heights):
        while len(stacks[col]) < height and placed < len(pool):
            place(col)

    # Second pass: leftovers onto the shortest column (lowest index on ties)
    while placed < len(pool):
        place(min(range(sink_width), key=lambda c: len(stacks[c])))

    deepest = max(len(stack) for stack in stacks)
    if deepest > max_stack_height:
        logger.warning(
            "Sink overflow: %d tiles over %d columns exceed max height %d (deepest column %d)",
            len(pool), sink_width, max_stack_height, deepest,
        )
    logger.debug("Generated sink: %d tiles in %d columns", placed, sink_width)

    return stacks


class SinkGenerator:
    """Generates complete levels with a solvable sink for a pattern."""

    def generate(self, params: GenerationParams) -> GenerationResult:
        """
        Generate a level for the pattern in params.

        Args:
            params: Pattern plus sink shape and waiting stand parameters.

        Returns:
            GenerationResult with the level, its metrics and generation time.

        Raises:
            ValueError: If the sink shape parameters are invalid.
        """
        start_time = time.time()

        sink_stacks = generate_solvable_sink_stacks(
            params.pixel_art,
            params.sink_width,
            min_stack_height=params.min_stack_height,
            max_stack_height=params.max_stack_height,
            seed=params.seed,
        )

        level = FruitMatchLevel(
            pixel_art=list(params.pixel_art),
            sink_stacks=sink_stacks,
            waiting_stand_slots=params.waiting_stand_slots,
            name=params.name,
            pixel_art_width=max((c.col + 1 for c in params.pixel_art), default=0),
            pixel_art_height=max((c.row + 1 for c in params.pixel_art), default=0),
        )

        metrics = get_calculator().calculate(level)
        if not metrics.is_solvable:
            # Tile pool is derived from the same breakdown the checker uses
            raise RuntimeError(
                f"Generated sink failed solvability: {'; '.join(metrics.solvability_issues)}"
            )

        generation_time_ms = int((time.time() - start_time) * 1000)
        logger.info(
            "Generated level: %d pixels, %d tiles, score %d (%s) in %dms",
            metrics.total_pixels,
            metrics.total_tiles_in_sink,
            metrics.difficulty_score,
            metrics.difficulty_tier.value,
            generation_time_ms,
        )

        return GenerationResult(
            level=level,
            metrics=metrics,
            generation_time_ms=generation_time_ms,
        )


# Singleton instance
_generator = None


def get_generator() -> SinkGenerator:
    """Get or create generator singleton instance."""
    global _generator
    if _generator is None:
        _generator = SinkGenerator()
    return _generator
