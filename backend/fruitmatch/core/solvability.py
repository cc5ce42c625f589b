"""Solvability checker for sink tile supplies."""
from typing import Dict, List, Sequence

from ..models.level import (
    ALL_FRUITS,
    TILES_PER_LAUNCHER,
    FruitMatchLevel,
    FruitType,
    PixelCell,
    SinkTile,
    SolvabilityReport,
    empty_fruit_counts,
)
from .capacity import calculate_launchers_per_fruit

# Waiting stand heuristics: two slots per fruit the player may have to hold,
# never planning for fewer than three such fruits.
MIN_HELD_FRUITS = 3
SLOTS_PER_HELD_FRUIT = 2


def required_tiles_per_fruit(pixel_art: Sequence[PixelCell]) -> Dict[FruitType, int]:
    """Exact tile count each fruit needs: three per launcher."""
    return {
        fruit: launchers * TILES_PER_LAUNCHER
        for fruit, launchers in calculate_launchers_per_fruit(pixel_art).items()
    }


def count_sink_tiles(sink_stacks: Sequence[Sequence[SinkTile]]) -> Dict[FruitType, int]:
    """Tile count per fruit across all sink columns."""
    counts = empty_fruit_counts()
    for stack in sink_stacks:
        for tile in stack:
            counts[tile.fruit_type] += 1
    return counts


def minimum_safe_slots(unique_fruits: int) -> int:
    """Smallest waiting stand that is not flagged as risky."""
    return max(unique_fruits - 1, MIN_HELD_FRUITS) * SLOTS_PER_HELD_FRUIT


def check_solvability(
    pixel_art: Sequence[PixelCell],
    sink_stacks: Sequence[Sequence[SinkTile]],
    waiting_stand_slots: int,
) -> SolvabilityReport:
    """
    Check whether a sink can complete the pattern.

    A sink is solvable iff every fruit has exactly three tiles per required
    launcher. Waiting stand size and non-multiple-of-3 counts are reported
    as advisories and never change the verdict.

    Args:
        pixel_art: Target pattern.
        sink_stacks: Candidate sink columns.
        waiting_stand_slots: Waiting stand capacity.

    Returns:
        SolvabilityReport with the verdict and human-readable issues.
    """
    issues: List[str] = []

    required = required_tiles_per_fruit(pixel_art)
    actual = count_sink_tiles(sink_stacks)

    # Exact tile counts
    mismatched = False
    for fruit in ALL_FRUITS:
        have, need = actual[fruit], required[fruit]
        if have < need:
            issues.append(f"Not enough {fruit.value} tiles: have {have}, need {need}")
            mismatched = True
        elif have > need:
            issues.append(f"Too many {fruit.value} tiles: have {have}, need {need}")
            mismatched = True

    # Waiting stand size (advisory)
    unique_fruits = sum(1 for count in required.values() if count > 0)
    min_safe = minimum_safe_slots(unique_fruits)
    if waiting_stand_slots < min_safe:
        issues.append(
            f"Waiting stand may be too small: {waiting_stand_slots} slots, "
            f"recommend at least {min_safe}"
        )

    # Triplet alignment (advisory)
    for fruit in ALL_FRUITS:
        if actual[fruit] > 0 and actual[fruit] % TILES_PER_LAUNCHER != 0:
            issues.append(f"{fruit.value} tiles not in multiple of 3: {actual[fruit]} tiles")

    return SolvabilityReport(is_solvable=not mismatched, issues=issues)


def check_level_solvability(level: FruitMatchLevel) -> SolvabilityReport:
    """check_solvability for a whole level."""
    return check_solvability(level.pixel_art, level.sink_stacks, level.waiting_stand_slots)
