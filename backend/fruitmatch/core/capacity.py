"""Launcher capacity breakdown.

Every fruit in the pattern is served by launchers of fixed capacity. The
breakdown is greedy, largest capacity first, so it favours fewer and bigger
launchers over an optimal bin packing.
"""
import random
from typing import Dict, Iterable, List, Optional

from ..models.level import (
    ALL_FRUITS,
    LAUNCHER_CAPACITIES,
    FruitType,
    LauncherConfig,
    PixelCell,
    empty_fruit_counts,
)

_SORTED_CAPACITIES = sorted(LAUNCHER_CAPACITIES, reverse=True)
_SMALLEST_CAPACITY = min(LAUNCHER_CAPACITIES)


def breakdown_into_capacities(pixel_count: int) -> List[int]:
    """
    Break a pixel count down into launcher capacities.

    Args:
        pixel_count: Pixels of one fruit to fill.

    Returns:
        Capacities, largest first. A leftover smaller than the smallest
        capacity gets one extra smallest launcher.

    Raises:
        ValueError: If pixel_count is negative.
    """
    if pixel_count < 0:
        raise ValueError(f"pixel_count must be non-negative, got {pixel_count}")

    capacities: List[int] = []
    remaining = pixel_count

    for capacity in _SORTED_CAPACITIES:
        while remaining >= capacity:
            capacities.append(capacity)
            remaining -= capacity

    if remaining > 0:
        capacities.append(_SMALLEST_CAPACITY)

    return capacities


def launchers_needed(pixel_count: int) -> int:
    """Number of launchers the greedy breakdown uses for pixel_count."""
    return len(breakdown_into_capacities(pixel_count))


def count_fruits(
    pixel_art: Iterable[PixelCell], only_unfilled: bool = False
) -> Dict[FruitType, int]:
    """Pixel count per fruit; every fruit is present, defaulting to 0."""
    counts = empty_fruit_counts()
    for cell in pixel_art:
        if only_unfilled and cell.filled:
            continue
        counts[cell.fruit_type] += 1
    return counts


def calculate_launchers_per_fruit(pixel_art: Iterable[PixelCell]) -> Dict[FruitType, int]:
    """How many launchers each fruit of the pattern needs."""
    return {
        fruit: launchers_needed(count)
        for fruit, count in count_fruits(pixel_art).items()
    }


def generate_launcher_queue(
    pixel_art: Iterable[PixelCell],
    rng: Optional[random.Random] = None,
    shuffle: bool = True,
) -> List[LauncherConfig]:
    """
    Build the launcher queue for the pixels still to fill.

    Args:
        pixel_art: Pattern cells; filled cells are ignored.
        rng: Random source for the shuffle. A fresh one is used if omitted.
        shuffle: Randomise queue order. Unshuffled queues follow fruit order.

    Returns:
        One LauncherConfig per capacity in each fruit's breakdown.
    """
    counts = count_fruits(pixel_art, only_unfilled=True)

    queue: List[LauncherConfig] = []
    for fruit in ALL_FRUITS:
        for capacity in breakdown_into_capacities(counts[fruit]):
            queue.append(LauncherConfig(fruit_type=fruit, capacity=capacity))

    if shuffle:
        (rng or random.Random()).shuffle(queue)

    return queue
