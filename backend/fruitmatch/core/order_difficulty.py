"""Tile-order difficulty calculator.

Two sinks with the same tiles can play very differently depending on the
order the tiles are stacked in. Order factors:
1. Triplet accessibility (depth of the first three tiles of each fruit)
2. Blocking (tiles sitting on tiles whose launcher comes earlier)
3. Interleaving (how many columns each fruit is spread over)
4. Launcher alignment (tile depth rank against launcher queue position)
5. Decision entropy (distinct fruits among the pickable top tiles)
6. Waiting stand pressure and win rate from random-play simulation

The score covers tile order only; DifficultyCalculator covers the rest.
"""
import logging
import math
import random
from collections import deque
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..models.level import (
    ALL_FRUITS,
    TILES_PER_LAUNCHER,
    FruitMatchLevel,
    FruitType,
    LauncherConfig,
    OrderDifficultyMetrics,
    OrderFactor,
    OrderOptimizationResult,
    SimulationResult,
    SinkTile,
    round_half_up,
)
from .capacity import count_fruits, generate_launcher_queue

logger = logging.getLogger(__name__)

Stacks = Sequence[Sequence[SinkTile]]

# Launchers on the conveyor at once
ACTIVE_LAUNCHERS = 4

# Random play gives up after this many picks
MAX_SIMULATION_MOVES = 10000

OPTIMIZATION_TARGETS = ("easy", "medium", "hard")


def _impact(score: float) -> str:
    if score < 0.3:
        return "easy"
    if score < 0.6:
        return "medium"
    return "hard"


def _first_needed(launcher_queue: Sequence[LauncherConfig]) -> Dict[FruitType, int]:
    """Queue position of the first launcher of each fruit."""
    needed: Dict[FruitType, int] = {}
    for index, launcher in enumerate(launcher_queue):
        needed.setdefault(launcher.fruit_type, index)
    return needed


def _restack(columns: List[List[SinkTile]]) -> List[List[SinkTile]]:
    """Copy tiles with position and stack_index matching where they now sit."""
    return [
        [replace(tile, position=col, stack_index=depth) for depth, tile in enumerate(column)]
        for col, column in enumerate(columns)
    ]


def _group_by_fruit(tiles: Sequence[SinkTile]) -> Dict[FruitType, List[SinkTile]]:
    """Tiles per fruit, fruits in order of first appearance."""
    groups: Dict[FruitType, List[SinkTile]] = {}
    for tile in tiles:
        groups.setdefault(tile.fruit_type, []).append(tile)
    return groups


def calculate_triplet_accessibility(
    sink_stacks: Stacks,
) -> Tuple[float, Dict[FruitType, float]]:
    """
    Average depth of the three shallowest tiles of each fruit.

    Returns:
        (score, average triplet depth per fruit). Fruits with fewer than
        three tiles are left out of the score and report depth 0. A depth
        of 6 or more scores 1.
    """
    depths: Dict[FruitType, List[int]] = {fruit: [] for fruit in ALL_FRUITS}
    for stack in sink_stacks:
        for tile in stack:
            depths[tile.fruit_type].append(tile.stack_index)

    average_depths: Dict[FruitType, float] = {}
    total_depth = 0
    counted = 0
    for fruit in ALL_FRUITS:
        shallowest = sorted(depths[fruit])[:TILES_PER_LAUNCHER]
        if len(shallowest) < TILES_PER_LAUNCHER:
            average_depths[fruit] = 0.0
            continue
        average_depths[fruit] = sum(shallowest) / TILES_PER_LAUNCHER
        total_depth += sum(shallowest)
        counted += 1

    if counted == 0:
        return 0.0, average_depths

    average = total_depth / (counted * TILES_PER_LAUNCHER)
    return min(1.0, average / 6), average_depths


def calculate_blocking_score(
    sink_stacks: Stacks, launcher_queue: Sequence[LauncherConfig]
) -> Tuple[float, int, int]:
    """
    Penalise tiles stacked on top of tiles whose launcher comes earlier.

    Every pair of tiles in a column is compared. A pair blocks when the
    lower tile's fruit is needed before the upper one; its severity is the
    queue distance, capped at 10. Fruits with no launcher are needed last.

    Returns:
        (score, blocking pairs, total pairs).
    """
    needed = _first_needed(launcher_queue)
    severity = 0.0
    blocking_pairs = 0
    total_pairs = 0

    for stack in sink_stacks:
        for i, upper in enumerate(stack):
            upper_needed = needed.get(upper.fruit_type, math.inf)
            for lower in stack[i + 1:]:
                lower_needed = needed.get(lower.fruit_type, math.inf)
                total_pairs += 1
                if lower_needed < upper_needed:
                    severity += min(upper_needed - lower_needed, 10) / 10
                    blocking_pairs += 1

    normalized = severity / total_pairs if total_pairs else 0.0
    return min(1.0, normalized * 2), blocking_pairs, total_pairs


def calculate_interleaving_score(
    sink_stacks: Stacks,
) -> Tuple[float, Dict[FruitType, float]]:
    """
    Share of sink columns each fruit appears in, averaged over present fruits.

    Returns:
        (score, spread per fruit). Absent fruits have spread 0.
    """
    columns: Dict[FruitType, set] = {fruit: set() for fruit in ALL_FRUITS}
    for col, stack in enumerate(sink_stacks):
        for tile in stack:
            columns[tile.fruit_type].add(col)

    spread = {
        fruit: len(cols) / len(sink_stacks) if cols else 0.0
        for fruit, cols in columns.items()
    }
    present = [s for s in spread.values() if s > 0]
    score = sum(present) / len(present) if present else 0.0
    return score, spread


def calculate_launcher_alignment(
    sink_stacks: Stacks, launcher_queue: Sequence[LauncherConfig]
) -> float:
    """
    Compare tile accessibility rank with launcher queue position.

    Tiles are ranked by depth. Each launcher in turn claims the three most
    accessible unclaimed tiles of its fruit; launcher N ideally claims
    around rank 3N. Launchers that cannot claim three tiles are skipped.
    """
    ranked = sorted(
        (tile for stack in sink_stacks for tile in stack),
        key=lambda tile: tile.stack_index,
    )
    claimed = set()
    misalignments: List[float] = []

    for index, launcher in enumerate(launcher_queue):
        ranks: List[int] = []
        for rank, tile in enumerate(ranked):
            if len(ranks) == TILES_PER_LAUNCHER:
                break
            if rank not in claimed and tile.fruit_type == launcher.fruit_type:
                claimed.add(rank)
                ranks.append(rank)

        if len(ranks) == TILES_PER_LAUNCHER:
            average_rank = sum(ranks) / TILES_PER_LAUNCHER
            ideal_rank = index * TILES_PER_LAUNCHER
            misalignments.append(abs(average_rank - ideal_rank) / len(ranked))

    if not misalignments:
        return 0.0
    return min(1.0, sum(misalignments) / len(misalignments) * 3)


def calculate_decision_entropy(
    sink_stacks: Stacks, unique_fruits: int
) -> Tuple[float, int, float]:
    """
    Shannon entropy of the distinct fruits on top of the sink.

    Choices are treated as equally likely, so the entropy is log2 of the
    number of distinct top fruits. It is normalised by log2 of the
    pattern's fruit count (at least 2).

    Returns:
        (score, distinct top fruits, entropy in bits).
    """
    choices = len({stack[0].fruit_type for stack in sink_stacks if stack})
    entropy_bits = math.log2(choices) if choices > 1 else 0.0
    max_entropy = math.log2(max(unique_fruits, 2))
    return min(1.0, entropy_bits / max_entropy), choices, entropy_bits


def _play_once(
    sink_stacks: Stacks,
    launcher_queue: Sequence[LauncherConfig],
    waiting_stand_slots: int,
    rng: random.Random,
) -> Tuple[bool, int, int]:
    """One random playthrough. Returns (won, peak waiting stand usage, moves)."""
    stacks = [deque(stack) for stack in sink_stacks]
    queue = deque(launcher.fruit_type for launcher in launcher_queue)
    # [fruit, tiles collected]
    active: List[list] = []
    waiting: List[FruitType] = []
    completed = 0
    peak = 0
    moves = 0

    def refill() -> None:
        while queue and len(active) < ACTIVE_LAUNCHERS:
            active.append([queue.popleft(), 0])

    def fire_full() -> int:
        full = [slot for slot in active if slot[1] >= TILES_PER_LAUNCHER]
        for slot in full:
            active.remove(slot)
        refill()
        return len(full)

    def drain_waiting() -> None:
        for slot in active:
            for fruit in list(waiting):
                if slot[1] >= TILES_PER_LAUNCHER:
                    break
                if fruit == slot[0]:
                    waiting.remove(fruit)
                    slot[1] += 1

    refill()
    while any(stacks) and moves < MAX_SIMULATION_MOVES:
        moves += 1
        column = rng.choice([stack for stack in stacks if stack])
        fruit = column.popleft().fruit_type

        slot = next((s for s in active if s[0] == fruit), None)
        if slot is None:
            waiting.append(fruit)
            peak = max(peak, len(waiting))
            if len(waiting) > waiting_stand_slots:
                return False, peak, moves
            continue

        slot[1] += 1
        fired = fire_full()
        # New launchers may take tiles already waiting, which can fire them too
        while fired:
            completed += fired
            drain_waiting()
            fired = fire_full()

    return completed == len(launcher_queue), peak, moves


def simulate_gameplay(
    sink_stacks: Stacks,
    launcher_queue: Sequence[LauncherConfig],
    waiting_stand_slots: int,
    simulations: int = 100,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> SimulationResult:
    """
    Play the level many times picking a random top tile each move.

    A picked tile feeds the first active launcher of its fruit, otherwise it
    goes to the waiting stand. Overfilling the waiting stand loses the game.
    Four launchers are active at once; a fired launcher is replaced from the
    queue and tiles on the waiting stand move to launchers that can take them.

    Args:
        sink_stacks: Sink columns, index 0 on top.
        launcher_queue: Launchers in the order they arrive.
        waiting_stand_slots: Waiting stand capacity.
        simulations: Number of playthroughs.
        rng: Random source. Takes precedence over seed.
        seed: Seed for a fresh random source when rng is omitted.

    Raises:
        ValueError: If simulations is less than 1.
    """
    if simulations < 1:
        raise ValueError(f"simulations must be at least 1, got {simulations}")
    if rng is None:
        rng = random.Random(seed)

    result = SimulationResult(
        total_games=simulations,
        peak_usage_distribution=[0] * (max(waiting_stand_slots, 0) + 1),
    )
    total_peak = 0
    total_moves = 0

    for _ in range(simulations):
        won, peak, moves = _play_once(sink_stacks, launcher_queue, waiting_stand_slots, rng)
        if won:
            result.wins += 1
        else:
            result.losses += 1
        total_peak += peak
        total_moves += moves
        result.peak_usage_distribution[min(peak, len(result.peak_usage_distribution) - 1)] += 1

    result.win_rate = result.wins / simulations
    result.average_peak_usage = total_peak / simulations
    result.average_moves = total_moves / simulations
    return result


class OrderDifficultyCalculator:
    """Scores the order of tiles in a sink."""

    # Factor weights; the score tops out at their sum
    WEIGHTS = {
        "triplet_accessibility": 0.15,
        "blocking_score": 0.12,
        "interleaving_score": 0.10,
        "launcher_alignment": 0.13,
        "decision_entropy": 0.08,
        "waiting_stand_pressure": 0.10,
        "simulated_win_rate": 0.20,
    }

    # Playthroughs per scored sink
    SIMULATIONS = 50

    def calculate(
        self,
        sink_stacks: Stacks,
        launcher_queue: Sequence[LauncherConfig],
        waiting_stand_slots: int,
        unique_fruits: int,
        run_simulation: bool = True,
        simulations: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> OrderDifficultyMetrics:
        """
        Calculate order difficulty metrics.

        Without a simulation (or with an empty sink) the win rate is taken
        as 0.5 and the average peak waiting stand usage as half the slots.

        Args:
            sink_stacks: Sink columns, index 0 on top.
            launcher_queue: Launchers in the order they arrive.
            waiting_stand_slots: Waiting stand capacity.
            unique_fruits: Distinct fruits in the pattern.
            run_simulation: Play the level randomly to measure pressure.
            simulations: Playthroughs, defaults to SIMULATIONS.
            rng: Random source for the simulation.

        Returns:
            OrderDifficultyMetrics with factor scores and a 0-100 score.
        """
        triplet, _ = calculate_triplet_accessibility(sink_stacks)
        blocking, blocking_pairs, total_pairs = calculate_blocking_score(sink_stacks, launcher_queue)
        interleaving, _ = calculate_interleaving_score(sink_stacks)
        alignment = calculate_launcher_alignment(sink_stacks, launcher_queue)
        entropy, choices, entropy_bits = calculate_decision_entropy(sink_stacks, unique_fruits)

        if run_simulation and any(sink_stacks):
            simulation = simulate_gameplay(
                sink_stacks,
                launcher_queue,
                waiting_stand_slots,
                simulations or self.SIMULATIONS,
                rng=rng,
            )
        else:
            simulation = SimulationResult(win_rate=0.5, average_peak_usage=waiting_stand_slots / 2)

        if waiting_stand_slots > 0:
            pressure = min(1.0, simulation.average_peak_usage / waiting_stand_slots)
        else:
            pressure = 1.0 if any(sink_stacks) else 0.0
        failure_rate = 1 - simulation.win_rate

        weights = self.WEIGHTS
        breakdown = [
            OrderFactor(
                name="Triplet Accessibility",
                description="How deep matching tiles are buried in stacks",
                score=triplet,
                weight=weights["triplet_accessibility"],
                explanation=(
                    "Matching tiles are near the surface"
                    if triplet < 0.3 else
                    "Some digging required to find matching tiles"
                    if triplet < 0.6 else
                    "Matching tiles deeply buried"
                ),
                impact=_impact(triplet),
            ),
            OrderFactor(
                name="Blocking Pattern",
                description="How often tiles block tiles needed sooner",
                score=blocking,
                weight=weights["blocking_score"],
                explanation=f"{blocking_pairs} of {total_pairs} tile pairs create blocking situations",
                impact=_impact(blocking),
            ),
            OrderFactor(
                name="Color Scattering",
                description="How spread out same-fruit tiles are across columns",
                score=interleaving,
                weight=weights["interleaving_score"],
                explanation=(
                    "Fruits clustered together"
                    if interleaving < 0.3 else
                    "Fruits moderately spread across columns"
                    if interleaving < 0.6 else
                    "Fruits highly scattered over the sink"
                ),
                impact=_impact(interleaving),
            ),
            OrderFactor(
                name="Launcher Alignment",
                description="How well tile order matches the launcher queue",
                score=alignment,
                weight=weights["launcher_alignment"],
                explanation=(
                    "Tiles surface when their launchers are active"
                    if alignment < 0.3 else
                    "Some mismatch between tile and launcher order"
                    if alignment < 0.6 else
                    "Tiles poorly aligned with launcher order"
                ),
                impact=_impact(alignment),
            ),
            OrderFactor(
                name="Decision Complexity",
                description="How many meaningful choices each move offers",
                score=entropy,
                weight=weights["decision_entropy"],
                explanation=f"{choices} different fruits to choose from ({entropy_bits:.2f} bits of entropy)",
                impact=_impact(entropy),
            ),
            OrderFactor(
                name="Buffer Pressure",
                description="How much of the waiting stand gets used",
                score=pressure,
                weight=weights["waiting_stand_pressure"],
                explanation=(
                    f"Average peak usage: {simulation.average_peak_usage:.1f} "
                    f"of {waiting_stand_slots} slots"
                ),
                impact=_impact(pressure),
            ),
            OrderFactor(
                name="Simulated Win Rate",
                description="Win probability with random play",
                score=failure_rate,
                weight=weights["simulated_win_rate"],
                explanation=(
                    f"{simulation.win_rate * 100:.0f}% win rate "
                    f"in {simulation.total_games} simulations"
                ),
                impact=(
                    "easy" if simulation.win_rate > 0.7 else
                    "medium" if simulation.win_rate > 0.4 else
                    "hard"
                ),
            ),
        ]

        score = int(round_half_up(100 * sum(f.contribution for f in breakdown)))

        return OrderDifficultyMetrics(
            triplet_accessibility=triplet,
            blocking_score=blocking,
            interleaving_score=interleaving,
            launcher_alignment=alignment,
            decision_entropy=entropy,
            waiting_stand_pressure=pressure,
            simulated_failure_rate=failure_rate,
            simulated_average_peak_usage=simulation.average_peak_usage,
            simulated_win_rate=simulation.win_rate,
            order_difficulty_score=score,
            factor_breakdown=breakdown,
        )

    def calculate_level(
        self,
        level: FruitMatchLevel,
        launcher_queue: Optional[Sequence[LauncherConfig]] = None,
        run_simulation: bool = True,
        simulations: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> OrderDifficultyMetrics:
        """
        Order metrics for a level.

        Without an explicit queue the level's launchers are taken in fruit
        order.
        """
        if launcher_queue is None:
            launcher_queue = generate_launcher_queue(level.pixel_art, shuffle=False)
        unique_fruits = sum(1 for c in count_fruits(level.pixel_art).values() if c > 0)
        return self.calculate(
            level.sink_stacks,
            launcher_queue,
            level.waiting_stand_slots,
            unique_fruits,
            run_simulation=run_simulation,
            simulations=simulations,
            rng=rng,
        )


def calculate_order_difficulty(
    sink_stacks: Stacks,
    launcher_queue: Sequence[LauncherConfig],
    waiting_stand_slots: int,
    unique_fruits: int,
    run_simulation: bool = True,
    rng: Optional[random.Random] = None,
) -> OrderDifficultyMetrics:
    """Score a sink order with the shared calculator."""
    return get_order_calculator().calculate(
        sink_stacks,
        launcher_queue,
        waiting_stand_slots,
        unique_fruits,
        run_simulation=run_simulation,
        rng=rng,
    )


def optimize_for_easy(
    tiles: Sequence[SinkTile],
    sink_width: int,
    launcher_queue: Sequence[LauncherConfig],
) -> List[List[SinkTile]]:
    """
    Cluster each fruit into a pair of adjacent columns, in launcher order.

    Each tile goes on the shorter of the current column pair (the first on
    ties), and the pair moves two columns right for the next fruit. Fruits
    with no launcher follow in fruit order.
    """
    groups = _group_by_fruit(tiles)
    order = list(dict.fromkeys(launcher.fruit_type for launcher in launcher_queue))
    order += [fruit for fruit in ALL_FRUITS if fruit in groups and fruit not in order]

    columns: List[List[SinkTile]] = [[] for _ in range(sink_width)]
    current = 0
    for fruit in order:
        for tile in groups.get(fruit, []):
            pair = [(current + c) % sink_width for c in range(min(2, sink_width))]
            target = min(pair, key=lambda col: len(columns[col]))
            columns[target].append(tile)
        current = (current + 2) % sink_width

    return _restack(columns)


def optimize_for_hard(tiles: Sequence[SinkTile], sink_width: int) -> List[List[SinkTile]]:
    """Deal one tile of each fruit in turn round-robin across the columns."""
    queues = [deque(group) for group in _group_by_fruit(tiles).values()]
    columns: List[List[SinkTile]] = [[] for _ in range(sink_width)]

    placed = 0
    while queues:
        for fruit_queue in list(queues):
            columns[placed % sink_width].append(fruit_queue.popleft())
            placed += 1
            if not fruit_queue:
                queues.remove(fruit_queue)

    return _restack(columns)


def optimize_for_launcher_alignment(
    tiles: Sequence[SinkTile],
    sink_width: int,
    launcher_queue: Sequence[LauncherConfig],
) -> List[List[SinkTile]]:
    """
    Lay tiles out row by row in the order the launcher queue consumes them.

    Each launcher takes three tiles of its fruit; tiles no launcher takes
    come last. The first row of the sink holds the first sink_width tiles.
    """
    groups = {fruit: deque(group) for fruit, group in _group_by_fruit(tiles).items()}
    ordered: List[SinkTile] = []
    for launcher in launcher_queue:
        fruit_tiles = groups.get(launcher.fruit_type)
        for _ in range(TILES_PER_LAUNCHER):
            if not fruit_tiles:
                break
            ordered.append(fruit_tiles.popleft())
    for fruit_tiles in groups.values():
        ordered.extend(fruit_tiles)

    columns: List[List[SinkTile]] = [[] for _ in range(sink_width)]
    for index, tile in enumerate(ordered):
        columns[index % sink_width].append(tile)

    return _restack(columns)


def introduce_blocking(
    sink_stacks: Stacks,
    intensity: float,
    rng: Optional[random.Random] = None,
) -> List[List[SinkTile]]:
    """
    Swap random adjacent tiles within columns.

    intensity (0-1) sets the swap count to 30% of the sink at full strength.
    The input is left untouched.
    """
    rng = rng or random.Random()
    columns = [list(stack) for stack in sink_stacks]
    swaps = int(intensity * sum(len(c) for c in columns) * 0.3)

    for _ in range(swaps):
        eligible = [column for column in columns if len(column) >= 2]
        if not eligible:
            break
        column = rng.choice(eligible)
        i = rng.randrange(len(column) - 1)
        column[i], column[i + 1] = column[i + 1], column[i]

    return _restack(columns)


def optimize_tile_order(
    sink_stacks: Stacks,
    launcher_queue: Sequence[LauncherConfig],
    waiting_stand_slots: int,
    unique_fruits: int,
    target: str,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> OrderOptimizationResult:
    """
    Reorder the sink's tiles towards a target difficulty.

    The tile multiset and sink width are kept, so solvability is unchanged.
    Scores before and after are computed without simulation.

    Args:
        sink_stacks: Current sink columns.
        launcher_queue: Launchers in the order they arrive.
        waiting_stand_slots: Waiting stand capacity.
        unique_fruits: Distinct fruits in the pattern.
        target: "easy", "medium" or "hard".
        rng: Random source for blocking swaps. Takes precedence over seed.
        seed: Seed for a fresh random source when rng is omitted.

    Raises:
        ValueError: If target is unknown or the sink has no columns.
    """
    if target not in OPTIMIZATION_TARGETS:
        raise ValueError(f"Unknown target '{target}'. Must be one of: {list(OPTIMIZATION_TARGETS)}")
    sink_width = len(sink_stacks)
    if sink_width == 0:
        raise ValueError("Sink has no columns to reorder")
    if rng is None:
        rng = random.Random(seed)

    calculator = get_order_calculator()
    tiles = [tile for stack in sink_stacks for tile in stack]

    if target == "easy":
        optimized = optimize_for_easy(tiles, sink_width, launcher_queue)
        strategy = "Clustered matching tiles in launcher order"
    elif target == "hard":
        optimized = introduce_blocking(optimize_for_hard(tiles, sink_width), 0.5, rng)
        strategy = "Scattered tiles and introduced blocking"
    else:
        optimized = introduce_blocking(
            optimize_for_launcher_alignment(tiles, sink_width, launcher_queue), 0.2, rng
        )
        strategy = "Aligned with launcher order with mild blocking"

    original = calculator.calculate(
        sink_stacks, launcher_queue, waiting_stand_slots, unique_fruits, run_simulation=False
    )
    reordered = calculator.calculate(
        optimized, launcher_queue, waiting_stand_slots, unique_fruits, run_simulation=False
    )
    logger.info(
        "Reordered sink for %s: order score %d -> %d",
        target, original.order_difficulty_score, reordered.order_difficulty_score,
    )

    return OrderOptimizationResult(
        original_score=original.order_difficulty_score,
        optimized_score=reordered.order_difficulty_score,
        optimized_stacks=optimized,
        strategy=strategy,
    )


# Singleton instance
_order_calculator = None


def get_order_calculator() -> OrderDifficultyCalculator:
    """Get or create order calculator singleton instance."""
    global _order_calculator
    if _order_calculator is None:
        _order_calculator = OrderDifficultyCalculator()
    return _order_calculator
