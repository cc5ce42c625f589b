"""Core business logic package.

This package contains the engines for capacity breakdown, solvability
checking, difficulty scoring, tile-order scoring and solvable sink
generation.
"""
from .capacity import (
    breakdown_into_capacities,
    launchers_needed,
    calculate_launchers_per_fruit,
    generate_launcher_queue,
)
from .solvability import check_solvability, check_level_solvability
from .difficulty import DifficultyCalculator, calculate_difficulty_metrics, get_calculator
from .generator import SinkGenerator, generate_solvable_sink_stacks, get_generator
from .estimation import get_recommended_settings, estimate_completion_time
from .order_difficulty import (
    OrderDifficultyCalculator,
    calculate_order_difficulty,
    get_order_calculator,
    simulate_gameplay,
    optimize_tile_order,
)

__all__ = [
    "breakdown_into_capacities",
    "launchers_needed",
    "calculate_launchers_per_fruit",
    "generate_launcher_queue",
    "check_solvability",
    "check_level_solvability",
    "DifficultyCalculator",
    "calculate_difficulty_metrics",
    "get_calculator",
    "SinkGenerator",
    "generate_solvable_sink_stacks",
    "get_generator",
    "get_recommended_settings",
    "estimate_completion_time",
    "OrderDifficultyCalculator",
    "calculate_order_difficulty",
    "get_order_calculator",
    "simulate_gameplay",
    "optimize_tile_order",
]
