"""API dependencies."""
from ..config import get_settings, Settings
from ..core.difficulty import get_calculator, DifficultyCalculator
from ..core.generator import get_generator, SinkGenerator
from ..core.order_difficulty import get_order_calculator, OrderDifficultyCalculator


def get_difficulty_calculator() -> DifficultyCalculator:
    """Dependency for difficulty calculator."""
    return get_calculator()


def get_order_difficulty_calculator() -> OrderDifficultyCalculator:
    """Dependency for tile-order calculator."""
    return get_order_calculator()


def get_sink_generator() -> SinkGenerator:
    """Dependency for sink generator."""
    return get_generator()


def get_app_settings() -> Settings:
    """Dependency for application settings."""
    return get_settings()
