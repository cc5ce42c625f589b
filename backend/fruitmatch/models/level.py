"""Level data models and structures."""
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional
from enum import Enum
import math
import uuid


class FruitType(str, Enum):
    """Tile / pixel colour enumeration."""
    BLUEBERRY = "blueberry"
    ORANGE = "orange"
    STRAWBERRY = "strawberry"
    DRAGONFRUIT = "dragonfruit"
    BANANA = "banana"
    APPLE = "apple"
    PLUM = "plum"
    PEAR = "pear"
    BLACKBERRY = "blackberry"


ALL_FRUITS: List[FruitType] = list(FruitType)

# Pixels filled by a single launcher shot
LAUNCHER_CAPACITIES = (20, 40, 60, 80, 100)

# Tiles a launcher consumes before it fires
TILES_PER_LAUNCHER = 3


def empty_fruit_counts() -> Dict[FruitType, int]:
    """Per-fruit counter with every fruit defaulted to 0."""
    return {fruit: 0 for fruit in ALL_FRUITS}


# Old designer names -> current fruits (levels saved before the 9-colour palette)
LEGACY_FRUIT_NAMES: Dict[str, FruitType] = {
    "cherry": FruitType.STRAWBERRY,   # red
    "grape": FruitType.PLUM,          # purple
    "lemon": FruitType.BANANA,        # yellow
    "kiwi": FruitType.APPLE,          # green
    "white": FruitType.PEAR,
    "black": FruitType.BLACKBERRY,
}


def migrate_fruit_type(name: str) -> FruitType:
    """
    Resolve a stored fruit name, including legacy names.

    Unknown names and non-string values fall back to apple, matching how the
    designer loads old levels.
    """
    if isinstance(name, FruitType):
        return name
    if not isinstance(name, str):
        return FruitType.APPLE
    try:
        return FruitType(name)
    except ValueError:
        return LEGACY_FRUIT_NAMES.get(name, FruitType.APPLE)


class DifficultyTier(str, Enum):
    """Difficulty tier enumeration."""
    TRIVIAL = "trivial"      # 0-19
    EASY = "easy"            # 20-34
    MEDIUM = "medium"        # 35-49
    HARD = "hard"            # 50-64
    EXPERT = "expert"        # 65-79
    NIGHTMARE = "nightmare"  # 80-100

    @classmethod
    def from_score(cls, score: float) -> "DifficultyTier":
        """Get tier from score."""
        if score < 20:
            return cls.TRIVIAL
        elif score < 35:
            return cls.EASY
        elif score < 50:
            return cls.MEDIUM
        elif score < 65:
            return cls.HARD
        elif score < 80:
            return cls.EXPERT
        else:
            return cls.NIGHTMARE


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with .5 going up; round() sends it to the even neighbour."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def generate_tile_id() -> str:
    return f"tile-{uuid.uuid4().hex[:12]}"


@dataclass
class PixelCell:
    """One cell of the target pixel art."""
    row: int
    col: int
    fruit_type: FruitType
    filled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "col": self.col,
            "fruitType": self.fruit_type.value,
            "filled": self.filled,
        }


@dataclass
class SinkTile:
    """A tile stacked in a sink column. stack_index 0 is the pickable top."""
    fruit_type: FruitType
    position: int
    stack_index: int
    id: str = field(default_factory=generate_tile_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fruitType": self.fruit_type.value,
            "stackIndex": self.stack_index,
            "position": self.position,
        }


@dataclass
class LauncherConfig:
    """A launcher that fires once fed three tiles of its fruit."""
    fruit_type: FruitType
    capacity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"fruitType": self.fruit_type.value, "capacity": self.capacity}


@dataclass
class FruitMatchLevel:
    """Target pattern plus sink and waiting stand configuration."""
    pixel_art: List[PixelCell] = field(default_factory=list)
    sink_stacks: List[List[SinkTile]] = field(default_factory=list)
    waiting_stand_slots: int = 7
    id: str = ""
    name: str = ""
    pixel_art_width: int = 0
    pixel_art_height: int = 0

    @property
    def sink_width(self) -> int:
        return len(self.sink_stacks)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FruitMatchLevel":
        """
        Build a level from the designer's JSON format.

        Missing sections default to empty; legacy fruit names are migrated.
        """
        pixel_art = [
            PixelCell(
                row=int(cell.get("row", 0)),
                col=int(cell.get("col", 0)),
                fruit_type=migrate_fruit_type(cell.get("fruitType", "")),
                filled=bool(cell.get("filled", False)),
            )
            for cell in data.get("pixelArt", []) or []
        ]

        sink_stacks: List[List[SinkTile]] = []
        for col, stack in enumerate(data.get("sinkStacks", []) or []):
            tiles = sorted(stack or [], key=lambda t: t.get("stackIndex", 0))
            sink_stacks.append([
                SinkTile(
                    fruit_type=migrate_fruit_type(tile.get("fruitType", "")),
                    position=col,
                    stack_index=depth,
                    id=tile.get("id") or generate_tile_id(),
                )
                for depth, tile in enumerate(tiles)
            ])

        width = data.get("pixelArtWidth")
        height = data.get("pixelArtHeight")
        return cls(
            pixel_art=pixel_art,
            sink_stacks=sink_stacks,
            waiting_stand_slots=int(data.get("waitingStandSlots", 7)),
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            pixel_art_width=int(width) if width is not None else max((c.col + 1 for c in pixel_art), default=0),
            pixel_art_height=int(height) if height is not None else max((c.row + 1 for c in pixel_art), default=0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the designer's JSON format."""
        return {
            "id": self.id,
            "name": self.name,
            "pixelArt": [cell.to_dict() for cell in self.pixel_art],
            "pixelArtWidth": self.pixel_art_width,
            "pixelArtHeight": self.pixel_art_height,
            "sinkWidth": self.sink_width,
            "sinkStacks": [[tile.to_dict() for tile in stack] for stack in self.sink_stacks],
            "waitingStandSlots": self.waiting_stand_slots,
        }


@dataclass
class SolvabilityReport:
    """Verdict of the exact tile-count check plus itemised issues."""
    is_solvable: bool
    issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"is_solvable": self.is_solvable, "issues": self.issues}


@dataclass
class DifficultyMetrics:
    """Derived difficulty snapshot of a level. Recomputed, never stored alone."""
    # Pattern
    total_pixels: int = 0
    unique_fruit_types: int = 0
    fruit_distribution: Dict[FruitType, int] = field(default_factory=empty_fruit_counts)

    # Launchers
    total_launchers: int = 0
    launchers_per_fruit: Dict[FruitType, int] = field(default_factory=empty_fruit_counts)
    average_launcher_capacity: float = 0.0

    # Sink
    total_tiles_in_sink: int = 0
    sink_columns: int = 0
    stack_depths: List[int] = field(default_factory=list)
    average_stack_depth: float = 0.0
    max_stack_depth: int = 0

    # Waiting stand
    waiting_stand_slots: int = 0
    buffer_ratio: float = 0.0

    # Complexity
    decision_complexity: float = 0.0
    visibility_score: float = 1.0
    distribution_evenness: float = 1.0

    # Result
    difficulty_score: int = 0
    difficulty_tier: DifficultyTier = DifficultyTier.TRIVIAL
    factor_breakdown: Dict[str, float] = field(default_factory=dict)

    # Solvability
    is_solvable: bool = True
    solvability_issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_pixels": self.total_pixels,
            "unique_fruit_types": self.unique_fruit_types,
            "fruit_distribution": {f.value: c for f, c in self.fruit_distribution.items()},
            "total_launchers": self.total_launchers,
            "launchers_per_fruit": {f.value: c for f, c in self.launchers_per_fruit.items()},
            "average_launcher_capacity": round(self.average_launcher_capacity, 2),
            "total_tiles_in_sink": self.total_tiles_in_sink,
            "sink_columns": self.sink_columns,
            "stack_depths": self.stack_depths,
            "average_stack_depth": round(self.average_stack_depth, 2),
            "max_stack_depth": self.max_stack_depth,
            "waiting_stand_slots": self.waiting_stand_slots,
            "buffer_ratio": round(self.buffer_ratio, 3),
            "decision_complexity": round(self.decision_complexity, 3),
            "visibility_score": round(self.visibility_score, 3),
            "distribution_evenness": round(self.distribution_evenness, 3),
            "difficulty_score": self.difficulty_score,
            "difficulty_tier": self.difficulty_tier.value,
            "factor_breakdown": {k: round(v, 3) for k, v in self.factor_breakdown.items()},
            "is_solvable": self.is_solvable,
            "solvability_issues": self.solvability_issues,
        }


@dataclass
class SettingRange:
    """Min/max/recommended value for one level parameter."""
    min: int
    max: int
    recommended: int

    def to_dict(self) -> Dict[str, int]:
        return {"min": self.min, "max": self.max, "recommended": self.recommended}


@dataclass
class RecommendedSettings:
    """Recommended level parameters for a difficulty tier."""
    grid_size: SettingRange
    color_count: SettingRange
    buffer_slots: SettingRange
    column_count: SettingRange

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid_size": self.grid_size.to_dict(),
            "color_count": self.color_count.to_dict(),
            "buffer_slots": self.buffer_slots.to_dict(),
            "column_count": self.column_count.to_dict(),
        }


@dataclass
class CompletionEstimate:
    """Expected play time in minutes."""
    min_minutes: float
    average_minutes: float
    max_minutes: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "min_minutes": round_half_up(self.min_minutes, 1),
            "average_minutes": round_half_up(self.average_minutes, 1),
            "max_minutes": round_half_up(self.max_minutes, 1),
        }


@dataclass
class OrderFactor:
    """One weighted factor of the tile-order score."""
    name: str
    description: str
    score: float
    weight: float
    explanation: str
    impact: str  # easy / medium / hard

    @property
    def contribution(self) -> float:
        return self.score * self.weight

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "score": round(self.score, 3),
            "weight": self.weight,
            "contribution": round(self.contribution, 3),
            "explanation": self.explanation,
            "impact": self.impact,
        }


@dataclass
class SimulationResult:
    """Outcome of random-play runs over one sink order."""
    wins: int = 0
    losses: int = 0
    total_games: int = 0
    win_rate: float = 0.0
    average_peak_usage: float = 0.0
    average_moves: float = 0.0
    peak_usage_distribution: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "total_games": self.total_games,
            "win_rate": round(self.win_rate, 3),
            "average_peak_usage": round(self.average_peak_usage, 2),
            "average_moves": round(self.average_moves, 1),
            "peak_usage_distribution": self.peak_usage_distribution,
        }


@dataclass
class OrderDifficultyMetrics:
    """Difficulty contributed by the order of tiles in the sink."""
    # Factor scores, 0 easy .. 1 hard
    triplet_accessibility: float = 0.0
    blocking_score: float = 0.0
    interleaving_score: float = 0.0
    launcher_alignment: float = 0.0
    decision_entropy: float = 0.0
    waiting_stand_pressure: float = 0.0

    # Simulation
    simulated_failure_rate: float = 0.0
    simulated_average_peak_usage: float = 0.0
    simulated_win_rate: float = 0.0

    # Result
    order_difficulty_score: int = 0
    factor_breakdown: List[OrderFactor] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "triplet_accessibility": round(self.triplet_accessibility, 3),
            "blocking_score": round(self.blocking_score, 3),
            "interleaving_score": round(self.interleaving_score, 3),
            "launcher_alignment": round(self.launcher_alignment, 3),
            "decision_entropy": round(self.decision_entropy, 3),
            "waiting_stand_pressure": round(self.waiting_stand_pressure, 3),
            "simulated_failure_rate": round(self.simulated_failure_rate, 3),
            "simulated_average_peak_usage": round(self.simulated_average_peak_usage, 2),
            "simulated_win_rate": round(self.simulated_win_rate, 3),
            "order_difficulty_score": self.order_difficulty_score,
            "factor_breakdown": [f.to_dict() for f in self.factor_breakdown],
        }


@dataclass
class OrderOptimizationResult:
    """Reordered sink for a target difficulty, with before/after order scores."""
    original_score: int
    optimized_score: int
    optimized_stacks: List[List[SinkTile]]
    strategy: str

    @property
    def improvement(self) -> int:
        return self.original_score - self.optimized_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_score": self.original_score,
            "optimized_score": self.optimized_score,
            "improvement": self.improvement,
            "strategy": self.strategy,
            "sink_stacks": [[tile.to_dict() for tile in stack] for stack in self.optimized_stacks],
        }


@dataclass
class GenerationParams:
    """Parameters for solvable sink generation."""
    pixel_art: List[PixelCell]
    sink_width: int = 6
    waiting_stand_slots: int = 7
    min_stack_height: int = 2
    max_stack_height: int = 5
    seed: Optional[int] = None
    name: str = ""


@dataclass
class GenerationResult:
    """Result of level generation."""
    level: FruitMatchLevel
    metrics: DifficultyMetrics
    generation_time_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "level_json": self.level.to_dict(),
            "metrics": self.metrics.to_dict(),
            "generation_time_ms": self.generation_time_ms,
        }
