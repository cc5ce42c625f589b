"""Utility helper functions."""
from typing import Dict, Any, List, Optional

from ..models.level import FruitType, PixelCell, migrate_fruit_type

# Emoji and colour squares accepted in quick-authored patterns
EMOJI_TO_FRUIT: Dict[str, FruitType] = {
    "🫐": FruitType.BLUEBERRY,
    "🍊": FruitType.ORANGE,
    "🍓": FruitType.STRAWBERRY,
    "🩷": FruitType.DRAGONFRUIT,
    "🍌": FruitType.BANANA,
    "🍏": FruitType.APPLE,
    "🍇": FruitType.PLUM,
    "🍐": FruitType.PEAR,
    "🖤": FruitType.BLACKBERRY,
    "🟦": FruitType.BLUEBERRY,
    "🟧": FruitType.ORANGE,
    "🟥": FruitType.STRAWBERRY,
    "🟨": FruitType.BANANA,
    "🟩": FruitType.APPLE,
    "🟪": FruitType.PLUM,
    "⬜": FruitType.PEAR,
    "⬛": FruitType.BLACKBERRY,
}


def emoji_pattern_to_pixel_art(pattern: List[List[str]]) -> List[PixelCell]:
    """
    Convert a 2D emoji grid to pixel art.

    Blank cells (empty or whitespace) are skipped. Unrecognised emoji are
    treated as fruit names, falling back to apple.
    """
    cells: List[PixelCell] = []
    for row, line in enumerate(pattern):
        for col, emoji in enumerate(line):
            if not emoji or not emoji.strip():
                continue
            fruit = EMOJI_TO_FRUIT.get(emoji) or migrate_fruit_type(emoji)
            cells.append(PixelCell(row=row, col=col, fruit_type=fruit))
    return cells


def create_blank_pixel_art(
    width: int, height: int, fruit_type: FruitType = FruitType.APPLE
) -> List[PixelCell]:
    """Create a full width x height grid of one fruit."""
    if width < 0 or height < 0:
        raise ValueError(f"Pixel art size must be non-negative, got {width}x{height}")
    return [
        PixelCell(row=row, col=col, fruit_type=fruit_type)
        for row in range(height)
        for col in range(width)
    ]


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid JSON index
    return isinstance(value, int) and not isinstance(value, bool)


def validate_level_json(level_json: Dict[str, Any]) -> tuple[bool, Optional[str]]:
    """
    Validate level JSON structure.

    Args:
        level_json: Level data to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    pixel_art = level_json.get("pixelArt", [])
    if not isinstance(pixel_art, list):
        return False, "'pixelArt' must be an array"

    seen = set()
    for i, cell in enumerate(pixel_art):
        if not isinstance(cell, dict):
            return False, f"pixelArt[{i}] must be an object"
        for key in ("row", "col", "fruitType"):
            if key not in cell:
                return False, f"pixelArt[{i}] missing '{key}' field"
        if not isinstance(cell["fruitType"], str):
            return False, f"pixelArt[{i}] 'fruitType' must be a string"
        try:
            position = (int(cell["row"]), int(cell["col"]))
        except (TypeError, ValueError):
            return False, f"Invalid pixel coordinates at pixelArt[{i}]"
        if position in seen:
            return False, f"Duplicate pixel at row {position[0]}, col {position[1]}"
        seen.add(position)

    sink_stacks = level_json.get("sinkStacks", [])
    if not isinstance(sink_stacks, list):
        return False, "'sinkStacks' must be an array"

    for col, stack in enumerate(sink_stacks):
        if not isinstance(stack, list):
            return False, f"sinkStacks[{col}] must be an array"
        for depth, tile in enumerate(stack):
            if not isinstance(tile, dict) or "fruitType" not in tile:
                return False, f"Tile at sinkStacks[{col}][{depth}] missing 'fruitType' field"
            if not isinstance(tile["fruitType"], str):
                return False, f"Tile at sinkStacks[{col}][{depth}] 'fruitType' must be a string"
            if "stackIndex" in tile and not _is_int(tile["stackIndex"]):
                return False, f"Tile at sinkStacks[{col}][{depth}] 'stackIndex' must be an integer"

    slots = level_json.get("waitingStandSlots", 7)
    if not _is_int(slots) or slots < 0:
        return False, "'waitingStandSlots' must be a non-negative integer"

    for key in ("pixelArtWidth", "pixelArtHeight"):
        value = level_json.get(key)
        if value is not None and not _is_int(value):
            return False, f"'{key}' must be an integer"

    return True, None
