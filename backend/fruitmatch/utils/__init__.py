"""Utility functions package."""
from .helpers import (
    create_blank_pixel_art,
    emoji_pattern_to_pixel_art,
    validate_level_json,
)

__all__ = [
    "create_blank_pixel_art",
    "emoji_pattern_to_pixel_art",
    "validate_level_json",
]
