"""Tests for level helpers and JSON conversion."""
import pytest
from fruitmatch.models.level import FruitMatchLevel, FruitType, migrate_fruit_type
from fruitmatch.utils.helpers import (
    create_blank_pixel_art,
    emoji_pattern_to_pixel_art,
    validate_level_json,
)


@pytest.fixture
def level_json():
    """Small level in the designer's JSON format."""
    return {
        "id": "level-1",
        "name": "Cherry",
        "pixelArt": [
            {"row": 0, "col": 0, "fruitType": "cherry", "filled": False},
            {"row": 0, "col": 1, "fruitType": "strawberry", "filled": False},
            {"row": 1, "col": 0, "fruitType": "apple", "filled": True},
        ],
        "sinkStacks": [
            [
                {"id": "b", "fruitType": "strawberry", "stackIndex": 1, "position": 0},
                {"id": "a", "fruitType": "strawberry", "stackIndex": 0, "position": 0},
            ],
            [{"id": "c", "fruitType": "kiwi", "stackIndex": 0, "position": 1}],
        ],
        "waitingStandSlots": 6,
    }


class TestMigrateFruitType:
    """Test cases for fruit name migration."""

    def test_current_names(self):
        assert migrate_fruit_type("blueberry") == FruitType.BLUEBERRY
        assert migrate_fruit_type(FruitType.PEAR) == FruitType.PEAR

    def test_legacy_names(self):
        assert migrate_fruit_type("cherry") == FruitType.STRAWBERRY
        assert migrate_fruit_type("grape") == FruitType.PLUM
        assert migrate_fruit_type("lemon") == FruitType.BANANA
        assert migrate_fruit_type("kiwi") == FruitType.APPLE
        assert migrate_fruit_type("white") == FruitType.PEAR
        assert migrate_fruit_type("black") == FruitType.BLACKBERRY

    def test_unknown_falls_back_to_apple(self):
        assert migrate_fruit_type("durian") == FruitType.APPLE

    def test_non_string_falls_back_to_apple(self):
        assert migrate_fruit_type(["apple"]) == FruitType.APPLE
        assert migrate_fruit_type(None) == FruitType.APPLE


class TestLevelJson:
    """Test cases for FruitMatchLevel JSON conversion."""

    def test_from_dict(self, level_json):
        level = FruitMatchLevel.from_dict(level_json)

        assert level.id == "level-1"
        assert level.waiting_stand_slots == 6
        assert [c.fruit_type for c in level.pixel_art] == [
            FruitType.STRAWBERRY, FruitType.STRAWBERRY, FruitType.APPLE,
        ]
        assert level.pixel_art[2].filled
        assert level.pixel_art_width == 2
        assert level.pixel_art_height == 2

    def test_from_dict_orders_stack_top_first(self, level_json):
        level = FruitMatchLevel.from_dict(level_json)

        assert level.sink_width == 2
        assert [t.id for t in level.sink_stacks[0]] == ["a", "b"]
        assert [t.stack_index for t in level.sink_stacks[0]] == [0, 1]
        assert level.sink_stacks[1][0].fruit_type == FruitType.APPLE
        assert level.sink_stacks[1][0].position == 1

    def test_round_trip(self, level_json):
        data = FruitMatchLevel.from_dict(level_json).to_dict()

        assert data["sinkWidth"] == 2
        assert data["pixelArt"][0]["fruitType"] == "strawberry"
        assert FruitMatchLevel.from_dict(data).to_dict() == data

    def test_from_empty_dict(self):
        level = FruitMatchLevel.from_dict({})

        assert level.pixel_art == []
        assert level.sink_stacks == []
        assert level.waiting_stand_slots == 7


class TestPixelArtHelpers:
    """Test cases for pixel art helpers."""

    def test_emoji_pattern(self):
        cells = emoji_pattern_to_pixel_art([
            ["🍓", " ", "🟦"],
            ["", "⬛", "🍐"],
        ])

        assert [(c.row, c.col, c.fruit_type) for c in cells] == [
            (0, 0, FruitType.STRAWBERRY),
            (0, 2, FruitType.BLUEBERRY),
            (1, 1, FruitType.BLACKBERRY),
            (1, 2, FruitType.PEAR),
        ]
        assert not any(c.filled for c in cells)

    def test_blank_pixel_art(self):
        cells = create_blank_pixel_art(4, 3, FruitType.BANANA)

        assert len(cells) == 12
        assert len({(c.row, c.col) for c in cells}) == 12
        assert all(c.fruit_type == FruitType.BANANA for c in cells)

    def test_blank_pixel_art_negative_size(self):
        with pytest.raises(ValueError):
            create_blank_pixel_art(-1, 3)


class TestValidateLevelJson:
    """Test cases for validate_level_json."""

    def test_valid_level(self, level_json):
        assert validate_level_json(level_json) == (True, None)

    def test_missing_fruit_type(self, level_json):
        del level_json["pixelArt"][0]["fruitType"]
        is_valid, error = validate_level_json(level_json)

        assert not is_valid
        assert "fruitType" in error

    def test_duplicate_pixel(self, level_json):
        level_json["pixelArt"].append({"row": 0, "col": 0, "fruitType": "apple"})
        is_valid, error = validate_level_json(level_json)

        assert not is_valid
        assert "Duplicate" in error

    def test_bad_sink(self, level_json):
        level_json["sinkStacks"] = [{"fruitType": "apple"}]

        assert validate_level_json(level_json)[0] is False

    def test_negative_slots(self, level_json):
        level_json["waitingStandSlots"] = -1

        assert validate_level_json(level_json)[0] is False

    def test_non_string_pixel_fruit_type(self, level_json):
        level_json["pixelArt"][0]["fruitType"] = 3
        is_valid, error = validate_level_json(level_json)

        assert not is_valid
        assert error == "pixelArt[0] 'fruitType' must be a string"

    def test_list_sink_fruit_type(self, level_json):
        level_json["sinkStacks"][1][0]["fruitType"] = ["apple"]
        is_valid, error = validate_level_json(level_json)

        assert not is_valid
        assert "sinkStacks[1][0]" in error

    @pytest.mark.parametrize("stack_index", ["1", None, 1.5, True])
    def test_non_integer_stack_index(self, level_json, stack_index):
        level_json["sinkStacks"][0][0]["stackIndex"] = stack_index
        is_valid, error = validate_level_json(level_json)

        assert not is_valid
        assert "'stackIndex' must be an integer" in error

    def test_stack_index_is_optional(self, level_json):
        del level_json["sinkStacks"][0][0]["stackIndex"]

        assert validate_level_json(level_json) == (True, None)

    def test_non_integer_pixel_art_size(self, level_json):
        level_json["pixelArtWidth"] = [4]

        assert validate_level_json(level_json) == (False, "'pixelArtWidth' must be an integer")

    def test_boolean_slots(self, level_json):
        level_json["waitingStandSlots"] = True

        assert validate_level_json(level_json)[0] is False
