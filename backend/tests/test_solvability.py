"""Tests for the solvability checker."""
import pytest
from fruitmatch.core.solvability import (
    check_solvability,
    check_level_solvability,
    minimum_safe_slots,
)
from fruitmatch.models.level import FruitMatchLevel, FruitType, PixelCell, SinkTile


def make_pattern(counts):
    """One row of pixels per fruit."""
    cells = []
    for row, (fruit, count) in enumerate(counts.items()):
        cells.extend(PixelCell(row=row, col=col, fruit_type=fruit) for col in range(count))
    return cells


def make_column(fruits, position=0):
    return [SinkTile(fruit_type=f, position=position, stack_index=i) for i, f in enumerate(fruits)]


@pytest.fixture
def apple_pattern():
    """5 apple pixels → one launcher → 3 tiles."""
    return make_pattern({FruitType.APPLE: 5})


class TestCheckSolvability:
    """Test cases for check_solvability."""

    def test_exact_supply_is_solvable(self, apple_pattern):
        report = check_solvability(apple_pattern, [make_column([FruitType.APPLE] * 3)], 8)

        assert report.is_solvable
        assert report.issues == []

    def test_shortfall_is_unsolvable(self, apple_pattern):
        report = check_solvability(apple_pattern, [make_column([FruitType.APPLE] * 2)], 8)

        assert not report.is_solvable
        assert "Not enough apple tiles: have 2, need 3" in report.issues

    def test_excess_is_unsolvable(self, apple_pattern):
        report = check_solvability(apple_pattern, [make_column([FruitType.APPLE] * 4)], 8)

        assert not report.is_solvable
        assert "Too many apple tiles: have 4, need 3" in report.issues
        assert "apple tiles not in multiple of 3: 4 tiles" in report.issues

    def test_foreign_fruit_is_unsolvable(self, apple_pattern):
        sink = [make_column([FruitType.APPLE] * 3), make_column([FruitType.PEAR] * 3, position=1)]
        report = check_solvability(apple_pattern, sink, 8)

        assert not report.is_solvable
        assert report.issues == ["Too many pear tiles: have 3, need 0"]

    def test_six_tiles_in_one_column(self):
        """25 pixels → 20 + 20 → 6 tiles; divisible by 3 so no advisory."""
        pattern = make_pattern({FruitType.APPLE: 25})
        report = check_solvability(pattern, [make_column([FruitType.APPLE] * 6)], 8)

        assert report.is_solvable
        assert report.issues == []

    def test_small_waiting_stand_is_advisory(self):
        pattern = make_pattern({fruit: 5 for fruit in list(FruitType)[:5]})
        sink = [make_column([fruit] * 3, position=i) for i, fruit in enumerate(list(FruitType)[:5])]

        report = check_solvability(pattern, sink, 7)

        assert report.is_solvable
        assert report.issues == ["Waiting stand may be too small: 7 slots, recommend at least 8"]

    def test_empty_pattern_and_sink(self):
        report = check_solvability([], [], 7)

        assert report.is_solvable
        assert report.issues == []

    def test_level_wrapper(self, apple_pattern):
        level = FruitMatchLevel(
            pixel_art=apple_pattern,
            sink_stacks=[make_column([FruitType.APPLE] * 3)],
            waiting_stand_slots=2,
        )
        report = check_level_solvability(level)

        assert report.is_solvable
        assert len(report.issues) == 1


class TestMinimumSafeSlots:
    """Test cases for the waiting stand heuristic."""

    def test_floor_of_three_fruits(self):
        assert minimum_safe_slots(0) == 6
        assert minimum_safe_slots(2) == 6
        assert minimum_safe_slots(4) == 6

    def test_grows_with_fruits(self):
        assert minimum_safe_slots(5) == 8
        assert minimum_safe_slots(9) == 16
