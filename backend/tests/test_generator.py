"""Tests for solvable sink generation."""
import logging
import random

import pytest
from fruitmatch.core.capacity import launchers_needed, count_fruits
from fruitmatch.core.generator import (
    SinkGenerator,
    generate_solvable_sink_stacks,
    get_generator,
)
from fruitmatch.core.solvability import check_solvability, count_sink_tiles
from fruitmatch.models.level import (
    ALL_FRUITS,
    FruitType,
    GenerationParams,
    PixelCell,
)


def make_pattern(counts):
    """One row of pixels per fruit."""
    cells = []
    for row, (fruit, count) in enumerate(counts.items()):
        cells.extend(PixelCell(row=row, col=col, fruit_type=fruit) for col in range(count))
    return cells


@pytest.fixture
def generator():
    """Create generator instance."""
    return SinkGenerator()


@pytest.fixture
def mixed_pattern():
    """Four fruits of uneven size."""
    return make_pattern({
        FruitType.APPLE: 150,
        FruitType.ORANGE: 45,
        FruitType.PLUM: 5,
        FruitType.BLUEBERRY: 220,
    })


class TestGenerateSolvableSinkStacks:
    """Test cases for generate_solvable_sink_stacks."""

    def test_single_small_fruit(self):
        """5 pixels → one launcher → exactly three tiles of that fruit."""
        stacks = generate_solvable_sink_stacks(make_pattern({FruitType.APPLE: 5}), 3, seed=1)
        counts = count_sink_tiles(stacks)

        assert counts[FruitType.APPLE] == 3
        assert sum(counts.values()) == 3

    def test_conservation(self, mixed_pattern):
        pixels = count_fruits(mixed_pattern)
        for width in range(1, 13):
            counts = count_sink_tiles(generate_solvable_sink_stacks(mixed_pattern, width, seed=width))
            for fruit in ALL_FRUITS:
                assert counts[fruit] == 3 * launchers_needed(pixels[fruit])

    def test_always_solvable(self):
        rng = random.Random(2024)
        for _ in range(30):
            counts = {fruit: rng.randint(0, 400) for fruit in ALL_FRUITS}
            pattern = make_pattern(counts)
            stacks = generate_solvable_sink_stacks(pattern, rng.randint(1, 15), rng=rng)

            assert check_solvability(pattern, stacks, 8).is_solvable

    def test_depth_accounting(self, mixed_pattern):
        stacks = generate_solvable_sink_stacks(mixed_pattern, 4, seed=5)
        total = sum(count_sink_tiles(stacks).values())

        assert sum(len(stack) for stack in stacks) == total
        for col, stack in enumerate(stacks):
            assert [tile.stack_index for tile in stack] == list(range(len(stack)))
            assert all(tile.position == col for tile in stack)

    def test_respects_max_height_when_capacity_suffices(self):
        """27 tiles over 6 columns: targets 5,5,5,4,4,4."""
        pattern = make_pattern({fruit: 5 for fruit in ALL_FRUITS})
        stacks = generate_solvable_sink_stacks(pattern, 6, seed=9)

        assert sorted(len(s) for s in stacks) == [4, 4, 4, 5, 5, 5]

    def test_overflow_exceeds_max_height(self, caplog):
        """27 tiles over 2 columns of max 5: leftovers stack past the limit."""
        pattern = make_pattern({fruit: 5 for fruit in ALL_FRUITS})

        with caplog.at_level(logging.WARNING, logger="fruitmatch.core.generator"):
            stacks = generate_solvable_sink_stacks(pattern, 2, max_stack_height=5, seed=9)

        assert sorted(len(s) for s in stacks) == [13, 14]
        assert sum(len(s) for s in stacks) == 27
        assert "Sink overflow" in caplog.text

    def test_min_height_leaves_trailing_columns_empty(self):
        """3 tiles, 4 columns, min height 2: first columns fill before others."""
        stacks = generate_solvable_sink_stacks(make_pattern({FruitType.PEAR: 5}), 4, seed=0)

        assert [len(s) for s in stacks] == [2, 1, 0, 0]

    def test_empty_pattern(self):
        stacks = generate_solvable_sink_stacks([], 5, seed=0)

        assert len(stacks) == 5
        assert all(stack == [] for stack in stacks)

    def test_seed_is_reproducible(self, mixed_pattern):
        first = generate_solvable_sink_stacks(mixed_pattern, 6, seed=123)
        second = generate_solvable_sink_stacks(mixed_pattern, 6, seed=123)

        assert [[t.fruit_type for t in s] for s in first] == [[t.fruit_type for t in s] for s in second]

    def test_injected_rng_is_reproducible(self, mixed_pattern):
        first = generate_solvable_sink_stacks(mixed_pattern, 6, rng=random.Random(77))
        second = generate_solvable_sink_stacks(mixed_pattern, 6, rng=random.Random(77))

        assert [[t.fruit_type for t in s] for s in first] == [[t.fruit_type for t in s] for s in second]

    def test_zero_columns_raises(self, mixed_pattern):
        with pytest.raises(ValueError):
            generate_solvable_sink_stacks(mixed_pattern, 0)

    def test_invalid_heights_raise(self, mixed_pattern):
        with pytest.raises(ValueError):
            generate_solvable_sink_stacks(mixed_pattern, 4, min_stack_height=6, max_stack_height=5)
        with pytest.raises(ValueError):
            generate_solvable_sink_stacks(mixed_pattern, 4, min_stack_height=-1)


class TestSinkGenerator:
    """Test cases for SinkGenerator."""

    def test_generate_returns_result(self, generator, mixed_pattern):
        result = generator.generate(GenerationParams(pixel_art=mixed_pattern, sink_width=7, seed=1))

        assert result.metrics.is_solvable
        assert result.level.sink_width == 7
        assert result.metrics.total_tiles_in_sink == sum(len(s) for s in result.level.sink_stacks)
        assert result.generation_time_ms >= 0

    def test_generate_sets_pattern_size(self, generator):
        pattern = [
            PixelCell(row=0, col=0, fruit_type=FruitType.APPLE),
            PixelCell(row=3, col=5, fruit_type=FruitType.APPLE),
        ]
        result = generator.generate(GenerationParams(pixel_art=pattern, sink_width=2, seed=1))

        assert result.level.pixel_art_width == 6
        assert result.level.pixel_art_height == 4

    def test_generate_keeps_waiting_stand(self, generator, mixed_pattern):
        params = GenerationParams(pixel_art=mixed_pattern, waiting_stand_slots=9, seed=4)
        result = generator.generate(params)

        assert result.level.waiting_stand_slots == 9
        assert result.metrics.waiting_stand_slots == 9

    def test_generate_invalid_width(self, generator, mixed_pattern):
        with pytest.raises(ValueError):
            generator.generate(GenerationParams(pixel_art=mixed_pattern, sink_width=0))

    def test_generate_result_to_dict(self, generator, mixed_pattern):
        result_dict = generator.generate(GenerationParams(pixel_art=mixed_pattern, seed=2)).to_dict()

        assert isinstance(result_dict, dict)
        assert "level_json" in result_dict
        assert "metrics" in result_dict
        assert "generation_time_ms" in result_dict
        assert result_dict["metrics"]["is_solvable"] is True

    def test_singleton_generator(self):
        assert get_generator() is get_generator()
