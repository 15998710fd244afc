"""
Tests for the generation engine.
"""

import logging

import pytest
from sparse_life.core import (
    Coordinate, CoordinateCache, World, GenerationEngine,
    GenerationOverflowError, MAX_GENERATION, count_neighbors,
)
from sparse_life.patterns import get_pattern


BLINKER = [(-1, 0), (0, 0), (1, 0)]


@pytest.fixture
def cache():
    return CoordinateCache()


@pytest.fixture
def engine(cache):
    with GenerationEngine(cache, workers=1) as eng:
        yield eng


class TestNeighborCounting:
    """Tests for neighbor counting."""

    def test_single_cell(self, cache):
        counts = count_neighbors([Coordinate(0, 0)], cache, generation=1)
        assert len(counts) == 8
        assert all(v == 1 for v in counts.values())
        assert Coordinate(0, 0) not in counts

    def test_overlapping_neighborhoods(self, cache):
        counts = count_neighbors([Coordinate(0, 0), Coordinate(1, 0)], cache, generation=1)
        assert counts[Coordinate(0, 0)] == 1
        assert counts[Coordinate(1, 0)] == 1
        assert counts[Coordinate(0, 1)] == 2
        assert counts[Coordinate(2, 1)] == 1


class TestAdvance:
    """Tests for GenerationEngine.advance."""

    def test_blinker_oscillates(self, engine, cache):
        """Blinker flips orientation and returns after two ticks."""
        seed = World.from_cells(BLINKER, cache)

        first = engine.advance(seed)
        assert first.cells == {Coordinate(0, -1), Coordinate(0, 0), Coordinate(0, 1)}

        second = engine.advance(first)
        assert second.cells == seed.cells

    def test_generation_increments(self, engine):
        world = World.from_cells(BLINKER, generation=41)
        assert engine.advance(world).generation == 42

    def test_isolated_cell_dies(self, engine):
        world = engine.advance(World.from_cells([(3, 3)]))
        assert world.is_extinct

    def test_extinction_is_terminal(self, engine):
        world = World(frozenset(), 5)
        nxt = engine.advance(world)
        assert nxt.is_extinct
        assert nxt.generation == 6

    def test_birth_zero_does_not_spawn(self, engine):
        """Only coordinates next to live cells are candidates for birth."""
        nxt = engine.advance(World(), birth={0, 3}, survival={2, 3})
        assert nxt.is_extinct

    def test_block_is_still(self, engine):
        block = World.from_cells([(0, 0), (1, 0), (0, 1), (1, 1)])
        assert engine.advance(block).cells == block.cells

    def test_glider_translates(self, engine, cache):
        """Glider moves one cell diagonally every four ticks."""
        glider = get_pattern("glider", cache)
        world = engine.advance_n(glider, 4)
        assert world.generation == 4
        assert world.cells == glider.translated(1, 1).cells

    def test_empty_rule_sets(self, engine):
        """No birth and no survival: everything dies."""
        world = World.from_cells([(0, 0), (1, 0), (0, 1), (1, 1)])
        assert engine.advance(world, birth=set(), survival=set()).is_extinct

    def test_seeds_rule(self, engine):
        """B2/S: live cells die, cells with exactly two neighbors are born."""
        world = World.from_cells([(0, 0), (1, 0)])
        nxt = engine.advance(world, birth={2}, survival=set())
        assert nxt.cells == {
            Coordinate(0, -1), Coordinate(1, -1), Coordinate(0, 1), Coordinate(1, 1),
        }

    def test_negative_counts_rejected(self, engine):
        world = World.from_cells(BLINKER)
        with pytest.raises(ValueError, match="birth"):
            engine.advance(world, birth={-1})
        with pytest.raises(ValueError, match="survival"):
            engine.advance(world, survival={2, -3})

    def test_input_world_unchanged(self, engine):
        seed = World.from_cells(BLINKER)
        cells = set(seed.cells)
        engine.advance(seed)
        assert seed.cells == cells
        assert seed.generation == 0

    def test_timestamps_refreshed(self, engine, cache):
        """Every cell of the new World is stamped with its generation."""
        seed = World.from_cells(BLINKER, cache)
        nxt = engine.advance(seed)
        assert cache.generation == 1
        for cell in nxt:
            assert cache.timestamp(cell) == 1
            assert cache.intern(cell.x, cell.y) is cell

    def test_overflow_is_fatal(self, engine):
        world = World.from_cells(BLINKER, generation=MAX_GENERATION)
        with pytest.raises(GenerationOverflowError):
            engine.advance(world)
        with pytest.raises(RuntimeError):
            engine.advance(world)

    def test_last_valid_generation(self, engine):
        world = World.from_cells(BLINKER, generation=MAX_GENERATION - 1)
        assert engine.advance(world).generation == MAX_GENERATION

    def test_debug_log_per_generation(self, engine, caplog):
        with caplog.at_level(logging.DEBUG, logger="sparse_life.core.engine"):
            engine.advance(World.from_cells(BLINKER))
        assert "Generation 1: population 3 (survivors=1, newborns=2)" in caplog.text

    def test_no_debug_log_at_info(self, engine, caplog):
        with caplog.at_level(logging.INFO, logger="sparse_life.core.engine"):
            engine.advance(World.from_cells(BLINKER))
        assert "Generation 1" not in caplog.text


class TestParallel:
    """Tests for parallel neighbor counting."""

    def test_parallel_matches_serial(self):
        """Fan-out over threads gives the same result as a serial count."""
        serial_cache = CoordinateCache()
        parallel_cache = CoordinateCache()
        serial = GenerationEngine(serial_cache, workers=1)

        with GenerationEngine(parallel_cache, workers=4, parallel_threshold=1) as parallel:
            a = get_pattern("r_pentomino", serial_cache)
            b = get_pattern("r_pentomino", parallel_cache)
            for _ in range(60):
                a = serial.advance(a)
                b = parallel.advance(b)
                assert a.cells == b.cells
                assert a.generation == b.generation

        assert len(serial_cache) == len(parallel_cache)

    def test_deterministic(self):
        """Repeated advances of the same World agree."""
        cache = CoordinateCache()
        with GenerationEngine(cache, workers=3, parallel_threshold=2) as engine:
            world = engine.advance_n(get_pattern("acorn", cache), 20)
            results = {engine.advance(world).cells for _ in range(5)}
        assert len(results) == 1

    def test_invalid_parameters(self):
        with pytest.raises(ValueError, match="workers"):
            GenerationEngine(workers=0)
        with pytest.raises(ValueError, match="parallel_threshold"):
            GenerationEngine(parallel_threshold=0)

    def test_default_cache(self):
        engine = GenerationEngine(workers=1)
        assert isinstance(engine.cache, CoordinateCache)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
