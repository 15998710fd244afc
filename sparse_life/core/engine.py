"""
Generation engine for the sparse Life plane.

Implements the time evolution of a World:
    W(t) → W(t+1) = T_{B,S}(W(t))

where B is the set of neighbor counts that give birth to a dead cell and
S the set of neighbor counts that let a live cell survive.

The next generation is composed of newborns from fecund neighborhoods and
survivors on stable neighborhoods. Neighbor counting is a map/reduce over
the live set: each live cell contributes +1 to each of its 8 Moore
neighbors, and the per-slice Counters are merged by addition. Large
worlds fan the map step out over a thread pool; the result is the same
whatever order the slices finish in.
"""

from __future__ import annotations
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Sequence
import logging
import os

from .coordinate import Coordinate, CoordinateCache, NEIGHBOR_OFFSETS
from .errors import GenerationOverflowError
from .world import World


logger = logging.getLogger(__name__)

# Generation indices are signed 64-bit counters
MAX_GENERATION = 2**63 - 1

# Conway's Game of Life: B3/S23
DEFAULT_BIRTH: FrozenSet[int] = frozenset({3})
DEFAULT_SURVIVAL: FrozenSet[int] = frozenset({2, 3})


def normalize_counts(counts: Iterable[int], name: str = "rule set") -> FrozenSet[int]:
    """Convert neighbor counts to a frozenset, rejecting negatives."""
    result = frozenset(int(c) for c in counts)
    negative = sorted(c for c in result if c < 0)
    if negative:
        raise ValueError(f"{name} contains negative neighbor counts: {negative}")
    return result


def count_neighbors(
    cells: Sequence[Coordinate],
    cache: CoordinateCache,
    generation: int,
) -> Counter:
    """
    Count, for every coordinate adjacent to a cell in cells, how many of
    those cells it neighbors.

    Every neighbor is interned through cache and stamped with generation.
    """
    counts: Counter = Counter()
    intern = cache.intern
    for cell in cells:
        x, y = cell.x, cell.y
        for dx, dy in NEIGHBOR_OFFSETS:
            counts[intern(x + dx, y + dy, generation)] += 1
    return counts


class GenerationEngine:
    """
    Computes successor Worlds under birth/survival rules.

    Example:
        cache = CoordinateCache()
        engine = GenerationEngine(cache)
        blinker = World.from_cells([(-1, 0), (0, 0), (1, 0)], cache)

        nxt = engine.advance(blinker)
        print(nxt.sorted_cells())
        # [Coordinate(x=0, y=-1), Coordinate(x=0, y=0), Coordinate(x=0, y=1)]

        # HighLife
        engine.advance(blinker, birth={3, 6}, survival={2, 3})
    """

    def __init__(
        self,
        cache: Optional[CoordinateCache] = None,
        workers: Optional[int] = None,
        parallel_threshold: int = 2048,
    ):
        """
        Initialize engine.

        Args:
            cache: Shared coordinate cache (a private one is created if None)
            workers: Thread count for neighbor counting (os.cpu_count() if None;
                1 disables fan-out)
            parallel_threshold: Minimum population before counting fans out
        """
        if workers is not None and workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        if parallel_threshold < 1:
            raise ValueError(f"parallel_threshold must be at least 1, got {parallel_threshold}")

        self.cache = cache if cache is not None else CoordinateCache()
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.parallel_threshold = parallel_threshold
        self._executor: Optional[ThreadPoolExecutor] = None

    # ===== Neighbor counting =====

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.workers,
                thread_name_prefix="sparse-life",
            )
        return self._executor

    def _slices(self, cells: List[Coordinate]) -> List[List[Coordinate]]:
        size = -(-len(cells) // self.workers)
        return [cells[i:i + size] for i in range(0, len(cells), size)]

    def neighbor_counts(self, world: World, generation: int) -> Counter:
        """
        Live-neighbor count of every coordinate adjacent to a live cell.

        Args:
            world: Current World
            generation: Timestamp for every interned neighbor

        Returns:
            Counter mapping coordinate to number of live neighbors
        """
        cells = list(world.cells)
        if self.workers <= 1 or len(cells) < self.parallel_threshold:
            return count_neighbors(cells, self.cache, generation)

        executor = self._get_executor()
        futures = [
            executor.submit(count_neighbors, chunk, self.cache, generation)
            for chunk in self._slices(cells)
        ]
        counts: Counter = Counter()
        for future in futures:
            counts.update(future.result())
        return counts

    # ===== Evolution =====

    def advance(
        self,
        world: World,
        birth: AbstractSet[int] = DEFAULT_BIRTH,
        survival: AbstractSet[int] = DEFAULT_SURVIVAL,
    ) -> World:
        """
        Compute the next generation.

        Args:
            world: Current World
            birth: Neighbor counts that bring a dead cell to life
            survival: Neighbor counts that keep a live cell alive

        Returns:
            New World with generation index world.generation + 1

        Raises:
            GenerationOverflowError: if the generation index would pass MAX_GENERATION
            ValueError: if a rule set contains a negative count
        """
        birth = normalize_counts(birth, "birth")
        survival = normalize_counts(survival, "survival")

        if world.generation >= MAX_GENERATION:
            raise GenerationOverflowError(world.generation, MAX_GENERATION)
        generation = world.generation + 1
        self.cache.advance_to(generation)

        neighbors = self.neighbor_counts(world, generation)

        newborns = {
            cell for cell, count in neighbors.items()
            if count in birth and cell not in world.cells
        }
        touch = self.cache.touch
        survivors = {
            touch(cell, generation) for cell in world.cells
            if neighbors.get(cell, 0) in survival
        }

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Generation {generation}: population {len(survivors) + len(newborns)} "
                f"(survivors={len(survivors)}, newborns={len(newborns)})"
            )
        return World(frozenset(survivors | newborns), generation)

    def advance_n(
        self,
        world: World,
        steps: int,
        birth: AbstractSet[int] = DEFAULT_BIRTH,
        survival: AbstractSet[int] = DEFAULT_SURVIVAL,
    ) -> World:
        """Advance steps generations."""
        for _ in range(steps):
            world = self.advance(world, birth, survival)
        return world

    # ===== Lifecycle =====

    def close(self) -> None:
        """Shut down the worker pool."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "GenerationEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"GenerationEngine(workers={self.workers}, parallel_threshold={self.parallel_threshold})"
