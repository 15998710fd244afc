"""
Sequence driver: repeated generation advance with termination detection.

Produces a list of Worlds, each the successor of the previous. A bounded
sliding history keeps memory flat; the run stops when, in priority order:

1. the population dies out (extinction)
2. the pattern returns to the recentered silhouette of its origin
   (still lifes, oscillators and spaceships close a loop here)
3. an injected stop predicate asks to halt
4. the population count has plateaued over a trailing window
5. an optional generation budget is exhausted
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Callable, FrozenSet, Iterator, List, Optional, Tuple
import logging

import numpy as np

from .coordinate import Coordinate
from .engine import GenerationEngine, DEFAULT_BIRTH, DEFAULT_SURVIVAL, normalize_counts
from .world import World, recenter


logger = logging.getLogger(__name__)

# (history most-recent-first, generation index, reserved) -> stop?
StopPredicate = Callable[[Tuple[World, ...], int, int], bool]


class StopReason(Enum):
    """Why a run ended."""
    EXTINCTION = "extinction"
    CYCLE = "cycle"
    PREDICATE = "predicate"
    STABILIZED = "stabilized"
    MAX_GENERATIONS = "max_generations"


def is_stable_population(history: List[World], window_size: int) -> bool:
    """
    Detect a plateau in the number of living cells.

    history is most-recent-first. The population is stable once the
    history is full (2 * window_size entries) and every entry in
    history[window_size:2 * window_size] has the newest entry's population.
    """
    if len(history) < 2 * window_size:
        return False
    newest = history[0].population
    return all(w.population == newest for w in history[window_size:2 * window_size])


@dataclass
class SequenceResult:
    """
    Outcome of a run.

    Behaves as a read-only, oldest-first sequence of the retained Worlds.

    Attributes:
        worlds: Retained Worlds, oldest first, at most window_size of them
        stop_reason: Termination condition that fired
        generations: Number of advances performed
        last: Newest World computed (kept even when worlds is empty)
    """
    worlds: List[World] = field(default_factory=list)
    stop_reason: StopReason = StopReason.EXTINCTION
    generations: int = 0
    last: Optional[World] = None

    def __len__(self) -> int:
        return len(self.worlds)

    def __getitem__(self, index):
        return self.worlds[index]

    def __iter__(self) -> Iterator[World]:
        return iter(self.worlds)

    @property
    def final_world(self) -> Optional[World]:
        """Newest World of the run."""
        if self.worlds:
            return self.worlds[-1]
        return self.last

    def populations(self) -> np.ndarray:
        """Population of each retained World."""
        return np.array([w.population for w in self.worlds], dtype=np.int64)

    def generation_indices(self) -> np.ndarray:
        return np.array([w.generation for w in self.worlds], dtype=np.int64)

    def summary(self) -> str:
        final = self.final_world
        population = final.population if final is not None else 0
        return (f"SequenceResult(stop={self.stop_reason.value}, "
                f"generations={self.generations}, retained={len(self.worlds)}, "
                f"final_population={population})")


class SequenceDriver:
    """
    Runs a GenerationEngine until a termination condition fires.

    Example:
        cache = CoordinateCache()
        driver = SequenceDriver(GenerationEngine(cache))
        glider = get_pattern("glider", cache)

        result = driver.run(glider, window_size=8)
        print(result.stop_reason)  # StopReason.CYCLE
        for world in result:
            print(world.generation, world.population)
    """

    def __init__(
        self,
        engine: GenerationEngine,
        birth: AbstractSet[int] = DEFAULT_BIRTH,
        survival: AbstractSet[int] = DEFAULT_SURVIVAL,
        max_generations: Optional[int] = None,
        flush_threshold: Optional[int] = None,
        flush_interval: Optional[int] = None,
    ):
        """
        Initialize driver.

        Args:
            engine: Engine used for every advance (its cache is flushed here)
            birth: Birth rule set
            survival: Survival rule set
            max_generations: Stop after this many advances (unbounded if None)
            flush_threshold: Retain threshold for periodic cache flushes
                (2 * window_size + 1 if None)
            flush_interval: Flush the cache every N generations (never if None)
        """
        if max_generations is not None and max_generations < 1:
            raise ValueError(f"max_generations must be at least 1, got {max_generations}")
        if flush_threshold is not None and flush_threshold < 0:
            raise ValueError(f"flush_threshold must be non-negative, got {flush_threshold}")
        if flush_interval is not None and flush_interval < 1:
            raise ValueError(f"flush_interval must be at least 1, got {flush_interval}")

        self.engine = engine
        self.birth: FrozenSet[int] = normalize_counts(birth, "birth")
        self.survival: FrozenSet[int] = normalize_counts(survival, "survival")
        self.max_generations = max_generations
        self.flush_threshold = flush_threshold
        self.flush_interval = flush_interval

    @property
    def cache(self):
        return self.engine.cache

    def _reference(self, origin: World) -> Optional[FrozenSet[Coordinate]]:
        if origin.is_extinct:
            return None
        return recenter(origin).cells

    def _maybe_flush(self, steps: int, window_size: int, generation: int) -> None:
        if self.flush_interval is None or steps % self.flush_interval != 0:
            return
        threshold = self.flush_threshold
        if threshold is None:
            threshold = 2 * window_size + 1
        # Measured from this run's newest generation, not the cache's, which
        # another run on the same cache may have pushed further ahead.
        removed = self.cache.flush(threshold, current=generation)
        logger.debug(f"Flushed {removed} cached coordinates (threshold={threshold}, "
                     f"generation={generation})")

    def run(
        self,
        seed: World,
        window_size: int,
        stop_predicate: Optional[StopPredicate] = None,
        origin: Optional[World] = None,
    ) -> SequenceResult:
        """
        Generate successive Worlds until a termination condition fires.

        Args:
            seed: World to start advancing from
            window_size: Maximal number of Worlds returned; the history
                holds up to 2 * window_size entries
            stop_predicate: Called as stop_predicate(history, generation, 0)
                after each advance; returning True halts the run
            origin: Pattern whose recentered silhouette closes a cycle
                (defaults to seed)

        Returns:
            SequenceResult with the retained Worlds oldest-first
        """
        if window_size < 0:
            raise ValueError(f"window_size must be non-negative, got {window_size}")

        reference = self._reference(origin if origin is not None else seed)
        keep = max(2 * window_size - 1, 0)

        logger.info(f"Running from generation {seed.generation} "
                    f"(population {seed.population}, window {window_size})")

        history: List[World] = [seed]
        steps = 0
        while True:
            newest = self.engine.advance(history[0], self.birth, self.survival)
            history = [newest] + history[:keep]
            steps += 1

            if newest.is_extinct:
                reason = StopReason.EXTINCTION
                break
            if reference is not None and recenter(newest).cells == reference:
                reason = StopReason.CYCLE
                break
            if stop_predicate is not None and stop_predicate(tuple(history), newest.generation, 0):
                reason = StopReason.PREDICATE
                break
            if is_stable_population(history, window_size):
                reason = StopReason.STABILIZED
                history = [newest]
                break
            if self.max_generations is not None and steps >= self.max_generations:
                reason = StopReason.MAX_GENERATIONS
                break

            self._maybe_flush(steps, window_size, newest.generation)

        worlds = history[::-1]
        worlds = worlds[max(len(worlds) - window_size, 0):]

        logger.info(f"Stopped at generation {newest.generation} after {steps} steps: "
                    f"{reason.value} (population {newest.population})")
        return SequenceResult(
            worlds=worlds,
            stop_reason=reason,
            generations=steps,
            last=newest,
        )
