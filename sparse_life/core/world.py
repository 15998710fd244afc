"""
World: the unit of simulation state.

A World pairs a frozen set of live coordinates with its generation index.
Worlds are immutable values; advancing produces a new World, so a history
can hold many of them at once.

Also provides the derived geometry used for cycle detection:
- bounding_box: tight envelope of the live cells
- recenter: translate a pattern so its envelope center sits on a target
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional, Tuple, Union

from .coordinate import Coordinate, CoordinateCache, Rect, ORIGIN
from .errors import EmptyWorldError


CellLike = Union[Coordinate, Tuple[int, int]]


@dataclass(frozen=True)
class World:
    """
    Immutable snapshot of live cells at a generation.

    Attributes:
        cells: Live coordinates
        generation: Generation index (increases by exactly 1 per advance)

    An empty World is valid and represents extinction.
    """
    cells: FrozenSet[Coordinate] = field(default_factory=frozenset)
    generation: int = 0

    def __post_init__(self):
        if not isinstance(self.cells, frozenset):
            object.__setattr__(self, "cells", frozenset(self.cells))

    @classmethod
    def from_cells(
        cls,
        cells: Iterable[CellLike],
        cache: Optional[CoordinateCache] = None,
        generation: int = 0,
    ) -> "World":
        """
        Build a World from coordinates or (x, y) pairs.

        Args:
            cells: Live cells
            cache: Intern every cell through this cache at generation
            generation: Generation index of the new World
        """
        coords = []
        for cell in cells:
            x, y = cell
            if cache is not None:
                coords.append(cache.intern(x, y, generation))
            else:
                coords.append(Coordinate(x, y))
        return cls(frozenset(coords), generation)

    @property
    def population(self) -> int:
        """Number of live cells."""
        return len(self.cells)

    @property
    def is_extinct(self) -> bool:
        return not self.cells

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.cells)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, tuple) and len(item) == 2:
            item = Coordinate(*item)
        return item in self.cells

    def translated(self, dx: int, dy: int, cache: Optional[CoordinateCache] = None) -> "World":
        """Copy of this World shifted by (dx, dy); generation unchanged."""
        return World.from_cells(
            ((c.x + dx, c.y + dy) for c in self.cells),
            cache=cache,
            generation=self.generation,
        )

    def sorted_cells(self) -> list:
        """Live cells in (x, y) order."""
        return sorted(self.cells)

    def __repr__(self) -> str:
        return f"World(generation={self.generation}, population={self.population})"


def bounding_box(world: World) -> Rect:
    """
    Determine the envelope of all live cells.

    Raises:
        EmptyWorldError: if the World has no live cells
    """
    if world.is_extinct:
        raise EmptyWorldError("bounding_box")

    cells = iter(world.cells)
    first = next(cells)
    rect = first.extreme(first)
    for cell in cells:
        rect = cell.extreme(rect)
    return rect


def recenter(
    world: World,
    center: Coordinate = ORIGIN,
    cache: Optional[CoordinateCache] = None,
) -> World:
    """
    Move the pattern without altering its disposition.

    The offset places the bounding-box midpoint (rounded toward the min
    corner) on center. Both sides of a cycle comparison must go through
    this function so they share the same rounding.

    Args:
        world: Non-empty World to move
        center: Target for the bounding-box midpoint
        cache: Intern the moved cells through this cache (plain instances if None)

    Returns:
        Translated World with the same generation index

    Raises:
        EmptyWorldError: if the World has no live cells
    """
    mid = bounding_box(world).center
    dx = center.x - mid.x
    dy = center.y - mid.y
    if dx == 0 and dy == 0:
        return world
    return world.translated(dx, dy, cache=cache)
