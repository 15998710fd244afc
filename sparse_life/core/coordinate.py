"""
Coordinates on the unbounded Life plane.

A Coordinate is an immutable (x, y) integer pair. Coordinates that recur
from one generation to the next are interned through a CoordinateCache so
every distinct value has one canonical instance. Each cache entry carries
the last generation that referenced it, which lets callers evict stale
values with an explicit flush.

Key concepts:
- Moore neighborhood: the 8 cells horizontally, vertically and diagonally adjacent
- Rect: inclusive axis-aligned envelope of a set of coordinates
- Interning: lookup-or-create through a shared, lock-striped cache
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union
import threading


# Offsets of the 8 Moore neighbors, row by row
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)


@dataclass(frozen=True, order=True)
class Coordinate:
    """
    Immutable position on the plane.

    Equality, hashing and ordering are by (x, y), so two coordinates with
    the same value compare equal whether or not they are the same interned
    instance.

    Example:
        a = Coordinate(1, 2)
        b = Coordinate(3, -1)
        print(a + b)        # Coordinate(x=4, y=1)
        print(a.extreme(b)) # Rect(min_corner=(1, -1), max_corner=(3, 2))
    """
    x: int
    y: int

    def __add__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Coordinate") -> "Coordinate":
        return Coordinate(self.x - other.x, self.y - other.y)

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Coordinate(x={self.x}, y={self.y})"

    def moore_neighborhood(
        self,
        cache: Optional["CoordinateCache"] = None,
        generation: Optional[int] = None,
    ) -> List["Coordinate"]:
        """
        The 8 coordinates adjacent to this one.

        Args:
            cache: Intern each neighbor through this cache (plain
                instances are created if None)
            generation: Timestamp to stamp on each interned neighbor

        Returns:
            List of 8 neighboring coordinates
        """
        x, y = self.x, self.y
        if cache is None:
            return [Coordinate(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS]
        return [cache.intern(x + dx, y + dy, generation) for dx, dy in NEIGHBOR_OFFSETS]

    def extreme(self, other: Union["Coordinate", "Rect"]) -> "Rect":
        """Smallest Rect enclosing this coordinate and other."""
        if isinstance(other, Coordinate):
            other = Rect(other, other)
        return Rect(
            Coordinate(min(self.x, other.min_corner.x), min(self.y, other.min_corner.y)),
            Coordinate(max(self.x, other.max_corner.x), max(self.y, other.max_corner.y)),
        )


ORIGIN = Coordinate(0, 0)


@dataclass(frozen=True)
class Rect:
    """
    Inclusive axis-aligned bounding box.

    Attributes:
        min_corner: Componentwise minimum
        max_corner: Componentwise maximum
    """
    min_corner: Coordinate
    max_corner: Coordinate

    @property
    def width(self) -> int:
        return self.max_corner.x - self.min_corner.x + 1

    @property
    def height(self) -> int:
        return self.max_corner.y - self.min_corner.y + 1

    @property
    def center(self) -> Coordinate:
        """Midpoint, rounded toward min_corner."""
        return Coordinate(
            self.min_corner.x + (self.max_corner.x - self.min_corner.x) // 2,
            self.min_corner.y + (self.max_corner.y - self.min_corner.y) // 2,
        )

    def contains(self, coord: Coordinate) -> bool:
        return (self.min_corner.x <= coord.x <= self.max_corner.x and
                self.min_corner.y <= coord.y <= self.max_corner.y)

    def __repr__(self) -> str:
        return (f"Rect(min_corner=({self.min_corner.x}, {self.min_corner.y}), "
                f"max_corner=({self.max_corner.x}, {self.max_corner.y}))")


class _CacheEntry:
    """Canonical instance plus last-referenced generation."""
    __slots__ = ("coordinate", "timestamp")

    def __init__(self, coordinate: Coordinate, timestamp: int):
        self.coordinate = coordinate
        self.timestamp = timestamp


class CoordinateCache:
    """
    Interning table from coordinate value to canonical instance.

    The table is split into buckets, each guarded by its own lock, so
    worker threads counting neighbors in parallel can intern concurrently
    without losing timestamp updates or creating two instances for one
    value.

    Entries are only ever removed by flush(). The cache does no liveness
    analysis: callers pick a retain threshold that covers every World they
    still hold.

    Example:
        cache = CoordinateCache()
        a = cache.intern(3, 4, generation=1)
        b = cache.intern(3, 4, generation=7)
        assert a is b
        assert cache.timestamp(a) == 7

        cache.flush(retain_threshold=2)   # drops entries stamped <= 5
    """

    def __init__(self, buckets: int = 64):
        """
        Initialize cache.

        Args:
            buckets: Number of independently locked buckets
        """
        if buckets < 1:
            raise ValueError(f"buckets must be at least 1, got {buckets}")
        self._n_buckets = buckets
        self._buckets: List[Dict[Tuple[int, int], _CacheEntry]] = [{} for _ in range(buckets)]
        self._locks = [threading.Lock() for _ in range(buckets)]
        self._generation = 0
        self._generation_lock = threading.Lock()

    @property
    def generation(self) -> int:
        """Highest generation index the cache has been told about."""
        return self._generation

    def advance_to(self, generation: int) -> int:
        """Raise the current generation to at least generation."""
        with self._generation_lock:
            if generation > self._generation:
                self._generation = generation
            return self._generation

    def _bucket_index(self, key: Tuple[int, int]) -> int:
        return hash(key) % self._n_buckets

    def intern(self, x: int, y: int, generation: Optional[int] = None) -> Coordinate:
        """
        Return the canonical Coordinate for (x, y), creating it if absent.

        The entry's timestamp is refreshed to generation (the cache's
        current generation if None). Timestamps never move backwards: an
        intern at an older generation than the stored timestamp leaves it
        unchanged, so a run behind others on a shared cache cannot age
        entries they still hold.
        """
        if generation is None:
            generation = self._generation
        elif generation > self._generation:
            self.advance_to(generation)

        key = (x, y)
        index = self._bucket_index(key)
        with self._locks[index]:
            bucket = self._buckets[index]
            entry = bucket.get(key)
            if entry is None:
                entry = _CacheEntry(Coordinate(x, y), generation)
                bucket[key] = entry
            elif entry.timestamp < generation:
                entry.timestamp = generation
            return entry.coordinate

    def touch(self, coord: Coordinate, generation: Optional[int] = None) -> Coordinate:
        """Refresh the timestamp of coord's value, returning the canonical instance."""
        return self.intern(coord.x, coord.y, generation)

    def timestamp(self, coord: Coordinate) -> Optional[int]:
        """Last generation that referenced coord's value, or None if not cached."""
        key = (coord.x, coord.y)
        index = self._bucket_index(key)
        with self._locks[index]:
            entry = self._buckets[index].get(key)
            return None if entry is None else entry.timestamp

    def flush(self, retain_threshold: int, current: Optional[int] = None) -> int:
        """
        Remove entries not referenced within the last retain_threshold generations.

        Entries with timestamp <= current - retain_threshold are evicted.
        A threshold larger than current evicts nothing.

        Args:
            retain_threshold: Number of recent generations to keep
            current: Generation to measure from (the cache's generation if None).
                A run sharing the cache with runs further ahead passes its own
                newest generation here.

        Returns:
            Number of entries removed
        """
        if retain_threshold < 0:
            raise ValueError(f"retain_threshold must be non-negative, got {retain_threshold}")

        if current is None:
            current = self._generation
        if retain_threshold > current:
            return 0
        cutoff = current - retain_threshold

        removed = 0
        for lock, bucket in zip(self._locks, self._buckets):
            with lock:
                stale = [key for key, entry in bucket.items() if entry.timestamp <= cutoff]
                for key in stale:
                    del bucket[key]
                removed += len(stale)
        return removed

    def clear(self) -> None:
        """Drop every entry and reset the generation."""
        for lock, bucket in zip(self._locks, self._buckets):
            with lock:
                bucket.clear()
        with self._generation_lock:
            self._generation = 0

    def __contains__(self, coord: object) -> bool:
        if isinstance(coord, Coordinate):
            key = (coord.x, coord.y)
        elif isinstance(coord, tuple) and len(coord) == 2:
            key = coord
        else:
            return False
        index = self._bucket_index(key)
        with self._locks[index]:
            return key in self._buckets[index]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def __repr__(self) -> str:
        return f"CoordinateCache(entries={len(self)}, generation={self._generation}, buckets={self._n_buckets})"
