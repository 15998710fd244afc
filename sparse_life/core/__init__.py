"""
Core module for the sparse Life simulator.

Contains:
- Coordinate / Rect: immutable plane positions and their envelopes
- CoordinateCache: lock-striped interning table with timestamp eviction
- World: frozen live-cell set plus generation index
- GenerationEngine: birth/survival successor computation
- SequenceDriver: bounded-history runs with termination detection
"""

from .coordinate import Coordinate, CoordinateCache, Rect, ORIGIN, NEIGHBOR_OFFSETS
from .errors import SparseLifeError, GenerationOverflowError, EmptyWorldError
from .world import World, bounding_box, recenter
from .engine import (
    GenerationEngine, MAX_GENERATION, DEFAULT_BIRTH, DEFAULT_SURVIVAL,
    count_neighbors, normalize_counts,
)
from .sequence import (
    SequenceDriver, SequenceResult, StopReason, StopPredicate,
    is_stable_population,
)

__all__ = [
    "Coordinate",
    "CoordinateCache",
    "Rect",
    "ORIGIN",
    "NEIGHBOR_OFFSETS",
    # Errors
    "SparseLifeError",
    "GenerationOverflowError",
    "EmptyWorldError",
    # World
    "World",
    "bounding_box",
    "recenter",
    # Engine
    "GenerationEngine",
    "MAX_GENERATION",
    "DEFAULT_BIRTH",
    "DEFAULT_SURVIVAL",
    "count_neighbors",
    "normalize_counts",
    # Sequence
    "SequenceDriver",
    "SequenceResult",
    "StopReason",
    "StopPredicate",
    "is_stable_population",
]
