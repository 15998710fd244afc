"""
Sparse Life Simulator

Conway's Game of Life and B/S rule variants on an unbounded plane.
Only live coordinates are tracked; the grid has no edges.

Main components:
- core: Coordinates and interning cache, Worlds, generation engine, sequence driver
- patterns: Plaintext/RLE loading and a catalog of classic seeds
- visualization: Text, array and matplotlib rendering
- config: Rule, sequence and engine parameters
"""

__version__ = "0.1.0"
__author__ = "Sparse Life Team"

from .core import (
    Coordinate,
    CoordinateCache,
    Rect,
    World,
    GenerationEngine,
    SequenceDriver,
    SequenceResult,
    StopReason,
    bounding_box,
    recenter,
)
from .config import LifeConfig, RuleParams
from .patterns import get_pattern, parse_plaintext, parse_rle

__all__ = [
    "Coordinate",
    "CoordinateCache",
    "Rect",
    "World",
    "GenerationEngine",
    "SequenceDriver",
    "SequenceResult",
    "StopReason",
    "bounding_box",
    "recenter",
    "LifeConfig",
    "RuleParams",
    "get_pattern",
    "parse_plaintext",
    "parse_rle",
]
