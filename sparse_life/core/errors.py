"""
Exception hierarchy for the sparse Life core.
"""

from __future__ import annotations


class SparseLifeError(Exception):
    """Base class for errors raised by the simulation core."""


class GenerationOverflowError(SparseLifeError, RuntimeError):
    """
    Raised when advancing a World would push its generation index past
    MAX_GENERATION.

    This is a fatal invariant violation: the run cannot continue and the
    error is never retried.
    """
    def __init__(self, generation: int, limit: int):
        self.generation = generation
        self.limit = limit
        super().__init__(f"Generations outnumbered: {generation} reached limit {limit}")


class EmptyWorldError(SparseLifeError, ValueError):
    """Raised when an operation is undefined on a World with no live cells."""
    def __init__(self, operation: str = "bounding_box"):
        self.operation = operation
        super().__init__(f"{operation} is undefined on an empty world")
