"""
Error taxonomy for the circular-reference engine.

Only two conditions are raised: runaway recursion and a proposed edge that
would close a cycle. Every other structural issue is a data finding and is
returned inside a CircularReferenceResult.
"""
from typing import Hashable, List, Sequence


class CircularReferenceError(Exception):
    """Base class for errors raised by the engine."""


class InfiniteRecursionDetected(CircularReferenceError):
    def __init__(self, depth: int):
        self.depth = depth
        super().__init__(f"Infinite recursion detected at depth {depth}")


class CyclicDependency(CircularReferenceError):
    def __init__(self, entities: Sequence[Hashable]):
        self.entities: List[Hashable] = list(entities)
        chain = " → ".join(str(e) for e in self.entities)
        super().__init__(f"Cyclic dependency detected: {chain}")


class DataSourceError(ValueError):
    """Raised when a data source cannot produce a well-formed snapshot."""
