"""
Depth-limited recursion.

safe_recursive_operation() hands the wrapped callable its current depth.
Calls nested inside that callable (directly or through helpers) see the
cumulative depth, so a runaway walk over cyclic data fails with
InfiniteRecursionDetected long before the interpreter's own stack limit.
"""
import contextvars
from typing import Callable, Optional, TypeVar

from ..config.config_loader import get_detection_config
from ..errors import InfiniteRecursionDetected

T = TypeVar("T")

# Depth of the innermost active guarded call in this execution context, -1 when none.
_current_depth: contextvars.ContextVar[int] = contextvars.ContextVar("circref_recursion_depth", default=-1)


def default_max_depth() -> int:
    return int(get_detection_config()["max_recursion_depth"])


def safe_recursive_operation(operation: Callable[[int], T], max_depth: Optional[int] = None) -> T:
    """
    Run operation(depth) with a depth ceiling.

    The outermost call passes depth 0; each guarded call made while another is
    active passes the enclosing depth + 1.

    Raises:
        InfiniteRecursionDetected: when depth reaches max_depth.
    """
    limit = default_max_depth() if max_depth is None else max_depth
    depth = _current_depth.get() + 1
    if depth >= limit:
        raise InfiniteRecursionDetected(depth)

    token = _current_depth.set(depth)
    try:
        return operation(depth)
    finally:
        _current_depth.reset(token)
