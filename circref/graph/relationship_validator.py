"""
Pre-insertion check: refuse an edge that would close a cycle.
"""
import logging
from typing import Hashable

from ..core.graph import AdjacencyMap, graph_from_adjacency
from ..errors import CyclicDependency
from .path_finder import find_path

logger = logging.getLogger(__name__)


def validate_new_relationship(source: Hashable, target: Hashable, graph: AdjacencyMap) -> bool:
    """
    Check that adding source -> target to graph keeps it acyclic.

    The caller's graph is left untouched.

    Returns:
        True when the edge is safe to add.

    Raises:
        CyclicDependency: if target can already reach source (or source == target).
    """
    candidate = graph_from_adjacency(graph)
    candidate.add_edge(source, target)

    path_back = find_path(target, source, candidate)
    if path_back is not None:
        logger.debug(f"Rejected edge {source} -> {target}: closes a cycle of {len(path_back)} nodes")
        # path_back already ends at source
        raise CyclicDependency(path_back if source == target else [source, *path_back])

    return True
