"""
Reachability queries over debt graphs.
"""
import networkx as nx
from typing import Hashable, List, Optional, Union

from ..core.graph import AdjacencyMap, graph_from_adjacency


def find_path(
    source: Hashable,
    target: Hashable,
    graph: Union[AdjacencyMap, nx.DiGraph],
) -> Optional[List[Hashable]]:
    """
    Shortest path (by edge count) from source to target, both endpoints included.

    Returns None when target is unreachable or source has no entry in the graph.
    A path from a node to itself exists only through a self-loop, as [source, source].
    """
    G = graph if isinstance(graph, nx.DiGraph) else graph_from_adjacency(graph)

    if source not in G:
        return None
    if source == target:
        return [source, source] if G.has_edge(source, source) else None

    try:
        # Unweighted, so networkx runs a breadth-first search
        return nx.shortest_path(G, source, target)
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        return None

