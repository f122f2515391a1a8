"""
Cycle detector: strongly connected component analysis.

Approach:
1. Find all Strongly Connected Components (SCCs) with networkx's
   non-recursive Tarjan implementation, O(V+E)
2. Keep only components with >= 2 members (a lone node is never a cycle group,
   self-loop or not)
3. Report one real cycle per component, found by DFS from its earliest member
4. Order everything by first appearance in the graph so repeated calls on the
   same input return identical lists
"""
import networkx as nx
from typing import Hashable, Iterable, List

from ..core.graph import GraphNode, graph_from_nodes


def cycle_components(G: nx.DiGraph) -> List[List[Hashable]]:
    """SCCs of size >= 2, members and components in node insertion order."""
    position = {node: i for i, node in enumerate(G.nodes())}

    components = [
        sorted(scc, key=position.__getitem__)
        for scc in nx.strongly_connected_components(G)
        if len(scc) >= 2
    ]
    components.sort(key=lambda members: position[members[0]])
    return components


def component_cycle(G: nx.DiGraph, component: List[Hashable]) -> List[Hashable]:
    """
    One real cycle inside a component, as the nodes it visits in order.

    Every consecutive pair, and the last node back to the first, is an edge
    of G. Self-loops are left out, so the cycle always has >= 2 members. For
    a simple cycle A -> B -> C -> A this is [A, B, C]; in a denser component
    it may cover only some of the members.
    """
    members = set(component)
    subgraph = nx.DiGraph()
    subgraph.add_nodes_from(component)
    subgraph.add_edges_from((u, v) for u, v in G.edges(component) if v in members and u != v)
    return [u for u, _ in nx.find_cycle(subgraph, source=component[0])]


def validate_graph_structure(nodes: Iterable[GraphNode]) -> List[List[Hashable]]:
    """
    Return every cycle group (SCC with >= 2 labels) in a standalone node list.

    Neighbours that are not themselves listed become leaf nodes.
    """
    return cycle_components(graph_from_nodes(nodes))
