"""
Graph primitives shared by the detectors.

Domain graphs are held as networkx DiGraphs while a pass runs; callers that
persist or pass graphs around use the plain AdjacencyMap form.
"""
import networkx as nx
from pydantic import BaseModel, Field
from typing import Dict, Generic, Hashable, Iterable, List, Set, TypeVar

from ..models import Transaction

Label = TypeVar("Label", bound=Hashable)

AdjacencyMap = Dict[Hashable, Set[Hashable]]


class GraphNode(BaseModel, Generic[Label]):
    """A labelled node for standalone structure validation. Duplicate neighbours and self-loops are allowed."""
    id: Label
    neighbors: List[Label] = Field(default_factory=list)


def build_debt_graph(transactions: Iterable[Transaction]) -> nx.DiGraph:
    """Builds a payer -> payee DiGraph. Transactions missing either side are skipped."""
    G = nx.DiGraph()
    for txn in transactions:
        if txn.payer_id is None or txn.payee_id is None:
            continue
        # Nodes first so iteration order follows first appearance
        G.add_node(txn.payer_id)
        G.add_node(txn.payee_id)
        if G.has_edge(txn.payer_id, txn.payee_id):
            G[txn.payer_id][txn.payee_id]["transaction_ids"].append(txn.id)
            G[txn.payer_id][txn.payee_id]["total_amount"] += txn.amount
        else:
            G.add_edge(txn.payer_id, txn.payee_id,
                       transaction_ids=[txn.id],
                       total_amount=txn.amount)
    return G


def graph_from_nodes(nodes: Iterable[GraphNode]) -> nx.DiGraph:
    G = nx.DiGraph()
    nodes = list(nodes)
    G.add_nodes_from(node.id for node in nodes)
    for node in nodes:
        for neighbor in node.neighbors:
            G.add_edge(node.id, neighbor)
    return G


def graph_from_adjacency(adjacency: AdjacencyMap) -> nx.DiGraph:
    G = nx.DiGraph()
    G.add_nodes_from(adjacency)
    for src, targets in adjacency.items():
        for dst in targets:
            G.add_edge(src, dst)
    return G


def to_adjacency_map(G: nx.DiGraph) -> AdjacencyMap:
    """One entry per node, including nodes with no outgoing edges."""
    return {node: set(G.successors(node)) for node in G.nodes()}


def build_debt_adjacency(transactions: Iterable[Transaction]) -> AdjacencyMap:
    return to_adjacency_map(build_debt_graph(transactions))
