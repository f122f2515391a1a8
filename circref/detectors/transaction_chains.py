"""
Transaction chain detector: finds debt rings (A owes B, B owes C, C owes A).

1. Build the payer -> payee debt graph (self-payments stay in the graph)
2. Every SCC with >= 2 people is one ring; self-loops alone never qualify,
   they are reported as warnings instead
3. Each ring is reported as one real cycle of debts, named from the people lookup
"""
import logging
import networkx as nx
from typing import Hashable, Iterable, List, Mapping

from ..core.graph import build_debt_graph
from ..core.utils import resolve_name
from ..graph.cycle_detector import component_cycle, cycle_components
from ..models import CircularPath, CircularReferenceResult, Person, ReferenceType, Transaction
from .self_references import is_self_payment

logger = logging.getLogger(__name__)


def detect_circular_transaction_chains(
    transactions: Iterable[Transaction],
    people_by_id: Mapping[Hashable, Person],
) -> CircularReferenceResult:
    transactions = list(transactions)
    warnings: List[str] = []

    for txn in transactions:
        if txn.payer_id is None or txn.payee_id is None:
            warnings.append(f"Transaction {txn.id} has missing payer or payee ID")
        elif is_self_payment(txn):
            warnings.append(f"Self-payment detected: {resolve_name(txn.payer_id, people_by_id)} paying themselves")

    G = build_debt_graph(transactions)

    circular_paths = []
    for component in cycle_components(G):
        ring = component_cycle(G, component)
        circular_paths.append(CircularPath(
            type=ReferenceType.TRANSACTION_CHAIN,
            entity_ids=ring,
            entity_names=[resolve_name(pid, people_by_id) for pid in ring],
        ))

    logger.debug(
        f"Transaction chains: {G.number_of_nodes()} people, {G.number_of_edges()} debts, "
        f"{len(circular_paths)} rings"
    )
    return CircularReferenceResult.from_findings(circular_paths, warnings)


def has_circular_transaction_chain(transactions: Iterable[Transaction]) -> bool:
    """Cheap check used for polling; stops at the first ring found."""
    G = build_debt_graph(transactions)
    G.remove_edges_from(list(nx.selfloop_edges(G)))
    return not nx.is_directed_acyclic_graph(G)
