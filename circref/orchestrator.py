"""
CircularReferenceDetector: pulls one snapshot from the data source, runs every
detector against it, and merges their findings into a single result.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Set, TypeVar

from .config.config_loader import get_detection_config
from .core.graph import AdjacencyMap, GraphNode, build_debt_adjacency
from .core.recursion import safe_recursive_operation
from .detectors.group_memberships import (
    detect_circular_group_memberships,
    has_group_containment_cycle,
    resolve_group_members,
)
from .detectors.self_references import detect_self_references
from .detectors.subscription_chains import detect_circular_subscription_chains
from .detectors.transaction_chains import detect_circular_transaction_chains, has_circular_transaction_chain
from .graph.cycle_detector import validate_graph_structure
from .graph.path_finder import find_path
from .graph.relationship_validator import validate_new_relationship
from .models import CircularReferenceResult, Snapshot
from .reporting import build_payload, render_statistics
from .sources import DataSource, take_snapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircularReferenceDetector:
    """
    Entry point for UI and reporting layers.

    Holds no state between calls: every detection reads a fresh snapshot.
    """

    def __init__(
        self,
        data_source: DataSource,
        max_recursion_depth: Optional[int] = None,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
    ):
        config = get_detection_config()
        self.data_source = data_source
        self.max_recursion_depth = max_recursion_depth if max_recursion_depth is not None else config["max_recursion_depth"]
        self.parallel = parallel if parallel is not None else config["parallel"]
        self.max_workers = max_workers if max_workers is not None else config["max_workers"]

    def snapshot(self) -> Snapshot:
        return take_snapshot(self.data_source)

    # ── Detectors ─────────────────────────────────────────────────────────────
    def detect_all_circular_references(self) -> CircularReferenceResult:
        snap = self.snapshot()
        people_by_id = snap.people_by_id

        detectors: List[Callable[[], CircularReferenceResult]] = [
            lambda: detect_circular_group_memberships(snap.groups),
            lambda: detect_circular_transaction_chains(snap.transactions, people_by_id),
            lambda: detect_circular_subscription_chains(snap.subscriptions, people_by_id),
        ]

        if self.parallel:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                futures = [pool.submit(fn) for fn in detectors]
                results = [f.result() for f in futures]
        else:
            results = [fn() for fn in detectors]

        merged = CircularReferenceResult.merge(*results)
        logger.info(
            f"Circular reference pass: {len(snap.people)} people, {len(snap.transactions)} transactions, "
            f"{len(snap.groups)} groups, {len(snap.subscriptions)} subscriptions -> {merged.summary}"
        )
        if merged.has_circular_references:
            for path in merged.circular_paths:
                logger.warning(f"{path.type.value} cycle: {path.path_description}")
        return merged

    def detect_self_references(self) -> List[str]:
        snap = self.snapshot()
        return detect_self_references(snap.transactions, snap.people_by_id)

    def detect_circular_transaction_chains(self) -> CircularReferenceResult:
        snap = self.snapshot()
        return detect_circular_transaction_chains(snap.transactions, snap.people_by_id)

    def detect_circular_group_memberships(self) -> CircularReferenceResult:
        return detect_circular_group_memberships(self.snapshot().groups)

    def detect_circular_subscription_chains(self) -> CircularReferenceResult:
        snap = self.snapshot()
        return detect_circular_subscription_chains(snap.subscriptions, snap.people_by_id)

    def debt_graph(self) -> AdjacencyMap:
        """Current payer -> payees map, for checking a new debt with validate_new_relationship before saving it."""
        return build_debt_adjacency(self.snapshot().transactions)

    def resolve_group_members(self, group_id: Hashable) -> Set[Hashable]:
        """Everyone in a group including nested subgroups. Raises InfiniteRecursionDetected on runaway nesting."""
        return resolve_group_members(group_id, self.snapshot().groups, max_depth=self.max_recursion_depth)

    # ── Quick checks and reports ──────────────────────────────────────────────
    def has_circular_references(self) -> bool:
        """True as soon as any detector sees a cycle; no paths are collected."""
        snap = self.snapshot()
        return has_circular_transaction_chain(snap.transactions) or has_group_containment_cycle(snap.groups)

    def get_circular_reference_count(self) -> int:
        return len(self.detect_all_circular_references().circular_paths)

    def get_statistics(self) -> str:
        return render_statistics(self.detect_all_circular_references())

    def export_report(self) -> str:
        return self.detect_all_circular_references().detailed_report

    def export_payload(self) -> Dict[str, Any]:
        return build_payload(self.detect_all_circular_references())

    # ── Standalone graph utilities ────────────────────────────────────────────
    @staticmethod
    def validate_graph_structure(nodes: Iterable[GraphNode]) -> List[List[Hashable]]:
        return validate_graph_structure(nodes)

    @staticmethod
    def find_path(source: Hashable, target: Hashable, graph: AdjacencyMap) -> Optional[List[Hashable]]:
        return find_path(source, target, graph)

    @staticmethod
    def validate_new_relationship(source: Hashable, target: Hashable, graph: AdjacencyMap) -> bool:
        return validate_new_relationship(source, target, graph)

    def safe_recursive_operation(self, operation: Callable[[int], T], max_depth: Optional[int] = None) -> T:
        return safe_recursive_operation(
            operation,
            max_depth=max_depth if max_depth is not None else self.max_recursion_depth,
        )
