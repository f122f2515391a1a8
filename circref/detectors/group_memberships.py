"""
Group membership validator.

People cannot contain groups, so plain membership never cycles. Groups may
also list other groups in subgroup_ids; that containment graph is checked
for cycle groups the same way debt graphs are.
"""
import logging
import networkx as nx
from typing import Dict, Hashable, Iterable, List, Optional, Set

from ..core.recursion import safe_recursive_operation
from ..core.utils import resolve_name
from ..graph.cycle_detector import component_cycle, cycle_components
from ..models import CircularPath, CircularReferenceResult, Group, ReferenceType

logger = logging.getLogger(__name__)


def build_containment_graph(groups: Iterable[Group]) -> nx.DiGraph:
    """Group -> subgroup edges. Subgroup ids that match no group are left out."""
    groups = list(groups)
    known = {g.id for g in groups}
    G = nx.DiGraph()
    G.add_nodes_from(g.id for g in groups)
    for group in groups:
        for sub_id in group.subgroup_ids:
            if sub_id in known:
                G.add_edge(group.id, sub_id)
    return G


def detect_circular_group_memberships(groups: Iterable[Group]) -> CircularReferenceResult:
    groups = list(groups)
    groups_by_id: Dict[Hashable, Group] = {g.id: g for g in groups}
    warnings: List[str] = []

    for group in groups:
        if not group.member_ids:
            detail = " of its own, only subgroups" if group.subgroup_ids else ""
            warnings.append(f"Group '{group.name}' has no members{detail}")
        if group.id in group.subgroup_ids:
            warnings.append(f"Group '{group.name}' contains itself")
        for sub_id in group.subgroup_ids:
            if sub_id not in groups_by_id:
                warnings.append(f"Group '{group.name}' references unknown subgroup {sub_id}")

    G = build_containment_graph(groups)
    circular_paths = []
    for component in cycle_components(G):
        loop = component_cycle(G, component)
        circular_paths.append(CircularPath(
            type=ReferenceType.GROUP_MEMBERSHIP,
            entity_ids=loop,
            entity_names=[resolve_name(gid, groups_by_id) for gid in loop],
        ))

    logger.debug(f"Group memberships: {len(groups)} groups, {len(circular_paths)} containment cycles")
    return CircularReferenceResult.from_findings(circular_paths, warnings)


def resolve_group_members(
    group_id: Hashable,
    groups: Iterable[Group],
    max_depth: Optional[int] = None,
) -> Set[Hashable]:
    """
    All people in a group, following nested subgroups.

    Raises:
        InfiniteRecursionDetected: if nesting runs deeper than max_depth,
            which is what a containment cycle turns into.
    """
    groups_by_id = {g.id: g for g in groups}

    def expand(gid: Hashable) -> Set[Hashable]:
        def visit(depth: int) -> Set[Hashable]:
            group = groups_by_id.get(gid)
            if group is None:
                return set()
            members = set(group.member_ids)
            for sub_id in group.subgroup_ids:
                members |= expand(sub_id)
            return members

        return safe_recursive_operation(visit, max_depth=max_depth)

    return expand(group_id)


def has_group_containment_cycle(groups: Iterable[Group]) -> bool:
    G = build_containment_graph(groups)
    G.remove_edges_from(list(nx.selfloop_edges(G)))
    return not nx.is_directed_acyclic_graph(G)
