import logging
from typing import Hashable, Iterable, List, Mapping

from ..models import CircularReferenceResult, Person, Subscription

logger = logging.getLogger(__name__)


def detect_circular_subscription_chains(
    subscriptions: Iterable[Subscription],
    people_by_id: Mapping[Hashable, Person],
) -> CircularReferenceResult:
    """
    Check subscription ownership references.

    Ownership is a single subscription -> person hop, so there is nothing that
    can cycle; the findings are orphaned or self-referencing owners, reported
    as warnings.
    """
    warnings: List[str] = []
    count = 0

    for sub in subscriptions:
        count += 1
        if sub.person_id is None:
            warnings.append(f"Subscription '{sub.name}' has no associated person")
        elif sub.person_id not in people_by_id:
            warnings.append(f"Subscription '{sub.name}' references non-existent person")

        for shared_id in sub.shared_with_ids:
            if shared_id == sub.person_id:
                warnings.append(f"Subscription '{sub.name}' is shared with its own owner")
            elif shared_id not in people_by_id:
                warnings.append(f"Subscription '{sub.name}' is shared with non-existent person {shared_id}")

    logger.debug(f"Subscription chains: {count} subscriptions, {len(warnings)} warnings")
    return CircularReferenceResult.from_findings([], warnings)
