import logging
from typing import Hashable, Iterable, List, Mapping

from ..core.utils import resolve_name
from ..models import Person, Transaction

logger = logging.getLogger(__name__)


def is_self_payment(txn: Transaction) -> bool:
    return txn.payer_id is not None and txn.payer_id == txn.payee_id


def detect_self_references(
    transactions: Iterable[Transaction],
    people_by_id: Mapping[Hashable, Person],
) -> List[str]:
    """One message per transaction whose payer is also its payee. Named by person when known, else by id."""
    messages = []
    for txn in transactions:
        if not is_self_payment(txn):
            continue
        who = resolve_name(txn.payer_id, people_by_id, fallback=str(txn.payer_id))
        messages.append(f"Transaction: {who} paying themselves (ID: {txn.id})")

    logger.debug(f"Self-reference scan: {len(messages)} found")
    return messages
