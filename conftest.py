import pytest

from circref.config.config_loader import reset_config
from circref.models import Person, Transaction
from circref.orchestrator import CircularReferenceDetector
from circref.sources import InMemoryDataSource


@pytest.fixture(autouse=True)
def reset_config_cache():
    """Clears config cache before each test for isolation."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def people():
    """Alice, Bob, Charlie keyed by first name."""
    return {name: Person(name=name, email=f"{name.lower()}@example.com") for name in ("Alice", "Bob", "Charlie")}


def owes(payer: Person, payee: Person, amount: float = 50.0) -> Transaction:
    return Transaction(payer_id=payer.id, payee_id=payee.id, amount=amount)


@pytest.fixture
def make_detector():
    def _make(**collections) -> CircularReferenceDetector:
        return CircularReferenceDetector(InMemoryDataSource(**collections))
    return _make
