"""
Detector-level tests: each detector is a pure function of the records it is given.

    python -m pytest test_detectors.py -v
"""
from uuid import uuid4

import pytest

from circref.detectors.group_memberships import (
    detect_circular_group_memberships,
    has_group_containment_cycle,
    resolve_group_members,
)
from circref.detectors.self_references import detect_self_references
from circref.detectors.subscription_chains import detect_circular_subscription_chains
from circref.detectors.transaction_chains import (
    detect_circular_transaction_chains,
    has_circular_transaction_chain,
)
from circref.errors import InfiniteRecursionDetected
from circref.models import Group, Person, ReferenceType, Subscription, Transaction
from conftest import owes


def by_id(*people):
    return {p.id: p for p in people}


# =============================================================================
# SELF REFERENCES
# =============================================================================

def test_self_reference_detection():
    charlie = Person(name="Charlie")
    txn = owes(charlie, charlie, 100.0)

    messages = detect_self_references([txn], by_id(charlie))

    assert len(messages) == 1
    assert "paying themselves" in messages[0]
    assert "Charlie" in messages[0]
    assert str(txn.id) in messages[0]


def test_self_reference_falls_back_to_id():
    stranger = uuid4()
    messages = detect_self_references([Transaction(payer_id=stranger, payee_id=stranger)], {})
    assert str(stranger) in messages[0]


def test_no_self_references(people):
    assert detect_self_references([owes(people["Alice"], people["Bob"])], by_id(*people.values())) == []


# =============================================================================
# TRANSACTION CHAINS
# =============================================================================

def test_three_party_chain(people):
    alice, bob, charlie = people["Alice"], people["Bob"], people["Charlie"]
    txns = [owes(alice, bob), owes(bob, charlie), owes(charlie, alice)]

    result = detect_circular_transaction_chains(txns, by_id(alice, bob, charlie))

    assert result.has_circular_references
    assert len(result.circular_paths) == 1
    path = result.circular_paths[0]
    assert path.type == ReferenceType.TRANSACTION_CHAIN
    assert path.cycle_length == 3
    assert path.entity_ids == [alice.id, bob.id, charlie.id]
    assert path.path_description == "Alice → Bob → Charlie"


def test_two_party_chain(people):
    alice, bob = people["Alice"], people["Bob"]
    result = detect_circular_transaction_chains([owes(alice, bob), owes(bob, alice)], by_id(alice, bob))

    assert result.has_circular_references
    assert result.circular_paths[0].cycle_length == 2


def test_linear_chain_has_no_cycle():
    chain = [Person(name=f"Person{i}") for i in range(4)]
    txns = [owes(chain[i], chain[i + 1]) for i in range(3)]

    result = detect_circular_transaction_chains(txns, by_id(*chain))

    assert not result.has_circular_references
    assert result.circular_paths == []


def test_self_payment_is_warning_not_chain(people):
    alice, bob = people["Alice"], people["Bob"]
    txns = [owes(alice, alice), owes(alice, bob), owes(bob, alice)]

    result = detect_circular_transaction_chains(txns, by_id(alice, bob))

    assert [p.cycle_length for p in result.circular_paths] == [2]
    assert any("Self-payment detected: Alice paying themselves" in w for w in result.warnings)


def test_lone_self_payment_has_no_chain(people):
    alice = people["Alice"]
    result = detect_circular_transaction_chains([owes(alice, alice)], by_id(alice))
    assert not result.has_circular_references
    assert len(result.warnings) == 1


def test_missing_payer_is_warned_and_skipped(people):
    txn = Transaction(payer_id=None, payee_id=people["Bob"].id)
    result = detect_circular_transaction_chains([txn], by_id(*people.values()))

    assert not result.has_circular_references
    assert result.warnings == [f"Transaction {txn.id} has missing payer or payee ID"]


def test_unknown_people_get_placeholder_names():
    a, b = uuid4(), uuid4()
    txns = [Transaction(payer_id=a, payee_id=b), Transaction(payer_id=b, payee_id=a)]

    result = detect_circular_transaction_chains(txns, {})

    assert result.circular_paths[0].entity_names == ["Unknown", "Unknown"]


def test_disjoint_rings_are_reported_separately():
    ring1 = [Person(name=n) for n in ("A1", "A2")]
    ring2 = [Person(name=n) for n in ("B1", "B2", "B3")]
    txns = [owes(ring1[0], ring1[1]), owes(ring1[1], ring1[0])]
    txns += [owes(ring2[i], ring2[(i + 1) % 3]) for i in range(3)]

    result = detect_circular_transaction_chains(txns, by_id(*ring1, *ring2))

    assert sorted(p.cycle_length for p in result.circular_paths) == [2, 3]


def test_dense_ring_reports_only_real_debts(people):
    alice, bob, charlie = people["Alice"], people["Bob"], people["Charlie"]
    txns = [owes(alice, bob), owes(alice, charlie), owes(bob, alice), owes(charlie, alice)]
    debts = {(t.payer_id, t.payee_id) for t in txns}

    result = detect_circular_transaction_chains(txns, by_id(alice, bob, charlie))

    assert len(result.circular_paths) == 1
    ring = result.circular_paths[0].entity_ids
    assert ring == [alice.id, bob.id]
    for payer, payee in zip(ring, ring[1:] + ring[:1]):
        assert (payer, payee) in debts


def test_ring_with_self_payment_skips_the_self_loop(people):
    alice, bob, charlie = people["Alice"], people["Bob"], people["Charlie"]
    txns = [owes(alice, alice), owes(alice, bob), owes(bob, charlie), owes(charlie, alice)]
    debts = {(t.payer_id, t.payee_id) for t in txns}

    ring = detect_circular_transaction_chains(txns, by_id(alice, bob, charlie)).circular_paths[0].entity_ids

    assert ring == [alice.id, bob.id, charlie.id]
    assert all((payer, payee) in debts for payer, payee in zip(ring, ring[1:] + ring[:1]))


def test_transaction_detector_is_idempotent(people):
    alice, bob, charlie = people["Alice"], people["Bob"], people["Charlie"]
    txns = [owes(alice, bob), owes(bob, charlie), owes(charlie, alice), owes(bob, alice)]
    lookup = by_id(alice, bob, charlie)

    assert detect_circular_transaction_chains(txns, lookup) == detect_circular_transaction_chains(txns, lookup)


def test_quick_transaction_check(people):
    alice, bob = people["Alice"], people["Bob"]
    assert has_circular_transaction_chain([owes(alice, bob), owes(bob, alice)])
    assert not has_circular_transaction_chain([owes(alice, bob), owes(alice, alice)])


# =============================================================================
# GROUP MEMBERSHIPS
# =============================================================================

def test_simple_group_has_no_cycle(people):
    group = Group(name="Test Group", member_ids={people["Alice"].id, people["Bob"].id})

    result = detect_circular_group_memberships([group])

    assert not result.has_circular_references
    assert result.warnings == []


def test_empty_group_warning():
    result = detect_circular_group_memberships([Group(name="Empty Group")])

    assert not result.has_circular_references
    assert "no members" in result.warnings[0]


def test_group_with_only_subgroups_still_has_no_members():
    inner = Group(name="Inner", member_ids={uuid4()})
    outer = Group(name="Outer", subgroup_ids={inner.id})

    result = detect_circular_group_memberships([outer, inner])

    assert not result.has_circular_references
    assert result.warnings == ["Group 'Outer' has no members of its own, only subgroups"]


def test_nested_groups_forming_cycle():
    g1_id, g2_id = uuid4(), uuid4()
    g1 = Group(id=g1_id, name="Trip", member_ids={uuid4()}, subgroup_ids={g2_id})
    g2 = Group(id=g2_id, name="Flatmates", member_ids={uuid4()}, subgroup_ids={g1_id})

    result = detect_circular_group_memberships([g1, g2])

    assert result.has_circular_references
    path = result.circular_paths[0]
    assert path.type == ReferenceType.GROUP_MEMBERSHIP
    assert path.entity_names == ["Trip", "Flatmates"]
    assert has_group_containment_cycle([g1, g2])


def test_group_containing_itself_is_warning():
    gid = uuid4()
    result = detect_circular_group_memberships([Group(id=gid, name="Loop", subgroup_ids={gid})])

    assert not result.has_circular_references
    assert result.warnings == [
        "Group 'Loop' has no members of its own, only subgroups",
        "Group 'Loop' contains itself",
    ]


def test_unknown_subgroup_is_warning():
    ghost = uuid4()
    result = detect_circular_group_memberships([Group(name="Parent", subgroup_ids={ghost})])
    assert f"Group 'Parent' references unknown subgroup {ghost}" in result.warnings


def test_resolve_nested_members():
    p1, p2, p3 = uuid4(), uuid4(), uuid4()
    leaf = Group(name="Leaf", member_ids={p3})
    mid_a = Group(name="MidA", member_ids={p2}, subgroup_ids={leaf.id})
    mid_b = Group(name="MidB", subgroup_ids={leaf.id})
    root = Group(name="Root", member_ids={p1}, subgroup_ids={mid_a.id, mid_b.id})

    assert resolve_group_members(root.id, [root, mid_a, mid_b, leaf]) == {p1, p2, p3}


def test_resolve_members_of_cyclic_groups_hits_ceiling():
    g1_id, g2_id = uuid4(), uuid4()
    groups = [
        Group(id=g1_id, name="A", subgroup_ids={g2_id}),
        Group(id=g2_id, name="B", subgroup_ids={g1_id}),
    ]

    with pytest.raises(InfiniteRecursionDetected) as exc_info:
        resolve_group_members(g1_id, groups, max_depth=20)

    assert exc_info.value.depth == 20


# =============================================================================
# SUBSCRIPTIONS
# =============================================================================

def test_valid_subscription_has_no_warnings():
    henry = Person(name="Henry")
    result = detect_circular_subscription_chains([Subscription(name="Netflix", person_id=henry.id)], by_id(henry))

    assert not result.has_circular_references
    assert result.warnings == []


def test_orphaned_subscription_warning():
    result = detect_circular_subscription_chains([Subscription(name="Orphaned Sub", person_id=uuid4())], {})

    assert not result.has_circular_references
    assert "non-existent person" in result.warnings[0]


def test_subscription_without_owner():
    result = detect_circular_subscription_chains([Subscription(name="Gym")], {})
    assert result.warnings == ["Subscription 'Gym' has no associated person"]


def test_shared_subscription_references():
    owner, friend = Person(name="Owner"), Person(name="Friend")
    ghost = uuid4()
    sub = Subscription(name="Spotify", person_id=owner.id, shared_with_ids=[friend.id, owner.id, ghost])

    result = detect_circular_subscription_chains([sub], by_id(owner, friend))

    assert result.warnings == [
        "Subscription 'Spotify' is shared with its own owner",
        f"Subscription 'Spotify' is shared with non-existent person {ghost}",
    ]


# =============================================================================
# EMPTY INPUT
# =============================================================================

def test_every_detector_is_clean_on_empty_input():
    assert detect_self_references([], {}) == []
    assert not detect_circular_transaction_chains([], {}).has_circular_references
    assert not detect_circular_group_memberships([]).has_circular_references
    assert not detect_circular_subscription_chains([], {}).has_circular_references
