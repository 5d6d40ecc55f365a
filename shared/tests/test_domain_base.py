"""Tests for the domain layer primitives."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from shared.domain.base import Aggregate, DomainEvent


@dataclass(eq=False, kw_only=True)
class Ledger(Aggregate):
    balance: int = 0


@dataclass(kw_only=True)
class Posted(DomainEvent):
    amount: int


def test_entities_compare_by_id() -> None:
    shared_id = uuid4()
    assert Ledger(id=shared_id, balance=1) == Ledger(id=shared_id, balance=2)
    assert Ledger(balance=1) != Ledger(balance=1)
    assert len({Ledger(id=shared_id), Ledger(id=shared_id)}) == 1


def test_aggregate_buffers_events_until_cleared() -> None:
    ledger = Ledger()
    ledger.add_event(Posted(aggregate_id=ledger.id, amount=5))

    snapshot = ledger.events
    snapshot.clear()
    assert len(ledger.events) == 1

    ledger.clear_events()
    assert ledger.events == []


def test_event_envelope() -> None:
    ledger = Ledger()
    payload = Posted(aggregate_id=ledger.id, amount=5).to_dict()

    assert payload["event_type"] == "Posted"
    assert payload["aggregate_id"] == str(ledger.id)
    assert payload["occurred_at"].endswith("+00:00")
