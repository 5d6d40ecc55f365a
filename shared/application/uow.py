"""
Unit of Work

Wraps a database transaction and holds back domain events until the
transaction has committed.
"""

from typing import List
import logging

from django.db import DEFAULT_DB_ALIAS, transaction

from shared.domain.base import Aggregate, DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Transaction boundary for one application command.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = booking_repo.get(booking_id, lock=True)
            booking.confirm()
            booking_repo.save(booking)
            uow.collect_events(booking)
        # BookingConfirmed is published here, after COMMIT

    Raising inside the block rolls the transaction back and discards
    every collected event.
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publish()
            else:
                self._discard()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None
        return False

    def collect_events(self, aggregate: Aggregate):
        """Move pending events from the aggregate into this unit of work."""
        new_events = aggregate.events
        if not new_events:
            return
        self._events.extend(new_events)
        aggregate.clear_events()
        logger.debug(
            "Collected %d events from %s %s",
            len(new_events), aggregate.__class__.__name__, aggregate.id,
        )

    def _schedule_publish(self):
        events = self._events.copy()
        self._events.clear()
        if events:
            transaction.on_commit(lambda: self._publish(events), using=self.using)

    def _discard(self):
        if self._events:
            logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()

    @staticmethod
    def _publish(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.debug("Publishing %d domain events after commit", len(events))
        message_bus.publish_events(events)
