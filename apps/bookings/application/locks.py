"""
Per-property write locks

Booking writers of the same property are serialized inside one process
by a lock keyed on the property id. The lock is held around the whole
transaction, so the availability check and the write it guards commit
before the next writer reads. Writers in other processes are serialized
by the row lock on the property and, on PostgreSQL, the exclusion
constraint.

The registry keeps one lock per property id seen by this process for the
lifetime of the process; it is bounded by the number of listings and
locks are never replaced, so writers of one property always meet on the
same lock.
"""

from contextlib import contextmanager
import threading

_registry_guard = threading.Lock()
_locks: dict[int, threading.Lock] = {}


def _lock_for(property_id: int) -> threading.Lock:
    with _registry_guard:
        lock = _locks.get(property_id)
        if lock is None:
            lock = _locks[property_id] = threading.Lock()
        return lock


@contextmanager
def property_lock(property_id: int):
    """
    Usage:
        with property_lock(property_id):
            with DjangoUnitOfWork() as uow:
                ...
    """
    lock = _lock_for(property_id)
    with lock:
        yield
