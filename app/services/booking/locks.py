# app/services/booking/locks.py
"""
Per-employee mutual exclusion for the check-and-insert span of booking creation.

Two layers are used together:
- an in-process lock per employee, which serialises writers sharing one
  process (SQLite, tests, a single worker);
- a PostgreSQL transaction-scoped advisory lock per employee, which
  serialises writers across processes and is released on commit/rollback.

Both are always taken in sorted employee-id order.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session


class EmployeeLockRegistry:
    """Hands out one reentrant lock per employee id"""

    def __init__(self):
        self._locks: Dict[UUID, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, employee_id: UUID) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[employee_id] = lock
            return lock

    @contextmanager
    def hold(self, employee_ids: Iterable[UUID]) -> Iterator[List[UUID]]:
        ordered = sorted(set(employee_ids), key=str)
        acquired = []
        try:
            for employee_id in ordered:
                lock = self._lock_for(employee_id)
                lock.acquire()
                acquired.append(lock)
            yield ordered
        finally:
            for lock in reversed(acquired):
                lock.release()


employee_locks = EmployeeLockRegistry()


def advisory_lock_key(employee_id: UUID) -> int:
    """Map an employee UUID onto the signed bigint space of pg_advisory_xact_lock"""
    return employee_id.int & 0x7FFF_FFFF_FFFF_FFFF


def acquire_advisory_locks(db: Session, employee_ids: Iterable[UUID]) -> None:
    """Take transaction-scoped advisory locks; no-op on non-PostgreSQL backends"""
    if db.get_bind().dialect.name != "postgresql":
        return
    for employee_id in sorted(set(employee_ids), key=str):
        db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": advisory_lock_key(employee_id)},
        )
