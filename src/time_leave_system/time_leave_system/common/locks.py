from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class EmployeeLocks:
    """One mutex per employee id.

    Overlap and balance checks read current state and then decide, so every
    mutation for a given employee must run while holding that employee's lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def _lock_for(self, employee_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(employee_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[employee_id] = lock
            return lock

    @contextmanager
    def hold(self, employee_id: int) -> Iterator[None]:
        lock = self._lock_for(int(employee_id))
        with lock:
            yield
