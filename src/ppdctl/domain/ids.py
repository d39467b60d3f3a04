"""Paperdoll instance id allocation.

INVARIANT: Ids are never reused. Allocation is strictly increasing for
the lifetime of the allocator, and uniqueness holds across threads.
"""

from __future__ import annotations

import itertools
import threading

PaperdollId = int


class IdAllocator:
    """Issue unique, increasing paperdoll ids starting at *start*.

    Safe to call from several threads at once. Callers get no ordering
    guarantee relative to each other, only uniqueness.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            msg = f"Id allocator start must be at least 1, got {start}"
            raise ValueError(msg)
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> PaperdollId:
        """Claim the next unused id."""
        with self._lock:
            return next(self._counter)
