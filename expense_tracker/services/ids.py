"""
Expense Identifier Generation

Ids are the creation time in epoch milliseconds, which keeps them
readable and roughly sortable. Two submissions inside the same
millisecond (or a clock that steps backwards) would collide, so the
generator never hands out an id at or below the last one it issued and
skips any id already present in the list.
"""

import time
from collections.abc import Callable, Iterable
from typing import Optional


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class ExpenseIdGenerator:
    """Monotonic, timestamp-derived integer ids."""

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or epoch_millis
        self._last_issued: Optional[int] = None

    def next_id(self, existing_ids: Iterable[int] = ()) -> int:
        candidate = self._clock()
        if self._last_issued is not None and candidate <= self._last_issued:
            candidate = self._last_issued + 1

        taken = set(existing_ids)
        while candidate in taken:
            candidate += 1

        self._last_issued = candidate
        return candidate
