"""
Temporary identifier generation.

Records created locally get a negative placeholder id until a backing store
assigns a permanent one.
"""

import itertools
from typing import Any


class IdAllocator:
    """
    Generator of unique temporary ids.

    Ids start at -1 and strictly decrease. They are never reused and never zero.

    Usage:
        allocator = IdAllocator()
        allocator.next()  # -1
        allocator.next()  # -2
    """

    def __init__(self) -> None:
        self._counter = itertools.count(-1, -1)

    def next(self) -> int:
        """Mint the next temporary id."""
        return next(self._counter)


_allocator = IdAllocator()


def next_temporary_id() -> int:
    """Mint a temporary id from the process-wide allocator."""
    return _allocator.next()


def is_temporary_id(value: Any) -> bool:
    """True for placeholder ids (negative integers)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return value < 0


def is_permanent_id(value: Any) -> bool:
    """
    True for ids assigned by an external authority.

    Empty values (None, "", 0) are neither temporary nor permanent.
    """
    if not value:
        return False
    return not is_temporary_id(value)
