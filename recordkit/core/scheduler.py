"""
Deferred task queue.

Event listeners never run inside the call that triggered them. Triggers
enqueue a task here and a drain loop runs it once the caller's stack has
unwound.
"""

from collections import deque
from typing import Any, Callable, Deque, Tuple

Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class Scheduler:
    """
    FIFO queue of deferred calls.

    Usage:
        scheduler = Scheduler()
        scheduler.schedule(print, "hello")
        scheduler.drain()  # prints "hello", returns 1
    """

    def __init__(self) -> None:
        self._tasks: Deque[Task] = deque()

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        return len(self._tasks)

    def schedule(self, fn: Callable[..., Any], *args: Any) -> None:
        """Queue fn(*args) for the next drain."""
        self._tasks.append((fn, args))

    def drain(self) -> int:
        """
        Run queued tasks until the queue is empty.

        Tasks scheduled while draining run in the same drain. Exceptions
        raised by a task propagate; tasks queued behind it stay queued.

        Returns:
            Number of tasks executed
        """
        count = 0
        while self._tasks:
            fn, args = self._tasks.popleft()
            count += 1
            fn(*args)
        return count

    def clear(self) -> None:
        """Drop all queued tasks."""
        self._tasks.clear()


_default_scheduler = Scheduler()


def get_default_scheduler() -> Scheduler:
    """Process-wide scheduler used by registries created without one."""
    return _default_scheduler


def drain() -> int:
    """Drain the process-wide scheduler."""
    return _default_scheduler.drain()
