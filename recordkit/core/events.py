"""
Listener registry for record lifecycle events.

One registry is shared by every version of a logical record, so a listener
registered on version N still fires when version N+2 transitions.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .scheduler import Scheduler, get_default_scheduler

# Event kinds
ID_SET = "id-set"
CAN_BE_CREATED = "can-be-created"

EVENT_KINDS = frozenset({ID_SET, CAN_BE_CREATED})

# Listener signatures:
#   id-set: (new_version, old_version) -> None
#   can-be-created: (record) -> None
Listener = Callable[..., Any]


@dataclass(eq=False)
class EventRegistry:
    """
    Ordered pending listeners per event kind.

    Fields:
        scheduler: Queue that firings are deferred to
        listeners: Dict of event kind -> listeners in registration order

    Usage:
        registry = EventRegistry()
        registry.add(ID_SET, callback)
        registry.fire(ID_SET, new_version, old_version)
        registry.scheduler.drain()
    """
    scheduler: Scheduler = field(default_factory=get_default_scheduler)
    listeners: Dict[str, List[Listener]] = field(
        default_factory=lambda: {kind: [] for kind in EVENT_KINDS}
    )

    def add(self, kind: str, listener: Listener) -> None:
        """Append listener to the kind's list."""
        self._list(kind).append(listener)

    def remove(self, kind: str, listener: Listener) -> bool:
        """
        Remove listener by identity.

        Returns:
            True if the listener was pending
        """
        pending = self._list(kind)
        for idx, candidate in enumerate(pending):
            if candidate is listener:
                del pending[idx]
                return True
        return False

    def pending(self, kind: str) -> List[Listener]:
        """Copy of the listeners waiting on kind."""
        return list(self._list(kind))

    def take(self, kind: str) -> List[Listener]:
        """Swap the kind's list for an empty one and return the old list."""
        taken = self._list(kind)
        self.listeners[kind] = []
        return taken

    def fire(self, kind: str, *args: Any) -> None:
        """
        Schedule one firing round for kind.

        The list is captured when the task runs, so listeners cleared before
        the drain never fire and listeners added while firing wait for the
        next round.
        """
        self.scheduler.schedule(self._run, kind, args)

    def _run(self, kind: str, args: tuple) -> None:
        for listener in self.take(kind):
            listener(*args)

    def _list(self, kind: str) -> List[Listener]:
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind: {kind}")
        return self.listeners[kind]


def new_registry(scheduler: Optional[Scheduler] = None) -> EventRegistry:
    """Create a registry bound to scheduler (default: process-wide)."""
    if scheduler is None:
        return EventRegistry()
    return EventRegistry(scheduler=scheduler)
