"""
Tests for the listener registry.

Critical: each listener fires at most once, in registration order, and only
after the scheduler drains.
"""

import pytest

from recordkit.core.events import CAN_BE_CREATED, ID_SET, EventRegistry
from recordkit.core.scheduler import Scheduler


def test_fire_is_deferred_until_drain(scheduler):
    """Listeners never run inside fire()."""
    registry = EventRegistry(scheduler=scheduler)
    calls = []
    registry.add(ID_SET, lambda new, old: calls.append((new, old)))

    registry.fire(ID_SET, "new", "old")
    assert calls == []

    scheduler.drain()
    assert calls == [("new", "old")]


def test_listeners_fire_in_registration_order_once(scheduler):
    """Second firing round finds an empty list."""
    registry = EventRegistry(scheduler=scheduler)
    calls = []
    registry.add(CAN_BE_CREATED, lambda rec: calls.append("a"))
    registry.add(CAN_BE_CREATED, lambda rec: calls.append("b"))

    registry.fire(CAN_BE_CREATED, None)
    registry.fire(CAN_BE_CREATED, None)
    scheduler.drain()

    assert calls == ["a", "b"]
    assert registry.pending(CAN_BE_CREATED) == []


def test_listener_added_during_firing_waits_for_next_round(scheduler):
    """The list is swapped before listeners run."""
    registry = EventRegistry(scheduler=scheduler)
    calls = []

    def late(new, old):
        calls.append("late")

    def first(new, old):
        calls.append("first")
        registry.add(ID_SET, late)

    registry.add(ID_SET, first)
    registry.fire(ID_SET, None, None)
    scheduler.drain()

    assert calls == ["first"]
    assert registry.pending(ID_SET) == [late]


def test_remove_before_drain_cancels(scheduler):
    """Removal is by identity and cancels a scheduled firing."""
    registry = EventRegistry(scheduler=scheduler)
    calls = []

    def listener(new, old):
        calls.append(new)

    registry.add(ID_SET, listener)
    registry.fire(ID_SET, 1, 0)

    assert registry.remove(ID_SET, listener) is True
    assert registry.remove(ID_SET, listener) is False

    scheduler.drain()
    assert calls == []


def test_unknown_event_kind_rejected():
    registry = EventRegistry(scheduler=Scheduler())
    with pytest.raises(ValueError):
        registry.add("saved", lambda: None)
