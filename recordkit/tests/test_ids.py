"""
Tests for temporary id allocation.
"""

from recordkit.core.ids import IdAllocator, is_permanent_id, is_temporary_id, next_temporary_id


def test_allocator_starts_below_zero_and_decreases():
    """Fresh allocator yields -1, -2, -3."""
    allocator = IdAllocator()
    assert [allocator.next() for _ in range(3)] == [-1, -2, -3]


def test_minted_ids_negative_and_unique():
    """N minted ids must be distinct and all below zero."""
    ids = [next_temporary_id() for _ in range(500)]

    assert len(set(ids)) == 500
    assert all(i < 0 for i in ids)


def test_id_classification():
    """Negative ints are temporary; non-empty other values are permanent."""
    assert is_temporary_id(-7)
    assert not is_temporary_id(7)
    assert not is_temporary_id("abc")
    assert not is_temporary_id(None)
    assert not is_temporary_id(True)

    assert is_permanent_id(973)
    assert is_permanent_id("7f3a-opaque")
    assert not is_permanent_id(-1)
    assert not is_permanent_id(None)
    assert not is_permanent_id("")
    assert not is_permanent_id(0)
