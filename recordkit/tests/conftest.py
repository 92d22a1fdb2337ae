import pytest

from recordkit.core import Scheduler


@pytest.fixture
def scheduler():
    """Fresh scheduler so deferred firings never leak between tests."""
    return Scheduler()


@pytest.fixture
def make(scheduler):
    """Create a record of kind on the test scheduler."""

    def _make(kind, data=None, **config):
        return kind.create(data, scheduler=scheduler, **config)

    return _make
