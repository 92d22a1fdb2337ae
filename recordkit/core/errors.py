"""
Exception types for the record versioning engine.
"""


class RecordError(Exception):
    """Base class for record contract violations."""
    pass


class IdConflictError(RecordError):
    """Raised when merging a different id into a record whose id is permanent."""
    pass


class AlreadyResolvedError(RecordError):
    """Raised when registering a pre-creation listener on a record that already has a permanent id."""
    pass
