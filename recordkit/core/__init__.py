"""
Core record versioning primitives.

This module provides:
- VersionedRecord: Immutable record version with merge and readiness events
- RecordKind: Attribute and relation declaration shared by records of a kind
- RelationDescriptor: Association with optional foreign-key attribute
- EventRegistry / Lineage: Mutable state shared across a version chain
- Scheduler: Deferred task queue for event firing
- IDs: Temporary id allocation
"""

from .config import RecordConfig
from .errors import RecordError, IdConflictError, AlreadyResolvedError
from .events import EventRegistry, ID_SET, CAN_BE_CREATED, EVENT_KINDS
from .ids import IdAllocator, next_temporary_id, is_temporary_id, is_permanent_id
from .lineage import Lineage
from .scheduler import Scheduler, get_default_scheduler, drain
from .relations import RelationDescriptor, RelationBinder
from .record import VersionedRecord
from .kinds import RecordKind, STRING, NUMBER
from .canonical import canonicalize, canonical_json_str

__all__ = [
    "RecordConfig",
    "RecordError",
    "IdConflictError",
    "AlreadyResolvedError",
    "EventRegistry",
    "ID_SET",
    "CAN_BE_CREATED",
    "EVENT_KINDS",
    "IdAllocator",
    "next_temporary_id",
    "is_temporary_id",
    "is_permanent_id",
    "Lineage",
    "Scheduler",
    "get_default_scheduler",
    "drain",
    "RelationDescriptor",
    "RelationBinder",
    "VersionedRecord",
    "RecordKind",
    "STRING",
    "NUMBER",
    "canonicalize",
    "canonical_json_str",
]
