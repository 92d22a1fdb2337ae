"""
Record kinds.

A kind is a data definition (attribute names, relations, default config)
shared by every record of that kind. All kinds use the same engine.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from frozendict import frozendict

from .config import RecordConfig
from .record import VersionedRecord
from .relations import RelationDescriptor
from .scheduler import Scheduler

# Attribute type sentinels (documentation only, not enforced)
STRING = str
NUMBER = int


@dataclass(frozen=True)
class RecordKind:
    """
    Declaration of one record kind.

    Fields:
        name: Kind name (e.g., "User", "ProfileImage")
        attributes: Dict of attribute name -> advisory type
        relations: Relation descriptors, shared by value across versions
        config: Default RecordConfig for records of this kind

    Usage:
        User = RecordKind("User", {"id": NUMBER, "name": STRING})
        user = User.create({"name": "Ada"})
    """
    name: str
    attributes: Mapping[str, type] = field(default_factory=frozendict)
    relations: Tuple[RelationDescriptor, ...] = ()
    config: RecordConfig = field(default_factory=RecordConfig)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", frozendict(self.attributes))
        object.__setattr__(self, "relations", tuple(self.relations))

    @property
    def associations(self) -> Tuple[str, ...]:
        """Association attribute names in declaration order."""
        return tuple(relation.association for relation in self.relations)

    def relation(self, association: str) -> Optional[RelationDescriptor]:
        """Get relation descriptor by association name, or None."""
        for relation in self.relations:
            if relation.association == association:
                return relation
        return None

    def create(
        self,
        data: Optional[Mapping[str, Any]] = None,
        scheduler: Optional[Scheduler] = None,
        **config_override: Any,
    ) -> VersionedRecord:
        """
        Construct a fresh record of this kind.

        Args:
            data: Initial attributes (a temporary id is minted if none given)
            scheduler: Queue for this record's event firings (default: process-wide)
            **config_override: RecordConfig fields to override for this record
        """
        return VersionedRecord(
            self,
            data,
            config=self.config.merge(config_override),
            scheduler=scheduler,
        )
