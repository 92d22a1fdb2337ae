"""
Versioned record.

A record is an immutable attribute snapshot. Every change goes through
merge(), which returns a new version and leaves the old one untouched.
Versions of one logical record share a Lineage (listeners, head, create
flag); that is the only mutable state they have in common.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from frozendict import frozendict

from ..logging_config import get_logger
from .canonical import canonical_json_str
from .config import RecordConfig
from .errors import AlreadyResolvedError, IdConflictError
from .events import CAN_BE_CREATED, ID_SET, EventRegistry, Listener, new_registry
from .ids import is_temporary_id, next_temporary_id
from .lineage import Lineage
from .relations import RelationBinder, denormalize_foreign_keys, related_record
from .scheduler import Scheduler

if TYPE_CHECKING:
    from .kinds import RecordKind


class VersionedRecord:
    """
    One immutable version of a record.

    Usage:
        user = User.create({"name": "Ada"})      # temporary id, e.g. -1
        saved = user.merge({"id": 973})          # new version, id-set scheduled
        user.is_new_record()                     # True (old version unchanged)
        saved.is_new_record()                    # False
    """

    def __init__(
        self,
        kind: "RecordKind",
        data: Optional[Mapping[str, Any]] = None,
        config: Optional[RecordConfig] = None,
        lineage: Optional[Lineage] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._kind = kind
        self._config = config if config is not None else kind.config

        id_attribute = self._config.id_attribute
        attrs = dict(data or {})
        if attrs.get(id_attribute) is None:
            attrs.pop(id_attribute, None)
            attrs = {id_attribute: next_temporary_id(), **attrs}
        self._data = denormalize_foreign_keys(frozendict(attrs), kind.relations)

        if lineage is None:
            lineage = Lineage(registry=new_registry(scheduler))
            self._log().debug("Created record")
        self._lineage = lineage
        lineage.head = self

        self._binder = RelationBinder(self)
        self._binder.bind()

    def __repr__(self) -> str:
        state = "new" if self.is_new_record() else "saved"
        return f"<{self._kind.name} {self._config.id_attribute}={self.id()!r} {state}>"

    # Accessors

    @property
    def kind(self) -> "RecordKind":
        return self._kind

    @property
    def config(self) -> RecordConfig:
        return self._config

    @property
    def lineage(self) -> Lineage:
        return self._lineage

    @property
    def registry(self) -> EventRegistry:
        return self._lineage.registry

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def id(self) -> Any:
        return self._data.get(self._config.id_attribute)

    def get_snapshot(self) -> frozendict:
        return self._data

    def latest(self) -> "VersionedRecord":
        """Most recent version of this record's chain."""
        return self._lineage.head

    def is_changed(self, snapshot: Mapping[str, Any]) -> bool:
        """True if snapshot differs from this version's attributes."""
        return snapshot != self._data

    def is_new_record(self) -> bool:
        """True until the backing store has assigned a permanent id."""
        if self._config.force_temporary:
            return True
        return is_temporary_id(self.id())

    # Versioning

    def merge(
        self,
        partial_data: Optional[Mapping[str, Any]] = None,
        config_override: Optional[Mapping[str, Any]] = None,
    ) -> "VersionedRecord":
        """
        Produce the next version with partial_data merged over the attributes.

        Args:
            partial_data: Attributes to set (right-biased overwrite)
            config_override: RecordConfig fields to change

        Returns:
            New version, or self if neither attributes nor config change

        Raises:
            IdConflictError: If the id is permanent and partial_data carries a
                different non-empty id
        """
        partial = dict(partial_data or {})
        id_attribute = self._config.id_attribute
        if id_attribute in partial and not partial[id_attribute]:
            del partial[id_attribute]
        self._check_id_change(partial)
        return self._next_version({**self._data, **partial}, self._config.merge(config_override))

    def replace(
        self,
        data: Mapping[str, Any],
        config_override: Optional[Mapping[str, Any]] = None,
    ) -> "VersionedRecord":
        """
        Produce the next version from a complete attribute map.

        Attributes missing from data are dropped, except the id which is kept
        when data does not carry one. Same guards and events as merge().
        """
        attrs = dict(data)
        id_attribute = self._config.id_attribute
        if not attrs.get(id_attribute):
            attrs[id_attribute] = self.id()
        self._check_id_change(attrs)
        return self._next_version(attrs, self._config.merge(config_override))

    def _check_id_change(self, data: Mapping[str, Any]) -> None:
        if self.is_new_record():
            return
        id_attribute = self._config.id_attribute
        new_id = data.get(id_attribute)
        if not new_id:
            return
        if new_id != self.id():
            raise IdConflictError(
                f"cannot change {id_attribute!r} from {self.id()!r} to {new_id!r}"
            )

    def _next_version(self, data: Dict[str, Any], config: RecordConfig) -> "VersionedRecord":
        merged = denormalize_foreign_keys(frozendict(data), self._kind.relations)
        if merged == self._data and config == self._config:
            return self

        record = type(self)(self._kind, merged, config=config, lineage=self._lineage)
        self._binder.unbind()

        log = record._log()
        log.debug("Merged record version")
        if self.is_new_record() and not record.is_new_record():
            log.debug("Record id set, previous id %s", self.id())
            self.registry.fire(ID_SET, record, self)
        elif record.is_new_record() and not self.can_be_created() and record.can_be_created():
            log.debug("Record can be created")
            self.registry.fire(CAN_BE_CREATED, record)
        return record

    # Events

    def on_id_set(self, listener: Listener) -> None:
        """
        Call listener(new_version, old_version) once a permanent id is merged in.

        Raises:
            AlreadyResolvedError: If the id is already permanent
        """
        if not self.is_new_record():
            raise AlreadyResolvedError("cannot call on_id_set, id has already been set")
        self.registry.add(ID_SET, listener)

    def on_id_set_or_now(self, listener: Listener) -> None:
        """Like on_id_set, but saved records schedule listener(self) right away."""
        if self.is_new_record():
            self.on_id_set(listener)
            return
        self.registry.scheduler.schedule(listener, self)

    def clear_on_id_set(self, listener: Listener) -> None:
        """Remove a pending id-set listener; no-op if it is not pending."""
        self.registry.remove(ID_SET, listener)

    def on_can_be_created(self, listener: Listener) -> None:
        """
        Call listener(record) once every relation of this record is saved.

        If that already holds, listener(self) is scheduled right away.

        Raises:
            AlreadyResolvedError: If the id is already permanent
        """
        if not self.is_new_record():
            raise AlreadyResolvedError("cannot call on_can_be_created, id has already been set")
        if self.can_be_created():
            self.registry.scheduler.schedule(listener, self)
            return
        self.registry.add(CAN_BE_CREATED, listener)

    # Readiness

    def unresolved_relations(self) -> List[str]:
        """Association names whose related record is still new."""
        pending = []
        for relation in self._kind.relations:
            related = related_record(self._data, relation)
            if related is not None and related.is_new_record():
                pending.append(relation.association)
        return pending

    def can_be_created(self) -> bool:
        """True when every relation is absent or already saved."""
        return not self.unresolved_relations()

    # Create-request tracking

    def mark_create_called(self) -> None:
        """Flag that a create request was sent; shared by every version."""
        self._lineage.create_called = True
        self._log().debug("Create called")

    def is_create_called(self) -> bool:
        return self._lineage.create_called

    def create_needs_to_be_called(self) -> bool:
        return self.is_new_record() and not self._lineage.create_called

    # Serialization

    def to_plain_object(self) -> Dict[str, Any]:
        """
        Attributes for transport.

        Association attributes, and foreign keys still holding a temporary
        id, are never included. While the record is new its id is relabelled
        as config.client_id_attribute.
        """
        result = dict(self._data)
        for relation in self._kind.relations:
            result.pop(relation.association, None)
            if relation.foreign_key and is_temporary_id(result.get(relation.foreign_key)):
                del result[relation.foreign_key]
        if self.is_new_record():
            temp_id = result.pop(self._config.id_attribute, None)
            result[self._config.client_id_attribute] = temp_id
        return result

    def to_json(self) -> str:
        """Canonical JSON of to_plain_object()."""
        return canonical_json_str(self.to_plain_object())

    def _log(self):
        return get_logger(__name__, trace_id=str(self.id()))
