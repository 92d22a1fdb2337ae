"""
Relation declarations and binding.

A record may hold another, still unsaved record under an association name.
The binder subscribes to that related record's id-set event and, once the
related record is saved, writes its permanent id into the dependent's
foreign-key attribute.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from frozendict import frozendict

from ..logging_config import get_logger
from .events import Listener
from .ids import is_permanent_id


@dataclass(frozen=True)
class RelationDescriptor:
    """
    Static relation declaration, shared by every version of a kind.

    Fields:
        association: Attribute holding the related record
        foreign_key: Attribute the related id is denormalized into (optional)
        target: Kind name of the related record (documentation only)
    """
    association: str
    foreign_key: Optional[str] = None
    target: Optional[str] = None


def related_record(data: Mapping[str, Any], relation: RelationDescriptor) -> Any:
    """
    Get the record held under relation.association.

    Returns:
        Related record, or None if the attribute is absent or holds a scalar
    """
    value = data.get(relation.association)
    if callable(getattr(value, "is_new_record", None)):
        return value
    return None


def refresh_related(
    data: frozendict, relations: Sequence[RelationDescriptor]
) -> frozendict:
    """
    Swap stale related versions for their saved chain head.

    A related version handed in after its chain was saved would otherwise
    subscribe to a registry that has already fired.
    """
    updates: Dict[str, Any] = {}
    for relation in relations:
        related = related_record(data, relation)
        if related is None or not related.is_new_record():
            continue
        head = related.latest()
        if head is not related and not head.is_new_record():
            updates[relation.association] = head
    if not updates:
        return data
    return frozendict({**data, **updates})


def denormalize_foreign_keys(
    data: frozendict, relations: Sequence[RelationDescriptor]
) -> frozendict:
    """
    Copy related record ids into their foreign-key attributes.

    Stale related versions are refreshed first. A related record that is
    still unsaved never overwrites a foreign key that already holds a
    permanent id.

    Returns:
        data itself when nothing changes, else a new snapshot
    """
    data = refresh_related(data, relations)
    updates: Dict[str, Any] = {}
    for relation in relations:
        if not relation.foreign_key:
            continue
        related = related_record(data, relation)
        if related is None:
            continue
        current = data.get(relation.foreign_key)
        if related.is_new_record() and is_permanent_id(current):
            continue
        related_id = related.id()
        if current != related_id:
            updates[relation.foreign_key] = related_id
    if not updates:
        return data
    return frozendict({**data, **updates})


class RelationBinder:
    """
    Keeps one version's id-set subscriptions on its unresolved related records.

    Each version owns a binder. When a version is superseded by a merge its
    subscriptions are retracted, and the new version binds its own.
    """

    def __init__(self, record: Any) -> None:
        self._record = record
        self._bindings: Dict[str, Tuple[Any, Listener]] = {}

    @property
    def bindings(self) -> Dict[str, Tuple[Any, Listener]]:
        """Dict of association -> (related record, subscribed callback)."""
        return dict(self._bindings)

    def bind(self) -> None:
        """Subscribe to id-set on every related record that is still new."""
        record = self._record
        snapshot = record.get_snapshot()
        for relation in record.kind.relations:
            related = related_record(snapshot, relation)
            if related is None or not related.is_new_record():
                continue
            callback = self._make_callback(relation)
            related.on_id_set(callback)
            self._bindings[relation.association] = (related, callback)
            get_logger(__name__, trace_id=str(record.id())).debug(
                "Subscribed to %s (related id %s)", relation.association, related.id()
            )

    def unbind(self) -> None:
        """Retract all pending subscriptions."""
        for related, callback in self._bindings.values():
            related.clear_on_id_set(callback)
        self._bindings = {}

    def resolve(self, relation: RelationDescriptor, resolved: Any) -> Any:
        """
        Fold a freshly saved related record into the bound version.

        With a foreign key declared, the id is denormalized and the nested
        record is dropped. Without one, the association is pointed at the
        saved version.

        Returns:
            New version of the dependent record
        """
        record = self._record
        data = dict(record.get_snapshot())
        if relation.foreign_key:
            data.pop(relation.association, None)
            data[relation.foreign_key] = resolved.id()
        else:
            data[relation.association] = resolved
        get_logger(__name__, trace_id=str(record.id())).debug(
            "Resolved %s to id %s", relation.association, resolved.id()
        )
        return record.replace(data)

    def _make_callback(self, relation: RelationDescriptor) -> Listener:
        def on_related_id_set(resolved: Any, previous: Any) -> None:
            self._bindings.pop(relation.association, None)
            self.resolve(relation, resolved)

        return on_related_id_set
