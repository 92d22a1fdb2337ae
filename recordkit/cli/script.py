"""
Simulation scripts.

A script declares record kinds and a list of steps (create, merge,
create_called, drain) run against named references. Every id-set and
can-be-created firing is recorded so the outcome can be inspected.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..core import (
    CAN_BE_CREATED,
    ID_SET,
    NUMBER,
    STRING,
    RecordConfig,
    RecordKind,
    RelationDescriptor,
    Scheduler,
    VersionedRecord,
)
from ..logging_config import get_logger

ATTRIBUTE_TYPES = {"string": STRING, "number": NUMBER}


class ScriptError(ValueError):
    """Raised when a script step references an unknown kind or reference."""
    pass


class RelationSpec(BaseModel):
    association: str
    foreign_key: Optional[str] = None
    target: Optional[str] = None


class KindSpec(BaseModel):
    name: str
    attributes: Dict[str, Literal["string", "number"]] = Field(default_factory=dict)
    relations: List[RelationSpec] = Field(default_factory=list)
    id_attribute: str = "id"
    client_id_attribute: str = "clientId"

    def to_kind(self) -> RecordKind:
        return RecordKind(
            name=self.name,
            attributes={name: ATTRIBUTE_TYPES[t] for name, t in self.attributes.items()},
            relations=tuple(
                RelationDescriptor(r.association, r.foreign_key, r.target) for r in self.relations
            ),
            config=RecordConfig(
                id_attribute=self.id_attribute,
                client_id_attribute=self.client_id_attribute,
            ),
        )


class StepSpec(BaseModel):
    op: Literal["create", "merge", "create_called", "drain"]
    ref: Optional[str] = None
    kind: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    links: Dict[str, str] = Field(default_factory=dict)
    config: Dict[str, Any] = Field(default_factory=dict)


class Script(BaseModel):
    kinds: List[KindSpec] = Field(default_factory=list)
    steps: List[StepSpec] = Field(default_factory=list)


def load_script(path: str) -> Script:
    """
    Load and validate a JSON script.

    Raises:
        FileNotFoundError: If path does not exist
        pydantic.ValidationError: If the script is malformed
    """
    return Script.model_validate_json(Path(path).read_text(encoding="utf-8"))


@dataclass(frozen=True)
class FiredEvent:
    """One listener firing observed during a simulation."""
    event: str
    ref: str
    record_id: Any


class Simulation:
    """
    Runs a script on its own scheduler.

    Usage:
        sim = Simulation(load_script("script.json")).run()
        sim.current("profile").can_be_created()
    """

    def __init__(self, script: Script, scheduler: Optional[Scheduler] = None) -> None:
        self.script = script
        self.scheduler = scheduler or Scheduler()
        self.kinds: Dict[str, RecordKind] = {k.name: k.to_kind() for k in script.kinds}
        self.records: Dict[str, VersionedRecord] = {}
        self.fired: List[FiredEvent] = []
        self._log = get_logger(__name__)

    def run(self) -> "Simulation":
        """Apply every step, then drain outstanding firings."""
        for step in self.script.steps:
            self.apply(step)
        self.scheduler.drain()
        return self

    def apply(self, step: StepSpec) -> None:
        if step.op == "drain":
            ran = self.scheduler.drain()
            self._log.debug("Drained %d tasks", ran)
            return

        ref = self._require_ref(step)
        if step.op == "create":
            kind = self.kinds.get(step.kind or "")
            if kind is None:
                raise ScriptError(f"Unknown kind for {ref!r}: {step.kind!r}")
            record = kind.create(self._with_links(step), scheduler=self.scheduler, **step.config)
            self.records[ref] = record
            self._watch(ref, record)
        elif step.op == "merge":
            self.records[ref] = self.current(ref).merge(self._with_links(step), step.config or None)
        elif step.op == "create_called":
            self.current(ref).mark_create_called()

    def current(self, ref: str) -> VersionedRecord:
        """Live version of a reference."""
        if ref not in self.records:
            raise ScriptError(f"Unknown reference: {ref!r}")
        return self.records[ref].latest()

    def summary(self) -> List[Dict[str, Any]]:
        rows = []
        for ref in self.records:
            record = self.current(ref)
            rows.append({
                "ref": ref,
                "kind": record.kind.name,
                "id": record.id(),
                "new": record.is_new_record(),
                "can_be_created": record.can_be_created(),
                "create_needs_to_be_called": record.create_needs_to_be_called(),
                "plain": record.to_plain_object(),
            })
        return rows

    def _require_ref(self, step: StepSpec) -> str:
        if not step.ref:
            raise ScriptError(f"Step {step.op!r} requires a ref")
        return step.ref

    def _with_links(self, step: StepSpec) -> Dict[str, Any]:
        data = dict(step.data)
        for association, target in step.links.items():
            data[association] = self.current(target)
        return data

    def _watch(self, ref: str, record: VersionedRecord) -> None:
        if not record.is_new_record():
            return

        def id_set(new: VersionedRecord, old: VersionedRecord) -> None:
            self.fired.append(FiredEvent(ID_SET, ref, new.id()))

        def can_be_created(current: VersionedRecord) -> None:
            self.fired.append(FiredEvent(CAN_BE_CREATED, ref, current.id()))

        record.on_id_set(id_set)
        record.on_can_be_created(can_be_created)
