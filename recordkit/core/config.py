"""
Per-record configuration.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class RecordConfig:
    """
    Immutable record configuration.

    Fields:
        id_attribute: Name of the attribute holding the record id
        force_temporary: Treat the record as new even if its id looks permanent
            (drafts detached from their backing store)
        client_id_attribute: Key the temporary id is serialized under while
            the record is new
    """
    id_attribute: str = "id"
    force_temporary: bool = False
    client_id_attribute: str = "clientId"

    def merge(self, override: Optional[Mapping[str, Any]] = None) -> "RecordConfig":
        """
        Create new config with override values applied.

        Raises:
            TypeError: If override names an unknown field
        """
        if not override:
            return self
        return replace(self, **dict(override))
