"""
Shared state of one version chain.

Versions are immutable; the lineage is the single mutable cell every version
of a logical record points to.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .events import EventRegistry


@dataclass(eq=False)
class Lineage:
    """
    Mutable cell shared by reference across a version chain.

    Fields:
        registry: Pending id-set / can-be-created listeners
        head: Most recently produced version
        create_called: A create request was sent to the backing store
    """
    registry: EventRegistry = field(default_factory=EventRegistry)
    head: Optional[Any] = None
    create_called: bool = False
