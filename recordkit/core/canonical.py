"""
Canonical JSON for plain record objects.

Keys are sorted so serialized records compare independent of attribute order.
"""

import json
from typing import Any, Mapping


def canonicalize(obj: Any) -> Any:
    """
    Normalize mappings (frozendict snapshots included), sequences and nested
    records into sorted plain data.
    """
    if callable(getattr(obj, "to_plain_object", None)):
        return canonicalize(obj.to_plain_object())
    if isinstance(obj, Mapping):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_str(obj: Any) -> str:
    """Compact, key-sorted UTF-8 JSON of obj."""
    return json.dumps(canonicalize(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
