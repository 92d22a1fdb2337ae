"""
Record Versioning Engine

Immutable, versioned records with temporary ids, permanent id assignment and
cross-record readiness events.
"""

__version__ = "0.1.0"
