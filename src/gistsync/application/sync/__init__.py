"""
Sync - the engine that mirrors source gists to targets.
"""

from .conflict import resolve_conflict
from .description import format_description
from .identifier import MAX_IDENTIFIER_LENGTH, derive_identifier, sanitize
from .lister import SourceLister, apply_filters
from .orchestrator import FailedOperation, SyncOrchestrator, SyncPhase, SyncResult
from .visibility import map_visibility


__all__ = [
    "MAX_IDENTIFIER_LENGTH",
    "FailedOperation",
    "SourceLister",
    "SyncOrchestrator",
    "SyncPhase",
    "SyncResult",
    "apply_filters",
    "derive_identifier",
    "format_description",
    "map_visibility",
    "resolve_conflict",
    "sanitize",
]
