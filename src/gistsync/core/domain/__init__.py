"""
Domain layer - entities and enums shared by every other layer.
"""

from .entities import (
    ExistingRef,
    NormalizedSnippet,
    OperationResult,
    SnippetFile,
    SourceItem,
    SyncOutcome,
)
from .enums import (
    OnConflict,
    OutcomeResult,
    SyncAction,
    TargetProvider,
    Visibility,
    VisibilityFilter,
    VisibilityMode,
)


__all__ = [
    "ExistingRef",
    "NormalizedSnippet",
    "OnConflict",
    "OperationResult",
    "OutcomeResult",
    "SnippetFile",
    "SourceItem",
    "SyncAction",
    "SyncOutcome",
    "TargetProvider",
    "Visibility",
    "VisibilityFilter",
    "VisibilityMode",
]
