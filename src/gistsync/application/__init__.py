"""
Application Layer - the sync use case.

This layer contains:
- sync/: identifier derivation, filters, conflict resolution and the orchestrator
"""

from .sync import SourceLister, SyncOrchestrator, SyncResult


__all__ = ["SourceLister", "SyncOrchestrator", "SyncResult"]
