"""
Conflict resolution - what to do when a target already has a counterpart.
"""

from ...core.domain.entities import ExistingRef
from ...core.domain.enums import OnConflict, SyncAction


def resolve_conflict(existing: ExistingRef | None, policy: OnConflict) -> SyncAction:
    """
    Choose the action for one (gist, target) pair.

    replace and update both mean a full overwrite through the adapter's
    update call.
    """
    if existing is None:
        return SyncAction.CREATE
    if policy is OnConflict.SKIP:
        return SyncAction.SKIP
    return SyncAction.UPDATE
