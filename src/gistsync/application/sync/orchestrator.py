"""
Sync Orchestrator - Coordinates mirroring gists to every configured target.

This is the main entry point for sync operations.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ...core.domain.entities import (
    ExistingRef,
    NormalizedSnippet,
    SourceItem,
    SyncOutcome,
)
from ...core.domain.enums import OutcomeResult, SyncAction
from ...core.exceptions import GistSyncError, NotApplicable, SourceListingError
from ...core.ports.config_provider import HooksConfig, TargetConfig
from ...core.ports.hook_runner import HookRunnerPort
from ...core.ports.snippet_target import SnippetTargetPort
from .conflict import resolve_conflict
from .description import format_description
from .identifier import derive_identifier
from .lister import SourceLister
from .visibility import map_visibility


class SyncPhase(Enum):
    """Stages of a sync run, in order."""

    IDLE = "idle"
    PRE_HOOK = "pre_hook"
    LISTING = "listing"
    DISPATCHING = "dispatching"
    PRUNING = "pruning"
    POST_HOOK = "post_hook"
    ERROR_HOOK = "error_hook"
    DONE = "done"


@dataclass
class FailedOperation:
    """
    Details of a failed operation during sync.

    Provides context about what failed, where, and why for
    better error reporting and debugging.
    """

    operation: str  # e.g., "find", "create", "update", "fetch"
    target_name: str
    identifier: str
    error: str
    gist_id: str = ""

    def __str__(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.operation}] {self.target_name}/{self.identifier}: {self.error}"


@dataclass
class SyncResult:
    """
    Result of a sync run with graceful degradation support.

    One SyncOutcome is recorded per (gist, target) attempt. A failing pair
    never stops the others, so a run can end with both successes and
    failures.

    Attributes:
        dry_run: Whether this was a dry-run (no changes made).
        cancelled: Whether the run was stopped before all pairs were attempted.
        gists_listed: Number of gists left after source filters.
        outcomes: Every recorded (gist, target) outcome, in dispatch order.
        failed_operations: Failed pairs with detailed error info.
        errors: Error messages (failed operations and fatal errors).
        warnings: Warning messages (per-file failures, skipped pruning).
    """

    dry_run: bool = False
    cancelled: bool = False
    gists_listed: int = 0

    outcomes: list[SyncOutcome] = field(default_factory=list)
    failed_operations: list[FailedOperation] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def _count(self, result: OutcomeResult) -> int:
        return sum(1 for o in self.outcomes if o.result is result)

    @property
    def created(self) -> int:
        return self._count(OutcomeResult.CREATED)

    @property
    def updated(self) -> int:
        return self._count(OutcomeResult.UPDATED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeResult.SKIPPED)

    @property
    def deleted(self) -> int:
        return self._count(OutcomeResult.DELETED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeResult.FAILED)

    @property
    def succeeded(self) -> int:
        return len(self.outcomes) - self.failed

    @property
    def success(self) -> bool:
        """True if the run finished without any error."""
        return not self.errors

    def add_outcome(self, outcome: SyncOutcome, operation: str = "") -> None:
        """
        Record one (gist, target) outcome.

        Args:
            outcome: The outcome to record.
            operation: Operation that failed, for failed outcomes.
        """
        self.outcomes.append(outcome)
        for warning in outcome.warnings:
            self.add_warning(f"[{outcome.target_name}] {outcome.identifier}: {warning}")
        if outcome.result is OutcomeResult.FAILED:
            failed = FailedOperation(
                operation=operation or "sync",
                target_name=outcome.target_name,
                identifier=outcome.identifier,
                error=outcome.error or "unknown error",
                gist_id=outcome.gist_id,
            )
            self.failed_operations.append(failed)
            self.errors.append(str(failed))

    def add_error(self, error: str) -> None:
        """Add an error that is not tied to a single pair."""
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Add a warning message (does not affect success status)."""
        self.warnings.append(warning)

    @property
    def partial_success(self) -> bool:
        """True if some pairs succeeded and some failed."""
        return self.succeeded > 0 and self.failed > 0

    @property
    def success_rate(self) -> float:
        """Fraction of attempted pairs that succeeded (1.0 if none)."""
        if not self.outcomes:
            return 1.0
        return self.succeeded / len(self.outcomes)

    def summary(self) -> str:
        """
        Generate a human-readable summary of the sync result.

        Returns:
            Multi-line summary string.
        """
        lines = []

        if self.dry_run:
            lines.append("DRY RUN - No changes made")
        if self.cancelled:
            lines.append("Cancelled before all gists were processed")

        lines.append(f"Sync complete: {self.succeeded} successful, {self.failed} errors")
        lines.append(f"  Gists: {self.gists_listed}")
        lines.append(
            f"  Created: {self.created}, Updated: {self.updated}, "
            f"Skipped: {self.skipped}, Deleted: {self.deleted}"
        )

        if self.failed_operations:
            lines.append("")
            lines.append("Failed operations:")
            for failed in self.failed_operations[:10]:
                lines.append(f"  • {failed}")
            if len(self.failed_operations) > 10:
                lines.append(f"  ... and {len(self.failed_operations) - 10} more")

        if self.warnings:
            lines.append("")
            lines.append("Warnings:")
            for warning in self.warnings[:5]:
                lines.append(f"  • {warning}")
            if len(self.warnings) > 5:
                lines.append(f"  ... and {len(self.warnings) - 5} more")

        return "\n".join(lines)


class SyncOrchestrator:
    """
    Orchestrates mirroring the source account's gists to every target.

    Phases:
    1. pre_sync hook (best effort)
    2. list and filter source gists (failure is fatal)
    3. for each gist, for each target: find, resolve, create or update
    4. prune orphans on targets that ask for it
    5. post_sync hook on success, on_error hook otherwise

    Pairs run sequentially in listing order, then configuration order.
    Cancellation is checked between pairs, never during a call.
    """

    def __init__(
        self,
        lister: SourceLister,
        targets: list[TargetConfig],
        adapter_factory: Callable[[TargetConfig], SnippetTargetPort],
        hooks: HooksConfig | None = None,
        hook_runner: HookRunnerPort | None = None,
        dry_run: bool = False,
        cancel_event: threading.Event | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            lister: Source lister (owns the gist source and filters)
            targets: Targets in configuration order; disabled ones are ignored
            adapter_factory: Builds the adapter for a target
            hooks: Lifecycle hook commands
            hook_runner: Executes hook commands
            dry_run: If True, no create, update or delete call is made
            cancel_event: Set to stop the run between pairs
        """
        self.lister = lister
        self.source = lister.source
        self.targets = [t for t in targets if t.enabled]
        self.adapter_factory = adapter_factory
        self.hooks = hooks or HooksConfig()
        self.hook_runner = hook_runner
        self.dry_run = dry_run
        self.cancel_event = cancel_event or threading.Event()
        self.logger = logging.getLogger("SyncOrchestrator")

        self.phase = SyncPhase.IDLE
        self._adapters: list[tuple[TargetConfig, SnippetTargetPort]] = []

    # -------------------------------------------------------------------------
    # Main Entry Points
    # -------------------------------------------------------------------------

    def cancel(self) -> None:
        """Request the run to stop before the next pair."""
        self.cancel_event.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def sync(
        self,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> SyncResult:
        """
        Run a full sync.

        Args:
            progress_callback: Optional callback (message, current, total)

        Returns:
            SyncResult with one outcome per attempted pair

        Raises:
            SourceListingError: If the source could not be listed.
        """
        result = SyncResult(dry_run=self.dry_run)
        self._adapters = [(t, self.adapter_factory(t)) for t in self.targets]

        self._set_phase(SyncPhase.PRE_HOOK)
        self._run_hook("pre_sync", self.hooks.pre_sync)

        self._set_phase(SyncPhase.LISTING)
        try:
            items = self.lister.list()
        except SourceListingError as e:
            self.logger.error(f"Failed to list gists: {e}")
            result.add_error(str(e))
            self._set_phase(SyncPhase.ERROR_HOOK)
            self._run_hook("on_error", self.hooks.on_error)
            self._set_phase(SyncPhase.DONE)
            raise

        result.gists_listed = len(items)
        if not items:
            # never prune against an empty listing
            self.logger.info("No gists to sync")
            self._set_phase(SyncPhase.POST_HOOK)
            self._run_hook("post_sync", self.hooks.post_sync)
            self._set_phase(SyncPhase.DONE)
            return result

        self._set_phase(SyncPhase.DISPATCHING)
        self._dispatch(items, result, progress_callback)

        if result.cancelled:
            self.logger.warning("Sync cancelled, skipping orphan pruning")
        else:
            self._set_phase(SyncPhase.PRUNING)
            self._prune(items, result)

        self.logger.info(f"Sync complete: {result.succeeded} successful, {result.failed} errors")

        if result.success:
            self._set_phase(SyncPhase.POST_HOOK)
            self._run_hook("post_sync", self.hooks.post_sync)
        else:
            self._set_phase(SyncPhase.ERROR_HOOK)
            self._run_hook("on_error", self.hooks.on_error)

        self._set_phase(SyncPhase.DONE)
        return result

    def list_gists(self) -> list[SourceItem]:
        """List the gists a sync would process, without touching any target."""
        return self.lister.list()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _dispatch(
        self,
        items: list[SourceItem],
        result: SyncResult,
        progress_callback: Callable[[str, int, int], None] | None,
    ) -> None:
        total = len(items)
        for index, listed in enumerate(items, start=1):
            if self.is_cancelled:
                result.cancelled = True
                return

            identifier = derive_identifier(listed)
            self._report_progress(progress_callback, identifier, index, total)
            self.logger.info(f"Processing gist {listed.id}: {identifier}")

            try:
                item = listed if listed.has_content else self.source.get_gist(listed.id)
            except GistSyncError as e:
                self.logger.error(f"Failed to fetch gist {listed.id}: {e}")
                for target, _ in self._adapters:
                    result.add_outcome(
                        self._failed(listed, target, identifier, str(e)), operation="fetch"
                    )
                continue

            for target, adapter in self._adapters:
                if self.is_cancelled:
                    result.cancelled = True
                    return
                outcome, operation = self.sync_pair(item, target, adapter)
                result.add_outcome(outcome, operation=operation)

    def sync_pair(
        self,
        item: SourceItem,
        target: TargetConfig,
        adapter: SnippetTargetPort,
    ) -> tuple[SyncOutcome, str]:
        """
        Sync one gist to one target.

        Never raises: any failure becomes a failed outcome.

        Returns:
            The outcome and the name of the last operation attempted.
        """
        snippet = self.normalize(item, target)
        identifier = snippet.identifier
        context = {
            "target": target.name,
            "provider": target.provider.value,
            "identifier": identifier,
        }
        operation = "find"

        try:
            existing = adapter.find(identifier)
            action = resolve_conflict(existing, target.on_conflict)

            if action is SyncAction.SKIP:
                self.logger.info(
                    f"[{target.name}] '{identifier}' already exists, skipping", extra=context
                )
                return self._outcome(item, target, identifier, OutcomeResult.SKIPPED), operation

            operation = action.value
            if self.dry_run:
                verb = "create" if action is SyncAction.CREATE else "update"
                self.logger.info(
                    f"[DRY-RUN] Would {verb} '{identifier}' on {target.name}", extra=context
                )
                kind = OutcomeResult.CREATED if verb == "create" else OutcomeResult.UPDATED
                return self._outcome(item, target, identifier, kind), operation

            if action is SyncAction.CREATE:
                op = adapter.create(snippet)
                kind = OutcomeResult.CREATED
            else:
                op = adapter.update(existing, snippet)
                kind = OutcomeResult.UPDATED

        except GistSyncError as e:
            self.logger.error(
                f"[{target.name}] Failed to {operation} '{identifier}': {e}", extra=context
            )
            return self._failed(item, target, identifier, str(e)), operation
        except Exception as e:
            self.logger.exception(
                f"[{target.name}] Unexpected error during {operation} of '{identifier}'",
                extra=context,
            )
            return self._failed(item, target, identifier, f"{type(e).__name__}: {e}"), operation

        for warning in op.warnings:
            self.logger.warning(f"[{target.name}] {warning}", extra=context)
        self.logger.info(f"[{target.name}] {kind.value.capitalize()} '{identifier}'", extra=context)

        outcome = self._outcome(item, target, identifier, kind, warnings=op.warnings)
        if op.ref is not None:
            outcome.url = op.ref.url
        return outcome, operation

    @staticmethod
    def normalize(item: SourceItem, target: TargetConfig) -> NormalizedSnippet:
        """Shape a gist for one target."""
        return NormalizedSnippet(
            identifier=derive_identifier(item),
            description=format_description(
                item.description,
                prefix=target.description_prefix,
                suffix=target.description_suffix,
                preserve=target.preserve_description,
            ),
            visibility=map_visibility(item.is_public, target.visibility_mode),
            files=item.files,
        )

    # -------------------------------------------------------------------------
    # Orphan Pruning
    # -------------------------------------------------------------------------

    def _prune(self, items: list[SourceItem], result: SyncResult) -> None:
        """
        Delete target objects that no longer have a source gist.

        Only runs for targets with delete_orphans, when the listing was
        unfiltered and the target had no failure this run.
        """
        pruning = [(t, a) for t, a in self._adapters if t.delete_orphans]
        if not pruning:
            return

        if self.lister.filters.is_active:
            message = "Orphan pruning skipped: source filters are active"
            self.logger.warning(message)
            result.add_warning(message)
            return

        wanted = {derive_identifier(item) for item in items}
        if not wanted:
            self.logger.warning("Orphan pruning skipped: no source identifiers")
            return
        failed_targets = {f.target_name for f in result.failed_operations}

        for target, adapter in pruning:
            if self.is_cancelled:
                result.cancelled = True
                return
            if target.name in failed_targets:
                message = f"[{target.name}] Orphan pruning skipped: target had failures"
                self.logger.warning(message)
                result.add_warning(message)
                continue
            self._prune_target(target, adapter, wanted, result)

    def _prune_target(
        self,
        target: TargetConfig,
        adapter: SnippetTargetPort,
        wanted: set[str],
        result: SyncResult,
    ) -> None:
        try:
            existing = adapter.list_existing()
        except NotApplicable as e:
            message = f"[{target.name}] Orphan pruning skipped: {e}"
            self.logger.warning(message)
            result.add_warning(message)
            return
        except GistSyncError as e:
            self.logger.error(f"[{target.name}] Failed to list existing snippets: {e}")
            result.add_error(f"[list] {target.name}: {e}")
            return

        for ref in existing:
            if ref.identifier in wanted:
                continue
            if self.is_cancelled:
                result.cancelled = True
                return
            result.add_outcome(*self._delete_orphan(target, adapter, ref))

    def _delete_orphan(
        self, target: TargetConfig, adapter: SnippetTargetPort, ref: ExistingRef
    ) -> tuple[SyncOutcome, str]:
        outcome = SyncOutcome(
            gist_id="",
            target_name=target.name,
            provider=target.provider.value,
            identifier=ref.identifier,
            result=OutcomeResult.DELETED,
            dry_run=self.dry_run,
            url=ref.url,
        )

        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would delete orphan '{ref.identifier}' on {target.name}")
            return outcome, "delete"

        try:
            adapter.delete(ref)
        except NotApplicable as e:
            self.logger.info(f"[{target.name}] Not deleting '{ref.identifier}': {e}")
            outcome.result = OutcomeResult.SKIPPED
            outcome.warnings.append(str(e))
            return outcome, "delete"
        except GistSyncError as e:
            self.logger.error(f"[{target.name}] Failed to delete orphan '{ref.identifier}': {e}")
            outcome.result = OutcomeResult.FAILED
            outcome.error = str(e)
            return outcome, "delete"

        self.logger.info(f"[{target.name}] Deleted orphan '{ref.identifier}'")
        return outcome, "delete"

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _set_phase(self, phase: SyncPhase) -> None:
        self.logger.debug(f"Phase: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _run_hook(self, name: str, command: str) -> None:
        if not command or self.hook_runner is None:
            return
        if not self.hook_runner.run(name, command):
            self.logger.warning(f"{name} hook failed, continuing")

    def _outcome(
        self,
        item: SourceItem,
        target: TargetConfig,
        identifier: str,
        kind: OutcomeResult,
        warnings: list[str] | None = None,
    ) -> SyncOutcome:
        return SyncOutcome(
            gist_id=item.id,
            target_name=target.name,
            provider=target.provider.value,
            identifier=identifier,
            result=kind,
            warnings=list(warnings or []),
            dry_run=self.dry_run,
        )

    def _failed(
        self, item: SourceItem, target: TargetConfig, identifier: str, error: str
    ) -> SyncOutcome:
        outcome = self._outcome(item, target, identifier, OutcomeResult.FAILED)
        outcome.error = error
        return outcome

    def _report_progress(
        self,
        callback: Callable[[str, int, int], None] | None,
        message: str,
        current: int,
        total: int,
    ) -> None:
        """Report progress if callback is provided."""
        if callback:
            callback(message, current, total)
