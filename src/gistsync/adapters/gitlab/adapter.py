"""
GitLab Adapter - Implements SnippetTargetPort with native GitLab snippets.

Key mappings:
- identifier -> snippet title
- description -> snippet description
- visibility -> public / internal / private
- files -> multi-file snippet (file_path + content)
"""

import logging
from typing import Any

from ...core.domain.entities import (
    ExistingRef,
    NormalizedSnippet,
    OperationResult,
    SnippetFile,
)
from ...core.exceptions import NotApplicable
from ...core.ports.config_provider import TargetConfig
from ...core.ports.snippet_target import SnippetTargetPort
from .client import GitLabApiClient


class GitLabAdapter(SnippetTargetPort):
    """
    GitLab implementation of the SnippetTargetPort.

    Snippets are matched by title. The snippet listing is fetched once and
    kept in sync with this adapter's own writes for the rest of the run.
    """

    def __init__(
        self,
        config: TargetConfig,
        dry_run: bool = True,
        timeout: float = GitLabApiClient.DEFAULT_TIMEOUT,
        max_retries: int = GitLabApiClient.DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
        client: GitLabApiClient | None = None,
    ):
        self.config = config
        self.logger = logging.getLogger("GitLabAdapter")
        self._client = client or GitLabApiClient(
            token=config.token,
            base_url=config.base_url,
            dry_run=dry_run,
            timeout=timeout,
            max_retries=max_retries,
            min_interval=min_interval,
        )
        self._refs: dict[str, ExistingRef] | None = None

    @property
    def name(self) -> str:
        return "GitLab"

    # -------------------------------------------------------------------------
    # SnippetTargetPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def _load_refs(self) -> dict[str, ExistingRef]:
        if self._refs is None:
            refs: dict[str, ExistingRef] = {}
            for snippet in self._client.list_snippets():
                ref = self._to_ref(snippet)
                refs.setdefault(ref.identifier, ref)
            self._refs = refs
        return self._refs

    def find(self, identifier: str) -> ExistingRef | None:
        return self._load_refs().get(identifier)

    def list_existing(self) -> list[ExistingRef]:
        """
        List the snippets this target's description marker identifies.

        Snippets are only ours when their description carries the configured
        description_prefix or description_suffix.

        Raises:
            NotApplicable: If the target has neither prefix nor suffix.
        """
        prefix = self.config.description_prefix
        suffix = self.config.description_suffix
        if not prefix and not suffix:
            raise NotApplicable(
                "GitLab snippets carry no gist-sync marker without "
                "description_prefix or description_suffix",
                operation="list_existing",
            )
        return [
            ref
            for ref in self._load_refs().values()
            if self._has_marker(ref, prefix, suffix)
        ]

    # -------------------------------------------------------------------------
    # SnippetTargetPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        payload = {
            "title": snippet.identifier,
            "description": snippet.description,
            "visibility": snippet.visibility.value,
            "files": [
                {"file_path": f.filename, "content": f.content or ""} for f in snippet.files
            ],
        }
        data = self._client.create_snippet(payload)
        ref = self._to_ref(data, identifier=snippet.identifier)
        self._remember(ref)
        self.logger.info(f"Created GitLab snippet {snippet.identifier}")
        return OperationResult(ref=ref)

    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        payload = {
            "title": snippet.identifier,
            "description": snippet.description,
            "visibility": snippet.visibility.value,
            "files": self._file_actions(ref, snippet.files),
        }
        data = self._client.update_snippet(ref.remote_id, payload)
        updated = self._to_ref(data, identifier=snippet.identifier) if data else ref
        self._remember(updated)
        self.logger.info(f"Updated GitLab snippet {snippet.identifier}")
        return OperationResult(ref=updated)

    def delete(self, ref: ExistingRef) -> OperationResult:
        self._client.delete_snippet(ref.remote_id)
        if self._refs is not None:
            self._refs.pop(ref.identifier, None)
        self.logger.info(f"Deleted GitLab snippet {ref.identifier}")
        return OperationResult(ref=ref)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _has_marker(ref: ExistingRef, prefix: str, suffix: str) -> bool:
        description = ref.raw.get("description") or ""
        if prefix and not description.startswith(prefix):
            return False
        return not suffix or description.endswith(suffix)

    @staticmethod
    def _existing_paths(ref: ExistingRef) -> set[str]:
        files = ref.raw.get("files")
        if isinstance(files, list):
            return {f["path"] for f in files if isinstance(f, dict) and f.get("path")}
        if ref.raw.get("file_name"):
            return {ref.raw["file_name"]}
        return set()

    def _file_actions(
        self, ref: ExistingRef, files: tuple[SnippetFile, ...]
    ) -> list[dict[str, Any]]:
        """
        Build the files payload of an update.

        Files missing from the gist are deleted from the snippet. When the
        existing file list is unknown every file is sent as an update.
        """
        existing = self._existing_paths(ref)
        actions = []
        for f in files:
            action = "create" if existing and f.filename not in existing else "update"
            actions.append({"action": action, "file_path": f.filename, "content": f.content or ""})
        wanted = {f.filename for f in files}
        for path in sorted(existing - wanted):
            actions.append({"action": "delete", "file_path": path})
        return actions

    def _to_ref(self, data: dict[str, Any], identifier: str | None = None) -> ExistingRef:
        return ExistingRef(
            identifier=identifier or str(data.get("title", "")),
            remote_id=str(data.get("id", "")),
            url=data.get("web_url"),
            raw=data,
        )

    def _remember(self, ref: ExistingRef) -> None:
        if self._refs is not None:
            self._refs[ref.identifier] = ref
