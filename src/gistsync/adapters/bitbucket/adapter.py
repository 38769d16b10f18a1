"""
Bitbucket Adapter - Implements SnippetTargetPort with Bitbucket Cloud snippets.

Key mappings:
- identifier -> snippet title
- visibility -> is_private (internal counts as private)
- files -> multipart ``file`` fields

Bitbucket snippets carry no description, so the formatted description is
not sent.
"""

import logging
from typing import Any

from ...core.domain.entities import ExistingRef, NormalizedSnippet, OperationResult
from ...core.exceptions import NotApplicable
from ...core.ports.config_provider import TargetConfig
from ...core.ports.snippet_target import SnippetTargetPort
from .client import BitbucketApiClient


class BitbucketAdapter(SnippetTargetPort):
    """Bitbucket implementation of the SnippetTargetPort."""

    def __init__(
        self,
        config: TargetConfig,
        dry_run: bool = True,
        timeout: float = BitbucketApiClient.DEFAULT_TIMEOUT,
        max_retries: int = BitbucketApiClient.DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
        client: BitbucketApiClient | None = None,
    ):
        self.config = config
        self.workspace = config.workspace or config.username
        self.logger = logging.getLogger("BitbucketAdapter")
        self._client = client or BitbucketApiClient(
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
        return "Bitbucket"

    def _load_refs(self) -> dict[str, ExistingRef]:
        if self._refs is None:
            refs: dict[str, ExistingRef] = {}
            for snippet in self._client.list_snippets(self.workspace):
                ref = self._to_ref(snippet)
                refs.setdefault(ref.identifier, ref)
            self._refs = refs
        return self._refs

    def find(self, identifier: str) -> ExistingRef | None:
        return self._load_refs().get(identifier)

    def list_existing(self) -> list[ExistingRef]:
        # titles are bare identifiers and there is no description to mark
        raise NotApplicable(
            "Bitbucket snippets carry no gist-sync marker", operation="list_existing"
        )

    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        data = self._client.create_snippet(
            self.workspace,
            title=snippet.identifier,
            is_private=snippet.visibility.is_private,
            files=[(f.filename, f.content or "") for f in snippet.files],
        )
        ref = self._to_ref(data, identifier=snippet.identifier)
        if self._refs is not None:
            self._refs[ref.identifier] = ref
        self.logger.info(f"Created Bitbucket snippet {snippet.identifier}")
        return OperationResult(ref=ref)

    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        data = self._client.update_snippet(
            self.workspace,
            ref.remote_id,
            title=snippet.identifier,
            is_private=snippet.visibility.is_private,
            files=[(f.filename, f.content or "") for f in snippet.files],
        )
        self.logger.info(f"Updated Bitbucket snippet {snippet.identifier}")
        updated = self._to_ref(data, identifier=snippet.identifier) if data else ref
        return OperationResult(ref=updated)

    def delete(self, ref: ExistingRef) -> OperationResult:
        self._client.delete_snippet(self.workspace, ref.remote_id)
        if self._refs is not None:
            self._refs.pop(ref.identifier, None)
        self.logger.info(f"Deleted Bitbucket snippet {ref.identifier}")
        return OperationResult(ref=ref)

    @staticmethod
    def _to_ref(data: dict[str, Any], identifier: str | None = None) -> ExistingRef:
        links = data.get("links") or {}
        html = links.get("html") or {}
        return ExistingRef(
            identifier=identifier or str(data.get("title", "")),
            remote_id=str(data.get("id", "")),
            url=html.get("href"),
            raw=data,
        )
