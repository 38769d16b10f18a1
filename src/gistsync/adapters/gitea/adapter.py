"""
Gitea Adapter - Implements SnippetTargetPort for Gitea, Codeberg and Forgejo.

These platforms have no snippet object, so each gist becomes a small
repository named ``gist-<identifier>`` whose files are written through the
contents API, one call per file.

Key mappings:
- identifier -> repository name (gist- prefix)
- description -> repository description
- visibility -> private flag (internal counts as private)
- files -> repository files at the root
"""

import base64
import logging
from typing import Any

from ...core.domain.entities import (
    ExistingRef,
    NormalizedSnippet,
    OperationResult,
    SnippetFile,
)
from ...core.exceptions import NotFoundError, ProviderError
from ...core.ports.config_provider import TargetConfig
from ...core.ports.snippet_target import SnippetTargetPort
from .client import DISPLAY_NAMES, GiteaApiClient


REPO_PREFIX = "gist-"


def repo_name(identifier: str) -> str:
    return f"{REPO_PREFIX}{identifier}"


def _encode(content: str | None) -> str:
    return base64.b64encode((content or "").encode("utf-8")).decode("ascii")


class GiteaAdapter(SnippetTargetPort):
    """
    Gitea-family implementation of the SnippetTargetPort.

    A failed file write does not fail the whole operation: the repository
    exists, so the failure is reported as a warning.
    """

    def __init__(
        self,
        config: TargetConfig,
        dry_run: bool = True,
        timeout: float = GiteaApiClient.DEFAULT_TIMEOUT,
        max_retries: int = GiteaApiClient.DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
        client: GiteaApiClient | None = None,
    ):
        self.config = config
        self.owner = config.username
        self.logger = logging.getLogger("GiteaAdapter")
        self._client = client or GiteaApiClient(
            token=config.token,
            provider=config.provider,
            base_url=config.base_url,
            dry_run=dry_run,
            timeout=timeout,
            max_retries=max_retries,
            min_interval=min_interval,
        )

    @property
    def name(self) -> str:
        return DISPLAY_NAMES.get(self.config.provider, "Gitea")

    # -------------------------------------------------------------------------
    # SnippetTargetPort Implementation - Read Operations
    # -------------------------------------------------------------------------

    def find(self, identifier: str) -> ExistingRef | None:
        try:
            data = self._client.get_repo(self.owner, repo_name(identifier))
        except NotFoundError:
            return None
        return self._to_ref(data, identifier)

    def list_existing(self) -> list[ExistingRef]:
        refs = []
        for repo in self._client.list_user_repos(self.owner):
            name = str(repo.get("name", ""))
            if name.startswith(REPO_PREFIX):
                refs.append(self._to_ref(repo, name[len(REPO_PREFIX) :]))
        return refs

    # -------------------------------------------------------------------------
    # SnippetTargetPort Implementation - Write Operations
    # -------------------------------------------------------------------------

    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        name = repo_name(snippet.identifier)
        data = self._client.create_repo(
            name=name,
            description=snippet.description,
            private=snippet.visibility.is_private,
        )
        self.logger.info(f"Created {self.name} repository {name}")
        warnings = self._write_files(name, snippet.files)
        return OperationResult(ref=self._to_ref(data, snippet.identifier), warnings=warnings)

    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        name = repo_name(snippet.identifier)
        data = self._client.edit_repo(
            self.owner,
            name,
            description=snippet.description,
            private=snippet.visibility.is_private,
        )
        warnings = self._write_files(name, snippet.files)
        self.logger.info(f"Updated {self.name} repository {name}")
        return OperationResult(
            ref=self._to_ref(data, snippet.identifier) if data else ref, warnings=warnings
        )

    def delete(self, ref: ExistingRef) -> OperationResult:
        self._client.delete_repo(self.owner, repo_name(ref.identifier))
        self.logger.info(f"Deleted {self.name} repository {repo_name(ref.identifier)}")
        return OperationResult(ref=ref)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _current_sha(self, repo: str, path: str) -> str | None:
        try:
            return self._client.get_file_sha(self.owner, repo, path)
        except NotFoundError:
            return None

    def _write_files(self, repo: str, files: tuple[SnippetFile, ...]) -> list[str]:
        """
        Create or overwrite each file, resolving the current sha first.

        Returns:
            One warning per file that could not be written.
        """
        warnings = []
        for f in files:
            try:
                sha = self._current_sha(repo, f.filename)
                if sha:
                    self._client.update_file(
                        self.owner,
                        repo,
                        f.filename,
                        _encode(f.content),
                        sha,
                        message=f"Update {f.filename}",
                    )
                else:
                    self._client.create_file(
                        self.owner,
                        repo,
                        f.filename,
                        _encode(f.content),
                        message=f"Add {f.filename}",
                    )
            except ProviderError as e:
                message = f"Failed to write {f.filename} to {repo}: {e}"
                self.logger.warning(message)
                warnings.append(message)
        return warnings

    def _to_ref(self, data: dict[str, Any], identifier: str) -> ExistingRef:
        return ExistingRef(
            identifier=identifier,
            remote_id=str(data.get("full_name") or f"{self.owner}/{repo_name(identifier)}"),
            url=data.get("html_url"),
            raw=data,
        )
