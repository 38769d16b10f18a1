"""
Keybase Adapter - Implements SnippetTargetPort with Keybase encrypted git repos.

Each gist becomes a repository ``gist-<identifier>``, personal or owned by
a team. Keybase repositories are always private and have no description,
so only the files are mirrored.
"""

import logging

from ...core.domain.entities import ExistingRef, NormalizedSnippet, OperationResult
from ...core.exceptions import AdapterError, AuthenticationError, NotApplicable, ProviderError
from ...core.ports.config_provider import TargetConfig
from ...core.ports.snippet_target import SnippetTargetPort
from .cli import KeybaseCli


REPO_PREFIX = "gist-"


class KeybaseAdapter(SnippetTargetPort):
    """Keybase implementation of the SnippetTargetPort."""

    def __init__(
        self,
        config: TargetConfig,
        dry_run: bool = True,
        cli: KeybaseCli | None = None,
    ):
        self.config = config
        self.team = config.team
        self.username = config.username
        self.logger = logging.getLogger("KeybaseAdapter")
        self._cli = cli or KeybaseCli(dry_run=dry_run)
        self._session_checked = False
        self._repos: set[str] | None = None

    @property
    def name(self) -> str:
        return "Keybase"

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def url_prefix(self) -> str:
        if self.team:
            return f"keybase://team/{self.team}/"
        return f"keybase://private/{self.username}/"

    def repo_url(self, identifier: str) -> str:
        return f"{self.url_prefix}{REPO_PREFIX}{identifier}"

    def _ensure_session(self) -> None:
        if self._session_checked:
            return
        if not self._cli.is_available():
            raise AuthenticationError(
                "Keybase CLI not available or not logged in", provider=self.name
            )
        self._session_checked = True

    def _load_repos(self) -> set[str]:
        self._ensure_session()
        if self._repos is None:
            prefix = self.url_prefix
            self._repos = {
                url[len(prefix) :]
                for url in self._cli.list_repo_urls(team=self.team)
                if url.startswith(prefix + REPO_PREFIX)
            }
        return self._repos

    def _to_ref(self, identifier: str) -> ExistingRef:
        url = self.repo_url(identifier)
        return ExistingRef(identifier=identifier, remote_id=f"{REPO_PREFIX}{identifier}", url=url)

    # -------------------------------------------------------------------------
    # SnippetTargetPort Implementation
    # -------------------------------------------------------------------------

    def find(self, identifier: str) -> ExistingRef | None:
        if f"{REPO_PREFIX}{identifier}" in self._load_repos():
            return self._to_ref(identifier)
        return None

    def list_existing(self) -> list[ExistingRef]:
        return [self._to_ref(name[len(REPO_PREFIX) :]) for name in sorted(self._load_repos())]

    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        self._ensure_session()
        name = f"{REPO_PREFIX}{snippet.identifier}"
        self._cli.create_repo(name, team=self.team)
        if self._repos is not None:
            self._repos.add(name)
        self.logger.info(f"Created Keybase repository {name}")

        try:
            self._cli.push_files(self.repo_url(snippet.identifier), snippet.files)
        except ProviderError as e:
            raise AdapterError(
                f"Repository {name} was created but pushing files failed",
                resource=name,
                provider=self.name,
                cause=e,
            ) from e
        return OperationResult(ref=self._to_ref(snippet.identifier))

    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        self._ensure_session()
        pushed = self._cli.push_files(self.repo_url(snippet.identifier), snippet.files)
        if pushed:
            self.logger.info(f"Updated Keybase repository {ref.remote_id}")
        else:
            self.logger.info(f"Keybase repository {ref.remote_id} already up to date")
        return OperationResult(ref=ref)

    def delete(self, ref: ExistingRef) -> OperationResult:
        raise NotApplicable(
            "Keybase repositories must be deleted interactively (keybase git delete)",
            operation="delete",
        )
