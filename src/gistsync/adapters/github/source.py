"""
GitHub Gist Source - Implements GistSourcePort for GitHub and GitHub Enterprise.
"""

import logging
from dataclasses import replace
from typing import Any

from ...core.domain.entities import SnippetFile, SourceItem
from ...core.ports.config_provider import SourceConfig
from ...core.ports.gist_source import GistSourcePort
from .client import GitHubApiClient


def parse_gist(data: dict[str, Any]) -> SourceItem:
    """
    Convert a GitHub gist payload to a SourceItem.

    GitHub returns files as an object keyed by filename; its insertion order
    is kept as the item's file order.
    """
    files = []
    for key, info in (data.get("files") or {}).items():
        info = info or {}
        files.append(
            SnippetFile(
                filename=info.get("filename") or key,
                content=info.get("content"),
                size=info.get("size") or 0,
                language=info.get("language"),
                raw_url=info.get("raw_url"),
                truncated=bool(info.get("truncated", False)),
            )
        )

    return SourceItem(
        id=str(data.get("id", "")),
        description=data.get("description") or None,
        files=tuple(files),
        is_public=bool(data.get("public", False)),
        created_at=data.get("created_at") or "",
        updated_at=data.get("updated_at") or "",
        html_url=data.get("html_url"),
    )


class GitHubGistSource(GistSourcePort):
    """Lists and fetches the gists owned by the configured user."""

    def __init__(
        self,
        config: SourceConfig,
        timeout: float = GitHubApiClient.DEFAULT_TIMEOUT,
        max_retries: int = GitHubApiClient.DEFAULT_MAX_RETRIES,
        client: GitHubApiClient | None = None,
    ):
        self.config = config
        self.logger = logging.getLogger("GitHubGistSource")
        self._client = client or GitHubApiClient(
            token=config.token,
            base_url=config.base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

    @property
    def name(self) -> str:
        return "GitHub Enterprise" if self.config.base_url else "GitHub"

    def list_page(self, page: int, per_page: int) -> list[SourceItem]:
        raw = self._client.list_user_gists(self.config.username, page=page, per_page=per_page)
        return [parse_gist(g) for g in raw if isinstance(g, dict)]

    def get_gist(self, gist_id: str) -> SourceItem:
        item = parse_gist(self._client.get_gist(gist_id))
        if all(not f.truncated for f in item.files):
            return item

        files = []
        for f in item.files:
            if f.truncated and f.raw_url:
                self.logger.debug(f"Fetching truncated file {f.filename} of gist {gist_id}")
                content = self._client.get_raw(f.raw_url)
                f = replace(f, content=content, truncated=False)
            files.append(f)

        return replace(item, files=tuple(files))
