"""
Gitea API Client - Low-level HTTP client for the Gitea REST API.

Codeberg and Forgejo run the same API, so one client serves all three.

Gitea REST API documentation:
https://docs.gitea.com/api/
"""

from typing import Any
from urllib.parse import quote

from ...core.domain.enums import TargetProvider
from ..http import BaseApiClient


DEFAULT_API_URLS = {
    TargetProvider.GITEA: "https://gitea.com/api/v1",
    TargetProvider.CODEBERG: "https://codeberg.org/api/v1",
    TargetProvider.FORGEJO: "https://forgejo.org/api/v1",
}

DISPLAY_NAMES = {
    TargetProvider.GITEA: "Gitea",
    TargetProvider.CODEBERG: "Codeberg",
    TargetProvider.FORGEJO: "Forgejo",
}


def resolve_api_url(provider: TargetProvider, base_url: str | None) -> str:
    """Self-hosted instances serve the API under <base_url>/api/v1."""
    if base_url:
        return f"{base_url.rstrip('/')}/api/v1"
    return DEFAULT_API_URLS.get(provider, DEFAULT_API_URLS[TargetProvider.GITEA])


class GiteaApiClient(BaseApiClient):
    """
    Gitea repository and contents API client.

    Authenticates with ``Authorization: token <token>``.
    """

    PROVIDER = "Gitea"
    PAGE_LIMIT = 50

    def __init__(
        self,
        token: str,
        provider: TargetProvider = TargetProvider.GITEA,
        base_url: str | None = None,
        dry_run: bool = True,
        timeout: float = BaseApiClient.DEFAULT_TIMEOUT,
        max_retries: int = BaseApiClient.DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
    ):
        self.PROVIDER = DISPLAY_NAMES.get(provider, "Gitea")
        super().__init__(
            api_url=resolve_api_url(provider, base_url),
            headers={"Authorization": f"token {token}"},
            dry_run=dry_run,
            timeout=timeout,
            max_retries=max_retries,
            min_interval=min_interval,
        )

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------

    def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        result = self.get(f"repos/{owner}/{repo}")
        return result if isinstance(result, dict) else {}

    def list_user_repos(self, username: str) -> list[dict[str, Any]]:
        """List every repository owned by a user."""
        repos: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self.get(
                f"users/{username}/repos", params={"page": page, "limit": self.PAGE_LIMIT}
            )
            if not isinstance(batch, list) or not batch:
                break
            repos.extend(r for r in batch if isinstance(r, dict))
            if len(batch) < self.PAGE_LIMIT:
                break
            page += 1
        return repos

    def create_repo(self, name: str, description: str, private: bool) -> dict[str, Any]:
        result = self.post(
            "user/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "auto_init": True,
            },
        )
        return result if isinstance(result, dict) else {}

    def edit_repo(self, owner: str, repo: str, description: str, private: bool) -> dict[str, Any]:
        result = self.patch(
            f"repos/{owner}/{repo}", json={"description": description, "private": private}
        )
        return result if isinstance(result, dict) else {}

    def delete_repo(self, owner: str, repo: str) -> None:
        self.delete(f"repos/{owner}/{repo}")

    # -------------------------------------------------------------------------
    # Contents
    # -------------------------------------------------------------------------

    @staticmethod
    def _contents_path(owner: str, repo: str, path: str) -> str:
        return f"repos/{owner}/{repo}/contents/{quote(path)}"

    def get_file_sha(self, owner: str, repo: str, path: str) -> str | None:
        """Current blob sha of a file (None if the response carries none)."""
        result = self.get(self._contents_path(owner, repo, path))
        if isinstance(result, dict):
            return result.get("sha")
        return None

    def create_file(
        self, owner: str, repo: str, path: str, content_b64: str, message: str
    ) -> dict[str, Any]:
        result = self.post(
            self._contents_path(owner, repo, path),
            json={"content": content_b64, "message": message},
        )
        return result if isinstance(result, dict) else {}

    def update_file(
        self, owner: str, repo: str, path: str, content_b64: str, sha: str, message: str
    ) -> dict[str, Any]:
        result = self.put(
            self._contents_path(owner, repo, path),
            json={"content": content_b64, "sha": sha, "message": message},
        )
        return result if isinstance(result, dict) else {}
