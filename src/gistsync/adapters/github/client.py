"""
GitHub API Client - Low-level HTTP client for the GitHub Gists REST API.

GitHub REST API documentation:
https://docs.github.com/en/rest/gists/gists
"""

from typing import Any

from ..http import BaseApiClient


GITHUB_API_URL = "https://api.github.com"


def resolve_api_url(base_url: str | None) -> str:
    """GitHub Enterprise serves its API under <base_url>/api/v3."""
    if base_url:
        return f"{base_url.rstrip('/')}/api/v3"
    return GITHUB_API_URL


class GitHubApiClient(BaseApiClient):
    """
    Read-only GitHub Gists client.

    Authenticates with a personal access token sent as
    ``Authorization: token <token>``.
    """

    PROVIDER = "GitHub"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        timeout: float = BaseApiClient.DEFAULT_TIMEOUT,
        max_retries: int = BaseApiClient.DEFAULT_MAX_RETRIES,
    ):
        super().__init__(
            api_url=resolve_api_url(base_url),
            headers={"Authorization": f"token {token}"},
            dry_run=False,
            timeout=timeout,
            max_retries=max_retries,
        )

    def list_user_gists(self, username: str, page: int = 1, per_page: int = 100) -> list[Any]:
        """List one page of a user's gists (file bodies not included)."""
        data = self.get(f"users/{username}/gists", params={"page": page, "per_page": per_page})
        return data if isinstance(data, list) else []

    def get_gist(self, gist_id: str) -> dict[str, Any]:
        """Fetch a single gist including file contents."""
        data = self.get(f"gists/{gist_id}")
        return data if isinstance(data, dict) else {}

    def get_raw(self, raw_url: str) -> str:
        """Fetch the full body of a file GitHub truncated in the gist payload."""
        return self.get_text(raw_url)
