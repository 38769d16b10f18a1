"""
GitLab API Client - Low-level HTTP client for the GitLab Snippets REST API.

GitLab REST API documentation:
https://docs.gitlab.com/ee/api/snippets.html
"""

from typing import Any

from ..http import BaseApiClient


GITLAB_API_URL = "https://gitlab.com/api/v4"


def resolve_api_url(base_url: str | None) -> str:
    """Self-managed instances serve the API under <base_url>/api/v4."""
    if base_url:
        return f"{base_url.rstrip('/')}/api/v4"
    return GITLAB_API_URL


class GitLabApiClient(BaseApiClient):
    """
    GitLab personal snippets client.

    Authenticates with the ``PRIVATE-TOKEN`` header and pages through
    listings with page/per_page parameters.
    """

    PROVIDER = "GitLab"
    PER_PAGE = 100

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        dry_run: bool = True,
        timeout: float = BaseApiClient.DEFAULT_TIMEOUT,
        max_retries: int = BaseApiClient.DEFAULT_MAX_RETRIES,
        min_interval: float | None = None,
    ):
        super().__init__(
            api_url=resolve_api_url(base_url),
            headers={"PRIVATE-TOKEN": token},
            dry_run=dry_run,
            timeout=timeout,
            max_retries=max_retries,
            min_interval=min_interval,
        )

    def list_snippets(self) -> list[dict[str, Any]]:
        """List every snippet of the authenticated user."""
        snippets: list[dict[str, Any]] = []
        page = 1
        while True:
            batch = self.get("snippets", params={"page": page, "per_page": self.PER_PAGE})
            if not isinstance(batch, list) or not batch:
                break
            snippets.extend(s for s in batch if isinstance(s, dict))
            if len(batch) < self.PER_PAGE:
                break
            page += 1
        return snippets

    def create_snippet(self, payload: dict[str, Any]) -> dict[str, Any]:
        result = self.post("snippets", json=payload)
        return result if isinstance(result, dict) else {}

    def update_snippet(self, snippet_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        result = self.put(f"snippets/{snippet_id}", json=payload)
        return result if isinstance(result, dict) else {}

    def delete_snippet(self, snippet_id: str) -> None:
        self.delete(f"snippets/{snippet_id}")
