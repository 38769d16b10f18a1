"""
Bitbucket API Client - Low-level HTTP client for Bitbucket Cloud snippets.

Bitbucket REST API documentation:
https://developer.atlassian.com/cloud/bitbucket/rest/api-group-snippets/
"""

from typing import Any

from ..http import BaseApiClient


BITBUCKET_API_URL = "https://api.bitbucket.org/2.0"

# Remove the session's JSON content type so requests writes the multipart boundary.
MULTIPART_HEADERS: dict[str, Any] = {"Content-Type": None}


class BitbucketApiClient(BaseApiClient):
    """
    Bitbucket Cloud snippets client.

    Authenticates with a bearer token. Listings are paginated with opaque
    ``next`` links that are followed as absolute URLs.
    """

    PROVIDER = "Bitbucket"

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
            api_url=base_url or BITBUCKET_API_URL,
            headers={"Authorization": f"Bearer {token}"},
            dry_run=dry_run,
            timeout=timeout,
            max_retries=max_retries,
            min_interval=min_interval,
        )

    def list_snippets(self, workspace: str) -> list[dict[str, Any]]:
        """List every snippet in a workspace, following next links."""
        snippets: list[dict[str, Any]] = []
        endpoint: str | None = f"snippets/{workspace}"
        while endpoint:
            page = self.get(endpoint)
            if not isinstance(page, dict):
                break
            snippets.extend(s for s in page.get("values", []) if isinstance(s, dict))
            endpoint = page.get("next")
        return snippets

    @staticmethod
    def _multipart(files: list[tuple[str, str]]) -> list[tuple[str, tuple[str, bytes]]]:
        return [("file", (name, content.encode("utf-8"))) for name, content in files]

    def create_snippet(
        self, workspace: str, title: str, is_private: bool, files: list[tuple[str, str]]
    ) -> dict[str, Any]:
        result = self.post(
            f"snippets/{workspace}",
            data={"title": title, "is_private": "true" if is_private else "false"},
            files=self._multipart(files),
            headers=MULTIPART_HEADERS,
        )
        return result if isinstance(result, dict) else {}

    def update_snippet(
        self,
        workspace: str,
        snippet_id: str,
        title: str,
        is_private: bool,
        files: list[tuple[str, str]],
    ) -> dict[str, Any]:
        result = self.put(
            f"snippets/{workspace}/{snippet_id}",
            data={"title": title, "is_private": "true" if is_private else "false"},
            files=self._multipart(files),
            headers=MULTIPART_HEADERS,
        )
        return result if isinstance(result, dict) else {}

    def delete_snippet(self, workspace: str, snippet_id: str) -> None:
        self.delete(f"snippets/{workspace}/{snippet_id}")
