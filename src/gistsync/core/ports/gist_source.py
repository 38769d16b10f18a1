"""
Gist Source Port - Abstract interface for the platform gists are read from.

Implementations:
- GitHubGistSource: GitHub and GitHub Enterprise gists
"""

from abc import ABC, abstractmethod

from ..domain.entities import SourceItem


class GistSourcePort(ABC):
    """Read-only access to the gists owned by one account."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the platform name."""
        ...

    @abstractmethod
    def list_page(self, page: int, per_page: int) -> list[SourceItem]:
        """
        Fetch one page of the account's gists.

        Args:
            page: 1-based page number.
            per_page: Page size requested from the platform.

        Returns:
            The items on that page; fewer than per_page means it is the last.
        """
        ...

    @abstractmethod
    def get_gist(self, gist_id: str) -> SourceItem:
        """
        Fetch one gist with all file bodies resident.

        Raises:
            TransientError: If the gist could not be fetched.
        """
        ...
