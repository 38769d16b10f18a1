"""
Snippet Target Port - Abstract interface for platforms gists are mirrored to.

Implementations:
- GitLabAdapter: native GitLab snippets
- GiteaAdapter: Gitea, Codeberg and Forgejo (one repository per gist)
- BitbucketAdapter: Bitbucket Cloud workspace snippets
- KeybaseAdapter: Keybase encrypted git repositories
"""

from abc import ABC, abstractmethod

from ..domain.entities import ExistingRef, NormalizedSnippet, OperationResult
from ..exceptions import NotApplicable


class SnippetTargetPort(ABC):
    """
    Abstract interface for snippet targets.

    Every adapter owns its base URL, auth header, pagination scheme and
    payload translation. The sync engine only sees this interface.
    """

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the platform name (e.g., 'GitLab', 'Codeberg')."""
        ...

    # -------------------------------------------------------------------------
    # Read Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def find(self, identifier: str) -> ExistingRef | None:
        """
        Look up the counterpart of a gist by its derived identifier.

        Args:
            identifier: The stable cross-platform join key.

        Returns:
            A handle on the existing object, or None if there is none.

        Raises:
            TransientError: If existence could not be determined.
        """
        ...

    @abstractmethod
    def list_existing(self) -> list[ExistingRef]:
        """
        List every object this adapter manages at the target.

        Objects the adapter cannot tell apart from ones created by hand
        must not be returned.

        Returns:
            Handles on the managed objects.

        Raises:
            NotApplicable: If the platform offers no way to recognise them.
        """
        ...

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    @abstractmethod
    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        """
        Create the counterpart of a gist.

        Per-file failures on platforms that upload files one call at a time
        are returned as warnings; the container still counts as created.

        Raises:
            TransientError: If the container could not be created.
        """
        ...

    @abstractmethod
    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        """
        Overwrite description, visibility and file contents of an existing object.

        Raises:
            TransientError: If a required call fails.
        """
        ...

    def delete(self, ref: ExistingRef) -> OperationResult:
        """
        Delete an object at the target.

        Optional capability; the default declines.

        Raises:
            NotApplicable: If the adapter does not support deletion.
        """
        raise NotApplicable(f"{self.name} does not support deleting snippets", operation="delete")
