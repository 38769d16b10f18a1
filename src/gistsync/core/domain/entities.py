"""
Domain entities - the provider-agnostic snippet model.

SourceItem is what the source platform yields; NormalizedSnippet is what a
target adapter receives. Adapters translate between these and their native
payloads so the engine never touches platform-specific shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import OutcomeResult, Visibility


@dataclass(frozen=True)
class SnippetFile:
    """
    One file of a gist or snippet.

    content is None when the file came from a listing call that does not
    carry file bodies.
    """

    filename: str
    content: str | None = None
    size: int = 0
    language: str | None = None
    raw_url: str | None = None
    truncated: bool = False

    @property
    def stem(self) -> str:
        """Filename without its extension (text after the last dot)."""
        if "." not in self.filename:
            return self.filename
        return self.filename.rsplit(".", 1)[0]


@dataclass(frozen=True)
class SourceItem:
    """A gist as listed by the source platform."""

    id: str
    description: str | None = None
    files: tuple[SnippetFile, ...] = ()
    is_public: bool = True
    created_at: str = ""
    updated_at: str = ""
    html_url: str | None = None

    @property
    def has_content(self) -> bool:
        """True once every file body is resident."""
        return all(f.content is not None and not f.truncated for f in self.files)

    @property
    def filenames(self) -> list[str]:
        return [f.filename for f in self.files]

    def __str__(self) -> str:
        return f"{self.id} ({self.description or 'no description'})"


@dataclass(frozen=True)
class NormalizedSnippet:
    """The snippet a target adapter writes, already shaped for the target."""

    identifier: str
    description: str
    visibility: Visibility
    files: tuple[SnippetFile, ...] = ()


@dataclass
class ExistingRef:
    """Handle on an object that already exists at a target."""

    identifier: str
    remote_id: str
    url: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass
class OperationResult:
    """What an adapter write returns."""

    ref: ExistingRef | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class SyncOutcome:
    """Result of syncing one gist to one target."""

    gist_id: str
    target_name: str
    provider: str
    identifier: str
    result: OutcomeResult
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False
    url: str | None = None

    @property
    def success(self) -> bool:
        return self.result.is_success

    def __str__(self) -> str:
        text = f"[{self.target_name}] {self.identifier}: {self.result.value}"
        if self.error:
            text += f" ({self.error})"
        return text
