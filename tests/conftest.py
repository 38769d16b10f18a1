"""
Shared pytest fixtures for the gist-sync test suite.

Fixture Categories:
- Domain: SourceItem / SnippetFile factories
- Configuration: SourceConfig, TargetConfig, AppConfig
- Fakes: in-memory gist source and snippet target
- CLI: Console
"""

from __future__ import annotations

from textwrap import dedent
from typing import Callable

import pytest

from gistsync.core.domain.entities import (
    ExistingRef,
    NormalizedSnippet,
    OperationResult,
    SnippetFile,
    SourceItem,
)
from gistsync.core.domain.enums import TargetProvider
from gistsync.core.exceptions import NotApplicable, TransientError
from gistsync.core.ports.config_provider import SourceConfig, SourceFilters, TargetConfig
from gistsync.core.ports.gist_source import GistSourcePort
from gistsync.core.ports.hook_runner import HookRunnerPort
from gistsync.core.ports.snippet_target import SnippetTargetPort


# =============================================================================
# Fakes
# =============================================================================


class FakeGistSource(GistSourcePort):
    """In-memory gist source; pages are sliced from a fixed list."""

    def __init__(self, items: list[SourceItem] | None = None, details: dict | None = None):
        self.items = list(items or [])
        self.details = dict(details or {})
        self.page_calls: list[tuple[int, int]] = []
        self.detail_calls: list[str] = []
        self.fail_on_page: int | None = None
        self.fail_detail_for: set[str] = set()

    @property
    def name(self) -> str:
        return "FakeSource"

    def list_page(self, page: int, per_page: int) -> list[SourceItem]:
        self.page_calls.append((page, per_page))
        if self.fail_on_page == page:
            raise TransientError("listing failed", provider="FakeSource")
        start = (page - 1) * per_page
        return self.items[start : start + per_page]

    def get_gist(self, gist_id: str) -> SourceItem:
        self.detail_calls.append(gist_id)
        if gist_id in self.fail_detail_for:
            raise TransientError(f"gist {gist_id} unavailable", provider="FakeSource")
        if gist_id in self.details:
            return self.details[gist_id]
        return next(item for item in self.items if item.id == gist_id)


class FakeSnippetTarget(SnippetTargetPort):
    """In-memory target keyed by identifier."""

    def __init__(
        self, label: str = "Fake", supports_delete: bool = True, supports_listing: bool = True
    ):
        self.label = label
        self.supports_delete = supports_delete
        self.supports_listing = supports_listing
        self.snippets: dict[str, NormalizedSnippet] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[str, Exception] = {}

    @property
    def name(self) -> str:
        return self.label

    def _maybe_fail(self, operation: str, identifier: str) -> None:
        error = self.fail_on.get(operation) or self.fail_on.get(f"{operation}:{identifier}")
        if error is not None:
            raise error

    def find(self, identifier: str) -> ExistingRef | None:
        self.calls.append(("find", identifier))
        self._maybe_fail("find", identifier)
        if identifier in self.snippets:
            return ExistingRef(identifier=identifier, remote_id=f"id-{identifier}")
        return None

    def list_existing(self) -> list[ExistingRef]:
        self.calls.append(("list_existing", ""))
        if not self.supports_listing:
            raise NotApplicable(f"{self.label} cannot list", operation="list_existing")
        return [ExistingRef(identifier=i, remote_id=f"id-{i}") for i in self.snippets]

    def create(self, snippet: NormalizedSnippet) -> OperationResult:
        self.calls.append(("create", snippet.identifier))
        self._maybe_fail("create", snippet.identifier)
        self.snippets[snippet.identifier] = snippet
        return OperationResult(
            ref=ExistingRef(
                identifier=snippet.identifier,
                remote_id=f"id-{snippet.identifier}",
                url=f"https://example.test/{snippet.identifier}",
            )
        )

    def update(self, ref: ExistingRef, snippet: NormalizedSnippet) -> OperationResult:
        self.calls.append(("update", snippet.identifier))
        self._maybe_fail("update", snippet.identifier)
        self.snippets[snippet.identifier] = snippet
        return OperationResult(ref=ref)

    def delete(self, ref: ExistingRef) -> OperationResult:
        self.calls.append(("delete", ref.identifier))
        if not self.supports_delete:
            raise NotApplicable(f"{self.label} cannot delete", operation="delete")
        self.snippets.pop(ref.identifier, None)
        return OperationResult(ref=ref)

    def writes(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] in ("create", "update", "delete")]


class RecordingHookRunner(HookRunnerPort):
    """Hook runner that records invocations instead of running them."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls: list[tuple[str, str]] = []

    def run(self, name: str, command: str) -> bool:
        self.calls.append((name, command))
        return self.succeed


# =============================================================================
# Domain Factories
# =============================================================================


def make_item(
    gist_id: str = "abc123456789",
    description: str | None = "Useful script",
    files: dict[str, str | None] | None = None,
    is_public: bool = True,
    updated_at: str = "2024-01-15T10:00:00Z",
) -> SourceItem:
    """Build a SourceItem; files maps filename to content."""
    files = {"main.py": "print('hi')\n"} if files is None else files
    return SourceItem(
        id=gist_id,
        description=description,
        files=tuple(SnippetFile(filename=n, content=c) for n, c in files.items()),
        is_public=is_public,
        created_at="2024-01-01T00:00:00Z",
        updated_at=updated_at,
    )


@pytest.fixture
def item_factory() -> Callable[..., SourceItem]:
    return make_item


@pytest.fixture
def sample_items() -> list[SourceItem]:
    """Three gists covering the three identifier rules."""
    return [
        make_item("aaa111", "Terraform AWS Module!!", {"main.tf": "resource {}"}),
        make_item("bbb222", None, {"main.go": "package main", "util.go": "package main"}),
        make_item("abc123456789", "", {}, is_public=False),
    ]


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def source_config() -> SourceConfig:
    return SourceConfig(username="octocat", token="ghp_test", filters=SourceFilters())


@pytest.fixture
def gitlab_target() -> TargetConfig:
    return TargetConfig(name="gitlab", provider=TargetProvider.GITLAB, token="glpat-test")


@pytest.fixture
def codeberg_target() -> TargetConfig:
    return TargetConfig(
        name="codeberg",
        provider=TargetProvider.CODEBERG,
        token="cb-test",
        username="octocat",
    )


@pytest.fixture
def sample_config_toml() -> str:
    return dedent(
        """
        [general]
        log_level = "debug"
        rate_limit_interval = 0.5

        [source]
        username = "octocat"
        token = "ghp_file"

        [source.filters]
        visibility = "public"
        exclude_patterns = ["^wip"]

        [hooks]
        post_sync = "echo done"

        [[targets]]
        name = "gitlab-main"
        provider = "gitlab"
        token = "glpat-file"
        description_prefix = "[mirror] "

        [[targets]]
        name = "codeberg"
        provider = "codeberg"
        token = "cb-file"
        username = "octocat"
        on_conflict = "skip"
        visibility_mode = "private"
        """
    )


# =============================================================================
# Fakes as fixtures
# =============================================================================


@pytest.fixture
def fake_source() -> FakeGistSource:
    return FakeGistSource()


@pytest.fixture
def source_factory() -> type[FakeGistSource]:
    return FakeGistSource


@pytest.fixture
def target_factory() -> type[FakeSnippetTarget]:
    return FakeSnippetTarget


@pytest.fixture
def hook_runner() -> RecordingHookRunner:
    return RecordingHookRunner()


# =============================================================================
# CLI
# =============================================================================


@pytest.fixture
def console():
    """Console without colors."""
    from gistsync.cli.output import Console

    return Console(color=False)
