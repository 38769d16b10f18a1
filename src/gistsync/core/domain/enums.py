"""
Domain enums - providers, policies and outcome kinds.
"""

from __future__ import annotations

from enum import Enum


class TargetProvider(Enum):
    """Platforms a gist can be mirrored to."""

    GITLAB = "gitlab"
    GITEA = "gitea"
    CODEBERG = "codeberg"
    FORGEJO = "forgejo"
    BITBUCKET = "bitbucket"
    KEYBASE = "keybase"

    @classmethod
    def from_string(cls, value: str) -> TargetProvider:
        """
        Parse a provider name.

        Raises:
            ValueError: If the name is not a supported provider.
        """
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        supported = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown provider '{value}' (supported: {supported})")

    @property
    def is_gitea_family(self) -> bool:
        """Gitea, Codeberg and Forgejo share one API."""
        return self in (TargetProvider.GITEA, TargetProvider.CODEBERG, TargetProvider.FORGEJO)

    @property
    def requires_token(self) -> bool:
        """Keybase authenticates through the local CLI session instead."""
        return self is not TargetProvider.KEYBASE


class OnConflict(Enum):
    """What to do when a counterpart already exists at a target."""

    SKIP = "skip"
    UPDATE = "update"
    REPLACE = "replace"

    @classmethod
    def from_string(cls, value: str) -> OnConflict:
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Invalid on_conflict '{value}' (expected skip, update or replace)")


class VisibilityMode(Enum):
    """How target visibility is derived from the source gist."""

    PRESERVE = "preserve"
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"

    @classmethod
    def from_string(cls, value: str | None) -> VisibilityMode:
        """Parse a mode; anything unrecognized means preserve."""
        if not value:
            return cls.PRESERVE
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.PRESERVE


class Visibility(Enum):
    """Concrete visibility of a snippet at a target."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"

    @property
    def is_private(self) -> bool:
        """Platforms without an internal tier treat internal as private."""
        return self is not Visibility.PUBLIC


class VisibilityFilter(Enum):
    """Source listing filter on gist visibility."""

    ALL = "all"
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_string(cls, value: str | None) -> VisibilityFilter:
        if not value:
            return cls.ALL
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Invalid visibility filter '{value}' (expected all, public or private)")


class SyncAction(Enum):
    """Action chosen by the conflict resolver."""

    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"


class OutcomeResult(Enum):
    """Result of one (gist, target) attempt."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    DELETED = "deleted"
    FAILED = "failed"

    @property
    def is_success(self) -> bool:
        return self is not OutcomeResult.FAILED
