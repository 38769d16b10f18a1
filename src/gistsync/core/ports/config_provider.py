"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- FileConfigProvider: Load from TOML (or YAML) config files with
  environment variable token overrides
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from ..domain.enums import OnConflict, TargetProvider, VisibilityFilter, VisibilityMode


SOURCE_TOKEN_ENV_VAR = "GIST_SYNC_SOURCE_TOKEN"


def target_token_env_var(target_name: str) -> str:
    """
    Environment variable that overrides a target's token.

    >>> target_token_env_var("gitlab-main")
    'GIST_SYNC_TARGET_GITLAB_MAIN_TOKEN'
    """
    return f"GIST_SYNC_TARGET_{target_name.upper().replace('-', '_')}_TOKEN"


@dataclass
class GeneralConfig:
    """Run-wide settings."""

    log_level: str = "info"
    log_file: str | None = None
    cache_dir: str | None = None  # working directory for git clones
    dry_run: bool = False
    rate_limit_interval: float = 1.0  # seconds between requests to one platform
    http_timeout: float = 30.0
    http_retries: int = 0


@dataclass
class HooksConfig:
    """Shell commands run around a sync."""

    pre_sync: str = ""
    post_sync: str = ""
    on_error: str = ""


@dataclass
class SourceFilters:
    """Which source gists are synced."""

    visibility: VisibilityFilter = VisibilityFilter.ALL
    since: str | None = None
    include_patterns: list[str] = field(default_factory=list)
    exclude_patterns: list[str] = field(default_factory=list)
    gist_ids: list[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        """True if any filter narrows the listing."""
        return bool(
            self.visibility is not VisibilityFilter.ALL
            or self.since
            or self.include_patterns
            or self.exclude_patterns
            or self.gist_ids
        )


@dataclass
class SourceConfig:
    """Configuration for the source platform (GitHub)."""

    username: str
    token: str
    provider: str = "github"
    base_url: str | None = None
    filters: SourceFilters = field(default_factory=SourceFilters)

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return bool(self.username and self.token)


@dataclass(frozen=True)
class TargetConfig:
    """Configuration for one target platform."""

    name: str
    provider: TargetProvider
    token: str = ""
    username: str = ""
    base_url: str | None = None
    enabled: bool = True
    on_conflict: OnConflict = OnConflict.UPDATE
    preserve_description: bool = True
    description_prefix: str = ""
    description_suffix: str = ""
    visibility_mode: VisibilityMode = VisibilityMode.PRESERVE
    delete_orphans: bool = False

    # Bitbucket
    workspace: str | None = None
    # Keybase
    team: str | None = None

    @property
    def token_env_var(self) -> str:
        return target_token_env_var(self.name)

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        if self.provider.requires_token and not self.token:
            return False
        if self.provider.is_gitea_family and not self.username:
            return False
        if self.provider is TargetProvider.KEYBASE and not (self.username or self.team):
            return False
        return True


@dataclass
class AppConfig:
    """Complete application configuration."""

    source: SourceConfig
    targets: list[TargetConfig] = field(default_factory=list)
    general: GeneralConfig = field(default_factory=GeneralConfig)
    hooks: HooksConfig = field(default_factory=HooksConfig)
    config_path: Path | None = None

    @property
    def enabled_targets(self) -> list[TargetConfig]:
        return [t for t in self.targets if t.enabled]

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.source.provider != "github":
            errors.append(f"Unsupported source provider '{self.source.provider}' (only github)")
        if not self.source.username:
            errors.append("Missing source username (source.username)")
        if not self.source.token:
            errors.append(f"Missing source token (source.token or {SOURCE_TOKEN_ENV_VAR})")
        if not self.enabled_targets:
            errors.append("No enabled targets found")
        if self.general.rate_limit_interval < 0:
            errors.append("general.rate_limit_interval must not be negative")
        if self.general.http_timeout <= 0:
            errors.append("general.http_timeout must be positive")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @property
    @abstractmethod
    def config_file_path(self) -> Path | None:
        """Path of the file the configuration was read from, if any."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration

        Raises:
            ConfigError: If the configuration is missing or invalid.
        """
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate configuration without raising.

        Returns:
            List of validation errors
        """
        ...
