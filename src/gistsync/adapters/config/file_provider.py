"""
File Configuration Provider - Load configuration from TOML or YAML files.

Lookup order when no path is given:
1. $XDG_CONFIG_HOME/gist-sync/config.toml (default ~/.config)
2. ./config.toml

Tokens can be supplied through the environment instead of the file:
- GIST_SYNC_SOURCE_TOKEN for the source
- GIST_SYNC_TARGET_<NAME>_TOKEN for each target (name upper-cased,
  dashes turned into underscores)
"""

import datetime
import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ...core.domain.enums import OnConflict, TargetProvider, VisibilityFilter, VisibilityMode
from ...core.exceptions import ConfigError, ConfigFileError
from ...core.ports.config_provider import (
    SOURCE_TOKEN_ENV_VAR,
    AppConfig,
    ConfigProviderPort,
    GeneralConfig,
    HooksConfig,
    SourceConfig,
    SourceFilters,
    TargetConfig,
    target_token_env_var,
)


CONFIG_DIR_NAME = "gist-sync"
CONFIG_FILE_NAME = "config.toml"

LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


def default_config_paths(env: Mapping[str, str] | None = None) -> list[Path]:
    """Candidate config files, most specific first."""
    env = os.environ if env is None else env
    xdg = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return [
        Path(xdg) / CONFIG_DIR_NAME / CONFIG_FILE_NAME,
        Path.cwd() / CONFIG_FILE_NAME,
    ]


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v is not None and str(v) != ""]


def _as_str(value: Any) -> str | None:
    """Normalize optional string settings; dates become ISO-8601."""
    if value is None or value == "":
        return None
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class FileConfigProvider(ConfigProviderPort):
    """
    Configuration provider that loads from TOML or YAML config files.

    TOML is parsed with tomllib; files ending in .yaml or .yml are parsed
    with PyYAML.
    """

    def __init__(
        self,
        config_path: Path | str | None = None,
        env: Mapping[str, str] | None = None,
        cli_overrides: dict[str, Any] | None = None,
    ):
        """
        Initialize the file config provider.

        Args:
            config_path: Explicit config file. If None, the default
                locations are searched.
            env: Environment used for token overrides (default os.environ).
            cli_overrides: Command line values that win over the file
                (dry_run, log_level).
        """
        self._explicit_path = Path(config_path).expanduser() if config_path else None
        self._env = os.environ if env is None else env
        self._cli_overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
        self._config_file: Path | None = None
        self.logger = logging.getLogger("FileConfigProvider")

    # -------------------------------------------------------------------------
    # ConfigProviderPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        if self._config_file:
            return f"File ({self._config_file})"
        return "File"

    @property
    def config_file_path(self) -> Path | None:
        return self._config_file

    def load(self) -> AppConfig:
        data = self._read_file(self._locate())
        config = self._build(data)
        config.config_path = self._config_file

        errors = config.validate()
        if errors:
            raise ConfigError("Invalid configuration: " + "; ".join(errors))
        return config

    def validate(self) -> list[str]:
        try:
            data = self._read_file(self._locate())
            config = self._build(data)
        except ConfigError as e:
            return [str(e)]
        return config.validate()

    # -------------------------------------------------------------------------
    # File Handling
    # -------------------------------------------------------------------------

    def _locate(self) -> Path:
        if self._explicit_path is not None:
            if not self._explicit_path.is_file():
                raise ConfigFileError(
                    f"Config file not found: {self._explicit_path}",
                    config_path=str(self._explicit_path),
                )
            return self._explicit_path

        candidates = default_config_paths(self._env)
        for candidate in candidates:
            if candidate.is_file():
                return candidate

        searched = ", ".join(str(c) for c in candidates)
        raise ConfigFileError(f"Config file not found (searched: {searched})")

    def _read_file(self, path: Path) -> dict[str, Any]:
        self._config_file = path
        try:
            if path.suffix in (".yaml", ".yml"):
                with path.open(encoding="utf-8") as fh:
                    data = yaml.safe_load(fh) or {}
            else:
                with path.open("rb") as fh:
                    data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as e:
            raise ConfigFileError(
                f"Invalid TOML syntax in {path}: {e}", config_path=str(path), cause=e
            ) from e
        except yaml.YAMLError as e:
            raise ConfigFileError(
                f"Invalid YAML syntax in {path}: {e}", config_path=str(path), cause=e
            ) from e
        except OSError as e:
            raise ConfigFileError(
                f"Cannot read config file {path}: {e}", config_path=str(path), cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigFileError(f"Config file {path} must contain a table", config_path=str(path))

        self.logger.debug(f"Loaded config from {path}")
        return data

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    def _build(self, data: dict[str, Any]) -> AppConfig:
        return AppConfig(
            source=self._parse_source(data.get("source") or {}),
            targets=self._parse_targets(data.get("targets") or []),
            general=self._parse_general(data.get("general") or {}),
            hooks=self._parse_hooks(data.get("hooks") or {}),
        )

    def _parse_general(self, section: dict[str, Any]) -> GeneralConfig:
        log_level = str(self._cli_overrides.get("log_level", section.get("log_level", "info")))
        if log_level.lower() not in LOG_LEVELS:
            raise ConfigError(
                f"Invalid general.log_level '{log_level}' (expected debug, info, warn or error)"
            )

        log_file = _as_str(section.get("log_file"))
        cache_dir = _as_str(section.get("cache_dir"))

        try:
            return GeneralConfig(
                log_level=log_level.lower(),
                log_file=str(Path(log_file).expanduser()) if log_file else None,
                cache_dir=str(Path(cache_dir).expanduser()) if cache_dir else None,
                dry_run=_as_bool(section.get("dry_run"), False)
                or bool(self._cli_overrides.get("dry_run", False)),
                rate_limit_interval=float(section.get("rate_limit_interval", 1)),
                http_timeout=float(section.get("http_timeout", 30)),
                http_retries=int(section.get("http_retries", 0)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid [general] setting: {e}", cause=e) from e

    @staticmethod
    def _parse_hooks(section: dict[str, Any]) -> HooksConfig:
        return HooksConfig(
            pre_sync=_as_str(section.get("pre_sync")) or "",
            post_sync=_as_str(section.get("post_sync")) or "",
            on_error=_as_str(section.get("on_error")) or "",
        )

    def _parse_source(self, section: dict[str, Any]) -> SourceConfig:
        token = self._env.get(SOURCE_TOKEN_ENV_VAR) or _as_str(section.get("token")) or ""
        filters = section.get("filters") or {}

        try:
            visibility = VisibilityFilter.from_string(_as_str(filters.get("visibility")))
        except ValueError as e:
            raise ConfigError(str(e), cause=e) from e

        return SourceConfig(
            username=_as_str(section.get("username")) or "",
            token=token,
            provider=(_as_str(section.get("provider")) or "github").lower(),
            base_url=_as_str(section.get("base_url")),
            filters=SourceFilters(
                visibility=visibility,
                since=_as_str(filters.get("since")),
                include_patterns=_as_list(filters.get("include_patterns")),
                exclude_patterns=_as_list(filters.get("exclude_patterns")),
                gist_ids=_as_list(filters.get("gist_ids")),
            ),
        )

    def _parse_targets(self, entries: list[Any]) -> list[TargetConfig]:
        if not isinstance(entries, list):
            raise ConfigError("'targets' must be an array of tables ([[targets]])")

        targets = []
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigError(f"targets[{i}] must be a table")
            target = self._parse_target(i, entry)
            if target is not None:
                targets.append(target)
        return targets

    def _parse_target(self, index: int, entry: dict[str, Any]) -> TargetConfig | None:
        """Parse one [[targets]] entry; unusable entries are skipped with a warning."""
        name = _as_str(entry.get("name")) or f"target-{index}"
        enabled = _as_bool(entry.get("enabled"), True)

        provider_name = _as_str(entry.get("provider"))
        if not provider_name:
            self.logger.warning(f"Target '{name}' has no provider, skipping...")
            return None
        try:
            provider = TargetProvider.from_string(provider_name)
        except ValueError as e:
            self.logger.warning(f"Target '{name}': {e}, skipping...")
            return None

        token = self._env.get(target_token_env_var(name)) or _as_str(entry.get("token")) or ""

        try:
            on_conflict = OnConflict.from_string(_as_str(entry.get("on_conflict")) or "update")
        except ValueError as e:
            raise ConfigError(f"Target '{name}': {e}", cause=e) from e

        target = TargetConfig(
            name=name,
            provider=provider,
            token=token,
            username=_as_str(entry.get("username")) or "",
            base_url=_as_str(entry.get("base_url")),
            enabled=enabled,
            on_conflict=on_conflict,
            preserve_description=_as_bool(entry.get("preserve_description"), True),
            description_prefix=_as_str(entry.get("description_prefix")) or "",
            description_suffix=_as_str(entry.get("description_suffix")) or "",
            visibility_mode=VisibilityMode.from_string(_as_str(entry.get("visibility_mode"))),
            delete_orphans=_as_bool(entry.get("delete_orphans"), False),
            workspace=_as_str(entry.get("workspace")),
            team=_as_str(entry.get("team")),
        )

        if enabled and not target.is_valid():
            if provider.requires_token and not token:
                self.logger.warning(f"Target '{name}' has no token, skipping...")
            else:
                self.logger.warning(f"Target '{name}' is missing a username, skipping...")
            return None

        return target
