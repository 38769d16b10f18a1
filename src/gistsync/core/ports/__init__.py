"""
Ports - abstract interfaces the application layer depends on.
"""

from .config_provider import (
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
from .gist_source import GistSourcePort
from .hook_runner import HookRunnerPort
from .snippet_target import SnippetTargetPort


__all__ = [
    "SOURCE_TOKEN_ENV_VAR",
    "AppConfig",
    "ConfigProviderPort",
    "GeneralConfig",
    "GistSourcePort",
    "HookRunnerPort",
    "HooksConfig",
    "SnippetTargetPort",
    "SourceConfig",
    "SourceFilters",
    "TargetConfig",
    "target_token_env_var",
]
