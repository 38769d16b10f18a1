"""
Service factories - build adapters from configuration.

The provider registry lives here: a target's provider is resolved to an
adapter once, when targets are loaded, and the sync engine never branches
on the provider again.

Usage:
    source = create_gist_source(config.source, config.general)
    adapter = create_target_adapter(target, config.general, dry_run=True)
"""

import logging

from .domain.enums import TargetProvider
from .ports.config_provider import GeneralConfig, SourceConfig, TargetConfig
from .ports.gist_source import GistSourcePort
from .ports.hook_runner import HookRunnerPort
from .ports.snippet_target import SnippetTargetPort


logger = logging.getLogger("Services")


# =============================================================================
# Factory Functions
# =============================================================================


def create_gist_source(
    source: SourceConfig,
    general: GeneralConfig | None = None,
) -> GistSourcePort:
    """
    Create the source adapter.

    Args:
        source: Source configuration (only 'github' is supported)
        general: Run-wide HTTP settings

    Returns:
        The gist source
    """
    general = general or GeneralConfig()

    if source.provider == "github":
        from gistsync.adapters.github import GitHubGistSource

        return GitHubGistSource(
            config=source,
            timeout=general.http_timeout,
            max_retries=general.http_retries,
        )
    raise ValueError(f"Unknown source provider: {source.provider}")


def create_target_adapter(
    target: TargetConfig,
    general: GeneralConfig | None = None,
    dry_run: bool = True,
) -> SnippetTargetPort:
    """
    Create the adapter for one target.

    Args:
        target: Target configuration
        general: Run-wide HTTP settings (timeout, retries, rate limit interval)
        dry_run: If True, adapters make no write calls

    Returns:
        The target adapter
    """
    general = general or GeneralConfig()
    http_options = {
        "dry_run": dry_run,
        "timeout": general.http_timeout,
        "max_retries": general.http_retries,
        "min_interval": general.rate_limit_interval,
    }

    if target.provider is TargetProvider.GITLAB:
        from gistsync.adapters.gitlab import GitLabAdapter

        return GitLabAdapter(config=target, **http_options)
    if target.provider.is_gitea_family:
        from gistsync.adapters.gitea import GiteaAdapter

        return GiteaAdapter(config=target, **http_options)
    if target.provider is TargetProvider.BITBUCKET:
        from gistsync.adapters.bitbucket import BitbucketAdapter

        return BitbucketAdapter(config=target, **http_options)
    if target.provider is TargetProvider.KEYBASE:
        from gistsync.adapters.keybase import KeybaseAdapter, KeybaseCli

        return KeybaseAdapter(
            config=target,
            dry_run=dry_run,
            cli=KeybaseCli(dry_run=dry_run, work_dir=general.cache_dir),
        )
    raise ValueError(f"Unknown target provider: {target.provider}")


def create_hook_runner() -> HookRunnerPort:
    """Create the hook runner used for pre_sync, post_sync and on_error."""
    from gistsync.adapters.hooks import ShellHookRunner

    return ShellHookRunner()
