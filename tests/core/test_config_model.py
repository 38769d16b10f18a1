"""
Tests for the configuration model (AppConfig, TargetConfig, SourceFilters).
"""

import pytest

from gistsync.core.domain.enums import TargetProvider, VisibilityFilter
from gistsync.core.ports.config_provider import (
    AppConfig,
    GeneralConfig,
    SourceConfig,
    SourceFilters,
    TargetConfig,
    target_token_env_var,
)


class TestTargetConfig:
    """Tests for TargetConfig.is_valid."""

    def test_token_env_var(self):
        assert target_token_env_var("gitlab-main") == "GIST_SYNC_TARGET_GITLAB_MAIN_TOKEN"
        target = TargetConfig(name="cb", provider=TargetProvider.CODEBERG)
        assert target.token_env_var == "GIST_SYNC_TARGET_CB_TOKEN"

    def test_gitlab_needs_token(self):
        assert not TargetConfig(name="g", provider=TargetProvider.GITLAB).is_valid()
        assert TargetConfig(name="g", provider=TargetProvider.GITLAB, token="t").is_valid()

    def test_gitea_family_needs_username(self):
        target = TargetConfig(name="c", provider=TargetProvider.CODEBERG, token="t")
        assert not target.is_valid()

    def test_keybase_needs_user_or_team_but_no_token(self):
        assert not TargetConfig(name="k", provider=TargetProvider.KEYBASE).is_valid()
        assert TargetConfig(name="k", provider=TargetProvider.KEYBASE, team="acme").is_valid()
        assert TargetConfig(name="k", provider=TargetProvider.KEYBASE, username="me").is_valid()


class TestSourceFilters:
    """Tests for SourceFilters.is_active."""

    def test_default_is_inactive(self):
        assert not SourceFilters().is_active

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"visibility": VisibilityFilter.PUBLIC},
            {"since": "2024-01-01"},
            {"include_patterns": ["^py"]},
            {"exclude_patterns": ["wip"]},
            {"gist_ids": ["abc"]},
        ],
    )
    def test_any_filter_is_active(self, kwargs):
        assert SourceFilters(**kwargs).is_active


class TestAppConfigValidate:
    """Tests for AppConfig.validate."""

    @pytest.fixture
    def valid(self):
        return AppConfig(
            source=SourceConfig(username="octocat", token="t"),
            targets=[TargetConfig(name="g", provider=TargetProvider.GITLAB, token="t")],
        )

    def test_valid(self, valid):
        assert valid.validate() == []

    def test_missing_source_credentials(self, valid):
        valid.source = SourceConfig(username="", token="")
        errors = valid.validate()
        assert any("username" in e for e in errors)
        assert any("token" in e for e in errors)

    def test_unsupported_source_provider(self, valid):
        valid.source.provider = "gitlab"
        assert any("only github" in e for e in valid.validate())

    def test_no_enabled_targets(self, valid):
        valid.targets = [
            TargetConfig(name="g", provider=TargetProvider.GITLAB, token="t", enabled=False)
        ]
        assert "No enabled targets found" in valid.validate()
        assert valid.enabled_targets == []

    def test_general_settings(self, valid):
        valid.general = GeneralConfig(rate_limit_interval=-1, http_timeout=0)
        errors = valid.validate()
        assert len(errors) == 2
