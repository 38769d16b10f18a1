"""
Tests for FileConfigProvider (TOML and YAML configuration files).
"""

from pathlib import Path
from textwrap import dedent

import pytest

from gistsync.adapters.config import FileConfigProvider
from gistsync.adapters.config.file_provider import default_config_paths
from gistsync.core.domain.enums import OnConflict, TargetProvider, VisibilityFilter, VisibilityMode
from gistsync.core.exceptions import ConfigError, ConfigFileError


@pytest.fixture
def config_file(tmp_path, sample_config_toml):
    path = tmp_path / "config.toml"
    path.write_text(sample_config_toml)
    return path


def write(tmp_path, text, name="config.toml"):
    path = tmp_path / name
    path.write_text(dedent(text))
    return path


# =============================================================================
# Loading
# =============================================================================


class TestFileConfigProviderLoad:
    """Tests for load()."""

    def test_full_config(self, config_file):
        provider = FileConfigProvider(config_file, env={})
        config = provider.load()

        assert config.source.username == "octocat"
        assert config.source.token == "ghp_file"
        assert config.source.filters.visibility is VisibilityFilter.PUBLIC
        assert config.source.filters.exclude_patterns == ["^wip"]
        assert config.general.log_level == "debug"
        assert config.general.rate_limit_interval == 0.5
        assert config.hooks.post_sync == "echo done"
        assert config.config_path == config_file
        assert provider.name == f"File ({config_file})"

    def test_targets(self, config_file):
        gitlab, codeberg = FileConfigProvider(config_file, env={}).load().targets

        assert gitlab.provider is TargetProvider.GITLAB
        assert gitlab.description_prefix == "[mirror] "
        assert gitlab.on_conflict is OnConflict.UPDATE
        assert codeberg.provider is TargetProvider.CODEBERG
        assert codeberg.on_conflict is OnConflict.SKIP
        assert codeberg.visibility_mode is VisibilityMode.PRIVATE

    def test_defaults(self, tmp_path):
        path = write(
            tmp_path,
            """
            [source]
            username = "octocat"
            token = "t"

            [[targets]]
            name = "gl"
            provider = "gitlab"
            token = "t"
            """,
        )
        config = FileConfigProvider(path, env={}).load()

        assert config.general.log_level == "info"
        assert config.general.rate_limit_interval == 1.0
        assert config.general.http_retries == 0
        assert config.hooks.pre_sync == ""
        target = config.targets[0]
        assert target.enabled
        assert target.preserve_description
        assert target.visibility_mode is VisibilityMode.PRESERVE
        assert not target.delete_orphans

    def test_env_tokens_win(self, config_file):
        env = {
            "GIST_SYNC_SOURCE_TOKEN": "ghp_env",
            "GIST_SYNC_TARGET_GITLAB_MAIN_TOKEN": "glpat-env",
        }
        config = FileConfigProvider(config_file, env=env).load()

        assert config.source.token == "ghp_env"
        assert config.targets[0].token == "glpat-env"
        assert config.targets[1].token == "cb-file"

    def test_cli_overrides(self, config_file):
        provider = FileConfigProvider(
            config_file, env={}, cli_overrides={"dry_run": True, "log_level": "warn"}
        )
        general = provider.load().general
        assert general.dry_run
        assert general.log_level == "warn"

    def test_since_as_toml_date(self, tmp_path):
        path = write(
            tmp_path,
            """
            [source]
            username = "octocat"
            token = "t"
            [source.filters]
            since = 2024-03-01
            include_patterns = "^py"

            [[targets]]
            name = "gl"
            provider = "gitlab"
            token = "t"
            """,
        )
        filters = FileConfigProvider(path, env={}).load().source.filters
        assert filters.since == "2024-03-01"
        assert filters.include_patterns == ["^py"]

    def test_yaml(self, tmp_path):
        path = write(
            tmp_path,
            """
            source:
              username: octocat
              token: t
            targets:
              - name: forge
                provider: forgejo
                token: t
                username: octocat
                base_url: https://forge.example.test
                delete_orphans: true
            """,
            name="config.yaml",
        )
        target = FileConfigProvider(path, env={}).load().targets[0]

        assert target.provider is TargetProvider.FORGEJO
        assert target.base_url == "https://forge.example.test"
        assert target.delete_orphans


# =============================================================================
# Unusable targets
# =============================================================================


class TestTargetSkipping:
    """Unusable target entries are skipped with a warning."""

    TEMPLATE = """
        [source]
        username = "octocat"
        token = "t"

        [[targets]]
        name = "good"
        provider = "gitlab"
        token = "t"

        [[targets]]
        {entry}
        """

    @pytest.mark.parametrize(
        "entry, message",
        [
            ('name = "x"', "has no provider"),
            ('name = "x"\nprovider = "sourcehut"', "Unknown provider"),
            ('name = "x"\nprovider = "gitlab"', "has no token"),
            ('name = "x"\nprovider = "gitea"\ntoken = "t"', "missing a username"),
        ],
    )
    def test_skipped(self, tmp_path, caplog, entry, message):
        text = self.TEMPLATE.replace("{entry}", entry.replace("\n", "\n        "))
        config = FileConfigProvider(write(tmp_path, text), env={}).load()

        assert [t.name for t in config.targets] == ["good"]
        assert message in caplog.text

    def test_disabled_target_without_token_is_kept(self, tmp_path):
        text = self.TEMPLATE.replace(
            "{entry}", 'name = "x"\n        provider = "gitlab"\n        enabled = false'
        )
        targets = FileConfigProvider(write(tmp_path, text), env={}).load().targets
        assert [t.name for t in targets] == ["good", "x"]
        assert not targets[1].enabled

    def test_keybase_needs_no_token(self, tmp_path):
        text = self.TEMPLATE.replace(
            "{entry}", 'name = "kb"\n        provider = "keybase"\n        team = "acme"'
        )
        targets = FileConfigProvider(write(tmp_path, text), env={}).load().targets
        assert targets[1].team == "acme"


# =============================================================================
# Errors
# =============================================================================


class TestFileConfigProviderErrors:
    """Tests for configuration errors."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError, match="not found"):
            FileConfigProvider(tmp_path / "nope.toml", env={}).load()

    def test_no_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        provider = FileConfigProvider(env={"XDG_CONFIG_HOME": str(tmp_path / "xdg")})
        with pytest.raises(ConfigFileError, match="searched"):
            provider.load()

    def test_xdg_location_is_found(self, tmp_path, sample_config_toml):
        xdg = tmp_path / "xdg"
        (xdg / "gist-sync").mkdir(parents=True)
        (xdg / "gist-sync" / "config.toml").write_text(sample_config_toml)

        provider = FileConfigProvider(env={"XDG_CONFIG_HOME": str(xdg)})

        assert provider.load().source.username == "octocat"
        assert provider.config_file_path == xdg / "gist-sync" / "config.toml"

    def test_default_paths(self, tmp_path):
        paths = default_config_paths({"XDG_CONFIG_HOME": "/cfg"})
        assert paths[0] == Path("/cfg/gist-sync/config.toml")
        assert paths[1].name == "config.toml"

    def test_invalid_toml(self, tmp_path):
        path = write(tmp_path, "[source\nusername = 1")
        with pytest.raises(ConfigFileError, match="Invalid TOML"):
            FileConfigProvider(path, env={}).load()

    def test_invalid_yaml(self, tmp_path):
        path = write(tmp_path, "source: [unclosed", name="c.yml")
        with pytest.raises(ConfigFileError, match="Invalid YAML"):
            FileConfigProvider(path, env={}).load()

    def test_invalid_log_level(self, config_file):
        provider = FileConfigProvider(config_file, env={}, cli_overrides={"log_level": "loud"})
        with pytest.raises(ConfigError, match="log_level"):
            provider.load()

    def test_invalid_on_conflict(self, tmp_path):
        path = write(
            tmp_path,
            """
            [source]
            username = "octocat"
            token = "t"
            [[targets]]
            name = "gl"
            provider = "gitlab"
            token = "t"
            on_conflict = "merge"
            """,
        )
        with pytest.raises(ConfigError, match="on_conflict"):
            FileConfigProvider(path, env={}).load()

    def test_missing_source_token(self, config_file):
        text = config_file.read_text().replace('token = "ghp_file"\n', "")
        config_file.write_text(text)
        with pytest.raises(ConfigError, match="Missing source token"):
            FileConfigProvider(config_file, env={}).load()


class TestFileConfigProviderValidate:
    """validate() reports problems instead of raising."""

    def test_valid(self, config_file):
        assert FileConfigProvider(config_file, env={}).validate() == []

    def test_missing_file(self, tmp_path):
        errors = FileConfigProvider(tmp_path / "x.toml", env={}).validate()
        assert len(errors) == 1
        assert "not found" in errors[0]

    def test_no_targets(self, tmp_path):
        path = write(tmp_path, '[source]\nusername = "o"\ntoken = "t"\n')
        assert "No enabled targets found" in FileConfigProvider(path, env={}).validate()
