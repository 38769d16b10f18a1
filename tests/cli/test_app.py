"""
Tests for the gist-sync CLI entry point.

Platform factories are patched so no network call is made; configuration
is read from real files in tmp_path.
"""

import signal
import threading
from unittest.mock import MagicMock, patch

import pytest

from gistsync.cli.app import CancelOnInterrupt, configure_logging, create_parser, main
from gistsync.cli.exit_codes import ExitCode
from gistsync.core.exceptions import TransientError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("GIST_SYNC_SOURCE_TOKEN", raising=False)
    monkeypatch.delenv("GIST_SYNC_TARGET_GITLAB_MAIN_TOKEN", raising=False)
    monkeypatch.delenv("GIST_SYNC_TARGET_CODEBERG_TOKEN", raising=False)


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("gistsync.cli.app.setup_logging") as mock:
        yield mock


@pytest.fixture
def config_path(tmp_path, sample_config_toml):
    path = tmp_path / "config.toml"
    path.write_text(sample_config_toml)
    return str(path)


@pytest.fixture
def items(item_factory):
    return [
        item_factory("aaa111", "Deploy script", {"deploy.sh": "echo hi"}),
        item_factory("bbb222", "Python helpers", {"helpers.py": "pass"}),
    ]


@pytest.fixture
def platform(items, source_factory, target_factory, hook_runner):
    """Patch the service factories with in-memory fakes."""
    source = source_factory(items)
    adapters = {
        "gitlab-main": target_factory("GitLab"),
        "codeberg": target_factory("Codeberg"),
    }
    with (
        patch("gistsync.cli.app.create_gist_source", return_value=source),
        patch(
            "gistsync.cli.app.create_target_adapter",
            side_effect=lambda target, general, dry_run: adapters[target.name],
        ) as factory,
        patch("gistsync.cli.app.create_hook_runner", return_value=hook_runner),
    ):
        yield MagicMock(source=source, adapters=adapters, factory=factory, hooks=hook_runner)


# =============================================================================
# Parser
# =============================================================================


class TestCreateParser:
    """Tests for create_parser."""

    def test_defaults(self):
        args = create_parser().parse_args([])
        assert args.command == "sync"
        assert args.config is None
        assert not args.dry_run
        assert args.log_format == "text"

    def test_prog_and_epilog(self):
        parser = create_parser()
        assert parser.prog == "gist-sync"
        assert "Examples" in parser.epilog

    @pytest.mark.parametrize("command", ["sync", "list", "targets", "validate"])
    def test_commands(self, command):
        assert create_parser().parse_args([command]).command == command

    def test_flags(self):
        args = create_parser().parse_args(
            ["-c", "x.toml", "-n", "-q", "--log-format", "json", "--no-color", "list"]
        )
        assert args.config == "x.toml"
        assert args.dry_run
        assert args.quiet
        assert args.log_format == "json"
        assert args.no_color

    def test_verbose_and_quiet_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["-v", "-q"])

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["push"])

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--version"])
        assert "gist-sync 1.0.0" in capsys.readouterr().out


class TestConfigureLogging:
    """Tests for log level selection."""

    def test_verbose_is_debug(self, no_logging_setup):
        configure_logging(create_parser().parse_args(["-v"]))
        assert no_logging_setup.call_args.kwargs["level"] == 10

    def test_quiet_is_warning(self, no_logging_setup):
        configure_logging(create_parser().parse_args(["-q"]))
        assert no_logging_setup.call_args.kwargs["level"] == 30

    def test_json_adds_service_field(self, no_logging_setup):
        configure_logging(create_parser().parse_args(["--log-format", "json"]))
        assert no_logging_setup.call_args.kwargs["static_fields"] == {"service": "gist-sync"}


# =============================================================================
# Commands
# =============================================================================


class TestSyncCommand:
    """Tests for `gist-sync sync`."""

    def test_sync_success(self, config_path, platform, capsys):
        code = main(["-c", config_path, "--no-color"])

        assert code == ExitCode.SUCCESS
        assert set(platform.adapters["gitlab-main"].snippets) == {"deploy-script", "python-helpers"}
        assert set(platform.adapters["codeberg"].snippets) == {"deploy-script", "python-helpers"}
        out = capsys.readouterr().out
        assert "Sync completed successfully!" in out
        assert platform.hooks.calls == [("post_sync", "echo done")]

    def test_descriptions_use_target_prefix(self, config_path, platform):
        main(["-c", config_path])
        snippet = platform.adapters["gitlab-main"].snippets["deploy-script"]
        assert snippet.description == "[mirror] Deploy script"

    def test_dry_run_flag(self, config_path, platform, capsys):
        code = main(["-c", config_path, "--dry-run"])

        assert code == ExitCode.SUCCESS
        assert all(a.writes() == [] for a in platform.adapters.values())
        assert all(c.kwargs["dry_run"] for c in platform.factory.call_args_list)
        assert "DRY-RUN MODE" in capsys.readouterr().out

    def test_partial_failure(self, config_path, platform):
        platform.adapters["codeberg"].fail_on["create"] = TransientError("down")
        assert main(["-c", config_path]) == ExitCode.PARTIAL_SUCCESS
        # no on_error command configured, post_sync must not run
        assert platform.hooks.calls == []

    def test_total_failure(self, config_path, platform):
        for adapter in platform.adapters.values():
            adapter.fail_on["find"] = TransientError("down")
        assert main(["-c", config_path]) == ExitCode.ERROR

    def test_listing_failure_is_connection_error(self, config_path, platform, capsys):
        platform.source.fail_on_page = 1
        assert main(["-c", config_path]) == ExitCode.CONNECTION_ERROR
        assert "page 1" in capsys.readouterr().out

    def test_quiet_summary_line(self, config_path, platform, capsys):
        main(["-c", config_path, "-q"])
        out = capsys.readouterr().out.strip().splitlines()
        assert out == [
            "status=OK mode=executed gists=2 created=4 updated=0 skipped=0 deleted=0"
        ]

    def test_missing_config_file(self, tmp_path, capsys):
        code = main(["-c", str(tmp_path / "missing.toml")])
        assert code == ExitCode.FILE_NOT_FOUND
        assert "not found" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[source]\nusername = "octocat"\n')
        assert main(["-c", str(path)]) == ExitCode.CONFIG_ERROR

    def test_keyboard_interrupt(self, config_path, platform):
        with patch("gistsync.cli.app.run_sync", side_effect=KeyboardInterrupt):
            assert main(["-c", config_path]) == ExitCode.SIGINT


class TestOtherCommands:
    """Tests for list, targets and validate."""

    def test_list(self, config_path, platform, capsys):
        assert main(["-c", config_path, "list"]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "aaa111" in out
        assert "2 gists" in out
        assert all(a.calls == [] for a in platform.adapters.values())

    def test_list_quiet_prints_count(self, config_path, platform, capsys):
        main(["-c", config_path, "-q", "list"])
        assert capsys.readouterr().out.strip() == "2 gists"

    def test_targets(self, config_path, capsys):
        assert main(["-c", config_path, "targets"]) == ExitCode.SUCCESS
        out = capsys.readouterr().out
        assert "gitlab-main" in out
        assert "codeberg" in out
        assert "Targets (2 enabled)" in out

    def test_validate_ok(self, config_path, capsys):
        assert main(["-c", config_path, "validate"]) == ExitCode.SUCCESS
        assert "Configuration OK" in capsys.readouterr().out

    def test_validate_errors(self, tmp_path, capsys):
        path = tmp_path / "config.toml"
        path.write_text('[source]\nusername = "octocat"\n')

        assert main(["-c", str(path), "validate"]) == ExitCode.CONFIG_ERROR
        out = capsys.readouterr().out
        assert "Missing source token" in out
        assert "No enabled targets found" in out


# =============================================================================
# Cancellation
# =============================================================================


class TestCancelOnInterrupt:
    """Tests for the Ctrl-C handler."""

    def test_first_interrupt_sets_event(self, console):
        event = threading.Event()
        with CancelOnInterrupt(event, console) as handler:
            handler._handle(signal.SIGINT, None)
            assert event.is_set()

    def test_second_interrupt_raises(self, console):
        event = threading.Event()
        event.set()
        with CancelOnInterrupt(event, console) as handler:
            with pytest.raises(KeyboardInterrupt):
                handler._handle(signal.SIGINT, None)

    def test_previous_handler_restored(self, console):
        previous = signal.getsignal(signal.SIGINT)
        with CancelOnInterrupt(threading.Event(), console):
            assert signal.getsignal(signal.SIGINT) != previous
        assert signal.getsignal(signal.SIGINT) == previous

    @staticmethod
    def cancel_on_find(identifier):
        signal.raise_signal(signal.SIGINT)
        return None

    def test_clean_cancelled_run_succeeds(self, config_path, platform):
        platform.adapters["gitlab-main"].find = self.cancel_on_find

        assert main(["-c", config_path]) == ExitCode.SUCCESS
        assert platform.hooks.calls == [("post_sync", "echo done")]
        assert platform.adapters["codeberg"].calls == []

    def test_cancelled_run_with_errors(self, config_path, platform):
        platform.adapters["gitlab-main"].find = self.cancel_on_find
        platform.adapters["gitlab-main"].fail_on["create"] = TransientError("down")

        assert main(["-c", config_path]) == ExitCode.CANCELLED
        assert platform.hooks.calls == []
