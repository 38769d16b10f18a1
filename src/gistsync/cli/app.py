"""
CLI App - Main entry point for the gist-sync command line tool.
"""

import argparse
import logging
import signal
import sys
import threading

from .. import __version__
from ..adapters.config import FileConfigProvider
from ..application.sync import SourceLister, SyncOrchestrator
from ..core.ports.config_provider import AppConfig
from ..core.services import create_gist_source, create_hook_runner, create_target_adapter
from .exit_codes import ExitCode
from .logging import parse_level, setup_logging
from .output import Console


COMMANDS = ("sync", "list", "targets", "validate")


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for gist-sync.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="gist-sync",
        description="Mirror GitHub gists to GitLab, Gitea, Codeberg, Forgejo, "
        "Bitbucket and Keybase",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync every gist to every enabled target
  gist-sync

  # Preview what would be created or updated
  gist-sync --dry-run

  # Use a specific config file
  gist-sync -c ~/gist-sync.toml sync

  # Show the gists that would be synced
  gist-sync list

  # Check the configuration
  gist-sync validate

  # JSON logs for cron
  gist-sync -q --log-format json
""",
    )

    parser.add_argument(
        "command",
        nargs="?",
        default="sync",
        choices=COMMANDS,
        help="Command to run (default: sync)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        help="Path to config file (default: $XDG_CONFIG_HOME/gist-sync/config.toml "
        "or ./config.toml)",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Show what would be done without making changes",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only print errors and a one-line summary",
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default="text",
        help="Log output format (default: text)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------


def load_config(args: argparse.Namespace) -> tuple[FileConfigProvider, AppConfig]:
    """
    Load configuration, applying command line overrides.

    Raises:
        ConfigError: If the configuration is missing or invalid.
    """
    cli_overrides = {
        "dry_run": True if args.dry_run else None,
        "log_level": "debug" if args.verbose else None,
    }
    provider = FileConfigProvider(config_path=args.config, cli_overrides=cli_overrides)
    return provider, provider.load()


def configure_logging(args: argparse.Namespace, config: AppConfig | None = None) -> None:
    """Set up logging from the command line and, once loaded, the config file."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    elif config is not None:
        level = parse_level(config.general.log_level)
    else:
        level = logging.INFO

    setup_logging(
        level=level,
        log_format=args.log_format,
        log_file=config.general.log_file if config else None,
        static_fields={"service": "gist-sync"} if args.log_format == "json" else None,
    )


class CancelOnInterrupt:
    """
    Context manager turning the first Ctrl-C into a cancellation request.

    The second Ctrl-C raises KeyboardInterrupt as usual.
    """

    def __init__(self, cancel_event: threading.Event, console: Console):
        self.cancel_event = cancel_event
        self.console = console
        self._previous = None

    def _handle(self, signum, frame) -> None:
        if self.cancel_event.is_set():
            raise KeyboardInterrupt
        self.cancel_event.set()
        self.console.print()
        self.console.warning("Cancelling after the current operation (Ctrl-C again to abort)")

    def __enter__(self) -> "CancelOnInterrupt":
        if threading.current_thread() is threading.main_thread():
            self._previous = signal.signal(signal.SIGINT, self._handle)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._previous is not None:
            signal.signal(signal.SIGINT, self._previous)
            self._previous = None


# -------------------------------------------------------------------------
# Commands
# -------------------------------------------------------------------------


def run_sync(console: Console, args: argparse.Namespace) -> int:
    """
    Run the sync operation from GitHub to every enabled target.

    Args:
        console: Console instance for output.
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    provider, config = load_config(args)
    configure_logging(args, config)
    dry_run = config.general.dry_run

    console.header(f"gist-sync {__version__}")
    if dry_run:
        console.dry_run_banner()
    if provider.config_file_path:
        console.info(f"Config: {provider.config_file_path}")
    console.info(f"Source: {config.source.username} ({config.source.provider})")
    console.info(f"Targets: {', '.join(t.name for t in config.enabled_targets)}")

    source = create_gist_source(config.source, config.general)
    lister = SourceLister(
        source,
        filters=config.source.filters,
        page_delay=config.general.rate_limit_interval,
    )
    cancel_event = threading.Event()
    orchestrator = SyncOrchestrator(
        lister=lister,
        targets=config.targets,
        adapter_factory=lambda target: create_target_adapter(
            target, config.general, dry_run=dry_run
        ),
        hooks=config.hooks,
        hook_runner=create_hook_runner(),
        dry_run=dry_run,
        cancel_event=cancel_event,
    )

    def progress_callback(message: str, current: int, total: int) -> None:
        console.progress(current, total, message)

    console.section("Syncing gists")
    with CancelOnInterrupt(cancel_event, console):
        result = orchestrator.sync(progress_callback=progress_callback)

    console.sync_result(result)

    # a cancelled run only fails when it recorded errors
    if result.success:
        return ExitCode.SUCCESS
    if result.cancelled:
        return ExitCode.CANCELLED
    if result.partial_success:
        return ExitCode.PARTIAL_SUCCESS
    return ExitCode.ERROR


def run_list(console: Console, args: argparse.Namespace) -> int:
    """List the source gists that a sync would process."""
    _, config = load_config(args)
    configure_logging(args, config)

    source = create_gist_source(config.source, config.general)
    lister = SourceLister(
        source,
        filters=config.source.filters,
        page_delay=config.general.rate_limit_interval,
    )
    items = lister.list()

    console.section(f"Gists on {source.name} ({len(items)})")
    rows = [
        [
            item.id,
            "yes" if item.is_public else "no",
            item.updated_at,
            (item.description or "")[:60],
        ]
        for item in items
    ]
    console.table(["ID", "Public", "Updated", "Description"], rows)
    console.print(f"{len(items)} gists", force=console.quiet)
    return ExitCode.SUCCESS


def run_targets(console: Console, args: argparse.Namespace) -> int:
    """Show the configured targets."""
    _, config = load_config(args)
    configure_logging(args, config)

    console.section(f"Targets ({len(config.enabled_targets)} enabled)")
    rows = [
        [
            target.name,
            target.provider.value,
            "yes" if target.enabled else "no",
            target.username or target.workspace or target.team or "",
        ]
        for target in config.targets
    ]
    console.table(["Name", "Provider", "Enabled", "User"], rows)
    return ExitCode.SUCCESS


def run_validate(console: Console, args: argparse.Namespace) -> int:
    """Load and validate the configuration without touching any platform."""
    provider = FileConfigProvider(config_path=args.config)
    errors = provider.validate()

    if errors:
        console.error("Configuration is invalid:")
        for error in errors:
            console.detail(error)
        return ExitCode.CONFIG_ERROR

    config = provider.load()
    console.success(f"Configuration OK: {provider.config_file_path}")
    console.detail(f"Source: {config.source.username} ({config.source.provider})")
    console.detail(
        f"Targets: {len(config.enabled_targets)} enabled, {len(config.targets)} configured"
    )
    return ExitCode.SUCCESS


HANDLERS = {
    "sync": run_sync,
    "list": run_list,
    "targets": run_targets,
    "validate": run_validate,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the gist-sync CLI.

    Parses arguments, sets up logging, and runs the requested command.

    Args:
        argv: Arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(args)

    console = Console(
        color=not args.no_color,
        verbose=args.verbose,
        quiet=args.quiet,
    )

    try:
        return HANDLERS[args.command](console, args)

    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted by user")
        return ExitCode.SIGINT

    except Exception as e:
        console.error(str(e))
        if args.verbose:
            logging.getLogger("gist-sync").exception(
                "Unhandled error", extra={"command": args.command}
            )
        return ExitCode.from_exception(e)


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
