"""
Exit Codes - Standardized exit codes for the gist-sync CLI.

Exit codes follow Unix conventions:
- 0: Success
- 1: General error
- 2-63: Application-specific errors
- 128+N: Killed by signal N

Usage:
    from gistsync.cli.exit_codes import ExitCode

    sys.exit(ExitCode.CONFIG_ERROR)
"""

from enum import IntEnum

from ..core.exceptions import (
    ConfigError,
    ConfigFileError,
    SourceListingError,
    TransientError,
)


class ExitCode(IntEnum):
    """
    Standardized exit codes for the CLI.

    Attributes:
        SUCCESS: Every pair synced (or nothing to do).
        ERROR: General or unknown error.
        CONFIG_ERROR: Configuration is missing or invalid.
        CONNECTION_ERROR: The source could not be listed.
        PARTIAL_SUCCESS: Some pairs synced, some failed.
        CANCELLED: The run was cancelled after recording errors.
        FILE_NOT_FOUND: The config file does not exist.
        SIGINT: Interrupted a second time (128 + 2).
    """

    SUCCESS = 0
    ERROR = 1
    CONFIG_ERROR = 2
    CONNECTION_ERROR = 3
    PARTIAL_SUCCESS = 4
    CANCELLED = 5
    FILE_NOT_FOUND = 6
    SIGINT = 130

    @property
    def description(self) -> str:
        """Get a human-readable description of the exit code."""
        return _DESCRIPTIONS.get(self, "Unknown exit code")

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ExitCode":
        """
        Determine the appropriate exit code for an exception.

        Args:
            exc: The exception that ended the run.

        Returns:
            The matching exit code.
        """
        if isinstance(exc, KeyboardInterrupt):
            return cls.SIGINT
        if isinstance(exc, ConfigFileError) and "not found" in exc.message.lower():
            return cls.FILE_NOT_FOUND
        if isinstance(exc, ConfigError):
            return cls.CONFIG_ERROR
        if isinstance(exc, FileNotFoundError):
            return cls.FILE_NOT_FOUND
        if isinstance(exc, (SourceListingError, TransientError)):
            return cls.CONNECTION_ERROR
        return cls.ERROR


_DESCRIPTIONS = {
    ExitCode.SUCCESS: "Operation completed successfully",
    ExitCode.ERROR: "An error occurred",
    ExitCode.CONFIG_ERROR: "Configuration error",
    ExitCode.FILE_NOT_FOUND: "Config file not found",
    ExitCode.CONNECTION_ERROR: "Could not list source gists",
    ExitCode.PARTIAL_SUCCESS: "Some gists failed to sync",
    ExitCode.CANCELLED: "Sync cancelled with errors",
    ExitCode.SIGINT: "Interrupted by user",
}
