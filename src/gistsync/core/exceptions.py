"""
Exception hierarchy for gist-sync.

All errors raised by the engine, the adapters and the configuration layer
derive from GistSyncError, so callers can catch one type at the boundary.

Hierarchy:

    GistSyncError
    ├── ConfigError                 fatal, raised before any network call
    │   └── ConfigFileError
    ├── SourceListingError          fatal, the source could not be enumerated
    ├── NotApplicable               an adapter declined an optional capability
    └── ProviderError               a call against a remote platform failed
        ├── TransientError          a single call failed (network, non-2xx)
        │   ├── AuthenticationError     401
        │   ├── AccessDeniedError       403
        │   ├── NotFoundError           404
        │   ├── RateLimitError          429
        │   └── RequestTimeoutError     timeout expired
        └── AdapterError            failed after at least one successful call
"""

from __future__ import annotations


class GistSyncError(Exception):
    """Base exception for all gist-sync errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


# =============================================================================
# Configuration
# =============================================================================


class ConfigError(GistSyncError):
    """Configuration is missing or invalid."""


class ConfigFileError(ConfigError):
    """Configuration file could not be read or parsed."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.config_path = config_path


# =============================================================================
# Source
# =============================================================================


class SourceListingError(GistSyncError):
    """The source platform could not be enumerated; the run cannot proceed."""


# =============================================================================
# Providers
# =============================================================================


class ProviderError(GistSyncError):
    """A call against a remote platform failed."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        provider: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.resource = resource
        self.provider = provider


class TransientError(ProviderError):
    """A single remote call failed (network error, timeout or non-2xx status)."""


class AuthenticationError(TransientError):
    """Credentials were rejected (HTTP 401)."""


class AccessDeniedError(TransientError):
    """Credentials lack permission for the resource (HTTP 403)."""


class NotFoundError(TransientError):
    """The requested resource does not exist (HTTP 404)."""


class RateLimitError(TransientError):
    """The platform throttled the request (HTTP 429)."""

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        resource: str | None = None,
        provider: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, resource, provider, cause)
        self.retry_after = retry_after


class RequestTimeoutError(TransientError):
    """The request did not complete within the configured timeout."""


class AdapterError(ProviderError):
    """A multi-step platform operation failed after at least one call succeeded."""


# =============================================================================
# Capabilities
# =============================================================================


class NotApplicable(GistSyncError):
    """An adapter does not support the requested operation."""

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation
