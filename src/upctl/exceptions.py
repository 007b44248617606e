"""Custom exception hierarchy for upctl.

All exceptions that cross layer boundaries must inherit from
:class:`UpctlError`.  Raw third-party exceptions (requests, urllib3,
``OSError``) must NEVER propagate beyond the infrastructure layer — they
are caught there and re-raised as a typed subclass defined here.

Hierarchy
---------
UpctlError
├── UsageError
├── ConfigError
├── FileDiscoveryError
│   └── PathNotFoundError
├── TransportError
├── ServiceError
└── MissingDependencyError
"""

from __future__ import annotations


class UpctlError(Exception):
    """Base exception for all upctl errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Arguments / configuration ---------------------------------------------

class UsageError(UpctlError):
    """Raised when command arguments are missing or malformed.

    This is the only error kind after which the CLI re-prints the
    command usage line.
    """


class ConfigError(UpctlError):
    """Raised when the configuration file or environment is invalid."""


# --- File discovery --------------------------------------------------------

class FileDiscoveryError(UpctlError):
    """Raised when the files to upload cannot be collected."""


class PathNotFoundError(FileDiscoveryError):
    """Raised when a path argument does not exist."""


# --- Network / service -----------------------------------------------------

class TransportError(UpctlError):
    """Raised when the request could not be completed at the network level.

    Retries have already been exhausted when this is raised.
    """


class ServiceError(UpctlError):
    """Raised when the upload service reports a failure."""

    def __init__(
        self,
        message: str,
        *,
        code: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.code: int | None = code
        """Envelope status code, when the service sent one."""


# --- Environment / tooling -------------------------------------------------

class MissingDependencyError(UpctlError):
    """Raised when an optional runtime dependency is not available."""
