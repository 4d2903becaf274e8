"""Custom exception hierarchy for eksphemeral.

All exceptions that cross layer boundaries must inherit from
:class:`EksphemeralError`.  Raw ``OSError``/``json`` exceptions must
NEVER propagate beyond the layer that produced them — they are caught
and re-raised as a typed subclass defined here.

Hierarchy
---------
EksphemeralError
├── ConfigurationError
│   ├── MissingEnvironmentError
│   └── MissingDependencyError
├── UsageError
│   ├── SpecFileNotFoundError
│   └── MissingArgumentError
├── ProcessLaunchError
└── DecodeError
"""

from __future__ import annotations


class EksphemeralError(Exception):
    """Base exception for all eksphemeral errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    and pick the matching process exit code.
    """

    exit_code: int = 1
    """Process exit code used when this error reaches the CLI boundary."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Configuration ---------------------------------------------------------

class ConfigurationError(EksphemeralError):
    """Raised when the runtime configuration is invalid."""


class MissingEnvironmentError(ConfigurationError):
    """Raised when a required environment variable is not set."""


class MissingDependencyError(ConfigurationError):
    """Raised when an optional runtime library is not installed."""


# --- Argument validation ---------------------------------------------------

class UsageError(EksphemeralError):
    """Raised when a command is invoked with invalid arguments."""


class SpecFileNotFoundError(UsageError):
    """Raised when ``create`` is given a cluster spec file that does not exist."""

    exit_code = 2


class MissingArgumentError(UsageError):
    """Raised when a command is missing required positional arguments."""

    exit_code = 3


# --- External scripts ------------------------------------------------------

class ProcessLaunchError(EksphemeralError):
    """Raised when an external script cannot be started."""


class DecodeError(EksphemeralError):
    """Raised when script output is not the JSON shape we expect.

    Callers treat this as "resource unavailable", never as a crash.
    """

    def __init__(self, message: str, *, text: str = "", hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.text: str = text[:200]
        """Leading excerpt of the payload that failed to decode."""
