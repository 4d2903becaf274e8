"""Exit-code constants used by the CLI layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit, including runs where a script failed but propagation is off."""

GENERAL_ERROR: int = 1
"""No command given, EKSPHEMERAL_HOME unset, or another known error."""

INVALID_SPEC: int = 2
"""``create`` was given a cluster spec file that does not exist."""

MISSING_ARGUMENTS: int = 3
"""``prolong`` was called without both the cluster ID and the minutes."""

SCRIPT_FAILED: int = 4
"""An external script failed and ``--propagate-exit`` was requested."""

UNEXPECTED_ERROR: int = 70
"""An unhandled exception escaped all known error boundaries (EX_SOFTWARE)."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""
