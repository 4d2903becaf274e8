"""Allow ``python -m eksphemeral`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m eksphemeral`` behaves identically to the ``eksp``
console script.
"""

from __future__ import annotations

from eksphemeral.cli.app import cli

if __name__ == "__main__":
    cli()
