"""Protocols (interfaces) consumed by the core layer.

Core code depends ONLY on these protocols — never on the concrete
subprocess machinery — so services can be driven by test doubles.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class ScriptRunner(Protocol):
    """Contract for running an external script and capturing its stdout."""

    def capture(self, script: Path, *args: str) -> str:
        """Run *script* with *args* and return its stdout lines concatenated.

        Lines are joined without separators, so scripts must emit
        single-line JSON.  Implementations report launch failures and
        non-zero exits themselves and return ``""`` when no output could
        be obtained; they must not raise for those conditions.
        """
        ...  # pragma: no cover
