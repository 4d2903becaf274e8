"""Infrastructure layer — external system integration.

This layer wraps all interaction with the operating system: launching
the ``eksp-*.sh`` scripts and draining their output.  Every raw
``OSError`` is caught here and re-raised as an
:class:`~eksphemeral.exceptions.EksphemeralError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from eksphemeral.infra.process_runner import (
    LineSink,
    ProcessResult,
    run_capturing,
    run_streaming,
)

__all__: list[str] = [
    "LineSink",
    "ProcessResult",
    "run_capturing",
    "run_streaming",
]
