"""User-facing wrapper around the process runner.

:class:`ScriptInvoker` turns runner results into the diagnostics users
see: script output is echoed line by line to stdout, launch failures and
non-zero exits are reported in the error colour, and neither aborts the
CLI.  It satisfies :class:`~eksphemeral.core.protocols.ScriptRunner`.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path

from eksphemeral.cli.console import error, hint
from eksphemeral.exceptions import ProcessLaunchError
from eksphemeral.infra.process_runner import ProcessResult, run_capturing, run_streaming

LAUNCH_FAILED: int = 127
"""Return code recorded when a script could not be started at all."""


class ScriptInvoker:
    """Runs external scripts and reports their failures to the user.

    Parameters
    ----------
    timeout:
        Seconds after which a script is killed, or ``None`` to wait
        indefinitely.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout
        self._lock = threading.Lock()
        self.failures: list[int] = []
        """Return codes of every failed invocation, in order."""

    @property
    def failed(self) -> bool:
        """Whether any invocation so far failed to start or exited non-zero."""
        return bool(self.failures)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def stream(self, script: Path, *args: str) -> int:
        """Run *script*, echoing stdout and stderr, and return its exit status."""
        try:
            result = run_streaming(
                script, args, line_sink=self._echo, timeout=self._timeout,
            )
        except ProcessLaunchError as exc:
            self._launch_failed(exc)
            return LAUNCH_FAILED
        self._report(result)
        return result.returncode

    def capture(self, script: Path, *args: str) -> str:
        """Run *script*, echoing stderr, and return its concatenated stdout.

        Returns ``""`` when the script could not be started.
        """
        try:
            result = run_capturing(
                script, args, line_sink=self._echo, timeout=self._timeout,
            )
        except ProcessLaunchError as exc:
            self._launch_failed(exc)
            return ""
        self._report(result)
        return result.output

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _echo(self, line: str) -> None:
        # Called from both drain threads; one write per line.
        with self._lock:
            sys.stdout.write(line + "\n")
            sys.stdout.flush()

    def _launch_failed(self, exc: ProcessLaunchError) -> None:
        self.failures.append(LAUNCH_FAILED)
        error("Can't shell out due to issues with starting command", exc)
        if exc.hint:
            hint(exc.hint)

    def _report(self, result: ProcessResult) -> None:
        if result.ok:
            return
        self.failures.append(result.returncode or 1)
        if result.timed_out:
            error(
                "Something bad happened after command completed",
                f"timed out after {self._timeout:g}s",
            )
        else:
            error(
                "Something bad happened after command completed",
                f"exit status {result.returncode}",
            )
