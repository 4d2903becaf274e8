"""Infrastructure: running the external ``eksp-*.sh`` scripts.

Each child gets two drain threads, one per pipe, started as soon as the
process is up and joined before the result is returned.  Lines keep
their order within a stream; no ordering is promised across stdout and
stderr.

Rules
-----
* Launch failures (``OSError``) are re-raised as
  :class:`~eksphemeral.exceptions.ProcessLaunchError`.
* A non-zero exit is data, not an error: it is reported through
  :class:`ProcessResult`.
* No user-facing output — lines go to the caller's ``line_sink``.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from eksphemeral._logging import get_logger
from eksphemeral.exceptions import ProcessLaunchError

_log = get_logger("infra.process_runner")

LineSink = Callable[[str], None]
"""Receives one line of child output, without its line terminator."""

_KILL_GRACE_SEC = 5.0


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of one script invocation."""

    command: tuple[str, ...]
    """The argv that was executed."""

    returncode: int
    """Exit status; negative when the child was killed by a signal."""

    output: str = ""
    """Captured stdout lines joined without separators (capturing mode only)."""

    timed_out: bool = False
    """Whether the child was killed for exceeding its timeout."""

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_streaming(
    command: str | Path,
    args: Sequence[str] = (),
    *,
    line_sink: LineSink,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run *command*, forwarding stdout and stderr lines to *line_sink*.

    Returns once the child has exited and both streams are drained.

    Raises
    ------
    ProcessLaunchError
        When the child process cannot be started.
    """
    process, argv = _launch(command, args, env)
    drains = [
        _start_drain(process.stdout, line_sink, "stdout"),
        _start_drain(process.stderr, line_sink, "stderr"),
    ]
    returncode, timed_out = _wait(process, timeout)
    _join(drains, timed_out)
    return ProcessResult(command=argv, returncode=returncode, timed_out=timed_out)


def run_capturing(
    command: str | Path,
    args: Sequence[str] = (),
    *,
    line_sink: LineSink,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> ProcessResult:
    """Run *command*, capturing stdout while forwarding stderr to *line_sink*.

    Captured stdout lines are concatenated **without separators** into
    :attr:`ProcessResult.output`, so a script must print its JSON on a
    single line.

    Raises
    ------
    ProcessLaunchError
        When the child process cannot be started.
    """
    process, argv = _launch(command, args, env)
    chunks: list[str] = []
    drains = [
        _start_drain(process.stderr, line_sink, "stderr"),
        _start_drain(process.stdout, chunks.append, "stdout"),
    ]
    returncode, timed_out = _wait(process, timeout)
    _join(drains, timed_out)
    return ProcessResult(
        command=argv,
        returncode=returncode,
        output="".join(chunks),
        timed_out=timed_out,
    )


# ---------------------------------------------------------------------------
# Process lifecycle
# ---------------------------------------------------------------------------

def _launch(
    command: str | Path,
    args: Sequence[str],
    env: Mapping[str, str] | None,
) -> tuple[subprocess.Popen[str], tuple[str, ...]]:
    argv = (str(command), *args)
    child_env = dict(os.environ if env is None else env)
    _log.debug("launching %s", shlex.join(argv))
    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=child_env,
        )
    except OSError as exc:
        raise ProcessLaunchError(
            f"{argv[0]}: {exc.strerror or exc}",
            hint="Check that the script exists and is executable.",
        ) from exc
    return process, argv


def _wait(process: subprocess.Popen[str], timeout: float | None) -> tuple[int, bool]:
    try:
        returncode = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _log.warning("pid %s exceeded %ss timeout, terminating", process.pid, timeout)
        process.terminate()
        try:
            process.wait(timeout=_KILL_GRACE_SEC)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
        return process.returncode, True
    _log.debug("pid %s exited with status %s", process.pid, returncode)
    return returncode, False


# ---------------------------------------------------------------------------
# Pipe draining
# ---------------------------------------------------------------------------

def _drain(stream: IO[str], sink: LineSink) -> None:
    try:
        for line in stream:
            sink(line.removesuffix("\n").removesuffix("\r"))
    finally:
        stream.close()


def _start_drain(stream: IO[str] | None, sink: LineSink, label: str) -> threading.Thread:
    if stream is None:
        raise ProcessLaunchError(f"no {label} pipe attached to child process")
    thread = threading.Thread(
        target=_drain,
        args=(stream, sink),
        name=f"eksphemeral-drain-{label}",
        daemon=True,
    )
    thread.start()
    return thread


def _join(drains: list[threading.Thread], timed_out: bool) -> None:
    # Grandchildren of a killed script may still hold the pipes open.
    for thread in drains:
        thread.join(timeout=_KILL_GRACE_SEC if timed_out else None)
