"""CLI application entry point and command routing for eksp.

This module is the **sole error boundary** for the entire application.
It catches :class:`~eksphemeral.exceptions.EksphemeralError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — cluster work is done by the external
  scripts, lookups by :class:`~eksphemeral.core.ClusterService`.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from eksphemeral._logging import get_logger, setup_logging
from eksphemeral.cli import exit_codes
from eksphemeral.cli.console import emit, error, hint, info
from eksphemeral.cli.scripts import ScriptInvoker
from eksphemeral.config import Scripts, Settings, load_settings
from eksphemeral.core.cluster_service import ClusterService
from eksphemeral.core.report import render_detail, render_table
from eksphemeral.exceptions import (
    DecodeError,
    EksphemeralError,
    MissingArgumentError,
    SpecFileNotFoundError,
)
from eksphemeral.version import __version__

_log = get_logger("cli.app")

USAGE = (
    "Please specify one of the following commands: "
    "install, uninstall, create, list, or prolong"
)
LOOKUP_FAILED = (
    "Can't render cluster details. Cluster could be gone or control plane is down :("
)
NO_CLUSTERS = "No clusters found"

Handler = Callable[[Settings, ScriptInvoker, Sequence[str]], int]


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Verbs are dispatched by hand rather than through sub-parsers so that
    missing or unknown verbs keep their own messages and exit codes.
    Options are only recognised before the verb; everything after it is
    handed to the verb verbatim, dashes included.
    """
    parser = argparse.ArgumentParser(
        prog="eksp",
        description="Manage ephemeral EKS clusters through the eksp-*.sh scripts.",
        epilog=(
            "commands: install (i), uninstall (u), create (c) [SPEC_FILE], "
            "list (ls, l) [CLUSTER_ID], prolong (p) CLUSTER_ID MINUTES, doctor"
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log script launches and exit codes to stderr.",
    )
    parser.add_argument(
        "--propagate-exit",
        action="store_true",
        help="Exit non-zero when an external script fails.",
    )
    parser.add_argument("command", nargs="?", default=None, help="Command to run.")
    parser.add_argument(
        "arguments", nargs=argparse.REMAINDER, help="Command arguments."
    )
    return parser


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def _handle_install(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    info("Trying to install EKSphemeral ...")
    invoker.stream(settings.script(Scripts.INSTALL))
    return exit_codes.SUCCESS


def _handle_uninstall(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    info("Trying to uninstall EKSphemeral ...")
    invoker.stream(settings.script(Scripts.UNINSTALL))
    return exit_codes.SUCCESS


def _handle_create(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    """Create a cluster, from a spec file when one is given.

    The spec file must exist; otherwise the create script is never run.
    """
    info("Trying to create a new ephemeral cluster ...")
    if not args:
        invoker.stream(settings.script(Scripts.CREATE))
        return exit_codes.SUCCESS

    spec_file = args[0]
    info(f"... using cluster spec {spec_file}")
    if not Path(spec_file).exists():
        raise SpecFileNotFoundError(
            f"Can't create a cluster due to invalid spec: {spec_file}: no such file or directory",
        )
    invoker.stream(settings.script(Scripts.CREATE), spec_file)
    return exit_codes.SUCCESS


def _handle_list(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    """Show one cluster in detail, or all clusters as a table."""
    service = ClusterService(invoker, settings.script(Scripts.LIST))

    if args:
        try:
            record = service.lookup(args[0])
        except DecodeError as exc:
            _log.debug("lookup of %s failed: %s", args[0], exc)
            error(LOOKUP_FAILED)
            return exit_codes.SUCCESS
        emit(render_detail(record))
        return exit_codes.SUCCESS

    try:
        cluster_ids = service.list_ids()
    except DecodeError as exc:
        error("Can't render cluster spec due to", exc)
        return exit_codes.SUCCESS
    if not cluster_ids:
        info(NO_CLUSTERS)
        return exit_codes.SUCCESS

    listing = service.list_all(cluster_ids)
    emit(render_table(listing.records))
    return exit_codes.SUCCESS


def _handle_prolong(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    if len(args) < 2:
        raise MissingArgumentError(
            "Can't prolong cluster lifetime without both the cluster ID "
            "and the time in minutes provided",
            hint="Usage: eksp prolong CLUSTER_ID MINUTES",
        )
    cluster_id, minutes = args[0], args[1]
    invoker.stream(settings.script(Scripts.PROLONG), cluster_id, minutes)
    return exit_codes.SUCCESS


def _handle_doctor(settings: Settings, invoker: ScriptInvoker, args: Sequence[str]) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from eksphemeral.cli.doctor import run_doctor

    return run_doctor(settings)


_HANDLERS: dict[str, Handler] = {
    "install": _handle_install,
    "uninstall": _handle_uninstall,
    "create": _handle_create,
    "list": _handle_list,
    "prolong": _handle_prolong,
    "doctor": _handle_doctor,
}

ALIASES: dict[str, str] = {
    "i": "install",
    "u": "uninstall",
    "c": "create",
    "ls": "list",
    "l": "list",
    "p": "prolong",
}


def resolve_command(name: str) -> str | None:
    """Map a verb or alias to its canonical command name, or ``None``."""
    canonical = ALIASES.get(name, name)
    return canonical if canonical in _HANDLERS else None


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the eksp CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    EksphemeralError
        For configuration and argument errors; :func:`cli` maps them to
        their exit codes.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else None)

    if args.command is None:
        info(f"This is EKSphemeral in version {__version__}")
        error(USAGE)
        return exit_codes.GENERAL_ERROR

    settings = load_settings()

    command = resolve_command(args.command)
    if command is None:
        error(USAGE)
        return exit_codes.SUCCESS

    invoker = ScriptInvoker(timeout=settings.script_timeout)
    code = _HANDLERS[command](settings, invoker, args.arguments)

    propagate = args.propagate_exit or settings.propagate_exit
    if code == exit_codes.SUCCESS and propagate and invoker.failed:
        return exit_codes.SCRIPT_FAILED
    return code


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except EksphemeralError as exc:
        error(str(exc))
        if exc.hint:
            hint(exc.hint)
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        error("Aborted by user.")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        error(
            "Unexpected error. Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
