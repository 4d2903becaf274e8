"""``eksp doctor`` — environment diagnostics command.

Checks that ``$EKSPHEMERAL_HOME`` points at a directory holding all five
``eksp-*.sh`` scripts with the executable bit set, and renders a Rich
table summarising the result.  No business logic resides here; it
purely collects and displays diagnostic data.
"""

from __future__ import annotations

import os
import platform
import sys

from eksphemeral.cli import exit_codes
from eksphemeral.cli.console import console
from eksphemeral.config import HOME_ENV, Scripts, Settings
from eksphemeral.version import __version__

_OK = "[green]OK[/green]"
_FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _eksphemeral_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the eksphemeral version row."""
    return "eksphemeral", __version__, _OK


def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = _OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _home_check(settings: Settings) -> tuple[str, str, str]:
    """Return (label, value, status) for the scripts directory row."""
    if settings.home.is_dir():
        return HOME_ENV, str(settings.home), _OK
    return HOME_ENV, f"{settings.home} (not a directory)", _FAIL


def _script_check(settings: Settings, name: str) -> tuple[str, str, str]:
    """Return (label, value, status) for one external script."""
    path = settings.script(name)
    if not path.is_file():
        return name, "missing", _FAIL
    if not os.access(path, os.X_OK):
        return name, "not executable", _FAIL
    return name, str(path), _OK


def collect_checks(settings: Settings) -> list[tuple[str, str, str]]:
    """Run every diagnostic check, in display order."""
    return [
        _eksphemeral_version_check(),
        _python_version_check(),
        _home_check(settings),
        *(_script_check(settings, name) for name in Scripts.ALL),
    ]


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\neksp doctor", file=sys.stderr)
    print("=" * 72, file=sys.stderr)
    print(f"{'Component':<20} {'Value':<42} {'Status':<8}", file=sys.stderr)
    print("-" * 72, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<20} {value:<42} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when every check passes,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks(settings)
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        print(
            "Some checks failed." if has_failure else "All checks passed.",
            file=sys.stderr,
        )
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="eksp doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=16)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table, markup=True)
    console.print()

    if has_failure:
        console.print("Some checks failed.", style="bold red")
        return exit_codes.GENERAL_ERROR
    console.print("All checks passed.", style="bold green")
    return exit_codes.SUCCESS
