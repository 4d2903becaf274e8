"""Shared pytest fixtures and configuration for the eksphemeral test suite.

Guidelines
----------
* No AWS access in any test — the ``eksp-*.sh`` scripts are replaced by
  tiny ``/bin/sh`` fakes written into ``tmp_path``.
* Core tests must be pure — runners are mocked.
* Tests must not depend on the caller's ``EKSPHEMERAL_*`` environment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

ScriptWriter = Callable[[str, str], Path]

_ENV_VARS = (
    "EKSPHEMERAL_HOME",
    "EKSPHEMERAL_SCRIPT_TIMEOUT",
    "EKSPHEMERAL_PROPAGATE_EXIT",
    "EKSPHEMERAL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    root = logging.getLogger("eksphemeral")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def write_script(home: Path, name: str, body: str) -> Path:
    """Write an executable ``/bin/sh`` script called *name* under *home*."""
    path = home / name
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture()
def eksp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty scripts directory exported as ``EKSPHEMERAL_HOME``."""
    home = tmp_path / "eksphemeral"
    home.mkdir()
    monkeypatch.setenv("EKSPHEMERAL_HOME", str(home))
    return home


@pytest.fixture()
def script(eksp_home: Path) -> ScriptWriter:
    """Return a writer for fake scripts inside :func:`eksp_home`."""

    def _write(name: str, body: str) -> Path:
        return write_script(eksp_home, name, body)

    return _write


def recording_body(output: str = "") -> str:
    """Script body that logs its arguments to ``calls.log`` then prints *output*."""
    body = 'echo "$(basename "$0") $*" >> "$EKSPHEMERAL_HOME/calls.log"\n'
    if output:
        body += f"echo '{output}'\n"
    return body


def read_calls(home: Path) -> list[str]:
    """Return the invocations recorded by :func:`recording_body` scripts."""
    log = home / "calls.log"
    if not log.exists():
        return []
    return [line.strip() for line in log.read_text(encoding="utf-8").splitlines()]
