"""Diagnostic logging for eksp.

User-facing output goes through :mod:`eksphemeral.cli.console`; the
``eksphemeral`` logger only carries diagnostics (script launches, exit
statuses, skipped lookups) to stderr.  It is silent below WARNING unless
``-v`` or ``EKSPHEMERAL_LOG_LEVEL`` asks for more.
"""

from __future__ import annotations

import logging
import os

LEVEL_ENV = "EKSPHEMERAL_LOG_LEVEL"

_ROOT = "eksphemeral"
_FORMAT = "ts=%(asctime)s level=%(levelname)s logger=%(name)s msg=%(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``eksphemeral`` namespace."""
    return logging.getLogger(f"{_ROOT}.{name}")


def _level_from_env() -> int:
    name = os.environ.get(LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else None
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(*, level: int | None = None) -> None:
    """Attach a single stderr handler to the ``eksphemeral`` logger.

    *level* wins over ``EKSPHEMERAL_LOG_LEVEL``.  Calling this again only
    adjusts the level.
    """
    root = logging.getLogger(_ROOT)
    if not any(getattr(h, "_eksphemeral", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._eksphemeral = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(_level_from_env() if level is None else level)
