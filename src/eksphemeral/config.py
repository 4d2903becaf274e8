"""Runtime configuration resolved from the environment.

``EKSPHEMERAL_HOME`` is the only required setting: it names the
directory holding the ``eksp-*.sh`` scripts that do the actual work.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from eksphemeral.exceptions import ConfigurationError, MissingEnvironmentError

HOME_ENV = "EKSPHEMERAL_HOME"
TIMEOUT_ENV = "EKSPHEMERAL_SCRIPT_TIMEOUT"
PROPAGATE_EXIT_ENV = "EKSPHEMERAL_PROPAGATE_EXIT"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class Scripts:
    """File names of the external scripts under ``$EKSPHEMERAL_HOME``."""

    INSTALL = "eksp-up.sh"
    UNINSTALL = "eksp-down.sh"
    CREATE = "eksp-create.sh"
    LIST = "eksp-list.sh"
    PROLONG = "eksp-prolong.sh"

    ALL: tuple[str, ...] = (INSTALL, UNINSTALL, CREATE, LIST, PROLONG)


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved settings for a single CLI invocation."""

    home: Path
    """Directory containing the external scripts."""

    script_timeout: float | None = None
    """Seconds after which a script is killed, or ``None`` to wait forever."""

    propagate_exit: bool = False
    """Whether a failed script turns into a non-zero exit of ``eksp`` itself."""

    def script(self, name: str) -> Path:
        """Return the absolute path of script *name* under :attr:`home`."""
        return self.home / name


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from *environ* (defaults to ``os.environ``).

    Raises
    ------
    MissingEnvironmentError
        When ``EKSPHEMERAL_HOME`` is not set.
    ConfigurationError
        When ``EKSPHEMERAL_SCRIPT_TIMEOUT`` is not a positive number.
    """
    env = os.environ if environ is None else environ

    home = env.get(HOME_ENV)
    if home is None:
        raise MissingEnvironmentError(
            f"Please set the {HOME_ENV} environment variable",
            hint="Point it at the directory containing the eksp-*.sh scripts.",
        )

    return Settings(
        home=Path(home).expanduser(),
        script_timeout=_parse_timeout(env.get(TIMEOUT_ENV, "")),
        propagate_exit=env.get(PROPAGATE_EXIT_ENV, "").strip().lower() in _TRUTHY,
    )


def _parse_timeout(raw: str) -> float | None:
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid {TIMEOUT_ENV} value: {raw!r}",
            hint="Use a positive number of seconds, or unset it to disable the timeout.",
        ) from exc
    if value <= 0:
        raise ConfigurationError(
            f"Invalid {TIMEOUT_ENV} value: {raw!r}",
            hint="Use a positive number of seconds, or unset it to disable the timeout.",
        )
    return value
