"""CLI console helpers with optional Rich support.

Informational lines go to stdout in light blue, errors to stderr in
light red.  Reports and script output are written verbatim, without
styling, so tabs and alignment survive.

This module avoids module-level imports of Rich so bootstrap paths
(``--help``, ``--version``) keep working when it is not installed.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO

from eksphemeral.exceptions import MissingDependencyError

INFO_STYLE = "bright_blue"
ERROR_STYLE = "bright_red"
HINT_STYLE = "yellow"


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = False) -> Any:
	"""Create a Rich console instance targeting stdout or stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def __init__(self, *, stderr: bool) -> None:
		self._stderr = stderr

	def _stream(self) -> TextIO:
		return sys.stderr if self._stderr else sys.stdout

	def print(
		self,
		*objects: object,
		style: str | None = None,
		markup: bool = False,
	) -> None:
		"""Render with Rich when available, else plain print.

		Markup is off by default so script text is shown verbatim; pass
		``markup=True`` for renderables that carry their own styling.
		"""
		try:
			rich_console = get_rich_console(stderr=self._stderr)
		except MissingDependencyError:
			print(*objects, file=self._stream())
			return
		rich_console.print(
			*objects,
			style=style,
			markup=markup,
			emoji=False,
			highlight=False,
			soft_wrap=True,
		)


console = _ConsoleProxy(stderr=True)
"""Diagnostics console (stderr)."""

out = _ConsoleProxy(stderr=False)
"""Informational console (stdout)."""


def info(message: str) -> None:
	"""Print an informational line to stdout in the info colour."""
	out.print(message, style=INFO_STYLE)


def error(message: str, detail: object | None = None) -> None:
	"""Print an error line to stderr in the error colour.

	When *detail* (usually an exception) is given the line reads
	``"<message>: <detail>"``.
	"""
	if detail is not None:
		message = f"{message.rstrip(': ')}: {detail}"
	console.print(message, style=ERROR_STYLE)


def hint(message: str) -> None:
	"""Print actionable guidance below an error."""
	console.print(f"Hint: {message}", style=HINT_STYLE)


def emit(text: str) -> None:
	"""Write *text* to stdout verbatim, terminated by a single newline."""
	stream = sys.stdout
	stream.write(text if text.endswith("\n") else text + "\n")
	stream.flush()
