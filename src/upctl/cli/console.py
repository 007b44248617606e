"""CLI console and logging helpers with optional Rich support.

This module intentionally avoids module-level imports of Rich so that
bootstrap paths (``--help``, ``--version``) remain functional even when
Rich is not installed.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from upctl.exceptions import MissingDependencyError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``MissingDependencyError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except MissingDependencyError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects)


console = _ConsoleProxy()


def configure_logging(debug: bool) -> None:
	"""Route ``upctl`` (and, in debug mode, ``urllib3``) logs to stderr.

	Level is DEBUG with *debug*, WARNING otherwise.
	"""
	try:
		from rich.logging import RichHandler
	except ModuleNotFoundError as exc:
		raise MissingDependencyError(
			"rich is not installed. Install with: pip install rich",
		) from exc

	level = logging.DEBUG if debug else logging.WARNING
	handler = RichHandler(
		console=get_rich_console(),
		show_path=False,
		show_time=debug,
		markup=False,
	)

	names = ["upctl", "urllib3"] if debug else ["upctl"]
	for name in names:
		logger = logging.getLogger(name)
		logger.handlers = [handler]
		logger.setLevel(level)
