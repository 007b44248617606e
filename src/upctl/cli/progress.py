"""Rich-based upload progress driven by :class:`UploadProgress` callbacks.

This module bridges the multipart body's progress callback with a Rich
:class:`~rich.progress.Progress` display, one task per file.  It is used
by the CLI layer only — the infra layer merely forwards progress
records.

Design
------
* :class:`RichUploadProgress` manages a Rich Progress context.
* :meth:`__call__` is the callback passed to ``UploadService.upload``.
* Shutdown-safe: if the display is already stopped, calls are silently
  ignored.
"""

from __future__ import annotations

from typing import Any

from upctl.cli.console import get_rich_console
from upctl.core.models import UploadProgress
from upctl.exceptions import MissingDependencyError


class RichUploadProgress:
    """Callable progress adapter for Rich.

    Usage::

        with RichUploadProgress() as progress:
            service.upload(paths, progress_callback=progress)
    """

    def __init__(self) -> None:
        try:
            from rich.progress import (
                BarColumn,
                DownloadColumn,
                Progress,
                TaskProgressColumn,
                TextColumn,
                TimeRemainingColumn,
                TransferSpeedColumn,
            )
        except ModuleNotFoundError as exc:
            raise MissingDependencyError(
                "rich is not installed. Install with: pip install rich",
            ) from exc

        self._progress: Any = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=get_rich_console(),
            transient=False,
        )
        self._tasks: dict[int, Any] = {}
        self._started: bool = False

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> RichUploadProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the Rich progress display."""
        if not self._started:
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Stop the Rich progress display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    # ------------------------------------------------------------------
    # Callback
    # ------------------------------------------------------------------

    def __call__(self, update: UploadProgress) -> None:
        if not self._started:
            return

        task_id = self._tasks.get(update.index)
        if task_id is None:
            task_id = self._progress.add_task(
                _display_name(update.filename),
                total=update.total,
            )
            self._tasks[update.index] = task_id

        self._progress.update(task_id, total=update.total, completed=update.uploaded)


def _display_name(filename: str) -> str:
    """Base name of *filename*, truncated to fit the progress line."""
    name = filename.rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    if len(name) > 50:
        name = name[:47] + "..."
    return name
