"""Infrastructure: expand path arguments into the files to upload.

Rules
-----
* Fail fast: the first missing path or walk error aborts collection and
  nothing collected so far is returned.
* Directories are walked in sorted order.  A symlinked directory inside
  a walked tree aborts collection; it is never followed or skipped.
* No deduplication.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Sequence
from os import PathLike
from pathlib import Path

from upctl.exceptions import FileDiscoveryError, PathNotFoundError


class FilesystemCollector:
    """Concrete :class:`~upctl.core.protocols.FileCollector`."""

    def collect(self, paths: Sequence[str | PathLike[str]]) -> tuple[Path, ...]:
        """Return absolute paths of every file reachable from *paths*."""
        entries: list[Path] = []
        for raw in paths:
            path = Path(raw).absolute()
            try:
                mode = path.stat().st_mode
            except FileNotFoundError as exc:
                raise PathNotFoundError(
                    f"{raw}: no such file or directory",
                ) from exc
            except OSError as exc:
                raise FileDiscoveryError(f"{raw}: {exc.strerror or exc}") from exc

            if stat.S_ISDIR(mode):
                entries.extend(_walk(path))
            else:
                entries.append(path)
        return tuple(entries)


def _walk(root: Path) -> list[Path]:
    """Collect every non-directory entry beneath *root*."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        dirnames.sort()
        for name in dirnames:
            link = Path(dirpath, name)
            if link.is_symlink():
                raise FileDiscoveryError(
                    f"{link}: symlinked directories cannot be uploaded",
                    hint="Pass the link target as a path argument instead.",
                )
        for name in sorted(filenames):
            found.append(Path(dirpath, name))
    return found


def _raise_walk_error(exc: OSError) -> None:
    target = exc.filename or "directory"
    raise FileDiscoveryError(
        f"{target}: {exc.strerror or exc}",
        hint="Check read permissions on the directory tree.",
    ) from exc
