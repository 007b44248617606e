"""Streaming ``multipart/form-data`` body with per-file progress.

The body is a file-like object: requests sizes it through ``__len__``
and ``tell()``, http.client drains it through ``read()``, and urllib3
rewinds it through ``seek()`` before a retry.  File contents are read
lazily in whatever block size the connection asks for, so memory use
stays flat regardless of upload size.

Part headers are rendered by urllib3's :class:`~urllib3.fields.RequestField`,
exactly as :func:`urllib3.encode_multipart_formdata` would.
"""

from __future__ import annotations

import io
import mimetypes
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary

from upctl.core.models import UploadProgress
from upctl.core.protocols import ProgressCallback
from upctl.exceptions import FileDiscoveryError

PROGRESS_INTERVAL: float = 0.01
"""Minimum seconds between two progress callbacks for the same transfer."""


@dataclass(frozen=True, slots=True)
class _Part:
    """One contiguous slice of the body: literal bytes or a file."""

    size: int
    data: bytes = b""
    path: Path | None = None
    ordinal: int = 0


class MultipartUpload:
    """Seekable multipart body over a list of files and form fields.

    Parameters
    ----------
    field_name:
        Form field repeated for every file (``upload[]``).
    files:
        Files to attach, in order.
    form:
        Scalar form fields, sent before the files.
    progress_callback:
        Receives an :class:`UploadProgress` for the file being sent, at
        most every *interval* seconds and once when a file completes.
    """

    def __init__(
        self,
        field_name: str,
        files: Sequence[Path],
        form: Mapping[str, str] | None = None,
        *,
        progress_callback: ProgressCallback | None = None,
        interval: float = PROGRESS_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        boundary: str | None = None,
    ) -> None:
        self.boundary: str = boundary or choose_boundary()
        self._progress_callback = progress_callback
        self._interval = interval
        self._clock = clock
        self._parts: list[_Part] = self._layout(field_name, files, form or {})
        self._length: int = sum(part.size for part in self._parts)

        self._index: int = 0
        self._offset: int = 0
        self._position: int = 0
        self._handle: BinaryIO | None = None
        self._last_report: float | None = None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _layout(
        self,
        field_name: str,
        files: Sequence[Path],
        form: Mapping[str, str],
    ) -> list[_Part]:
        parts: list[_Part] = []
        delimiter = f"--{self.boundary}\r\n".encode("latin-1")

        for name, value in form.items():
            field = RequestField(name=name, data=value)
            field.make_multipart()
            blob = delimiter + field.render_headers().encode("utf-8")
            blob += value.encode("utf-8") + b"\r\n"
            parts.append(_Part(size=len(blob), data=blob))

        for ordinal, path in enumerate(files):
            try:
                size = path.stat().st_size
            except OSError as exc:
                raise FileDiscoveryError(f"{path}: {exc.strerror or exc}") from exc

            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            field = RequestField(name=field_name, data=b"", filename=path.name)
            field.make_multipart(content_type=content_type)
            header = delimiter + field.render_headers().encode("utf-8")
            parts.append(_Part(size=len(header), data=header))
            parts.append(_Part(size=size, path=path, ordinal=ordinal))
            parts.append(_Part(size=2, data=b"\r\n"))

        closing = f"--{self.boundary}--\r\n".encode("latin-1")
        parts.append(_Part(size=len(closing), data=closing))
        return parts

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    # ------------------------------------------------------------------
    # File-like protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._length

    def tell(self) -> int:
        return self._position

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Reposition the body; only absolute positions are supported."""
        if whence != io.SEEK_SET:
            raise ValueError("MultipartUpload only supports absolute seeks")
        if not 0 <= offset <= self._length:
            raise ValueError(f"seek position {offset} outside body")

        self._close_handle()
        self._last_report = None
        self._position = offset
        self._index = 0
        while self._index < len(self._parts) and offset >= self._parts[self._index].size:
            offset -= self._parts[self._index].size
            self._index += 1
        self._offset = offset
        return self._position

    def read(self, size: int | None = -1) -> bytes:
        if size is None or size < 0:
            size = self._length - self._position

        chunks: list[bytes] = []
        while size > 0 and self._index < len(self._parts):
            part = self._parts[self._index]
            remaining = part.size - self._offset
            if remaining <= 0:
                if part.path is not None and part.size == 0:
                    self._report(part, final=True)
                self._advance()
                continue

            wanted = min(size, remaining)
            if part.path is None:
                chunk = part.data[self._offset:self._offset + wanted]
            else:
                chunk = self._read_file(part, wanted)

            chunks.append(chunk)
            self._offset += len(chunk)
            self._position += len(chunk)
            size -= len(chunk)

            if part.path is not None:
                self._report(part, final=self._offset == part.size)
        return b"".join(chunks)

    def close(self) -> None:
        self._close_handle()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_file(self, part: _Part, wanted: int) -> bytes:
        assert part.path is not None
        if self._handle is None:
            try:
                self._handle = part.path.open("rb")
            except OSError as exc:
                raise FileDiscoveryError(f"{part.path}: {exc.strerror or exc}") from exc
            self._handle.seek(self._offset)

        chunk = self._handle.read(wanted)
        if not chunk:
            raise FileDiscoveryError(
                f"{part.path}: file shrank while it was being uploaded",
            )
        return chunk

    def _advance(self) -> None:
        self._close_handle()
        self._index += 1
        self._offset = 0

    def _close_handle(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def _report(self, part: _Part, *, final: bool) -> None:
        if self._progress_callback is None:
            return
        now = self._clock()
        if (
            not final
            and self._last_report is not None
            and now - self._last_report < self._interval
        ):
            return
        self._last_report = now
        self._progress_callback(
            UploadProgress(
                filename=str(part.path),
                uploaded=self._offset,
                total=part.size,
                index=part.ordinal,
            ),
        )
