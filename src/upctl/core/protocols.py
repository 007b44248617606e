"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so that services can be driven by fakes in tests.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from os import PathLike
from pathlib import Path
from typing import Protocol

from upctl.core.models import OutgoingRequest, RawResponse, TransportContext, UploadProgress

ProgressCallback = Callable[[UploadProgress], None]
"""Receives per-file transfer updates while a request body is sent."""


class Transport(Protocol):
    """Contract for HTTP backends.

    Any object that implements :meth:`send` with the correct signature
    satisfies this protocol structurally (no explicit inheritance
    required).
    """

    def send(
        self,
        request: OutgoingRequest,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> RawResponse:
        """Issue *request* and return whatever the server answered.

        HTTP error statuses are NOT exceptions here — they come back as
        a :class:`RawResponse` for the response interpreter to judge.

        Raises
        ------
        TransportError
            When no response could be obtained, after retries.
        """
        ...  # pragma: no cover


TransportFactory = Callable[[TransportContext], Transport]
"""Builds a :class:`Transport` bound to one operation's context."""


class FileCollector(Protocol):
    """Contract for expanding path arguments into files to upload."""

    def collect(self, paths: Sequence[str | PathLike[str]]) -> tuple[Path, ...]:
        """Return every file reachable from *paths*, in traversal order.

        Raises
        ------
        PathNotFoundError
            When any argument does not exist.
        FileDiscoveryError
            When a directory walk fails.
        """
        ...  # pragma: no cover
