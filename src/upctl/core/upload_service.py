"""Core upload service — orchestrates the upload pipeline.

Flow
----
1. Build the transport context for ``/file/``.
2. Collect files via the injected :class:`FileCollector`.
3. Send one multipart POST through a transport built for the context.
4. Interpret the response.

File discovery happens before any transport is created, so a missing
path never costs a network round trip.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from os import PathLike

from upctl.core.models import ClientConfig, ExpireDirective, OutgoingRequest
from upctl.core.protocols import FileCollector, ProgressCallback, TransportFactory
from upctl.core.response_interpreter import interpret_response
from upctl.core.transport_builder import build_transport_context
from upctl.exceptions import UsageError

logger = logging.getLogger(__name__)

UPLOAD_PATH: str = "/file/"


class UploadService:
    """Drives a single upload.

    Parameters
    ----------
    config:
        Resolved client configuration.
    transport_factory:
        Builds a transport from the per-operation context.
    collector:
        Expands path arguments into files.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport_factory: TransportFactory,
        collector: FileCollector,
    ) -> None:
        self._config = config
        self._transport_factory = transport_factory
        self._collector = collector

    def upload(
        self,
        paths: Sequence[str | PathLike[str]],
        *,
        expire: ExpireDirective | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> str:
        """Upload every file reachable from *paths* in one request.

        Returns
        -------
        str
            The service's success message (may be empty).

        Raises
        ------
        UsageError
            If *paths* is empty.
        FileDiscoveryError
            If a path is missing or a walk fails.
        TransportError
            If the request failed after retries.
        ServiceError
            If the service reported a failure.
        """
        if not paths:
            raise UsageError("No files specified to upload!")

        context = build_transport_context(self._config, UPLOAD_PATH)

        files = self._collector.collect(paths)

        # The service always receives an expire field, empty when unset.
        form = {"expire": str(expire) if expire is not None else ""}

        logger.debug("Uploading %d file(s) to %s", len(files), context.url)

        transport = self._transport_factory(context)
        raw = transport.send(
            OutgoingRequest(
                method="POST",
                url=context.url,
                files=files,
                form=form,
                multipart=True,
            ),
            progress_callback=progress_callback,
        )
        return interpret_response(raw, debug=context.debug)
