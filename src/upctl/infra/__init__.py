"""Infrastructure layer — external system integration.

This layer wraps all interaction with the filesystem and the network
(requests / urllib3).  Every raw third-party exception must be caught
here and re-raised as a :class:`~upctl.exceptions.UpctlError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from upctl.infra.file_collector import FilesystemCollector
from upctl.infra.http_transport import RequestsTransport, transport_factory
from upctl.infra.multipart import MultipartUpload
from upctl.infra.retry import BackoffRetry, build_retry

__all__: list[str] = [
    "BackoffRetry",
    "FilesystemCollector",
    "MultipartUpload",
    "RequestsTransport",
    "build_retry",
    "transport_factory",
]
