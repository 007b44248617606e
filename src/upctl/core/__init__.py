"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
"""

from upctl.core.list_service import ListService
from upctl.core.models import (
    ApiContext,
    ClientConfig,
    ExpireDirective,
    OutgoingRequest,
    Parsed,
    RawResponse,
    ResponseEnvelope,
    RetryPolicy,
    TransportContext,
    Unparsed,
    UploadProgress,
)
from upctl.core.protocols import FileCollector, Transport, TransportFactory
from upctl.core.response_interpreter import decode_body, interpret_response
from upctl.core.transport_builder import build_transport_context
from upctl.core.upload_service import UploadService

__all__: list[str] = [
    "ApiContext",
    "ClientConfig",
    "ExpireDirective",
    "FileCollector",
    "ListService",
    "OutgoingRequest",
    "Parsed",
    "RawResponse",
    "ResponseEnvelope",
    "RetryPolicy",
    "Transport",
    "TransportContext",
    "TransportFactory",
    "Unparsed",
    "UploadProgress",
    "UploadService",
    "build_transport_context",
    "decode_body",
    "interpret_response",
]
