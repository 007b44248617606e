"""Domain models for upctl.

All models are **frozen** dataclasses — immutable value objects.  They
carry zero I/O and no dependencies on external packages.  The only
behaviour they hold is pure derivation (backoff delays, percentages,
expire parsing).
"""

from __future__ import annotations

import random
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from upctl.exceptions import UsageError


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ApiContext:
    """A named tenant credential scope."""

    context: str
    """Tenant name, sent as ``apicontext`` in list queries."""

    key: str
    """Bearer token used when this context is selected."""


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Fully resolved client configuration.

    Produced by the CLI configuration layer from defaults, the config
    file, the environment and command-line flags.  The core only ever
    reads it.
    """

    endpoint: str
    """Base URL of the upload API, e.g. ``http://localhost:8080/api/v1``."""

    version: str
    """Client version, used for the ``User-Agent`` header."""

    api_key: str | None = None
    retries: int = 3
    debug: bool = False
    timeout: float = 300.0
    apicontexts: tuple[ApiContext, ...] = ()

    def key_for(self, context: str | None) -> str | None:
        """Return the bearer token to use for tenant *context*.

        A configured :class:`ApiContext` with a matching name wins over
        the endpoint-wide API key.
        """
        if context is not None:
            for candidate in self.apicontexts:
                if candidate.context == context:
                    return candidate.key
        return self.api_key


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Capped exponential backoff with jitter.

    ``count`` of zero disables retries entirely.
    """

    count: int = 0
    min_interval: float = 1.0
    max_interval: float = 5.0

    @property
    def enabled(self) -> bool:
        return self.count > 0

    def backoff(
        self,
        attempt: int,
        rand: Callable[[], float] = random.random,
    ) -> float:
        """Return the delay in seconds before retry *attempt* (1-based).

        The exponential step ``min * 2**attempt`` is capped at
        ``max_interval``; the delay is drawn from the upper half of that
        step and never drops below ``min_interval``.
        """
        if attempt < 1:
            return 0.0
        step = min(self.max_interval, self.min_interval * 2 ** attempt)
        half = step / 2
        return max(self.min_interval, half + rand() * half)


@dataclass(frozen=True, slots=True)
class TransportContext:
    """Everything needed to issue requests for one operation.

    Built once per operation by
    :func:`~upctl.core.transport_builder.build_transport_context`.
    """

    url: str
    """Fully resolved request URL (endpoint + path suffix)."""

    user_agent: str
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    api_key: str | None = None
    debug: bool = False
    timeout: float = 300.0


UPLOAD_FIELD: str = "upload[]"
"""Form field name repeated once per attached file."""


@dataclass(frozen=True, slots=True)
class OutgoingRequest:
    """A single HTTP request handed to a :class:`Transport`."""

    method: str
    url: str
    files: tuple[Path, ...] = ()
    form: Mapping[str, str] = field(default_factory=dict)
    json: Mapping[str, Any] | None = None
    file_field: str = UPLOAD_FIELD
    multipart: bool = False
    """Send as ``multipart/form-data`` even when *files* is empty."""


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Status and body as received from the wire."""

    status: int
    body: str
    error: Exception | None = None
    """Underlying transport error reported alongside the response."""


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ResponseEnvelope:
    """The ``{code, success, message}`` shape returned by the service."""

    code: int = 0
    success: bool = False
    message: str = ""


@dataclass(frozen=True, slots=True)
class Parsed:
    """Body decoded as a :class:`ResponseEnvelope`."""

    envelope: ResponseEnvelope


@dataclass(frozen=True, slots=True)
class Unparsed:
    """Body that is not an envelope; kept verbatim."""

    text: str


DecodedBody = Parsed | Unparsed


# ---------------------------------------------------------------------------
# Upload parameters / progress
# ---------------------------------------------------------------------------

_DURATION_RE = re.compile(r"^[1-9][0-9]*[dhm]$")


@dataclass(frozen=True, slots=True)
class ExpireDirective:
    """When the service should purge an upload.

    Either ``asap`` or a duration with a ``d``/``h``/``m`` unit.
    """

    value: str

    ASAP = "asap"

    @classmethod
    def parse(cls, raw: str) -> ExpireDirective:
        """Validate *raw* and return a directive.

        Raises
        ------
        UsageError
            If *raw* is neither ``asap`` nor a duration like ``30m``.
        """
        value = raw.strip().lower()
        if value == cls.ASAP or _DURATION_RE.match(value):
            return cls(value)
        raise UsageError(
            f"Invalid expire setting: {raw!r}",
            hint="Use 'asap' or a duration such as 30m, 2h or 1d.",
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class UploadProgress:
    """Transfer state of one file within the multipart body."""

    filename: str
    uploaded: int
    total: int
    index: int = 0
    """Position of the file within the request; duplicates differ here."""

    @property
    def percent(self) -> float:
        """Fraction of the file sent so far, 0–100."""
        if self.total <= 0:
            return 100.0
        return min(100.0, self.uploaded / self.total * 100.0)

    @property
    def finished(self) -> bool:
        return self.uploaded >= self.total
