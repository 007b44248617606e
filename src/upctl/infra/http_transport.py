"""requests-backed implementation of :class:`~upctl.core.protocols.Transport`.

This module is the **only** place in the codebase that issues HTTP
requests.  All requests/urllib3 exceptions are caught here and re-raised
as :class:`~upctl.exceptions.TransportError` — nothing raw escapes the
infrastructure boundary.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from requests.auth import AuthBase

from upctl.core.models import OutgoingRequest, RawResponse, TransportContext
from upctl.core.protocols import ProgressCallback
from upctl.exceptions import TransportError
from upctl.infra.multipart import MultipartUpload
from upctl.infra.retry import build_retry

logger = logging.getLogger(__name__)

_TRACE_BODY_LIMIT = 2048


class BearerAuth(AuthBase):
    """Attach ``Authorization: Bearer <token>`` to every request."""

    def __init__(self, token: str) -> None:
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


class RequestsTransport:
    """Concrete :class:`Transport` bound to one :class:`TransportContext`.

    Usage::

        transport = RequestsTransport(context)
        raw = transport.send(OutgoingRequest("GET", context.url))

    This class satisfies the :class:`~upctl.core.protocols.Transport`
    protocol structurally — no explicit inheritance required.
    """

    def __init__(
        self,
        context: TransportContext,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._context = context
        self._session: requests.Session = (
            session if session is not None else self._build_session(context)
        )

    @property
    def session(self) -> requests.Session:
        return self._session

    # ------------------------------------------------------------------
    # Session construction
    # ------------------------------------------------------------------

    @staticmethod
    def _build_session(context: TransportContext) -> requests.Session:
        session = requests.Session()
        session.headers["User-Agent"] = context.user_agent

        if context.api_key:
            session.auth = BearerAuth(context.api_key)

        if context.retry.enabled:
            on_retry = _log_retry if context.debug else None
            adapter = HTTPAdapter(max_retries=build_retry(context.retry, on_retry))
            session.mount("http://", adapter)
            session.mount("https://", adapter)

        if context.debug:
            session.hooks["response"].append(_log_exchange)

        return session

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def send(
        self,
        request: OutgoingRequest,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> RawResponse:
        """Send *request*; HTTP error statuses are returned, not raised.

        Raises
        ------
        TransportError
            For connection failures, timeouts and exhausted retries.
        """
        kwargs: dict[str, Any] = {"timeout": self._context.timeout}
        body: MultipartUpload | None = None

        if request.multipart or request.files:
            body = MultipartUpload(
                request.file_field,
                request.files,
                request.form,
                progress_callback=progress_callback,
            )
            kwargs["data"] = body
            kwargs["headers"] = {"Content-Type": body.content_type}
        elif request.json is not None:
            kwargs["json"] = dict(request.json)
        elif request.form:
            kwargs["data"] = dict(request.form)

        try:
            response = self._session.request(request.method, request.url, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(
                f"{request.method} {request.url} failed: {exc}",
                hint="Check the endpoint URL and your network connection.",
            ) from exc
        finally:
            if body is not None:
                body.close()

        return RawResponse(status=response.status_code, body=response.text)


# ---------------------------------------------------------------------------
# Debug tracing
# ---------------------------------------------------------------------------

def describe_exchange(response: requests.Response) -> str:
    """Render request line, headers, timing and body of one exchange."""
    prepared = response.request
    lines = [
        f"{prepared.method} {prepared.url}",
        *(f"> {name}: {_redact(name, value)}" for name, value in prepared.headers.items()),
        f"< HTTP {response.status_code} {response.reason} "
        f"({response.elapsed.total_seconds() * 1000:.1f} ms)",
        *(f"< {name}: {value}" for name, value in response.headers.items()),
    ]
    text = response.text
    if len(text) > _TRACE_BODY_LIMIT:
        text = text[:_TRACE_BODY_LIMIT] + "..."
    lines.append(text)
    return "\n".join(lines)


def _redact(name: str, value: str | bytes) -> str | bytes:
    if name.lower() == "authorization":
        return "Bearer ***"
    return value


def _log_exchange(response: requests.Response, *args: Any, **kwargs: Any) -> None:
    logger.debug("%s", describe_exchange(response))


def _log_retry(method: str, url: str, error: Exception | None) -> None:
    logger.debug("Retrying endpoint request: %s %s %s", method, url, error)


def transport_factory(context: TransportContext) -> RequestsTransport:
    """:data:`~upctl.core.protocols.TransportFactory` for production use."""
    return RequestsTransport(context)
