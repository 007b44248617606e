"""Turns a raw service response into a success message or an error.

The body is first decoded into a :data:`~upctl.core.models.DecodedBody`
(``Parsed`` envelope or ``Unparsed`` text); a single rule then maps
either variant to the outcome.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from upctl.core.models import DecodedBody, Parsed, RawResponse, ResponseEnvelope, Unparsed
from upctl.exceptions import ServiceError, TransportError, UpctlError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR: str = "Unknown error"


def decode_body(text: str) -> DecodedBody:
    """Decode *text* as a response envelope, or keep it verbatim."""
    try:
        data = json.loads(text)
    except ValueError:
        return Unparsed(text)

    # A JSON null decodes to an empty envelope.
    if data is None:
        return Parsed(ResponseEnvelope())
    if not isinstance(data, dict):
        return Unparsed(text)

    code = _field(data, "code", 0)
    success = _field(data, "success", False)
    message = _field(data, "message", "")

    # bool is an int subclass; a boolean code is still a type mismatch.
    if not isinstance(code, int) or isinstance(code, bool):
        return Unparsed(text)
    if not isinstance(success, bool) or not isinstance(message, str):
        return Unparsed(text)

    return Parsed(ResponseEnvelope(code=code, success=success, message=message))


def _field(data: dict[str, Any], name: str, default: Any) -> Any:
    value = data.get(name)
    return default if value is None else value


def interpret_response(raw: RawResponse, *, debug: bool = False) -> str:
    """Return the service's success message or raise.

    Raises
    ------
    ServiceError
        When the envelope reports failure, carrying the server message
        or ``"Unknown error"``.
    TransportError
        When the envelope carries no message but the transport reported
        an underlying error.
    """
    decoded = decode_body(raw.body)

    if isinstance(decoded, Parsed):
        envelope = decoded.envelope
    else:
        envelope = ResponseEnvelope(message=decoded.text)
        if debug:
            logger.debug(
                "Response body is not a JSON envelope (HTTP %s); see the exchange trace above",
                raw.status,
            )

    if envelope.success:
        return envelope.message

    if envelope.message:
        raise ServiceError(envelope.message, code=envelope.code or None)

    if raw.error is not None:
        if isinstance(raw.error, UpctlError):
            raise raw.error
        raise TransportError(str(raw.error)) from raw.error

    raise ServiceError(UNKNOWN_ERROR, code=envelope.code or None)
