"""Core list service — queries uploads for one tenant context."""

from __future__ import annotations

from upctl.core.models import ClientConfig, OutgoingRequest
from upctl.core.protocols import TransportFactory
from upctl.core.response_interpreter import interpret_response
from upctl.core.transport_builder import build_transport_context
from upctl.exceptions import UsageError

LIST_PATH: str = "/list/"


class ListService:
    """Sends ``{"apicontext": ...}`` as a JSON-bodied GET to ``/list/``.

    When the tenant context matches a configured
    :class:`~upctl.core.models.ApiContext`, that context's key is used
    as the bearer token.
    """

    def __init__(self, config: ClientConfig, transport_factory: TransportFactory) -> None:
        self._config = config
        self._transport_factory = transport_factory

    def list(self, apicontext: str) -> str:
        """Return the service's listing message for *apicontext*.

        Raises
        ------
        UsageError
            If *apicontext* is empty.
        TransportError
            If the request failed after retries.
        ServiceError
            If the service reported a failure.
        """
        if not apicontext.strip():
            raise UsageError("No api context specified to list!")

        context = build_transport_context(
            self._config,
            LIST_PATH,
            api_key=self._config.key_for(apicontext),
        )
        transport = self._transport_factory(context)
        raw = transport.send(
            OutgoingRequest(method="GET", url=context.url, json={"apicontext": apicontext}),
        )
        return interpret_response(raw, debug=context.debug)
