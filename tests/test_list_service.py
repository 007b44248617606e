"""Tests for the list (describe) pipeline with a fake transport."""

from __future__ import annotations

import pytest
from conftest import FakeTransport, ok

from upctl.core.list_service import ListService
from upctl.core.models import ApiContext, ClientConfig, RawResponse
from upctl.exceptions import ServiceError, TransportError, UsageError


class TestListService:
    def test_sends_json_get(self, config: ClientConfig) -> None:
        transport = FakeTransport(ok("3 uploads"))

        assert ListService(config, transport.factory).list("support") == "3 uploads"

        (request,) = transport.requests
        assert request.method == "GET"
        assert request.url == "http://upload.test/api/v1/list/"
        assert dict(request.json or {}) == {"apicontext": "support"}
        assert request.files == ()

    def test_uses_endpoint_key_by_default(self, config: ClientConfig) -> None:
        transport = FakeTransport(ok())
        ListService(config, transport.factory).list("support")
        assert transport.contexts[0].api_key == "secret"

    def test_configured_context_key_wins(self) -> None:
        config = ClientConfig(
            endpoint="http://upload.test",
            version="1.0.0",
            api_key="global",
            apicontexts=(ApiContext("support", "support-key"),),
        )
        transport = FakeTransport(ok())
        ListService(config, transport.factory).list("support")
        assert transport.contexts[0].api_key == "support-key"

    def test_empty_context_is_usage_error(self, config: ClientConfig) -> None:
        transport = FakeTransport(ok())
        with pytest.raises(UsageError):
            ListService(config, transport.factory).list("  ")
        assert transport.requests == []

    def test_service_failure(self, config: ClientConfig) -> None:
        transport = FakeTransport(
            RawResponse(status=403, body='{"success":false,"message":"unknown context"}'),
        )
        with pytest.raises(ServiceError, match="unknown context"):
            ListService(config, transport.factory).list("nope")

    def test_transport_failure(self, config: ClientConfig) -> None:
        transport = FakeTransport(TransportError("timed out"))
        with pytest.raises(TransportError, match="timed out"):
            ListService(config, transport.factory).list("support")
