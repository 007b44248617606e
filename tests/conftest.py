"""Shared pytest fixtures and configuration for the upctl test suite.

Guidelines
----------
* No internet access in any test.
* HTTP is faked at the :class:`~upctl.core.protocols.Transport` boundary
  or by mocking the requests session.
* Filesystem tests use ``tmp_path`` trees only.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from upctl.core.models import (
    ClientConfig,
    OutgoingRequest,
    RawResponse,
    TransportContext,
    UploadProgress,
)


class FakeTransport:
    """Records every request and replays queued outcomes in order.

    Each outcome is either a :class:`RawResponse` to return or an
    exception to raise.
    """

    def __init__(self, *outcomes: RawResponse | Exception) -> None:
        self.outcomes: list[RawResponse | Exception] = list(outcomes)
        self.requests: list[OutgoingRequest] = []
        self.contexts: list[TransportContext] = []

    def factory(self, context: TransportContext) -> FakeTransport:
        self.contexts.append(context)
        return self

    def send(
        self,
        request: OutgoingRequest,
        *,
        progress_callback: Callable[[UploadProgress], None] | None = None,
    ) -> RawResponse:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        if progress_callback is not None:
            for index, path in enumerate(request.files):
                size = path.stat().st_size
                progress_callback(UploadProgress(str(path), size, size, index))
        return outcome


def ok(message: str = "ok") -> RawResponse:
    return RawResponse(
        status=200,
        body=f'{{"code":200,"success":true,"message":"{message}"}}',
    )


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        endpoint="http://upload.test/api/v1",
        version="9.9.9",
        api_key="secret",
        retries=2,
    )


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """A small upload tree::

        root/
          a.txt
          sub/
            b.bin
            deeper/
              c.log
    """
    root = tmp_path / "root"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.bin").write_bytes(b"\x00\x01\x02")
    (root / "sub" / "deeper" / "c.log").write_text("gamma gamma")
    return root


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's real config file and UPCTL_* variables out of tests."""
    monkeypatch.setattr("upctl.cli.config.DEFAULT_CONFIG_PATH", tmp_path / "no-such.toml")
    for name in list(os.environ):
        if name.startswith("UPCTL_"):
            monkeypatch.delenv(name)
