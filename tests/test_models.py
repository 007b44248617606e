"""Tests for the domain models in ``upctl.core.models``."""

from __future__ import annotations

import dataclasses

import pytest

from upctl.core.models import (
    ApiContext,
    ClientConfig,
    ExpireDirective,
    RetryPolicy,
    TransportContext,
    UploadProgress,
)
from upctl.exceptions import UsageError


# ---------------------------------------------------------------------------
# RetryPolicy
# ---------------------------------------------------------------------------

class TestRetryPolicy:
    def test_zero_count_disables(self) -> None:
        assert not RetryPolicy(count=0).enabled
        assert RetryPolicy(count=1).enabled

    def test_no_delay_before_first_attempt(self) -> None:
        assert RetryPolicy(count=3).backoff(0) == 0.0

    @pytest.mark.parametrize("attempt", [1, 2, 3, 4, 10, 50])
    @pytest.mark.parametrize("rand", [0.0, 0.5, 0.999])
    def test_delay_stays_within_bounds(self, attempt: int, rand: float) -> None:
        policy = RetryPolicy(count=3, min_interval=1.0, max_interval=5.0)
        delay = policy.backoff(attempt, rand=lambda: rand)
        assert 1.0 <= delay <= 5.0

    def test_delay_grows_then_caps(self) -> None:
        policy = RetryPolicy(count=5, min_interval=1.0, max_interval=5.0)
        upper = [policy.backoff(n, rand=lambda: 1.0) for n in (1, 2, 3, 4)]
        assert upper == [2.0, 4.0, 5.0, 5.0]

    def test_jitter_spans_upper_half(self) -> None:
        policy = RetryPolicy(count=5, min_interval=1.0, max_interval=5.0)
        assert policy.backoff(2, rand=lambda: 0.0) == 2.0
        assert policy.backoff(2, rand=lambda: 1.0) == 4.0


# ---------------------------------------------------------------------------
# ExpireDirective
# ---------------------------------------------------------------------------

class TestExpireDirective:
    @pytest.mark.parametrize("raw", ["asap", "30m", "2h", "1d", "120m"])
    def test_valid_values(self, raw: str) -> None:
        assert str(ExpireDirective.parse(raw)) == raw

    def test_normalises_case_and_space(self) -> None:
        assert ExpireDirective.parse(" ASAP ").value == "asap"
        assert ExpireDirective.parse("1H").value == "1h"

    @pytest.mark.parametrize("raw", ["", "soon", "10", "1w", "0h", "-1d", "1.5h", "h1"])
    def test_invalid_values(self, raw: str) -> None:
        with pytest.raises(UsageError, match="Invalid expire setting") as exc_info:
            ExpireDirective.parse(raw)
        assert exc_info.value.hint is not None


# ---------------------------------------------------------------------------
# UploadProgress
# ---------------------------------------------------------------------------

class TestUploadProgress:
    def test_percent(self) -> None:
        assert UploadProgress("a", 25, 100).percent == 25.0

    def test_empty_file_is_complete(self) -> None:
        progress = UploadProgress("empty", 0, 0)
        assert progress.percent == 100.0
        assert progress.finished

    def test_not_finished_midway(self) -> None:
        assert not UploadProgress("a", 1, 2).finished


# ---------------------------------------------------------------------------
# ClientConfig
# ---------------------------------------------------------------------------

class TestClientConfig:
    def test_key_for_matching_context(self) -> None:
        config = ClientConfig(
            endpoint="http://x",
            version="1.0.0",
            api_key="global",
            apicontexts=(ApiContext("support", "tenant-key"),),
        )
        assert config.key_for("support") == "tenant-key"

    def test_key_for_falls_back_to_api_key(self) -> None:
        config = ClientConfig(endpoint="http://x", version="1.0.0", api_key="global")
        assert config.key_for("unknown") == "global"
        assert config.key_for(None) == "global"


# ---------------------------------------------------------------------------
# Immutability
# ---------------------------------------------------------------------------

class TestFrozen:
    def test_transport_context_is_frozen(self) -> None:
        context = TransportContext(url="http://x/file/", user_agent="upctl-1.0.0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            context.url = "http://elsewhere/"  # type: ignore[misc]

    def test_client_config_is_frozen(self) -> None:
        config = ClientConfig(endpoint="http://x", version="1.0.0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.retries = 9  # type: ignore[misc]
