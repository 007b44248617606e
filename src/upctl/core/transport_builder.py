"""Builds the per-operation :class:`~upctl.core.models.TransportContext`.

Pure: no sockets are opened here.  The infra layer turns the context
into a live HTTP session.
"""

from __future__ import annotations

from upctl.core.models import ClientConfig, RetryPolicy, TransportContext

MIN_BACKOFF: float = 1.0
MAX_BACKOFF: float = 5.0

USER_AGENT_PREFIX: str = "upctl-"


def resolve_url(endpoint: str, suffix: str) -> str:
    """Join *endpoint* and *suffix* without doubling the slash."""
    if endpoint.endswith("/") and suffix.startswith("/"):
        return endpoint[:-1] + suffix
    return endpoint + suffix


def build_transport_context(
    config: ClientConfig,
    suffix: str,
    *,
    api_key: str | None = None,
) -> TransportContext:
    """Return an immutable context bound to ``config.endpoint + suffix``.

    Parameters
    ----------
    config:
        The resolved client configuration.
    suffix:
        API path for this operation, e.g. ``"/file/"``.
    api_key:
        Overrides ``config.api_key`` when given (tenant-scoped keys).
    """
    retry = RetryPolicy(
        count=max(0, config.retries),
        min_interval=MIN_BACKOFF,
        max_interval=MAX_BACKOFF,
    )
    token = api_key if api_key is not None else config.api_key
    return TransportContext(
        url=resolve_url(config.endpoint, suffix),
        user_agent=USER_AGENT_PREFIX + config.version,
        retry=retry,
        api_key=token or None,
        debug=config.debug,
        timeout=config.timeout,
    )
