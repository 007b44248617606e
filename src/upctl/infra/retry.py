"""urllib3 retry policy driven by :class:`~upctl.core.models.RetryPolicy`.

urllib3 performs the actual retry loop inside the connection pool; this
subclass only swaps in our backoff curve and reports each retry.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from urllib3.util.retry import Retry

from upctl.core.models import RetryPolicy

RetryHook = Callable[[str, str, Exception | None], None]
"""Called with (method, url, error) before every retry attempt."""


class BackoffRetry(Retry):
    """:class:`urllib3.util.retry.Retry` with jittered, capped backoff.

    ``policy`` and ``on_retry`` are carried across the copies urllib3
    makes on every :meth:`increment`.
    """

    def __init__(
        self,
        *args: Any,
        policy: RetryPolicy | None = None,
        on_retry: RetryHook | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.policy: RetryPolicy | None = policy
        self.on_retry: RetryHook | None = on_retry

    def new(self, **kw: Any) -> BackoffRetry:
        retry = super().new(**kw)
        retry.policy = self.policy
        retry.on_retry = self.on_retry
        return retry

    def get_backoff_time(self) -> float:
        if self.policy is None:
            return super().get_backoff_time()
        return self.policy.backoff(len(self.history))

    def increment(
        self,
        method: str | None = None,
        url: str | None = None,
        response: Any = None,
        error: Exception | None = None,
        _pool: Any = None,
        _stacktrace: Any = None,
    ) -> BackoffRetry:
        # Raises MaxRetryError once exhausted, so the hook only sees real retries.
        retry = super().increment(
            method=method,
            url=url,
            response=response,
            error=error,
            _pool=_pool,
            _stacktrace=_stacktrace,
        )
        if self.on_retry is not None:
            self.on_retry(method or "", _full_url(_pool, url), error)
        return retry


def build_retry(policy: RetryPolicy, on_retry: RetryHook | None = None) -> BackoffRetry:
    """Return a retry object for *policy*.

    Every method is retryable (uploads are POSTs).  HTTP error statuses
    are not retried: they carry a service envelope and are judged by the
    response interpreter.
    """
    return BackoffRetry(
        total=policy.count,
        redirect=False,
        allowed_methods=None,
        raise_on_status=False,
        respect_retry_after_header=False,
        policy=policy,
        on_retry=on_retry,
    )


def _full_url(pool: Any, url: str | None) -> str:
    path = url or ""
    if pool is None or path.startswith(("http://", "https://")):
        return path
    host = getattr(pool, "host", "")
    scheme = getattr(pool, "scheme", "http")
    port = getattr(pool, "port", None)
    netloc = f"{host}:{port}" if port else host
    return f"{scheme}://{netloc}{path}"
