"""Shared HTTP session with automatic retry and backoff.

Provides a ``requests.Session`` that retries on transient network errors
(timeouts, connection resets, 429/502/503/504) with exponential backoff and
injects a default timeout into every request.
"""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_TIMEOUT = 30  # seconds
USER_AGENT = "recreation-finder/0.1 (+https://ridb.recreation.gov)"


def build_retry(total: int = 4, backoff_factor: float = 2.0) -> Retry:
    """Build the retry strategy used for RIDB requests.

    Args:
        total: Maximum number of retries.
        backoff_factor: Exponential backoff factor (0s, 2s, 4s, 8s with the default).

    Returns:
        A configured urllib3 Retry instance.
    """
    return Retry(
        total=total,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 502, 503, 504],
        allowed_methods=["GET", "HEAD", "OPTIONS"],
        raise_on_status=False,  # let resp.raise_for_status() handle it
    )


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Session:
    """Build a ``requests.Session`` with a retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``build_retry()``).
        timeout: Default timeout applied to every request.

    Returns:
        The configured session.
    """
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or build_retry())
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers["User-Agent"] = USER_AGENT

    # Wrap send so callers don't need to pass ``timeout=`` every time.
    original_send = session.send

    def send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return original_send(prepared, **kwargs)  # type: ignore[arg-type]

    session.send = send_with_timeout  # type: ignore[method-assign]
    return session
