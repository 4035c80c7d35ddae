"""Shared HTTP client configuration."""

import httpx

from kdrive_sdk._version import __version__

DEFAULT_TIMEOUT = 30.0


def create_http_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    base_url: str | None = None,
) -> httpx.Client:
    """Create configured HTTP client.

    Redirects are followed, so a download answered with a redirect to
    storage returns the file bytes rather than the empty 3xx body.

    Args:
        timeout: Request timeout in seconds.
        base_url: Optional base URL for all requests.

    Returns:
        Configured httpx.Client instance.
    """
    return httpx.Client(
        timeout=timeout,
        base_url=base_url or "",
        follow_redirects=True,
        headers={"User-Agent": f"kdrive-sdk/{__version__}"},
    )
