"""Transport protocol and the httpx-backed implementation."""

from typing import Protocol

import httpx

from kdrive_sdk._internal.dispatch.models import HttpRequest, RawResponse
from kdrive_sdk._internal.http import DEFAULT_TIMEOUT, create_http_client
from kdrive_sdk.exceptions import TransportError


# Accept header sent for each response encoding
ACCEPT_HEADERS = {"json": "application/json", "binary": "*/*"}


class Transport(Protocol):
    """Capability that performs the actual network call.

    Implementations return the final response for any status code and
    should raise TransportError for network-level failures. Other
    exceptions are wrapped into TransportError by the dispatcher.
    ``request.response_encoding`` is a hint for content negotiation; the
    body is always returned as raw bytes.
    """

    def send(self, request: HttpRequest) -> RawResponse: ...


class HttpxTransport:
    """Transport that sends requests with an httpx.Client.

    Response bodies are always read as raw bytes; decoding is left to the
    normalizer. The Accept header follows the request's response encoding
    unless the caller set one. Any httpx-level failure becomes a
    TransportError.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self._client = client or create_http_client(timeout=timeout)

    def send(self, request: HttpRequest) -> RawResponse:
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=self._headers(request),
                content=request.content,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        return RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            content=response.content,
        )

    def _headers(self, request: HttpRequest) -> dict[str, str]:
        headers = dict(request.headers)
        if not any(name.lower() == "accept" for name in headers):
            headers["Accept"] = ACCEPT_HEADERS[request.response_encoding]
        return headers

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
