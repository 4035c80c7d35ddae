"""Request dispatcher for kDrive operations."""

import os
from typing import Any
from urllib.parse import quote

from kdrive_sdk._internal.dispatch.catalog import get_descriptor
from kdrive_sdk._internal.dispatch.models import (
    APPLICATION_JSON,
    DEFAULT_API_URL,
    OCTET_STREAM,
    Credentials,
    HttpRequest,
    OperationDescriptor,
    RequestContext,
)
from kdrive_sdk._internal.dispatch.normalizer import normalize
from kdrive_sdk._internal.dispatch.transport import HttpxTransport, Transport
from kdrive_sdk._internal.http import DEFAULT_TIMEOUT
from kdrive_sdk.exceptions import (
    KDriveConfigError,
    KDriveError,
    MissingParameterError,
    TransportError,
)

DEFAULT_TIMEOUT_MS = int(DEFAULT_TIMEOUT * 1000)


class DispatchClient:
    """Builds one HTTP request per invocation and sends it through a transport.

    The client holds no per-call state: credentials may be given once at
    construction or per call, and each dispatch performs exactly one round
    trip. Transport failures are terminal for the call; nothing is retried.

    Use `DispatchClient.from_env()` to create a client from environment variables.
    """

    def __init__(
        self,
        *,
        credentials: Credentials | None = None,
        transport: Transport | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
    ) -> None:
        """Initialize the dispatch client.

        Args:
            credentials: Default credentials used when a call supplies none.
            transport: Transport used to send requests. Defaults to httpx.
            timeout_ms: Request timeout in milliseconds for the default transport.
            debug: Enable debug logging to stderr.
        """
        self._credentials = credentials
        self._transport = transport or HttpxTransport(timeout=timeout_ms / 1000)
        self._timeout_ms = timeout_ms
        self._debug = debug

    @classmethod
    def from_env(cls, *, transport: Transport | None = None) -> "DispatchClient":
        """Create a dispatch client from environment variables.

        Required environment variables:
            KDRIVE_ACCESS_TOKEN: The kDrive API access token.

        Optional environment variables:
            KDRIVE_API_URL: Base API URL (default: https://api.infomaniak.com).
            KDRIVE_TIMEOUT_MS: Request timeout in milliseconds.
            KDRIVE_DEBUG: Set to "1" to enable debug logging.

        Raises:
            KDriveConfigError: If KDRIVE_ACCESS_TOKEN is missing.
            ValueError: If KDRIVE_TIMEOUT_MS is not a valid integer.
        """
        access_token = os.environ.get("KDRIVE_ACCESS_TOKEN")
        if not access_token:
            raise KDriveConfigError("KDRIVE_ACCESS_TOKEN is not set")

        api_url = os.environ.get("KDRIVE_API_URL") or DEFAULT_API_URL
        debug = os.environ.get("KDRIVE_DEBUG", "") == "1"
        timeout_ms = int(os.environ.get("KDRIVE_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))

        return cls(
            credentials=Credentials(access_token=access_token, api_url=api_url),
            transport=transport,
            timeout_ms=timeout_ms,
            debug=debug,
        )

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    @property
    def debug(self) -> bool:
        return self._debug

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            import sys

            print(f"[kdrive-sdk] {message}", file=sys.stderr)

    def _resolve_credentials(self, credentials: Credentials | None) -> Credentials:
        resolved = credentials or self._credentials
        if resolved is None:
            raise KDriveConfigError("No credentials supplied")
        return resolved

    def build_request(
        self,
        descriptor: OperationDescriptor,
        context: RequestContext,
        credentials: Credentials | None = None,
    ) -> HttpRequest:
        """Resolve a descriptor and context into a single HTTP request.

        Raises:
            MissingParameterError: If a required parameter is absent.
        """
        credentials = self._resolve_credentials(credentials)
        params = {**descriptor.defaults, **context.values()}

        for name in descriptor.required_params:
            present = context.payload is not None if name == "payload" else name in params
            if not present:
                raise MissingParameterError(
                    name,
                    details={
                        "operation": descriptor.name,
                        "required": list(descriptor.required_params),
                        "supplied": sorted(params),
                    },
                )

        path = descriptor.path.format(
            **{key: quote(str(value), safe="") for key, value in params.items()}
        )
        url = f"{credentials.api_url}/{descriptor.api_version}{path}"

        headers = {"Authorization": f"Bearer {credentials.access_token}"}
        content: bytes | None = None
        if descriptor.body_encoding == "binary":
            headers["Content-Type"] = OCTET_STREAM
            content = context.payload
        else:
            headers["Content-Type"] = APPLICATION_JSON

        return HttpRequest(
            method=descriptor.method,
            url=url,
            headers=headers,
            content=content,
            response_encoding=descriptor.response_shape,
            operation=descriptor.name,
            params=params,
        )

    def dispatch(
        self,
        descriptor: OperationDescriptor,
        context: RequestContext,
        credentials: Credentials | None = None,
    ) -> Any:
        """Build, send and normalize a single request.

        Args:
            descriptor: The operation to perform.
            context: Resolved parameters for this invocation.
            credentials: Per-call credentials; falls back to the client's.

        Returns:
            The parsed JSON body, or a BinaryResult for downloads.

        Raises:
            MissingParameterError: If a required parameter is absent.
            KDriveAPIError: On a non-2xx response.
            TransportError: On a network-level failure, or any other
                exception raised by the transport.
        """
        request = self.build_request(descriptor, context, credentials)
        self._log_debug(f"{request.method} {request.url} ({request.payload_size} bytes)")

        try:
            response = self._transport.send(request)
        except TransportError as e:
            e.details.update(request.describe())
            self._log_debug(f"{descriptor.name} transport error: {e}")
            raise
        except KDriveError:
            raise
        except Exception as e:
            # Injected transports may raise their own exceptions
            self._log_debug(f"{descriptor.name} transport error: {type(e).__name__}: {e}")
            raise TransportError(
                f"{type(e).__name__}: {e}", details=request.describe()
            ) from e

        self._log_debug(f"{descriptor.name} -> {response.status_code}")
        return normalize(descriptor, response, context=context, request=request)

    def execute(
        self,
        resource: str,
        operation: str,
        context: RequestContext,
        credentials: Credentials | None = None,
    ) -> Any:
        """Look up (resource, operation) in the catalog and dispatch it.

        Raises:
            UnsupportedOperationError: If the pair is not in the catalog.
        """
        descriptor = get_descriptor(resource, operation)
        return self.dispatch(descriptor, context, credentials)

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()
