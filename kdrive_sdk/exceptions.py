"""Public exceptions for the kDrive SDK."""

from typing import Any


class KDriveError(Exception):
    """Base exception for all kDrive SDK errors.

    Every error carries a ``details`` dict with diagnostics (the resolved
    request description once one exists). Secrets are redacted before they
    land here.
    """

    kind = "KDriveError"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class KDriveConfigError(KDriveError):
    """Configuration error (missing env vars, invalid config)."""

    kind = "ConfigError"


class UnsupportedOperationError(KDriveError):
    """The (resource, operation) pair is not in the operation catalog."""

    kind = "UnsupportedOperation"

    def __init__(
        self, resource: str, operation: str, *, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            f"Unsupported operation '{operation}' for resource '{resource}'",
            details=details,
        )
        self.resource = resource
        self.operation = operation


class MissingParameterError(KDriveError):
    """A parameter required by the operation was not supplied."""

    kind = "MissingParameter"

    def __init__(self, parameter: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Missing required parameter '{parameter}'", details=details)
        self.parameter = parameter


class KDriveAPIError(KDriveError):
    """Error from kDrive API."""

    kind = "APIError"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        body: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code
        self.body = body


class EndpointNotFoundError(KDriveAPIError):
    """The API answered 404 to an upload."""

    kind = "EndpointNotFound"


class FileAlreadyExistsError(KDriveAPIError):
    """The API answered 409 to an upload."""

    kind = "FileAlreadyExists"


class RequestFailedError(KDriveAPIError):
    """Any other non-2xx response."""

    kind = "RequestFailed"


class TransportError(KDriveError):
    """Network-level failure (DNS, connection reset, timeout)."""

    kind = "TransportError"


class KDriveValidationError(KDriveError):
    """Validation error for invocation parameters or request data."""

    kind = "ValidationError"
