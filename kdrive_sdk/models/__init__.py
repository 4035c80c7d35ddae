"""Public models for the kDrive SDK.

Example:
    from kdrive_sdk.models import Credentials, Invocation

    credentials = Credentials(access_token="token")
    item = Invocation(resource="file", operation="info", parameters={"driveId": "1", "fileId": "7"})
"""

from kdrive_sdk._internal.dispatch.models import (
    BinaryResult,
    Credentials,
    ErrorRecord,
    HttpRequest,
    Invocation,
    ItemResult,
    RawResponse,
    RequestContext,
)

__all__ = [
    "BinaryResult",
    "Credentials",
    "ErrorRecord",
    "HttpRequest",
    "Invocation",
    "ItemResult",
    "RawResponse",
    "RequestContext",
]
