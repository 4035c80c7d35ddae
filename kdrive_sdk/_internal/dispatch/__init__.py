"""Request dispatch for kDrive operations.

WARNING: This is a system-level module used by KDriveClient.
Prefer the public client in application code.
"""

from kdrive_sdk._internal.dispatch.catalog import CATALOG, get_descriptor, list_operations
from kdrive_sdk._internal.dispatch.client import DispatchClient
from kdrive_sdk._internal.dispatch.models import (
    BinaryResult,
    Credentials,
    ErrorRecord,
    HttpRequest,
    Invocation,
    ItemResult,
    OperationDescriptor,
    RawResponse,
    RequestContext,
)
from kdrive_sdk._internal.dispatch.normalizer import guess_mime_type, normalize
from kdrive_sdk._internal.dispatch.transport import HttpxTransport, Transport

__all__ = [
    "CATALOG",
    "get_descriptor",
    "list_operations",
    "DispatchClient",
    "normalize",
    "guess_mime_type",
    "Transport",
    "HttpxTransport",
    "OperationDescriptor",
    "Credentials",
    "RequestContext",
    "HttpRequest",
    "RawResponse",
    "BinaryResult",
    "ErrorRecord",
    "Invocation",
    "ItemResult",
]
