"""Response normalization for kDrive operations."""

import base64
import mimetypes
from typing import Any

from kdrive_sdk._internal.dispatch.models import (
    OCTET_STREAM,
    BinaryResult,
    HttpRequest,
    OperationDescriptor,
    RawResponse,
    RequestContext,
)
from kdrive_sdk.exceptions import (
    EndpointNotFoundError,
    FileAlreadyExistsError,
    KDriveAPIError,
    RequestFailedError,
)

# Types common on cloud drives that the built-in mimetypes table lacks
EXTRA_MIME_TYPES: dict[str, str] = {
    # Office documents
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".doc": "application/msword",
    ".xls": "application/vnd.ms-excel",
    ".ppt": "application/vnd.ms-powerpoint",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
    ".odp": "application/vnd.oasis.opendocument.presentation",
    ".rtf": "application/rtf",
    # Text and markup
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".csv": "text/csv",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    # Archives
    ".7z": "application/x-7z-compressed",
    ".rar": "application/vnd.rar",
    ".zip": "application/zip",
    # Media
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".mp4": "video/mp4",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
}

# Compressed files are typed by their outer encoding (".tar.gz" -> gzip)
ENCODING_MIME_TYPES: dict[str, str] = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "br": "application/x-brotli",
    "compress": "application/x-compress",
}

# Built-in table plus EXTRA_MIME_TYPES, independent of the host's mime.types
_MIME_TYPES = mimetypes.MimeTypes()
for _ext, _type in EXTRA_MIME_TYPES.items():
    _MIME_TYPES.add_type(_type, _ext)

BODY_PREVIEW_MAX_LENGTH = 2048


def guess_mime_type(file_name: str | None) -> str:
    """Derive a MIME type from a file name's extension.

    Returns ``application/octet-stream`` when the extension is unknown or
    absent.
    """
    if not file_name:
        return OCTET_STREAM
    mime_type, encoding = _MIME_TYPES.guess_type(file_name, strict=False)
    if encoding is not None:
        return ENCODING_MIME_TYPES.get(encoding, OCTET_STREAM)
    return mime_type or OCTET_STREAM


def normalize(
    descriptor: OperationDescriptor,
    response: RawResponse,
    *,
    context: RequestContext,
    request: HttpRequest | None = None,
) -> Any:
    """Map a raw response into the operation's declared result shape.

    Args:
        descriptor: The operation that produced the response.
        response: Raw status, headers and body from the transport.
        context: The invocation context (file ID and name for downloads).
        request: The resolved request, attached to failures for diagnostics.

    Returns:
        The parsed JSON body for JSON-shaped operations, or a BinaryResult
        for downloads.

    Raises:
        KDriveAPIError: A subclass matching the status code for non-2xx
            responses.
    """
    if not response.is_success:
        raise _status_error(descriptor, response, request)

    if descriptor.response_shape == "binary":
        return BinaryResult(
            file_id=context.file_id or "",
            data=base64.b64encode(response.content).decode("ascii"),
            mime_type=guess_mime_type(context.file_name),
            file_name=context.file_name or "",
        )

    try:
        return response.parse_json()
    except ValueError:
        # Non-JSON bodies are passed through as text
        return response.text


def _status_error(
    descriptor: OperationDescriptor,
    response: RawResponse,
    request: HttpRequest | None,
) -> KDriveAPIError:
    """Build the typed failure for a non-2xx response."""
    body = response.text
    details: dict[str, Any] = request.describe() if request is not None else {}
    details["status_code"] = response.status_code
    details["response"] = body[:BODY_PREVIEW_MAX_LENGTH]

    error_cls: type[KDriveAPIError] = RequestFailedError
    message = f"{descriptor.name} failed with status {response.status_code}"
    if descriptor.typed_status_errors:
        if response.status_code == 404:
            error_cls = EndpointNotFoundError
            message = "API endpoint not found"
        elif response.status_code == 409:
            error_cls = FileAlreadyExistsError
            message = "File already exists"

    return error_cls(message, response.status_code, body=body, details=details)
