"""Pydantic models for kDrive request dispatch.

Descriptors are static and immutable; every other model is built per
invocation and never retained by the dispatcher.
"""

import json
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from kdrive_sdk._internal.dispatch.redaction import redact_payload

# =============================================================================
# Constants
# =============================================================================

DEFAULT_API_URL = "https://api.infomaniak.com"
OCTET_STREAM = "application/octet-stream"
APPLICATION_JSON = "application/json"

HttpMethod = Literal["GET", "POST", "DELETE"]
BodyEncoding = Literal["none", "json", "binary"]
ResponseShape = Literal["json", "binary"]

# =============================================================================
# Operation Descriptor
# =============================================================================


class OperationDescriptor(BaseModel):
    """Static definition of one supported operation's request shape.

    Required fields:
        resource: Resource name ('profile', 'drive', 'file', 'folder')
        operation: Operation name ('get', 'list', 'upload', ...)
        method: HTTP method
        api_version: Version segment prepended to the path
        path: Path template with ``{placeholder}`` parameters

    Optional fields:
        required_params: Parameter names that must be resolved before dispatch
        defaults: Values used when an optional parameter is not supplied
        body_encoding: 'none', 'json' or 'binary'
        response_shape: 'json' or 'binary'
        typed_status_errors: Map 404/409 to typed failures instead of RequestFailed
    """

    resource: str
    operation: str
    method: HttpMethod
    api_version: int = Field(ge=1)
    path: str
    required_params: tuple[str, ...] = ()
    defaults: dict[str, str] = Field(default_factory=dict)
    body_encoding: BodyEncoding = "none"
    response_shape: ResponseShape = "json"
    typed_status_errors: bool = False

    model_config = {"frozen": True}

    @field_validator("path")
    @classmethod
    def path_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("path must start with '/'")
        return v

    @property
    def key(self) -> tuple[str, str]:
        return (self.resource, self.operation)

    @property
    def name(self) -> str:
        return f"{self.resource}.{self.operation}"


# =============================================================================
# Per-call Inputs
# =============================================================================


class Credentials(BaseModel):
    """Access token and base URL supplied by the credential collaborator."""

    access_token: str = Field(min_length=1, repr=False)
    api_url: str = DEFAULT_API_URL

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class RequestContext(BaseModel):
    """Resolved parameter values for a single invocation.

    Accepts both snake_case names and the camelCase names used by workflow
    parameters (``driveId``, ``parentFolderId``, ...).
    """

    drive_id: str | None = Field(default=None, alias="driveId")
    file_id: str | None = Field(default=None, alias="fileId")
    folder_id: str | None = Field(default=None, alias="folderId")
    parent_folder_id: str | None = Field(default=None, alias="parentFolderId")
    account_id: str | None = Field(default=None, alias="accountId")
    file_name: str | None = Field(default=None, alias="fileName")
    payload: bytes | None = None

    model_config = {"populate_by_name": True}

    @field_validator(
        "drive_id", "file_id", "folder_id", "parent_folder_id", "account_id", mode="before"
    )
    @classmethod
    def coerce_ids(cls, v: Any) -> Any:
        # Numeric IDs are common in workflow data
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def file_size(self) -> int | None:
        if self.payload is None:
            return None
        return len(self.payload)

    def values(self) -> dict[str, Any]:
        """Return all resolved substitution values, excluding the payload."""
        resolved: dict[str, Any] = self.model_dump(exclude={"payload"}, exclude_none=True)
        resolved = {k: v for k, v in resolved.items() if v != ""}
        if self.payload is not None:
            resolved["file_size"] = self.file_size
        return resolved


# =============================================================================
# Transport-level Request / Response
# =============================================================================


class HttpRequest(BaseModel):
    """A fully resolved HTTP request, ready for the transport."""

    method: HttpMethod
    url: str
    headers: dict[str, str]
    content: bytes | None = None
    response_encoding: ResponseShape = "json"
    operation: str
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def payload_size(self) -> int:
        return len(self.content) if self.content is not None else 0

    def describe(self) -> dict[str, Any]:
        """Return a redacted description suitable for error diagnostics."""
        return redact_payload({
            "operation": self.operation,
            "method": self.method,
            "url": self.url,
            "headers": self.headers,
            "params": self.params,
            "payload_size": self.payload_size,
        })


class RawResponse(BaseModel):
    """Status, headers and raw body bytes as returned by the transport."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    content: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def parse_json(self) -> Any:
        if not self.content.strip():
            return {}
        return json.loads(self.content)


# =============================================================================
# Results
# =============================================================================


class BinaryResult(BaseModel):
    """Downloaded file: base64 data plus the metadata needed to store it."""

    file_id: str
    data: str
    mime_type: str = OCTET_STREAM
    file_name: str


class ErrorRecord(BaseModel):
    """Structured failure attached to an item when errors are tolerated."""

    error: str
    kind: str
    status_code: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class Invocation(BaseModel):
    """One input record from the orchestrator."""

    resource: str
    operation: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    binary: bytes | None = None


class ItemResult(BaseModel):
    """Outcome of one invocation: data (plus binary for downloads) or error."""

    index: int = Field(ge=0)
    data: Any = None
    binary: BinaryResult | None = None
    error: ErrorRecord | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
