"""User-facing client for the kDrive API.

Example usage:
    from kdrive_sdk import KDriveClient

    client = KDriveClient(access_token="your-token")

    profile = client.get_profile()
    files = client.list_files(drive_id="12345")

    # Batch of orchestrator records, failures captured per item
    results = client.run(
        [
            {"resource": "file", "operation": "info", "parameters": {"driveId": "1", "fileId": "7"}},
            {"resource": "folder", "operation": "delete", "parameters": {"folderId": "9"}},
        ],
        continue_on_error=True,
    )
"""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from kdrive_sdk._internal.dispatch.catalog import ROOT_FOLDER_ID, get_descriptor
from kdrive_sdk._internal.dispatch.client import DEFAULT_TIMEOUT_MS, DispatchClient
from kdrive_sdk._internal.dispatch.models import (
    DEFAULT_API_URL,
    BinaryResult,
    Credentials,
    ErrorRecord,
    Invocation,
    ItemResult,
    RequestContext,
)
from kdrive_sdk._internal.dispatch.transport import Transport
from kdrive_sdk.exceptions import (
    KDriveConfigError,
    KDriveError,
    KDriveValidationError,
)


class KDriveClient:
    """Client for kDrive profile, drive, file and folder operations.

    Each call performs exactly one HTTP round trip. Invocations are processed
    sequentially and share nothing but the read-only operation catalog and
    the credentials.
    """

    def __init__(
        self,
        access_token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        credentials: Credentials | None = None,
        transport: Transport | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        debug: bool = False,
        dispatcher: DispatchClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            access_token: kDrive API access token. Ignored if credentials is given.
            api_url: Base API URL.
            credentials: Pre-built credentials.
            transport: Transport used to send requests. Defaults to httpx.
            timeout_ms: Request timeout in milliseconds for the default transport.
            debug: Enable debug logging to stderr.
            dispatcher: Pre-built dispatcher; replaces all other arguments.

        Raises:
            KDriveConfigError: If neither access_token nor credentials is given.
        """
        if dispatcher is not None:
            self._debug = dispatcher.debug
            self._dispatcher = dispatcher
            return

        if credentials is None:
            if not access_token:
                raise KDriveConfigError("An access token is required")
            credentials = Credentials(access_token=access_token, api_url=api_url)
        self._debug = debug
        self._dispatcher = DispatchClient(
            credentials=credentials,
            transport=transport,
            timeout_ms=timeout_ms,
            debug=debug,
        )

    @classmethod
    def from_env(cls, *, transport: Transport | None = None) -> "KDriveClient":
        """Create a client from environment variables.

        See `DispatchClient.from_env()` for the variables read.
        """
        return cls(dispatcher=DispatchClient.from_env(transport=transport))

    @property
    def dispatcher(self) -> DispatchClient:
        return self._dispatcher

    def _log_debug(self, message: str) -> None:
        """Log a debug message to stderr if debug mode is enabled."""
        if self._debug:
            import sys

            print(f"[kdrive-sdk] {message}", file=sys.stderr)

    # =========================================================================
    # Generic Invocation
    # =========================================================================

    def invoke(
        self,
        resource: str,
        operation: str,
        parameters: Mapping[str, Any] | None = None,
        binary: bytes | None = None,
        *,
        credentials: Credentials | None = None,
    ) -> Any:
        """Perform one (resource, operation) call.

        Args:
            resource: Resource name ('profile', 'drive', 'file', 'folder').
            operation: Operation name ('get', 'list', 'upload', ...).
            parameters: Parameter values, camelCase or snake_case names.
            binary: Raw file bytes for uploads.
            credentials: Per-call credentials override.

        Returns:
            The parsed JSON body, or a BinaryResult for downloads.

        Raises:
            KDriveError: A subclass describing why the call failed.
        """
        descriptor = get_descriptor(resource, operation)
        context = _build_context(resource, operation, parameters or {}, binary)
        return self._dispatcher.dispatch(descriptor, context, credentials)

    def run(
        self,
        invocations: Iterable[Invocation | Mapping[str, Any]],
        *,
        continue_on_error: bool = False,
        credentials: Credentials | None = None,
    ) -> list[ItemResult]:
        """Process a batch of invocations one at a time, in order.

        Args:
            invocations: Orchestrator records.
            continue_on_error: Capture failures as error records instead of
                aborting the batch.
            credentials: Per-batch credentials override.

        Returns:
            One ItemResult per invocation, in input order.

        Raises:
            KDriveError: The first failure, when continue_on_error is False.
        """
        results: list[ItemResult] = []
        for index, raw in enumerate(invocations):
            try:
                item = _to_invocation(raw)
                result = self.invoke(
                    item.resource,
                    item.operation,
                    item.parameters,
                    item.binary,
                    credentials=credentials,
                )
            except KDriveError as e:
                if not continue_on_error:
                    raise
                self._log_debug(f"Item {index} failed ({e.kind}): {e}")
                results.append(ItemResult(index=index, error=_error_record(e)))
                continue

            if isinstance(result, BinaryResult):
                results.append(
                    ItemResult(index=index, data={"file_id": result.file_id}, binary=result)
                )
            else:
                results.append(ItemResult(index=index, data=result))
        return results

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def get_profile(self) -> Any:
        """Get the authenticated user's profile."""
        return self.invoke("profile", "get")

    def list_drives(self, account_id: str) -> Any:
        """List drives belonging to an account."""
        return self.invoke("drive", "list", {"account_id": account_id})

    def list_files(self, drive_id: str, parent_folder_id: str = ROOT_FOLDER_ID) -> Any:
        """List files in a folder (the drive root by default)."""
        return self.invoke(
            "file", "list", {"drive_id": drive_id, "parent_folder_id": parent_folder_id}
        )

    def get_file_info(self, drive_id: str, file_id: str) -> Any:
        """Get metadata for a single file."""
        return self.invoke("file", "info", {"drive_id": drive_id, "file_id": file_id})

    def download_file(self, drive_id: str, file_id: str, file_name: str) -> BinaryResult:
        """Download a file's content.

        Args:
            drive_id: Drive containing the file.
            file_id: File to download.
            file_name: Name given to the result; its extension sets the MIME type.
        """
        return self.invoke(
            "file",
            "download",
            {"drive_id": drive_id, "file_id": file_id, "file_name": file_name},
        )

    def upload_file(
        self,
        drive_id: str,
        parent_folder_id: str,
        file_name: str,
        data: bytes,
    ) -> Any:
        """Upload raw bytes as a new file.

        Raises:
            EndpointNotFoundError: If the API answers 404.
            FileAlreadyExistsError: If the API answers 409.
        """
        return self.invoke(
            "file",
            "upload",
            {"drive_id": drive_id, "parent_folder_id": parent_folder_id, "file_name": file_name},
            data,
        )

    def delete_file(self, drive_id: str, file_id: str) -> Any:
        return self.invoke("file", "delete", {"drive_id": drive_id, "file_id": file_id})

    def create_folder(self, parent_folder_id: str) -> Any:
        return self.invoke("folder", "create", {"parent_folder_id": parent_folder_id})

    def delete_folder(self, folder_id: str) -> Any:
        return self.invoke("folder", "delete", {"folder_id": folder_id})

    def verify_credentials(self, credentials: Credentials | None = None) -> bool:
        """Check that the access token is accepted by the profile endpoint.

        This is best-effort: it returns False on any KDriveError, including
        missing credentials, and never raises one.
        """
        try:
            self.invoke("profile", "get", credentials=credentials)
        except KDriveError as e:
            self._log_debug(f"Credential check failed: {e}")
            return False
        return True

    def close(self) -> None:
        self._dispatcher.close()

    def __enter__(self) -> "KDriveClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _to_invocation(raw: Invocation | Mapping[str, Any]) -> Invocation:
    if isinstance(raw, Invocation):
        return raw
    try:
        return Invocation.model_validate(raw)
    except ValidationError as e:
        raise KDriveValidationError(
            f"Invalid invocation: {e.error_count()} validation error(s)",
            details={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def _build_context(
    resource: str,
    operation: str,
    parameters: Mapping[str, Any],
    binary: bytes | None,
) -> RequestContext:
    try:
        return RequestContext.model_validate({**parameters, "payload": binary})
    except ValidationError as e:
        raise KDriveValidationError(
            f"Invalid parameters for {resource}.{operation}",
            details={
                "operation": f"{resource}.{operation}",
                "errors": e.errors(include_url=False, include_input=False),
            },
        ) from e


def _error_record(error: KDriveError) -> ErrorRecord:
    return ErrorRecord(
        error=str(error),
        kind=error.kind,
        status_code=getattr(error, "status_code", None),
        details=error.details,
    )
