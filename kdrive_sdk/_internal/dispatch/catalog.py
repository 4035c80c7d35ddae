"""Static catalog of supported kDrive operations.

Version segments differ between operations (``/2`` vs ``/3``). They are kept
exactly as the live API serves each endpoint.
"""

from types import MappingProxyType

from kdrive_sdk._internal.dispatch.models import OperationDescriptor
from kdrive_sdk.exceptions import UnsupportedOperationError

ROOT_FOLDER_ID = "1"
FILE_LIST_LIMIT = 1000

_DESCRIPTORS: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        resource="profile",
        operation="get",
        method="GET",
        api_version=2,
        path="/profile",
    ),
    OperationDescriptor(
        resource="drive",
        operation="list",
        method="GET",
        api_version=2,
        path="/drive?account_id={account_id}",
        required_params=("account_id",),
    ),
    OperationDescriptor(
        resource="file",
        operation="list",
        method="GET",
        api_version=3,
        path=f"/drive/{{drive_id}}/files/{{parent_folder_id}}/files?limit={FILE_LIST_LIMIT}",
        required_params=("drive_id", "parent_folder_id"),
        defaults={"parent_folder_id": ROOT_FOLDER_ID},
    ),
    OperationDescriptor(
        resource="file",
        operation="info",
        method="GET",
        api_version=3,
        path="/drive/{drive_id}/files/{file_id}",
        required_params=("drive_id", "file_id"),
    ),
    OperationDescriptor(
        resource="file",
        operation="download",
        method="GET",
        api_version=2,
        path="/drive/{drive_id}/files/{file_id}/download",
        required_params=("drive_id", "file_id", "file_name"),
        response_shape="binary",
    ),
    OperationDescriptor(
        resource="file",
        operation="upload",
        method="POST",
        api_version=3,
        path=(
            "/drive/{drive_id}/upload?directory_id={parent_folder_id}"
            "&file_name={file_name}&total_size={file_size}"
        ),
        required_params=("drive_id", "parent_folder_id", "file_name", "payload"),
        body_encoding="binary",
        typed_status_errors=True,
    ),
    OperationDescriptor(
        resource="file",
        operation="delete",
        method="DELETE",
        api_version=3,
        path="/drive/{drive_id}/files/{file_id}",
        required_params=("drive_id", "file_id"),
    ),
    OperationDescriptor(
        resource="folder",
        operation="create",
        method="POST",
        api_version=2,
        path="/drive/folders/{parent_folder_id}/folders",
        required_params=("parent_folder_id",),
    ),
    OperationDescriptor(
        resource="folder",
        operation="delete",
        method="DELETE",
        api_version=2,
        path="/drive/folders/{folder_id}",
        required_params=("folder_id",),
    ),
)

CATALOG: MappingProxyType[tuple[str, str], OperationDescriptor] = MappingProxyType(
    {descriptor.key: descriptor for descriptor in _DESCRIPTORS}
)


def get_descriptor(resource: str, operation: str) -> OperationDescriptor:
    """Look up the descriptor for a (resource, operation) pair.

    Raises:
        UnsupportedOperationError: If the pair is not in the catalog.
    """
    try:
        return CATALOG[(resource, operation)]
    except KeyError:
        raise UnsupportedOperationError(
            resource,
            operation,
            details={"supported": sorted(f"{r}.{o}" for r, o in CATALOG)},
        ) from None


def list_operations(resource: str | None = None) -> list[OperationDescriptor]:
    """Return catalog entries, optionally restricted to one resource."""
    return [d for d in _DESCRIPTORS if resource is None or d.resource == resource]
