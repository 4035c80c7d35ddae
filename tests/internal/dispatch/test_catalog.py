"""Tests for the operation catalog."""

import pytest
from pydantic import ValidationError

from kdrive_sdk._internal.dispatch.catalog import (
    CATALOG,
    ROOT_FOLDER_ID,
    get_descriptor,
    list_operations,
)
from kdrive_sdk.exceptions import UnsupportedOperationError


class TestCatalog:
    """Tests for catalog contents."""

    def test_contains_all_operations(self):
        """Should expose exactly the supported (resource, operation) pairs."""
        assert set(CATALOG) == {
            ("profile", "get"),
            ("drive", "list"),
            ("file", "list"),
            ("file", "info"),
            ("file", "download"),
            ("file", "upload"),
            ("file", "delete"),
            ("folder", "create"),
            ("folder", "delete"),
        }

    def test_catalog_is_read_only(self):
        """Should not allow entries to be added at runtime."""
        with pytest.raises(TypeError):
            CATALOG[("folder", "rename")] = CATALOG[("folder", "delete")]  # type: ignore[index]

    def test_descriptors_are_frozen(self):
        """Descriptors should be immutable."""
        descriptor = get_descriptor("file", "info")
        with pytest.raises(ValidationError):
            descriptor.method = "POST"  # type: ignore[misc]

    def test_only_upload_is_binary(self):
        """Only upload should send a raw byte body."""
        binary = [d.name for d in CATALOG.values() if d.body_encoding == "binary"]
        assert binary == ["file.upload"]

    def test_only_download_returns_binary(self):
        """Only download should return raw bytes."""
        binary = [d.name for d in CATALOG.values() if d.response_shape == "binary"]
        assert binary == ["file.download"]

    def test_api_versions_per_operation(self):
        """Should keep each endpoint's own API version segment."""
        versions = {d.name: d.api_version for d in CATALOG.values()}
        assert versions == {
            "profile.get": 2,
            "drive.list": 2,
            "file.list": 3,
            "file.info": 3,
            "file.download": 2,
            "file.upload": 3,
            "file.delete": 3,
            "folder.create": 2,
            "folder.delete": 2,
        }

    def test_file_list_default_parent(self):
        """file.list should default to the root folder."""
        assert get_descriptor("file", "list").defaults == {"parent_folder_id": ROOT_FOLDER_ID}


class TestGetDescriptor:
    """Tests for get_descriptor()."""

    def test_returns_descriptor(self):
        """Should return the matching descriptor."""
        descriptor = get_descriptor("folder", "create")
        assert descriptor.method == "POST"
        assert descriptor.path == "/drive/folders/{parent_folder_id}/folders"

    def test_unknown_pair(self):
        """Should raise UnsupportedOperationError for unknown pairs."""
        with pytest.raises(UnsupportedOperationError) as exc_info:
            get_descriptor("folder", "rename")
        assert exc_info.value.resource == "folder"
        assert exc_info.value.operation == "rename"
        assert "folder.delete" in exc_info.value.details["supported"]

    def test_unknown_resource(self):
        """Should raise UnsupportedOperationError for unknown resources."""
        with pytest.raises(UnsupportedOperationError):
            get_descriptor("bucket", "list")


class TestListOperations:
    """Tests for list_operations()."""

    def test_all(self):
        assert len(list_operations()) == len(CATALOG)

    def test_by_resource(self):
        names = [d.operation for d in list_operations("folder")]
        assert names == ["create", "delete"]
