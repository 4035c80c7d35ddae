"""Tests for response normalization."""

import base64

import pytest

from kdrive_sdk._internal.dispatch.catalog import get_descriptor
from kdrive_sdk._internal.dispatch.models import (
    BinaryResult,
    HttpRequest,
    RawResponse,
    RequestContext,
)
from kdrive_sdk._internal.dispatch.normalizer import guess_mime_type, normalize
from kdrive_sdk.exceptions import (
    EndpointNotFoundError,
    FileAlreadyExistsError,
    RequestFailedError,
)


def upload_request() -> HttpRequest:
    return HttpRequest(
        method="POST",
        url="https://api.infomaniak.com/3/drive/7/upload?directory_id=5&file_name=a.txt&total_size=3",
        headers={"Authorization": "Bearer secret", "Content-Type": "application/octet-stream"},
        content=b"abc",
        operation="file.upload",
        params={"drive_id": "7", "parent_folder_id": "5", "file_name": "a.txt", "file_size": 3},
    )


class TestGuessMimeType:
    """Tests for guess_mime_type()."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [
            ("report.pdf", "application/pdf"),
            ("photo.JPG", "image/jpeg"),
            ("notes.txt", "text/plain"),
            ("data.json", "application/json"),
            ("a.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
            ("a.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
            ("a.md", "text/markdown"),
            ("a.gz", "application/gzip"),
            ("backup.tar.gz", "application/gzip"),
            ("backup.tgz", "application/gzip"),
            ("dump.sql.bz2", "application/x-bzip2"),
            ("logs.tar.xz", "application/x-xz"),
            ("unknownext.xyz", "application/octet-stream"),
            ("README", "application/octet-stream"),
            ("", "application/octet-stream"),
            (None, "application/octet-stream"),
        ],
    )
    def test_guess(self, file_name, expected):
        assert guess_mime_type(file_name) == expected


class TestNormalizeJson:
    """Tests for JSON-shaped responses."""

    def test_passes_body_through(self):
        """Should return the parsed body unmodified."""
        response = RawResponse(status_code=200, content=b'{"result":"success","data":[1,2]}')
        result = normalize(get_descriptor("profile", "get"), response, context=RequestContext())
        assert result == {"result": "success", "data": [1, 2]}

    def test_empty_body(self):
        """Should return an empty dict for an empty body."""
        response = RawResponse(status_code=204)
        result = normalize(get_descriptor("file", "delete"), response, context=RequestContext())
        assert result == {}

    def test_non_json_body(self):
        """Should return text for bodies that are not JSON."""
        response = RawResponse(status_code=200, content=b"ok")
        result = normalize(get_descriptor("folder", "create"), response, context=RequestContext())
        assert result == "ok"


class TestNormalizeBinary:
    """Tests for download responses."""

    @pytest.mark.parametrize("raw", [b"", b"\x00\x01\x02", bytes(range(256))])
    def test_base64(self, raw):
        """data should be the base64 encoding of the raw bytes."""
        context = RequestContext(file_id="9", file_name="report.pdf")
        response = RawResponse(status_code=200, content=raw)
        result = normalize(get_descriptor("file", "download"), response, context=context)
        assert isinstance(result, BinaryResult)
        assert base64.b64decode(result.data) == raw
        assert result.mime_type == "application/pdf"

    def test_unknown_extension(self):
        """Unknown extensions should fall back to application/octet-stream."""
        context = RequestContext(file_id="9", file_name="unknownext.xyz")
        response = RawResponse(status_code=200, content=b"abc")
        result = normalize(get_descriptor("file", "download"), response, context=context)
        assert result.mime_type == "application/octet-stream"
        assert result.file_name == "unknownext.xyz"


class TestNormalizeStatus:
    """Tests for status code interpretation."""

    def test_upload_404(self):
        response = RawResponse(status_code=404, content=b'{"error":"not_found"}')
        with pytest.raises(EndpointNotFoundError) as exc_info:
            normalize(
                get_descriptor("file", "upload"),
                response,
                context=RequestContext(),
                request=upload_request(),
            )
        error = exc_info.value
        assert str(error) == "API endpoint not found"
        assert error.details["params"]["file_size"] == 3
        assert error.details["response"] == '{"error":"not_found"}'
        assert error.details["headers"]["Authorization"] == "[REDACTED]"

    def test_upload_409(self):
        response = RawResponse(status_code=409)
        with pytest.raises(FileAlreadyExistsError) as exc_info:
            normalize(
                get_descriptor("file", "upload"),
                response,
                context=RequestContext(),
                request=upload_request(),
            )
        assert str(exc_info.value) == "File already exists"
        assert exc_info.value.details["params"]["file_name"] == "a.txt"

    def test_upload_500(self):
        """Other upload failures should be RequestFailedError."""
        response = RawResponse(status_code=500, content=b"boom")
        with pytest.raises(RequestFailedError) as exc_info:
            normalize(get_descriptor("file", "upload"), response, context=RequestContext())
        assert exc_info.value.status_code == 500
        assert exc_info.value.body == "boom"

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 409, 500, 503])
    def test_other_operations(self, status):
        """Non-upload failures should always be RequestFailedError."""
        response = RawResponse(status_code=status, content=b"{}")
        with pytest.raises(RequestFailedError) as exc_info:
            normalize(get_descriptor("file", "info"), response, context=RequestContext())
        assert type(exc_info.value) is RequestFailedError
        assert exc_info.value.status_code == status
        assert f"status {status}" in str(exc_info.value)

    @pytest.mark.parametrize("status", [204, 299])
    def test_other_2xx_is_success(self, status):
        response = RawResponse(status_code=status)
        result = normalize(get_descriptor("file", "delete"), response, context=RequestContext())
        assert result == {}

    @pytest.mark.parametrize("status", [301, 302, 304, 307])
    def test_redirect_status_is_failure(self, status):
        """An unfollowed 3xx should raise rather than return an empty download."""
        response = RawResponse(status_code=status, headers={"location": "https://cdn.example/x"})
        with pytest.raises(RequestFailedError) as exc_info:
            normalize(
                get_descriptor("file", "download"),
                response,
                context=RequestContext(file_id="9", file_name="a.pdf"),
            )
        assert exc_info.value.status_code == status

    def test_download_failure_is_not_binary(self):
        """A failed download should raise instead of returning a BinaryResult."""
        response = RawResponse(status_code=403, content=b"denied")
        with pytest.raises(RequestFailedError):
            normalize(
                get_descriptor("file", "download"),
                response,
                context=RequestContext(file_id="9", file_name="a.pdf"),
            )
