"""Unit tests for storage error mapping and taxonomy."""

import pytest

from object_storage.core.exceptions import AppException
from object_storage.infra.storage.exceptions import (
    StorageError,
    StorageFileNotFoundError,
    StorageKeyNotExistsError,
    StorageKeyVanishedError,
    StoragePartialMoveError,
    StoragePermissionError,
    StorageQuotaExceededError,
    StorageTimeoutError,
    StorageValidationError,
    is_not_found,
    map_boto_error,
)
from tests.utils import make_client_error


class TestMapBotoError:
    """Test ClientError to StorageError mapping."""

    @pytest.mark.parametrize(
        ("code", "expected"),
        [
            ("NoSuchKey", StorageFileNotFoundError),
            ("404", StorageFileNotFoundError),
            ("NoSuchBucket", StorageFileNotFoundError),
            ("AccessDenied", StoragePermissionError),
            ("403", StoragePermissionError),
            ("SlowDown", StorageTimeoutError),
            ("QuotaExceeded", StorageQuotaExceededError),
            ("InvalidArgument", StorageValidationError),
        ],
    )
    def test_known_codes(self, code, expected):
        error = map_boto_error(make_client_error(code, "PutObject"), operation="upload")

        assert type(error) is expected

    def test_unknown_code_is_generic(self):
        error = map_boto_error(make_client_error("Weird", "PutObject"), operation="upload")

        assert type(error) is StorageError
        assert error.code == "STORAGE_ERROR"
        assert error.status_code == 500

    def test_metadata(self):
        error = map_boto_error(
            make_client_error("AccessDenied", "CopyObject", message="nope"),
            operation="copy",
            key="a.txt",
        )

        assert error.extra["operation"] == "copy"
        assert error.extra["key"] == "a.txt"
        assert error.extra["aws_error_code"] == "AccessDenied"
        assert error.extra["request_id"] == "TESTREQUEST"
        assert error.detail == "Copy failed: nope"

    def test_is_not_found(self):
        assert is_not_found(make_client_error("404", "HeadObject"))
        assert is_not_found(make_client_error("NoSuchKey", "GetObject"))
        assert not is_not_found(make_client_error("AccessDenied", "GetObject"))


class TestTaxonomy:
    """Test error class relationships and fields."""

    def test_all_errors_are_app_exceptions(self):
        assert issubclass(StorageError, AppException)

    def test_key_not_exists(self):
        error = StorageKeyNotExistsError("a.txt", metadata={"bucket": "b"})

        assert error.code == "STORAGE_KEY_NOT_EXISTS"
        assert error.status_code == 404
        assert error.title == "Not Found"
        assert error.type == "storage-key-not-exists"
        assert error.extra == {"key": "a.txt", "bucket": "b"}

    def test_vanished_is_distinguishable(self):
        error = StorageKeyVanishedError("a.txt", "copy")

        assert isinstance(error, StorageKeyNotExistsError)
        assert error.code == "STORAGE_KEY_VANISHED"
        assert error.extra["operation"] == "copy"
        assert "copy" in error.detail

    def test_partial_move_carries_keys(self):
        error = StoragePartialMoveError("a", "b", "https://h/b")

        assert (error.source, error.destination, error.url) == ("a", "b", "https://h/b")
        assert error.extra["url"] == "https://h/b"
        assert error.code == "STORAGE_PARTIAL_MOVE"

    def test_quota_title(self):
        assert StorageQuotaExceededError("full").title == "Insufficient Storage"
