"""Pytest configuration and shared fixtures.

Organization:
    - Environment Fixtures: isolate settings from the developer's shell
    - Storage Fixtures: settings, in-memory S3 client and the adapter
"""

from __future__ import annotations

import os

import pytest

from object_storage.core.settings import StorageSettings, clear_all_caches
from object_storage.infra.logging.context import clear_log_context
from object_storage.infra.storage.backends.s3.backend import S3ObjectStorage
from tests.utils import InMemoryS3Client

TEST_BUCKET = "test-bucket"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test without STORAGE_*/LOG_* variables, .env or conf/ files.

    Settings caches and the logging context are reset around each test.
    """
    for name in list(os.environ):
        if name.startswith(("STORAGE_", "LOG_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_all_caches()
    clear_log_context()
    yield
    clear_all_caches()
    clear_log_context()


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def storage_settings() -> StorageSettings:
    """Settings for a bucket in a non-default region."""
    return StorageSettings(bucket=TEST_BUCKET, region="eu-west-1")


@pytest.fixture
def s3_client() -> InMemoryS3Client:
    """In-memory S3 client holding the test bucket."""
    return InMemoryS3Client(TEST_BUCKET)


@pytest.fixture
def storage(s3_client, storage_settings) -> S3ObjectStorage:
    """Adapter wired to the in-memory client.

    Example:
        async def test_upload(storage):
            url = await storage.upload("a.txt", b"data")
    """
    return S3ObjectStorage(s3_client, storage_settings)
