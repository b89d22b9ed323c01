"""Tests for the storage CLI commands.

Testing approach:
- Uses Click's CliRunner for command invocation
- Replaces open_object_storage so commands run against the in-memory client
- Checks exit codes, stdout payloads and stderr status messages
"""

from contextlib import asynccontextmanager

from click.testing import CliRunner
import pytest

from object_storage.cli.commands import storage as storage_commands
from object_storage.cli.main import cli
from object_storage.infra.storage.backends.s3.backend import S3ObjectStorage
from tests.utils import InMemoryS3Client, make_client_error

# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def bucket(monkeypatch):
    """Configure the test bucket through the environment."""
    monkeypatch.setenv("STORAGE_BUCKET", "test-bucket")
    monkeypatch.setenv("STORAGE_REGION", "eu-west-1")
    return InMemoryS3Client("test-bucket")


@pytest.fixture
def remote(bucket, monkeypatch):
    """Route every command's storage through the in-memory bucket."""

    @asynccontextmanager
    async def fake_open(settings=None, **kwargs):
        yield S3ObjectStorage(bucket, settings)

    monkeypatch.setattr(storage_commands, "open_object_storage", fake_open)
    return bucket


def run(runner, *args, **kwargs):
    return runner.invoke(cli, ["storage", *args], **kwargs)


# =============================================================================
# Configuration Commands
# =============================================================================


class TestInfoCommand:
    """Test `storage info`."""

    def test_configured(self, cli_runner, bucket):
        result = run(cli_runner, "info")

        assert result.exit_code == 0
        assert "Bucket: test-bucket" in result.output
        assert "Public Endpoint: https://test-bucket.s3-eu-west-1.amazonaws.com" in result.output

    def test_unconfigured(self, cli_runner):
        result = run(cli_runner, "info")

        assert result.exit_code == 0
        assert "Configured: False" in result.output
        assert "not fully configured" in result.output


class TestUrlCommand:
    """Test `storage url`."""

    def test_prints_resolved_url(self, cli_runner, bucket):
        result = run(cli_runner, "url", "docs/readme.txt")

        assert result.exit_code == 0
        assert result.stdout.strip() == (
            "https://test-bucket.s3-eu-west-1.amazonaws.com/docs/readme.txt"
        )

    def test_requires_bucket(self, cli_runner):
        result = run(cli_runner, "url", "k")

        assert result.exit_code == 1
        assert "not configured" in result.output

    def test_invalid_configuration(self, cli_runner, monkeypatch):
        monkeypatch.setenv("STORAGE_DRIVER", "minio")

        result = run(cli_runner, "url", "k")

        assert result.exit_code == 1
        assert "Invalid storage configuration" in result.output


# =============================================================================
# Object Commands
# =============================================================================


class TestObjectCommands:
    """Test commands that reach the bucket."""

    def test_upload_from_file(self, cli_runner, remote, tmp_path):
        source = tmp_path / "readme.txt"
        source.write_bytes(b"hello")

        result = run(cli_runner, "upload", str(source), "docs/readme.txt")

        assert result.exit_code == 0
        assert remote.objects["docs/readme.txt"] == b"hello"
        assert result.stdout.strip().endswith("/docs/readme.txt")

    def test_upload_from_stdin(self, cli_runner, remote):
        result = run(cli_runner, "upload", "-", "notes/a.txt", input=b"piped")

        assert result.exit_code == 0
        assert remote.objects["notes/a.txt"] == b"piped"

    def test_mkdir(self, cli_runner, remote):
        result = run(cli_runner, "mkdir", "photos/")

        assert result.exit_code == 0
        assert remote.objects["photos/"] == b""

    def test_ls(self, cli_runner, remote):
        remote.objects.update({"a/b/c/1": b"", "a/b/c/2": b"", "a/b/x": b""})

        result = run(cli_runner, "ls", "a/b")
        deduped = run(cli_runner, "ls", "a/b", "--dedupe")

        assert result.stdout.split() == ["c", "c", "x"]
        assert deduped.stdout.split() == ["c", "x"]

    def test_ls_empty(self, cli_runner, remote):
        result = run(cli_runner, "ls", "nothing")

        assert result.exit_code == 0
        assert "No objects found" in result.output

    def test_cp(self, cli_runner, remote):
        remote.objects["src"] = b"data"

        result = run(cli_runner, "cp", "src", "dst")

        assert result.exit_code == 0
        assert remote.objects["dst"] == b"data"

    def test_cp_missing_source(self, cli_runner, remote):
        result = run(cli_runner, "cp", "ghost", "dst")

        assert result.exit_code == 1
        assert "Source does not exist: ghost" in result.output
        assert "dst" not in remote.objects

    def test_mv(self, cli_runner, remote):
        remote.objects["src"] = b"data"

        result = run(cli_runner, "mv", "src", "dst")

        assert result.exit_code == 0
        assert "src" not in remote.objects
        assert remote.objects["dst"] == b"data"

    def test_mv_partial(self, cli_runner, remote):
        remote.objects["src"] = b"data"
        remote.fail_next("delete_object", make_client_error("AccessDenied", "DeleteObject"))

        result = run(cli_runner, "mv", "src", "dst")

        assert result.exit_code == 1
        assert "could not delete src" in result.output
        assert "src" in remote.objects
        assert "dst" in remote.objects

    @pytest.mark.parametrize("command", ["get", "cat"])
    def test_get_to_stdout(self, cli_runner, remote, command):
        remote.objects["k"] = b"\x00binary\xff"

        result = run(cli_runner, command, "k")

        assert result.exit_code == 0
        assert result.stdout_bytes == b"\x00binary\xff"

    def test_get_to_file(self, cli_runner, remote, tmp_path):
        remote.objects["k"] = b"content"
        target = tmp_path / "out.bin"

        result = run(cli_runner, "get", "k", "-o", str(target))

        assert result.exit_code == 0
        assert target.read_bytes() == b"content"

    def test_get_missing(self, cli_runner, remote):
        result = run(cli_runner, "get", "ghost")

        assert result.exit_code == 1
        assert "Object does not exist: ghost" in result.output

    def test_rm_is_idempotent(self, cli_runner, remote):
        assert run(cli_runner, "rm", "ghost").exit_code == 0

    def test_rm_error(self, cli_runner, remote):
        remote.fail_next("delete_object", make_client_error("AccessDenied", "DeleteObject"))

        result = run(cli_runner, "rm", "k")

        assert result.exit_code == 1
        assert "Delete failed" in result.output

    def test_exists(self, cli_runner, remote):
        remote.objects["k"] = b""

        found = run(cli_runner, "exists", "k")
        missing = run(cli_runner, "exists", "ghost")

        assert (found.exit_code, found.stdout.strip()) == (0, "yes")
        assert (missing.exit_code, missing.stdout.strip()) == (1, "no")


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "object-storage" in result.output
