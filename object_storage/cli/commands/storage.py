"""Storage commands for S3-compatible object storage.

Every command maps onto one adapter operation:
- info: configuration summary (no I/O)
- url: resolve a key to its public URL (no I/O)
- upload, mkdir, ls, cp, mv, get, rm, exists: remote operations

Status messages go to stderr so that ``ls``, ``url`` and ``get`` output can be
piped.
"""

import sys
from typing import BinaryIO

import click
from pydantic import ValidationError

from object_storage.cli.utils import coro, error, format_bytes, info, section, success, warning
from object_storage.core.settings import StorageSettings, get_storage_settings
from object_storage.infra.storage.client import open_object_storage
from object_storage.infra.storage.endpoints import public_endpoint_for, resolve_url
from object_storage.infra.storage.exceptions import (
    StorageError,
    StorageKeyNotExistsError,
    StoragePartialMoveError,
)


def _load_settings() -> StorageSettings:
    """Load settings or exit with the validation error."""
    try:
        return get_storage_settings()
    except ValidationError as e:
        error(f"Invalid storage configuration: {e}")
        sys.exit(1)


def _configured_settings() -> StorageSettings:
    """Load settings and exit unless a bucket is configured."""
    settings = _load_settings()
    if not settings.is_configured:
        error("Storage is not configured. Run 'object-storage storage info' for details.")
        sys.exit(1)
    return settings


@click.group(name="storage")
def storage() -> None:
    """Storage management commands.

    Upload, list, copy, move, fetch and delete objects in the configured
    bucket.
    """


@storage.command(name="info")
def info_cmd() -> None:
    """Show storage configuration.

    Displays driver, bucket, region and endpoints. Never contacts the
    remote store.
    """
    settings = _load_settings()

    section("Storage Configuration")

    click.echo(f"\nDriver: {settings.driver.value}")
    click.echo(f"Configured: {settings.is_configured}")
    click.echo(f"Bucket: {settings.bucket or '-'}")
    click.echo(f"Region: {settings.region}")
    click.echo(f"API Endpoint: {settings.api_endpoint or 'AWS S3 (default)'}")
    if settings.is_configured:
        click.echo(f"Public Endpoint: {public_endpoint_for(settings)}")
    click.echo(f"ACL: {settings.acl}")
    click.echo(f"Addressing Style: {settings.addressing_style}")
    click.echo(f"Max Retries: {settings.max_retries} ({settings.retry_mode})")
    click.echo(f"Timeout: {settings.timeout}s")
    click.echo(f"Deduplicate Listings: {settings.dedupe_listing}")

    if settings.access_key and settings.secret_key:
        success("Credentials: Configured")
    else:
        warning("Credentials: Not configured (using the default AWS credential chain)")

    if not settings.is_configured:
        warning("Storage is not fully configured.")
        info("Set STORAGE_BUCKET (and STORAGE_REGION / STORAGE_ENDPOINT as needed)")
    else:
        success("Storage is properly configured")


@storage.command(name="url")
@click.argument("key")
def url_cmd(key: str) -> None:
    """Print the public URL of KEY without contacting the remote store."""
    settings = _configured_settings()
    click.echo(resolve_url(public_endpoint_for(settings), key))


@storage.command(name="upload")
@click.argument("source", type=click.File("rb"))
@click.argument("key")
@coro
async def upload_cmd(source: BinaryIO, key: str) -> None:
    """Upload a local file (or '-' for stdin) to KEY.

    Examples:
        object-storage storage upload ./readme.txt docs/readme.txt
        echo hello | object-storage storage upload - notes/hello.txt
    """
    settings = _configured_settings()
    data = source.read()

    try:
        async with open_object_storage(settings) as store:
            url = await store.upload(key, data)
    except StorageError as e:
        error(f"Upload failed: {e.detail}")
        sys.exit(1)

    success(f"Uploaded {format_bytes(len(data))} to {key}")
    click.echo(url)


@storage.command(name="mkdir")
@click.argument("key")
@coro
async def mkdir_cmd(key: str) -> None:
    """Create a directory marker (zero-byte object) at KEY."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            await store.create_directory(key)
    except StorageError as e:
        error(f"Failed to create directory: {e.detail}")
        sys.exit(1)

    success(f"Created directory marker {key}")


@storage.command(name="ls")
@click.argument("prefix", required=False)
@click.option(
    "--dedupe/--no-dedupe",
    default=None,
    help="Collapse repeated child names (default: STORAGE_DEDUPE_LISTING)",
)
@coro
async def ls_cmd(prefix: str | None, dedupe: bool | None) -> None:
    """List the immediate children of PREFIX (the bucket root when omitted).

    Examples:
        object-storage storage ls
        object-storage storage ls docs --dedupe
    """
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            names = await store.list(prefix, dedupe=dedupe)
    except StorageError as e:
        error(f"Listing failed: {e.detail}")
        sys.exit(1)

    if not names:
        warning(f"No objects found under '{prefix or ''}'")
        return

    for name in names:
        click.echo(name)


@storage.command(name="cp")
@click.argument("source")
@click.argument("destination")
@coro
async def cp_cmd(source: str, destination: str) -> None:
    """Copy SOURCE to DESTINATION inside the bucket."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            url = await store.copy(source, destination)
    except StorageKeyNotExistsError:
        error(f"Source does not exist: {source}")
        sys.exit(1)
    except StorageError as e:
        error(f"Copy failed: {e.detail}")
        sys.exit(1)

    success(f"Copied {source} to {destination}")
    click.echo(url)


@storage.command(name="mv")
@click.argument("source")
@click.argument("destination")
@coro
async def mv_cmd(source: str, destination: str) -> None:
    """Move SOURCE to DESTINATION (copy, then delete the source)."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            url = await store.move(source, destination)
    except StorageKeyNotExistsError:
        error(f"Source does not exist: {source}")
        sys.exit(1)
    except StoragePartialMoveError as e:
        warning(f"Copied to {e.destination} but could not delete {e.source}")
        info(f"Retry with: object-storage storage rm {e.source}")
        sys.exit(1)
    except StorageError as e:
        error(f"Move failed: {e.detail}")
        sys.exit(1)

    success(f"Moved {source} to {destination}")
    click.echo(url)


@storage.command(name="get")
@click.argument("key")
@click.option(
    "-o",
    "--output",
    type=click.File("wb"),
    default="-",
    help="Write the object to this file (default: stdout)",
)
@coro
async def get_cmd(key: str, output: BinaryIO) -> None:
    """Fetch the content of KEY."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            data = await store.get_object(key)
    except StorageKeyNotExistsError:
        error(f"Object does not exist: {key}")
        sys.exit(1)
    except StorageError as e:
        error(f"Download failed: {e.detail}")
        sys.exit(1)

    output.write(data)


@storage.command(name="rm")
@click.argument("key")
@coro
async def rm_cmd(key: str) -> None:
    """Delete KEY. Deleting a missing key succeeds."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            await store.delete(key)
    except StorageError as e:
        error(f"Delete failed: {e.detail}")
        sys.exit(1)

    success(f"Deleted {key}")


@storage.command(name="exists")
@click.argument("key")
@coro
async def exists_cmd(key: str) -> None:
    """Check whether KEY exists; exits with status 1 when it does not."""
    settings = _configured_settings()

    try:
        async with open_object_storage(settings) as store:
            found = await store.exists(key)
    except StorageError as e:
        error(f"Existence check failed: {e.detail}")
        sys.exit(2)

    click.echo("yes" if found else "no")
    if not found:
        sys.exit(1)


storage.add_command(get_cmd, name="cat")
