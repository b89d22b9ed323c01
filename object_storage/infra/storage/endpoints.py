"""Public endpoint derivation and key-to-URL resolution.

URL forms (must stay bit-exact, clients persist them):
    custom public endpoint:  {public_endpoint}/{key}
    reference region:        https://{bucket}.s3.amazonaws.com/{key}
    any other region:        https://{bucket}.s3-{region}.amazonaws.com/{key}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from object_storage.core.settings.storage import DEFAULT_REGION

if TYPE_CHECKING:
    from object_storage.core.settings.storage import StorageSettings

SERVICE_HOST = "amazonaws.com"


def public_endpoint(
    bucket: str,
    region: str,
    custom_endpoint: str | None = None,
) -> str:
    """Return the URL base under which the bucket's objects are published.

    Args:
        bucket: Bucket name
        region: Region identifier
        custom_endpoint: Public endpoint override, returned verbatim when set

    Returns:
        URL base without a trailing key separator
    """
    if custom_endpoint:
        return custom_endpoint
    if region == DEFAULT_REGION:
        return f"https://{bucket}.s3.{SERVICE_HOST}"
    return f"https://{bucket}.s3-{region}.{SERVICE_HOST}"


def public_endpoint_for(settings: StorageSettings) -> str:
    """Derive the public endpoint from storage settings.

    Raises:
        ValueError: If the settings carry no bucket
    """
    if not settings.bucket:
        raise ValueError("Cannot derive a public endpoint without a bucket")
    return public_endpoint(settings.bucket, settings.region, settings.public_endpoint)


def resolve_url(endpoint: str, key: str) -> str:
    """Join an endpoint and a key with a single separator."""
    return endpoint + "/" + key
