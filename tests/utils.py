"""Test utilities and helper functions.

This module provides an in-memory stand-in for the aiobotocore S3 client so
adapter behaviour can be tested end to end without a network. Failures are
reported exactly the way botocore reports them: as ClientError instances
carrying an S3 error code.

Usage:
    from tests.utils import InMemoryS3Client, make_client_error

    client = InMemoryS3Client("test-bucket")
    client.fail_next("delete_object", make_client_error("AccessDenied", "DeleteObject"))
"""

from __future__ import annotations

from typing import Any

from botocore.exceptions import ClientError


def make_client_error(
    code: str,
    operation_name: str,
    message: str | None = None,
    status_code: int | None = None,
) -> ClientError:
    """Build a ClientError shaped like the ones botocore raises."""
    statuses = {"404": 404, "NoSuchKey": 404, "NoSuchBucket": 404, "AccessDenied": 403}
    return ClientError(
        {
            "Error": {"Code": code, "Message": message or code},
            "ResponseMetadata": {
                "RequestId": "TESTREQUEST",
                "HTTPStatusCode": status_code or statuses.get(code, 400),
            },
        },
        operation_name,
    )


class StreamingBody:
    """Minimal async body matching aiobotocore's StreamingBody.read()."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    async def read(self) -> bytes:
        return self._data


class InMemoryS3Client:
    """In-memory S3 client covering the calls the adapter makes.

    Keys are listed in lexicographic order, like S3. Every call is recorded
    in ``calls`` as ``(method, kwargs)``.
    """

    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        self.objects: dict[str, bytes] = {}
        self.acls: dict[str, str] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self._failures: dict[str, list[BaseException]] = {}

    # ------------------------------------------------------------------
    # Test controls
    # ------------------------------------------------------------------

    def fail_next(self, method: str, error: BaseException) -> None:
        """Make the next call to ``method`` raise ``error``."""
        self._failures.setdefault(method, []).append(error)

    def calls_to(self, method: str) -> list[dict[str, Any]]:
        return [kwargs for name, kwargs in self.calls if name == method]

    def _enter(self, method: str, operation_name: str, kwargs: dict[str, Any]) -> None:
        self.calls.append((method, kwargs))
        pending = self._failures.get(method)
        if pending:
            raise pending.pop(0)
        if kwargs.get("Bucket") != self.bucket:
            raise make_client_error("NoSuchBucket", operation_name)

    # ------------------------------------------------------------------
    # S3 API
    # ------------------------------------------------------------------

    async def put_object(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("put_object", "PutObject", kwargs)
        body = kwargs.get("Body", b"")
        assert kwargs.get("ContentLength", len(body)) == len(body)
        self.objects[kwargs["Key"]] = bytes(body)
        if "ACL" in kwargs:
            self.acls[kwargs["Key"]] = kwargs["ACL"]
        return {"ETag": '"etag"'}

    async def head_object(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("head_object", "HeadObject", kwargs)
        key = kwargs["Key"]
        if key not in self.objects:
            # HEAD responses have no body, so botocore only sees the status
            raise make_client_error("404", "HeadObject", message="Not Found")
        return {"ContentLength": len(self.objects[key])}

    async def get_object(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("get_object", "GetObject", kwargs)
        key = kwargs["Key"]
        if key not in self.objects:
            raise make_client_error("NoSuchKey", "GetObject")
        data = self.objects[key]
        return {"Body": StreamingBody(data), "ContentLength": len(data)}

    async def copy_object(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("copy_object", "CopyObject", kwargs)
        source = kwargs["CopySource"]
        if source["Bucket"] != self.bucket or source["Key"] not in self.objects:
            raise make_client_error("NoSuchKey", "CopyObject")
        self.objects[kwargs["Key"]] = self.objects[source["Key"]]
        if "ACL" in kwargs:
            self.acls[kwargs["Key"]] = kwargs["ACL"]
        return {"CopyObjectResult": {"ETag": '"etag"'}}

    async def delete_object(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("delete_object", "DeleteObject", kwargs)
        self.objects.pop(kwargs["Key"], None)
        self.acls.pop(kwargs["Key"], None)
        return {}

    async def list_objects_v2(self, **kwargs: Any) -> dict[str, Any]:
        self._enter("list_objects_v2", "ListObjectsV2", kwargs)
        prefix = kwargs.get("Prefix", "")
        max_keys = kwargs.get("MaxKeys", 1000)
        start = int(kwargs.get("ContinuationToken", "0"))

        matching = sorted(key for key in self.objects if key.startswith(prefix))
        page = matching[start : start + max_keys]
        truncated = start + max_keys < len(matching)

        response: dict[str, Any] = {
            "KeyCount": len(page),
            "MaxKeys": max_keys,
            "IsTruncated": truncated,
        }
        if page:
            response["Contents"] = [
                {"Key": key, "Size": len(self.objects[key])} for key in page
            ]
        if truncated:
            response["NextContinuationToken"] = str(start + max_keys)
        return response
