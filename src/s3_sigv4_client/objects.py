from dataclasses import dataclass, field

from multidict import CIMultiDictProxy

from .base import _S3ClientBase
from .exceptions import UnsupportedCapabilityError

META_PREFIX = "x-amz-meta-"


@dataclass(frozen=True)
class ObjectResult:
    content_type: str | None
    content_length: int
    etag: str
    last_modified: str | None
    version_id: str | None
    server_side_encryption: str | None
    metadata: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class DeleteResult:
    delete_marker: bool
    version_id: str | None


def _object_result(
    headers: CIMultiDictProxy[str], body: bytes | None = None
) -> ObjectResult:
    metadata = {}
    for header_name, header_value in headers.items():
        if header_name.lower().startswith(META_PREFIX):
            metadata[header_name[len(META_PREFIX) :]] = header_value

    return ObjectResult(
        content_type=headers.get("Content-Type"),
        content_length=int(headers.get("Content-Length", 0)),
        etag=headers.get("ETag", "").strip('"'),
        last_modified=headers.get("Last-Modified"),
        version_id=headers.get("x-amz-version-id"),
        server_side_encryption=headers.get("x-amz-server-side-encryption"),
        metadata=metadata,
        body=body,
    )


class _ObjectOperations(_S3ClientBase):
    async def get_object(self, key: str) -> ObjectResult:
        response = await self._make_request("GET", key=key)
        return _object_result(response.headers, response.body)

    async def head_object(self, key: str) -> ObjectResult:
        """Get object metadata without downloading the object."""
        response = await self._make_request("HEAD", key=key)
        return _object_result(response.headers)

    async def delete_object(self, key: str) -> DeleteResult:
        response = await self._make_request("DELETE", key=key)
        return DeleteResult(
            delete_marker=response.headers.get("x-amz-delete-marker") == "true",
            version_id=response.headers.get("x-amz-version-id"),
        )

    async def put_object(self, key: str, data: bytes) -> ObjectResult:
        # only the empty-body payload hash can be signed
        raise UnsupportedCapabilityError(
            f"Cannot upload '{key}' ({len(data)} bytes): signed request bodies "
            "are not supported"
        )
