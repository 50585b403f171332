from collections.abc import AsyncIterator

from .base import _S3ClientBase
from .responses import ListBucketResult, ObjectInfo, parse_list_bucket_result


class _BucketOperations(_S3ClientBase):
    # https://docs.aws.amazon.com/AmazonS3/latest/API/API_ListObjectsV2.html
    async def list_objects(
        self,
        prefix: str | None = None,
        delimiter: str | None = None,
        max_keys: int = 1000,
        continuation_token: str | None = None,
        start_after: str | None = None,
    ) -> ListBucketResult:
        params = {
            "list-type": "2",  # Use ListObjectsV2
            "max-keys": str(max_keys),
        }

        if prefix:
            params["prefix"] = prefix
        if delimiter:
            params["delimiter"] = delimiter
        if continuation_token:
            params["continuation-token"] = continuation_token
        if start_after:
            params["start-after"] = start_after

        response = await self._make_request("GET", params=params)
        response_text = response.text()

        # Some S3 services return an empty response for empty buckets
        if not response_text.strip():
            return ListBucketResult(
                name=self.bucket,
                prefix=prefix,
                delimiter=delimiter,
                max_keys=max_keys,
                is_truncated=False,
                continuation_token=continuation_token,
            )

        return parse_list_bucket_result(response_text)

    async def iter_objects(
        self,
        prefix: str | None = None,
        delimiter: str | None = None,
        page_size: int = 1000,
    ) -> AsyncIterator[ObjectInfo]:
        """Yield every object under ``prefix``, following continuation tokens."""
        continuation_token = None
        while True:
            result = await self.list_objects(
                prefix=prefix,
                delimiter=delimiter,
                max_keys=page_size,
                continuation_token=continuation_token,
            )
            for obj in result.contents:
                yield obj

            if not result.is_truncated or not result.next_continuation_token:
                break
            continuation_token = result.next_continuation_token
