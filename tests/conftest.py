import collections

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from s3_sigv4_client.client import S3Client
from s3_sigv4_client.config import ClientConfig
from s3_sigv4_client.transport import TransportResponse


class MockClient(S3Client):
    def __init__(self, config: ClientConfig):
        super().__init__(config)
        self._responses = collections.deque()
        self.requests = []

    async def _make_request(
        self,
        method: str,
        key: str | None = None,
        headers: dict | None = None,
        params: dict[str, str] | None = None,
    ):
        self.requests.append(
            {
                "method": method,
                "key": key,
                "headers": headers,
                "params": params,
            }
        )
        if self._responses:
            return self._responses.popleft()
        raise ValueError("No more responses available in the mock client.")

    def add_response(self, response: str | bytes, headers: dict | None = None):
        body = response.encode() if isinstance(response, str) else response
        self._responses.append(
            TransportResponse(
                status=200,
                headers=CIMultiDictProxy(CIMultiDict(headers or {})),
                body=body,
            )
        )


@pytest.fixture
def config():
    return ClientConfig(
        endpoint="https://s3.us-east-1.amazonaws.com",
        bucket="test-bucket",
        access_key="test-access-key",
        secret_key="test-secret-key",
    )


@pytest.fixture
def mock_client(config):
    return MockClient(config)
