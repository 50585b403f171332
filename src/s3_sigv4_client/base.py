import logging
import pathlib
from collections.abc import Mapping
from typing import Self
from urllib.parse import quote

from yarl import URL

from .auth import AWSSignatureV4, SigningRequest
from .config import ClientConfig
from .responses import error_from_response
from .transport import S3Transport, TransportResponse

logger = logging.getLogger(__name__)


class _S3ClientBase:
    def __init__(self, config: ClientConfig, transport: S3Transport | None = None):
        self.config = config
        self.bucket_url = config.bucket_url

        self._auth = AWSSignatureV4(config.access_key, config.secret_key)
        self._transport = transport or S3Transport.from_config(config)

    @classmethod
    def from_config_file(
        cls,
        config_path: str | pathlib.Path,
        profile_name: str = "default",
    ) -> Self:
        return cls(ClientConfig.from_file(config_path, profile_name))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        return cls(ClientConfig.from_env(environ))

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def transport(self) -> S3Transport:
        return self._transport

    async def __aenter__(self):
        await self._transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self._transport.close()

    def _object_url(self, key: str) -> URL:
        # keys are opaque: "." and ".." segments and leading or doubled
        # slashes are part of the name and must reach the server unchanged
        path = f"{self.bucket_url.raw_path.rstrip('/')}/{quote(key, safe='/')}"
        return self.bucket_url.with_path(path, encoded=True)

    def _build_request(
        self,
        method: str,
        key: str | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> SigningRequest:
        url = self._object_url(key) if key else self.bucket_url
        if params:
            url = url.with_query(params)
        signed_headers = self._auth.sign_request(method, url, headers)
        return SigningRequest(method, url, signed_headers)

    async def _make_request(
        self,
        method: str,
        key: str | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> TransportResponse:
        request = self._build_request(method, key, headers, params)
        response = await self._transport.send(request)

        if response.status >= 400:
            error = error_from_response(response.status, response.text())
            logger.debug(
                "%s %s failed: %s (request id %s)",
                method,
                request.url,
                error,
                error.request_id,
            )
            raise error

        return response
