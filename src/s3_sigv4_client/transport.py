"""HTTP transport for signed requests, built on aiohttp."""

import asyncio
import logging
import pathlib
import ssl
from collections.abc import AsyncIterable
from dataclasses import dataclass
from typing import Self

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy

from .auth import SigningRequest
from .config import DEFAULT_TIMEOUT, ClientConfig
from .exceptions import ConfigError, S3TransportError, UnsupportedCapabilityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    status: int
    headers: CIMultiDictProxy[str]
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


class S3Transport:
    # request bodies cannot be signed yet, see with_streaming_body()
    supports_streaming_body = False

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        trust_cert_path: str | pathlib.Path | None = None,
    ):
        self.timeout = timeout
        self.trust_cert_path = (
            pathlib.Path(trust_cert_path) if trust_cert_path is not None else None
        )
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> Self:
        return cls(timeout=config.timeout, trust_cert_path=config.trust_cert_path)

    def with_custom_root_cert(self, path: str | pathlib.Path) -> Self:
        """Return a new transport that trusts the CA certificates in ``path``."""
        path = pathlib.Path(path)
        if not path.is_file():
            raise ConfigError(f"Trusted certificate file not found: {path}")
        return type(self)(timeout=self.timeout, trust_cert_path=path)

    def with_streaming_body(
        self, reader: AsyncIterable[bytes], content_hash: str
    ) -> Self:
        raise UnsupportedCapabilityError(
            "Streaming request bodies are not supported: only requests with an "
            "empty body can be signed"
        )

    def _ssl_context(self) -> ssl.SSLContext | None:
        if self.trust_cert_path is None:
            return None
        try:
            return ssl.create_default_context(cafile=str(self.trust_cert_path))
        except (OSError, ssl.SSLError) as e:
            raise ConfigError(
                f"Cannot load trusted certificate {self.trust_cert_path}: {e}"
            ) from e

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self):
        if self._session is None:
            ssl_context = self._ssl_context()
            connector = (
                aiohttp.TCPConnector(ssl=ssl_context) if ssl_context else None
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )

    async def close(self):
        if self._session:
            await self._session.close()
            self._session = None

    async def send(self, request: SigningRequest) -> TransportResponse:
        await self._ensure_session()

        logger.debug("%s %s", request.method, request.url)
        try:
            async with self._session.request(
                method=request.method,
                url=request.url,
                headers=CIMultiDict(request.headers),
            ) as response:
                body = await response.read()
                result = TransportResponse(
                    status=response.status,
                    headers=CIMultiDictProxy(CIMultiDict(response.headers)),
                    body=body,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise S3TransportError(
                f"{request.method} {request.url} failed: {e!r}"
            ) from e

        logger.debug("%s %s -> %d", request.method, request.url, result.status)
        return result
