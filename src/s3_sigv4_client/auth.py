"""AWS Signature Version 4 authentication for S3."""

import dataclasses
import datetime as dt
import hashlib
import hmac
import logging
from collections.abc import Mapping
from typing import Self

from multidict import CIMultiDict
from yarl import URL

from .canonical import EMPTY_BODY_SHA256, canonical_request, signed_headers
from .exceptions import CryptoFailureError, MalformedTimestampError, MalformedUrlError

logger = logging.getLogger(__name__)

REGION = "us-east-1"
SERVICE = "s3"
TERMINATOR = "aws4_request"
AUTH_METHOD = "AWS4-HMAC-SHA256"
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


@dataclasses.dataclass(frozen=True)
class SigningRequest:
    method: str
    url: URL
    headers: CIMultiDict[str] = dataclasses.field(default_factory=CIMultiDict)

    @classmethod
    def build(
        cls,
        method: str,
        url: URL | str,
        headers: Mapping[str, str] | None = None,
    ) -> Self:
        return cls(method, parse_url(url), CIMultiDict(headers or {}))


def parse_url(url: URL | str) -> URL:
    if not isinstance(url, URL):
        try:
            url = URL(url)
        except (TypeError, ValueError) as e:
            raise MalformedUrlError(f"Cannot parse URL {url!r}: {e}") from e
    if not url.is_absolute() or not url.host:
        raise MalformedUrlError(f"URL has no host: {str(url)!r}")
    return url


def host_header(url: URL) -> str:
    url = parse_url(url)
    if url.explicit_port is not None and not url.is_default_port():
        return f"{url.host}:{url.explicit_port}"
    return url.host


def format_timestamp(now: dt.datetime | None = None) -> str:
    if now is None:
        now = dt.datetime.now(dt.UTC)
    return now.strftime(TIMESTAMP_FORMAT)


def short_date(timestamp: str) -> str:
    date, sep, _ = timestamp.partition("T")
    if not sep or not date:
        raise MalformedTimestampError(
            f"Timestamp {timestamp!r} is not in YYYYMMDDTHHMMSSZ format"
        )
    return date


def credential_scope(date_stamp: str) -> str:
    return f"{date_stamp}/{REGION}/{SERVICE}/{TERMINATOR}"


def _sha256_hash(data: str) -> str:
    try:
        return hashlib.sha256(data.encode("utf-8")).hexdigest()
    except (UnicodeEncodeError, ValueError) as e:
        raise CryptoFailureError(f"SHA-256 failed: {e}") from e


def _hmac_sha256(key: bytes, data: str) -> bytes:
    try:
        return hmac.new(key, data.encode("utf-8"), hashlib.sha256).digest()
    except (UnicodeEncodeError, TypeError, ValueError) as e:
        raise CryptoFailureError(f"HMAC-SHA256 failed: {e}") from e


def get_signature_key(secret_key: str, date_stamp: str) -> bytes:
    try:
        secret = f"AWS4{secret_key}".encode()
    except UnicodeEncodeError as e:
        raise CryptoFailureError("Secret key is not valid UTF-8 text") from e
    k_date = _hmac_sha256(secret, date_stamp)
    k_region = _hmac_sha256(k_date, REGION)
    k_service = _hmac_sha256(k_region, SERVICE)
    return _hmac_sha256(k_service, TERMINATOR)


def create_string_to_sign(timestamp: str, canonical_request: str) -> str:
    return "\n".join(
        [
            AUTH_METHOD,
            timestamp,
            credential_scope(short_date(timestamp)),
            _sha256_hash(canonical_request),
        ]
    )


def calculate_signature(secret_key: str, timestamp: str, string_to_sign: str) -> str:
    signing_key = get_signature_key(secret_key, short_date(timestamp))
    return _hmac_sha256(signing_key, string_to_sign).hex()


def authorization_header(
    access_key: str, date_stamp: str, signed_headers: str, signature: str
) -> str:
    return (
        f"{AUTH_METHOD} "
        f"Credential={access_key}/{credential_scope(date_stamp)}, "
        f"SignedHeaders={signed_headers}, "
        f"Signature={signature}"
    )


def canonical_request_for(request: SigningRequest) -> str:
    return canonical_request(
        request.method,
        request.url.raw_path,
        request.url.query.items(),
        request.headers,
    )


def sign(
    access_key: str,
    secret_key: str,
    request: SigningRequest,
    timestamp: str | None = None,
) -> SigningRequest:
    """Return a copy of ``request`` carrying SigV4 authentication headers.

    ``timestamp`` pins ``x-amz-date`` (``YYYYMMDDTHHMMSSZ``) for reproducible
    signatures; the current UTC time is used otherwise. The request is
    always signed with the empty-body payload hash. The caller's request
    object is left untouched.
    """
    url = parse_url(request.url)
    if timestamp is None:
        timestamp = format_timestamp()
    date_stamp = short_date(timestamp)

    headers = CIMultiDict(request.headers)
    headers.popall("Authorization", None)
    headers["x-amz-date"] = timestamp
    headers["x-amz-content-sha256"] = EMPTY_BODY_SHA256
    headers["host"] = host_header(url)

    signed = dataclasses.replace(request, url=url, headers=headers)
    canonical = canonical_request_for(signed)
    logger.debug("Canonical request:\n%s", canonical)

    string_to_sign = create_string_to_sign(timestamp, canonical)
    logger.debug("String to sign:\n%s", string_to_sign)

    signature = calculate_signature(secret_key, timestamp, string_to_sign)
    headers["Authorization"] = authorization_header(
        access_key, date_stamp, signed_headers(headers), signature
    )
    return signed


class AWSSignatureV4:
    def __init__(self, access_key: str, secret_key: str):
        self.access_key = access_key
        self.secret_key = secret_key

    def __repr__(self) -> str:
        return f"AWSSignatureV4(access_key={self.access_key!r})"

    def sign_request(
        self,
        method: str,
        url: URL | str,
        headers: Mapping[str, str] | None = None,
        timestamp: str | None = None,
    ) -> CIMultiDict[str]:
        request = SigningRequest.build(method, url, headers)
        return sign(self.access_key, self.secret_key, request, timestamp).headers
