"""AWS Signature Version 4 signing and a minimal asyncio client for S3."""

__version__ = "0.1.0"

from .auth import AWSSignatureV4, SigningRequest, sign
from .client import S3Client
from .config import ClientConfig
from .exceptions import (
    ConfigError,
    CryptoFailureError,
    MalformedTimestampError,
    MalformedUrlError,
    S3AccessDeniedError,
    S3ClientError,
    S3Error,
    S3InvalidRequestError,
    S3NotFoundError,
    S3ServerError,
    S3SignatureMismatchError,
    S3SigV4ClientError,
    S3TransportError,
    SigningError,
    UnsupportedCapabilityError,
)
from .responses import ListBucketResult, ObjectInfo, S3ErrorDocument
from .transport import S3Transport

__all__ = [
    "sign",
    "AWSSignatureV4",
    "SigningRequest",
    "S3Client",
    "ClientConfig",
    "S3Transport",
    "ListBucketResult",
    "ObjectInfo",
    "S3ErrorDocument",
    "S3SigV4ClientError",
    "SigningError",
    "MalformedUrlError",
    "MalformedTimestampError",
    "CryptoFailureError",
    "ConfigError",
    "UnsupportedCapabilityError",
    "S3TransportError",
    "S3Error",
    "S3ClientError",
    "S3ServerError",
    "S3NotFoundError",
    "S3AccessDeniedError",
    "S3SignatureMismatchError",
    "S3InvalidRequestError",
]
