"""Decoding of S3 XML replies into typed records."""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from .exceptions import (
    S3AccessDeniedError,
    S3ClientError,
    S3Error,
    S3InvalidRequestError,
    S3NotFoundError,
    S3ServerError,
    S3SignatureMismatchError,
)


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    last_modified: str | None = None
    etag: str | None = None
    size: int = 0
    storage_class: str | None = None


@dataclass(frozen=True)
class ListBucketResult:
    name: str
    max_keys: int
    is_truncated: bool
    prefix: str | None = None
    key_count: int | None = None
    delimiter: str | None = None
    continuation_token: str | None = None
    next_continuation_token: str | None = None
    start_after: str | None = None
    common_prefixes: list[str] = field(default_factory=list)
    contents: list[ObjectInfo] = field(default_factory=list)


@dataclass(frozen=True)
class S3ErrorDocument:
    code: str
    message: str
    resource: str | None = None
    request_id: str | None = None


# S3 replies may or may not be namespaced, "{*}" matches both
def _text(element: ET.Element, tag: str) -> str | None:
    child = element.find(f"{{*}}{tag}")
    if child is None:
        return None
    return child.text or ""


def _int(element: ET.Element, tag: str) -> int | None:
    text = _text(element, tag)
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        raise ValueError(f"Invalid integer in <{tag}>: {text!r}") from None


def _parse_xml(xml: str | bytes) -> ET.Element:
    try:
        return ET.fromstring(xml)
    except ET.ParseError as e:
        snippet = xml[:200]
        if isinstance(snippet, bytes):
            snippet = snippet.decode(errors="replace")
        raise ValueError(
            f"Invalid XML response from S3 service: {e}. Response: {snippet}..."
        ) from e


def _parse_object(content: ET.Element) -> ObjectInfo:
    etag = _text(content, "ETag")
    return ObjectInfo(
        key=_text(content, "Key") or "",
        last_modified=_text(content, "LastModified"),
        etag=etag.strip('"') if etag is not None else None,
        size=_int(content, "Size") or 0,
        storage_class=_text(content, "StorageClass"),
    )


def parse_list_bucket_result(xml: str | bytes) -> ListBucketResult:
    root = _parse_xml(xml)

    common_prefixes = []
    for element in root.findall("{*}CommonPrefixes"):
        prefix = _text(element, "Prefix")
        if prefix is not None:
            common_prefixes.append(prefix)

    max_keys = _int(root, "MaxKeys")
    return ListBucketResult(
        name=_text(root, "Name") or "",
        prefix=_text(root, "Prefix"),
        key_count=_int(root, "KeyCount"),
        max_keys=max_keys if max_keys is not None else 1000,
        delimiter=_text(root, "Delimiter"),
        is_truncated=_text(root, "IsTruncated") == "true",
        continuation_token=_text(root, "ContinuationToken"),
        next_continuation_token=_text(root, "NextContinuationToken"),
        start_after=_text(root, "StartAfter"),
        common_prefixes=common_prefixes,
        contents=[_parse_object(c) for c in root.findall("{*}Contents")],
    )


def parse_error_document(xml: str | bytes) -> S3ErrorDocument:
    root = _parse_xml(xml)
    return S3ErrorDocument(
        code=_text(root, "Code") or "Unknown",
        message=_text(root, "Message") or "Unknown error",
        resource=_text(root, "Resource"),
        request_id=_text(root, "RequestId"),
    )


def error_from_response(status: int, body: str) -> S3Error:
    try:
        document = parse_error_document(body)
    except ValueError:
        document = S3ErrorDocument(code="Unknown", message=body or "Unknown error")

    code = document.code
    details = {"resource": document.resource, "request_id": document.request_id}

    if status == 404 or code in ["NoSuchKey", "NoSuchBucket"]:
        return S3NotFoundError(document.message, error_code=code, **details)
    elif code == "SignatureDoesNotMatch":
        return S3SignatureMismatchError(document.message, **details)
    elif status == 403 or code == "AccessDenied":
        return S3AccessDeniedError(document.message, **details)
    elif code == "InvalidRequest":
        return S3InvalidRequestError(document.message, **details)
    elif 400 <= status < 500:
        return S3ClientError(document.message, status, code, **details)
    else:
        return S3ServerError(document.message, status, code, **details)
