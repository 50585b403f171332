"""Canonical request construction for AWS Signature Version 4.

Only the canonical form is built here; hashing and signing live in
:mod:`s3_sigv4_client.auth`.
"""

import urllib.parse
from collections.abc import Iterable, Mapping

# SHA-256 of b"", the only payload hash this package signs with
EMPTY_BODY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

QueryPairs = Mapping[str, str] | Iterable[tuple[str, str]]


def encode_query_key(key: str) -> str:
    """Percent-encode everything except the RFC 3986 unreserved characters."""
    return urllib.parse.quote(key, safe="")


def encode_query_value(value: str) -> str:
    """Form-urlencode a value: space becomes ``+``."""
    return urllib.parse.quote_plus(value, safe="")


def canonical_query_string(query: QueryPairs | None) -> str:
    if not query:
        return ""

    items = query.items() if isinstance(query, Mapping) else query
    pairs = sorted(
        (encode_query_key(str(k)), encode_query_value(str(v))) for k, v in items
    )
    return "&".join(f"{k}={v}" for k, v in pairs)


def _normalize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    normalized = {}
    for name, value in headers.items():
        name = name.lower()
        if name == "authorization":
            continue
        normalized[name] = str(value).strip()
    return dict(sorted(normalized.items()))


def canonical_headers(headers: Mapping[str, str]) -> str:
    return "".join(
        f"{name}:{value}\n" for name, value in _normalize_headers(headers).items()
    )


def signed_headers(headers: Mapping[str, str]) -> str:
    return ";".join(_normalize_headers(headers))


def canonical_request(
    method: str,
    path: str,
    query: QueryPairs | None,
    headers: Mapping[str, str],
) -> str:
    # the headers block carries its own trailing newline, so a blank line
    # separates it from the signed headers list
    return "\n".join(
        [
            method,
            path or "/",
            canonical_query_string(query),
            canonical_headers(headers),
            signed_headers(headers),
            EMPTY_BODY_SHA256,
        ]
    )
