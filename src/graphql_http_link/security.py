"""Header redaction and address validation helpers."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import urlparse


SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "proxy-authorization",
    "x-api-key",
    "x-csrf-token",
}


def sanitize_headers(headers: Mapping[str, object]) -> dict[str, object]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, object] = {}
    for key, value in headers.items():
        if str(key).lower() in SENSITIVE_HEADERS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def validate_uri(uri: str) -> None:
    """Validate a GraphQL endpoint address.

    Relative paths such as ``/graphql`` are accepted and left for the httpx
    client's ``base_url`` to resolve. Absolute addresses must be http(s).
    """
    if not isinstance(uri, str) or not uri:
        raise ValueError("uri must be a non-empty string")
    if "\x00" in uri:
        raise ValueError("Invalid uri")
    parsed = urlparse(uri)
    if not parsed.scheme:
        return
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported uri scheme: {parsed.scheme}")
    if not parsed.netloc:
        raise ValueError("uri must include a host")
