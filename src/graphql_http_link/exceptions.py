"""HTTP link exceptions."""

from __future__ import annotations

from typing import Any, Mapping


class HttpLinkError(Exception):
    """Base exception for all HTTP link failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        response: Any = None,
        result: Any = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers) if headers is not None else {}
        self.response = response
        self.result = result
        self.cause = cause

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.status_code is None:
            return str(self.args[0])
        return f"{self.status_code}: {self.args[0]}"


class HttpLinkValidationError(HttpLinkError):
    """Raised when link construction options are invalid."""


class HttpLinkFetcherError(HttpLinkValidationError):
    """Raised when a custom fetcher cannot be used."""


class HttpLinkClientParseError(HttpLinkError):
    """Raised when the request body cannot be serialized."""


class HttpLinkServerParseError(HttpLinkError):
    """Raised when the response body is not valid JSON."""

    def __init__(self, message: str, *, body_text: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, body=body_text, **kwargs)
        self.body_text = body_text


class HttpLinkServerError(HttpLinkError):
    """Raised for non-2xx responses and malformed GraphQL results.

    ``result`` holds the decoded body when there is one, so callers can still
    read ``data`` and ``errors`` from a partially failed exchange.
    """


class HttpLinkNetworkError(HttpLinkError):
    """Raised for transport-level failures like DNS and TCP errors."""


class HttpLinkTimeoutError(HttpLinkNetworkError):
    """Raised when a request exceeds the configured timeout."""


class HttpLinkAbortError(HttpLinkError):
    """Raised by a fetcher when its abort signal fires."""
