"""Address selection, body encoding, fetching and response decoding."""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from typing import Any, Callable, Mapping

import httpx

from .cancellation import AbortSignal
from .exceptions import (
    HttpLinkAbortError,
    HttpLinkClientParseError,
    HttpLinkFetcherError,
    HttpLinkNetworkError,
    HttpLinkServerError,
    HttpLinkServerParseError,
    HttpLinkTimeoutError,
)
from .models import ExecutionResult
from .operation import Operation
from .security import validate_uri

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, dict[str, Any]], Any]

DEFAULT_TIMEOUT = 30.0


def select_uri(operation: Operation, fallback_uri: str | Callable[[Operation], str] | None = None) -> str:
    context = operation.get_context()
    context_uri = context.get("uri")
    if context_uri:
        return context_uri
    if callable(fallback_uri):
        return fallback_uri(operation)
    return fallback_uri or "/graphql"


def serialize_fetch_body(body: Mapping[str, Any]) -> bytes:
    try:
        return json.dumps(body, separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise HttpLinkClientParseError(f"Network request failed. Payload is not serializable: {exc}", cause=exc) from exc


def check_fetcher(fetcher: Fetcher | None) -> None:
    if fetcher is None:
        return
    if not callable(fetcher):
        raise HttpLinkFetcherError(f"fetch must be callable, got {type(fetcher).__name__}")
    call = fetcher if inspect.isroutine(fetcher) else getattr(fetcher, "__call__", fetcher)
    if not inspect.iscoroutinefunction(call):
        logger.warning(
            "fetch %r is not a coroutine function; it must return an awaitable or an httpx.Response",
            fetcher,
        )


def is_abort_error(error: BaseException) -> bool:
    return isinstance(error, (HttpLinkAbortError, asyncio.CancelledError))


def parse_and_check_http_response(operation: Operation) -> Callable[[httpx.Response], dict[str, Any]]:
    """Return a decoder that turns a raw response into a GraphQL result.

    The decoder raises :class:`HttpLinkServerParseError` for bodies that are
    not JSON and :class:`HttpLinkServerError` for non-2xx statuses or bodies
    without ``data`` and ``errors``. Both carry the response; the latter
    also carries the decoded ``result``.
    """

    def decode(response: httpx.Response) -> dict[str, Any]:
        body_text = response.text
        headers = dict(response.headers)
        try:
            result = json.loads(body_text)
        except ValueError as exc:
            raise HttpLinkServerParseError(
                f"Response body is not valid JSON: {exc}",
                status_code=response.status_code,
                body_text=body_text,
                headers=headers,
                response=response,
                cause=exc,
            ) from exc

        kwargs = {
            "status_code": response.status_code,
            "body": result,
            "headers": headers,
            "response": response,
            "result": result,
        }
        if response.status_code >= 300:
            raise HttpLinkServerError(
                f"Response not successful: Received status code {response.status_code}",
                **kwargs,
            )

        if not isinstance(result, dict) or not ExecutionResult.model_validate(result).is_graphql_result:
            raise HttpLinkServerError(f"Server response was missing for query '{operation.operation_name}'.", **kwargs)
        return result

    return decode


def _normalize_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    if not headers:
        return {}
    return {str(key): str(value) for key, value in headers.items() if value is not None}


class HttpxFetcher:
    """Default fetcher backed by :class:`httpx.AsyncClient`.

    Understands the ``method``, ``headers``, ``body``, ``timeout`` and
    ``signal`` options. Other options are ignored.
    """

    def __init__(self, httpx_client: httpx.AsyncClient | None = None, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout
        self._owns_client = httpx_client is None
        self._httpx = httpx_client or httpx.AsyncClient(timeout=timeout, trust_env=False)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._httpx.aclose()

    async def __call__(self, uri: str, options: dict[str, Any]) -> httpx.Response:
        validate_uri(uri)
        timeout = options.get("timeout", self.timeout)
        request = self._httpx.build_request(
            str(options.get("method", "POST")).upper(),
            uri,
            headers=_normalize_headers(options.get("headers")),
            content=options.get("body"),
            timeout=timeout,
        )
        signal: AbortSignal | None = options.get("signal")
        if signal is None:
            return await self._send(request)
        if signal.aborted:
            raise HttpLinkAbortError("The request was aborted before it was sent")

        send = asyncio.ensure_future(self._send(request))
        aborted = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({send, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            send.cancel()
            raise
        finally:
            aborted.cancel()
        if send.done():
            return send.result()

        send.cancel()
        logger.debug("Aborted in-flight request to %s", uri)
        raise HttpLinkAbortError(f"The request was aborted: {signal.reason}")

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._httpx.send(request)
        except httpx.TimeoutException as exc:
            raise HttpLinkTimeoutError("Request timed out", cause=exc) from exc
        except httpx.TransportError as exc:
            raise HttpLinkNetworkError(f"Network error: {exc}", cause=exc) from exc
