"""HTTP link: runs one GraphQL operation per subscription."""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
from typing import Any, Callable, Mapping

import httpx
from pydantic import ValidationError

from .cancellation import AbortController, AbortSignal, create_signal_if_supported
from .classifier import Fulfilled, Rejected, classify
from .config import FALLBACK_HTTP_CONFIG, HttpConfig, HttpQueryOptions, select_http_options_and_body
from .exceptions import HttpLinkClientParseError, HttpLinkValidationError
from .models import HttpLinkOptions
from .observable import Observable, SubscriptionObserver
from .operation import Operation, create_operation
from .security import sanitize_headers
from .transport import (
    DEFAULT_TIMEOUT,
    Fetcher,
    HttpxFetcher,
    check_fetcher,
    parse_and_check_http_response,
    select_uri,
    serialize_fetch_body,
)

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Operation], Observable]
SignalFactory = Callable[[], "tuple[AbortController | None, AbortSignal | None]"]


class HttpLink:
    """Send GraphQL operations over HTTP and stream back their results.

    Each call to :meth:`request` returns a lazy :class:`Observable`. Nothing
    is sent until it is subscribed; unsubscribing before the response
    arrives aborts the request and suppresses any further signal.
    """

    default_uri = "/graphql"

    def __init__(
        self,
        *,
        uri: str | Callable[[Operation], str] | None = None,
        fetch: Fetcher | None = None,
        include_extensions: bool | None = None,
        fetch_options: Mapping[str, Any] | None = None,
        credentials: str | None = None,
        headers: Mapping[str, Any] | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        create_signal: SignalFactory | None = None,
        uri_env_var: str = "GRAPHQL_HTTP_URI",
    ) -> None:
        check_fetcher(fetch)
        try:
            settings = HttpLinkOptions(
                uri=uri or os.getenv(uri_env_var) or self.default_uri,
                fetch=fetch,
                include_extensions=include_extensions,
                fetch_options=fetch_options,
                credentials=credentials,
                headers=headers,
                httpx_client=httpx_client,
                timeout=timeout,
                create_signal=create_signal,
            )
        except ValidationError as exc:
            raise HttpLinkValidationError(f"Invalid HTTP link options: {exc}", cause=exc) from exc

        self.uri = settings.uri
        self._default_fetcher: HttpxFetcher | None = None
        if settings.fetch is None:
            self._default_fetcher = HttpxFetcher(settings.httpx_client, timeout=settings.timeout)
        self._fetch: Fetcher = settings.fetch or self._default_fetcher
        self._create_signal: SignalFactory = settings.create_signal or create_signal_if_supported
        self.link_config = HttpConfig(
            http=HttpQueryOptions(include_extensions=settings.include_extensions),
            options=settings.fetch_options,
            credentials=settings.credentials,
            headers=settings.headers,
        )
        self._pending: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> "HttpLink":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Cancel in-flight exchanges, then close the owned httpx client."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        if self._default_fetcher is not None:
            await self._default_fetcher.aclose()

    def __call__(self, operation: Operation) -> Observable:
        return self.request(operation)

    def request(self, operation: Operation) -> Observable:
        chosen_uri = select_uri(operation, self.uri)
        context_config = HttpConfig.from_context(operation.get_context())
        options, body = select_http_options_and_body(
            operation,
            FALLBACK_HTTP_CONFIG,
            self.link_config,
            context_config,
        )

        try:
            options["body"] = serialize_fetch_body(body)
        except HttpLinkClientParseError as exc:
            failure = exc

            def fail(observer: SubscriptionObserver) -> None:
                observer.error(failure)

            return Observable(fail)

        def subscriber(observer: SubscriptionObserver) -> Callable[[], None]:
            call_options = dict(options)
            controller, signal = self._create_signal()
            if controller is not None:
                call_options["signal"] = signal

            task = asyncio.get_running_loop().create_task(
                self._exchange(observer, operation, chosen_uri, call_options)
            )
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

            def teardown() -> None:
                if controller is None:
                    return
                logger.debug("Tearing down %s request for %r", chosen_uri, operation.operation_name)
                controller.abort()

            return teardown

        return Observable(subscriber)

    async def _exchange(
        self,
        observer: SubscriptionObserver,
        operation: Operation,
        uri: str,
        options: dict[str, Any],
    ) -> None:
        logger.debug(
            "%s %s operation=%r headers=%s",
            options.get("method", "POST"),
            uri,
            operation.operation_name,
            sanitize_headers(options.get("headers") or {}),
        )
        cancelled: asyncio.CancelledError | None = None
        try:
            response = self._fetch(uri, options)
            if inspect.isawaitable(response):
                response = await response
            operation.set_context(response=response)
            result = parse_and_check_http_response(operation)(response)
            outcome: Fulfilled | Rejected = Fulfilled(result)
        except asyncio.CancelledError as exc:
            cancelled = exc
            outcome = Rejected(exc)
        except Exception as exc:
            outcome = Rejected(exc)

        classification = classify(outcome)
        logger.debug("Operation %r settled as %s", operation.operation_name, classification.state.value)
        classification.deliver(observer)
        if cancelled is not None:
            raise cancelled


def create_http_link(**options: Any) -> RequestHandler:
    """Build an :class:`HttpLink` and return its request handler."""
    return HttpLink(**options).request


def execute(
    link: HttpLink | RequestHandler,
    request: Mapping[str, Any],
    context: Mapping[str, Any] | None = None,
) -> Observable:
    """Run a request mapping (``query``, ``variables``, ...) through a link."""
    return link(create_operation(request, context))
