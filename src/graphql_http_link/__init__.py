"""GraphQL over HTTP link with cancellable, push-based results."""

from .cancellation import AbortController, AbortSignal, create_signal_if_supported
from .classifier import Classification, ExchangeState, Fulfilled, Rejected, classify
from .config import FALLBACK_HTTP_CONFIG, HttpConfig, HttpQueryOptions, select_http_options_and_body
from .exceptions import (
    HttpLinkAbortError,
    HttpLinkClientParseError,
    HttpLinkError,
    HttpLinkFetcherError,
    HttpLinkNetworkError,
    HttpLinkServerError,
    HttpLinkServerParseError,
    HttpLinkTimeoutError,
    HttpLinkValidationError,
)
from .link import HttpLink, create_http_link, execute
from .observable import Observable, Subscription
from .operation import Operation, create_operation
from .transport import HttpxFetcher, parse_and_check_http_response, select_uri, serialize_fetch_body

__all__ = [
    "AbortController",
    "AbortSignal",
    "Classification",
    "ExchangeState",
    "FALLBACK_HTTP_CONFIG",
    "Fulfilled",
    "HttpConfig",
    "HttpLink",
    "HttpLinkAbortError",
    "HttpLinkClientParseError",
    "HttpLinkError",
    "HttpLinkFetcherError",
    "HttpLinkNetworkError",
    "HttpLinkServerError",
    "HttpLinkServerParseError",
    "HttpLinkTimeoutError",
    "HttpLinkValidationError",
    "HttpQueryOptions",
    "HttpxFetcher",
    "Observable",
    "Operation",
    "Rejected",
    "Subscription",
    "classify",
    "create_http_link",
    "create_operation",
    "create_signal_if_supported",
    "execute",
    "parse_and_check_http_response",
    "select_http_options_and_body",
    "select_uri",
    "serialize_fetch_body",
]
