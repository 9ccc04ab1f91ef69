"""Layered HTTP configuration for GraphQL requests.

A request is configured from three layers, lowest precedence first: the
baseline defaults, the options given when the link is built, and the
options found in the operation context. Each group (``http`` flags,
transport ``options``, ``credentials``, ``headers``) merges on its own, and
``None`` at a higher layer never erases a lower layer's value.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from .operation import Operation


@dataclass(frozen=True)
class HttpQueryOptions:
    include_query: bool | None = None
    include_extensions: bool | None = None

    @classmethod
    def coerce(cls, value: "HttpQueryOptions | Mapping[str, Any] | None") -> "HttpQueryOptions | None":
        if value is None or isinstance(value, HttpQueryOptions):
            return value
        return cls(
            include_query=value.get("include_query", value.get("includeQuery")),
            include_extensions=value.get("include_extensions", value.get("includeExtensions")),
        )

    def as_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class HttpConfig:
    http: HttpQueryOptions | None = None
    options: Mapping[str, Any] | None = None
    credentials: str | None = None
    headers: Mapping[str, Any] | None = None

    @classmethod
    def from_context(cls, context: Mapping[str, Any]) -> "HttpConfig":
        """Read the per-call layer out of an operation context."""
        return cls(
            http=HttpQueryOptions.coerce(context.get("http")),
            options=context.get("fetch_options"),
            credentials=context.get("credentials"),
            headers=context.get("headers"),
        )


FALLBACK_HTTP_CONFIG = HttpConfig(
    http=HttpQueryOptions(include_query=True, include_extensions=False),
    headers={
        "accept": "*/*",
        "content-type": "application/json",
    },
    options={"method": "POST"},
)


def _drop_unset(values: Mapping[str, Any] | None) -> dict[str, Any]:
    if not values:
        return {}
    return {key: value for key, value in values.items() if value is not None}


def merge_headers(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge header mappings key by key, ignoring case.

    The override's spelling of a header name replaces the base's.
    """
    if not override:
        return dict(base)
    overridden = {str(key).lower() for key, value in override.items() if value is not None}
    merged = {key: value for key, value in base.items() if str(key).lower() not in overridden}
    merged.update(_drop_unset(override))
    return merged


def select_http_options_and_body(
    operation: Operation,
    fallback_config: HttpConfig,
    *configs: HttpConfig | None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Resolve the effective transport options and the request body.

    Returns ``(options, body)``; ``options`` always carries a ``headers``
    mapping and carries ``credentials`` only when some layer set it.
    """
    options: dict[str, Any] = dict(_drop_unset(fallback_config.options))
    options["headers"] = dict(_drop_unset(fallback_config.headers))
    if fallback_config.credentials:
        options["credentials"] = fallback_config.credentials
    http = fallback_config.http.as_dict() if fallback_config.http else {}

    for config in configs:
        if config is None:
            continue
        headers = merge_headers(options["headers"], config.headers)
        options.update(_drop_unset(config.options))
        options["headers"] = headers
        if config.credentials:
            options["credentials"] = config.credentials
        if config.http is not None:
            http.update(config.http.as_dict())

    body: dict[str, Any] = {
        "operationName": operation.operation_name,
        "variables": operation.variables,
    }
    if http.get("include_extensions"):
        body["extensions"] = operation.extensions
    if http.get("include_query"):
        body["query"] = operation.query_text

    return options, body
