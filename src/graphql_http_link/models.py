"""Validated link options and GraphQL response shapes."""

from __future__ import annotations

from typing import Any, Callable, Literal, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .security import validate_uri


class HttpLinkModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ExecutionResult(HttpLinkModel):
    """Top-level body of a GraphQL-over-HTTP response.

    Only the presence of ``data`` or ``errors`` matters; their contents are
    passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    data: Any = None
    errors: Any = None
    extensions: Any = None

    @property
    def is_graphql_result(self) -> bool:
        return bool({"data", "errors"} & self.model_fields_set)


class HttpLinkOptions(HttpLinkModel):
    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    uri: str | Callable[..., str] = "/graphql"
    fetch: Callable[..., Any] | None = None
    include_extensions: bool | None = None
    fetch_options: dict[str, Any] | None = None
    credentials: Literal["omit", "same-origin", "include"] | None = None
    headers: dict[str, Any] | None = None
    httpx_client: httpx.AsyncClient | None = None
    timeout: float = Field(default=30.0, gt=0)
    create_signal: Callable[[], tuple[Any, Any]] | None = None

    @field_validator("uri")
    @classmethod
    def _check_uri(cls, value: str | Callable[..., str]) -> str | Callable[..., str]:
        if isinstance(value, str):
            validate_uri(value)
        return value

    @field_validator("headers", "fetch_options", mode="before")
    @classmethod
    def _copy_mapping(cls, value: Mapping[str, Any] | None) -> dict[str, Any] | None:
        if value is None:
            return None
        return dict(value)
