"""GraphQL operations and their per-exchange context."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass
class Operation:
    query: Any
    variables: dict[str, Any] = field(default_factory=dict)
    operation_name: str | None = None
    extensions: dict[str, Any] = field(default_factory=dict)
    _context: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def query_text(self) -> str:
        return self.query if isinstance(self.query, str) else str(self.query)

    def get_context(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._context))

    def set_context(self, next_context: Mapping[str, Any] | None = None, **values: Any) -> Mapping[str, Any]:
        """Shallow-merge values into this operation's context."""
        if next_context:
            self._context.update(next_context)
        self._context.update(values)
        return self.get_context()


def create_operation(request: Mapping[str, Any], context: Mapping[str, Any] | None = None) -> Operation:
    """Build an :class:`Operation` from a request mapping.

    Accepts ``query`` plus the optional ``variables``, ``operation_name``
    (or ``operationName``), ``extensions`` and ``context`` keys.
    """
    if "query" not in request or request["query"] is None:
        raise ValueError("request must include a query")
    unknown = set(request) - {"query", "variables", "operation_name", "operationName", "extensions", "context"}
    if unknown:
        raise ValueError(f"illegal request keys: {', '.join(sorted(unknown))}")

    merged_context = dict(request.get("context") or {})
    if context:
        merged_context.update(context)

    return Operation(
        query=request["query"],
        variables=dict(request.get("variables") or {}),
        operation_name=request.get("operation_name") or request.get("operationName"),
        extensions=dict(request.get("extensions") or {}),
        _context=merged_context,
    )
