from __future__ import annotations

import asyncio

from graphql_http_link.classifier import (
    Classification,
    ExchangeState,
    Fulfilled,
    Rejected,
    classify,
)
from graphql_http_link.exceptions import (
    HttpLinkAbortError,
    HttpLinkNetworkError,
    HttpLinkServerError,
)


class Recorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def next(self, value: object) -> None:
        self.events.append(("next", value))

    def error(self, error: BaseException) -> None:
        self.events.append(("error", error))

    def complete(self) -> None:
        self.events.append(("complete", None))


def _deliver(classification: Classification) -> list[tuple[str, object]]:
    recorder = Recorder()
    classification.deliver(recorder)
    return recorder.events


def test_success_emits_value_then_completes() -> None:
    result = {"data": {"hero": {"name": "R2-D2"}}}
    classification = classify(Fulfilled(result))
    assert classification.state is ExchangeState.EMITTED
    assert _deliver(classification) == [("next", result), ("complete", None)]


def test_partial_result_emits_value_then_error() -> None:
    error = HttpLinkServerError("timed out", status_code=401, result={"errors": [{"message": "timeout"}]})
    classification = classify(Rejected(error))
    assert classification.state is ExchangeState.ERRORED
    assert _deliver(classification) == [
        ("next", {"errors": [{"message": "timeout"}]}),
        ("error", error),
    ]


def test_explicit_abort_is_silent() -> None:
    classification = classify(Rejected(HttpLinkAbortError("aborted")))
    assert classification.state is ExchangeState.SILENTLY_ABORTED
    assert _deliver(classification) == []


def test_cancelled_error_is_silent() -> None:
    classification = classify(Rejected(asyncio.CancelledError()))
    assert classification.state is ExchangeState.SILENTLY_ABORTED
    assert classification.signals == ()


def test_abort_wins_over_attached_result() -> None:
    error = HttpLinkAbortError("aborted", result={"errors": [{"message": "ignored"}]})
    assert classify(Rejected(error)).state is ExchangeState.SILENTLY_ABORTED


def test_network_failure_is_error_only() -> None:
    error = HttpLinkNetworkError("connection refused")
    assert _deliver(classify(Rejected(error))) == [("error", error)]


def test_empty_error_collection_is_error_only() -> None:
    error = HttpLinkServerError("bad status", status_code=500, result={"data": None, "errors": []})
    assert _deliver(classify(Rejected(error))) == [("error", error)]


def test_falsy_result_with_errors_elsewhere_is_error_only() -> None:
    error = HttpLinkServerError("bad status", status_code=500, result=None)
    error.errors = [{"message": "not a structured result"}]  # type: ignore[attr-defined]
    assert _deliver(classify(Rejected(error))) == [("error", error)]


def test_plain_exception_with_result_attribute() -> None:
    class DecodeFailure(Exception):
        result = {"data": {"a": 1}, "errors": [{"message": "partial"}]}

    error = DecodeFailure()
    assert _deliver(classify(Rejected(error))) == [("next", DecodeFailure.result), ("error", error)]
