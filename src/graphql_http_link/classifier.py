"""Turn a settled exchange into the signals its consumer receives.

A GraphQL response can carry data and errors at once, and the HTTP status
alone does not say which. ``classify`` decides, in a fixed order, whether
the consumer sees nothing (explicit abort), a value followed by an error
(partial result), a value followed by completion, or only an error.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from .observable import Observer
from .transport import is_abort_error

logger = logging.getLogger(__name__)


class ExchangeState(str, enum.Enum):
    PENDING = "pending"
    EMITTED = "emitted"
    ERRORED = "errored"
    SILENTLY_ABORTED = "silently_aborted"


@dataclass(frozen=True)
class Fulfilled:
    result: Any


@dataclass(frozen=True)
class Rejected:
    error: BaseException


ExchangeOutcome = Union[Fulfilled, Rejected]


@dataclass(frozen=True)
class Signal:
    kind: str
    payload: Any = None


@dataclass(frozen=True)
class Classification:
    state: ExchangeState
    signals: tuple[Signal, ...] = ()

    def deliver(self, observer: Observer) -> None:
        for signal in self.signals:
            if signal.kind == "next":
                observer.next(signal.payload)
            elif signal.kind == "error":
                observer.error(signal.payload)
            else:
                observer.complete()


def _carries_graphql_errors(error: BaseException) -> bool:
    result = getattr(error, "result", None)
    return isinstance(result, Mapping) and bool(result.get("errors"))


def classify(outcome: ExchangeOutcome) -> Classification:
    if isinstance(outcome, Rejected):
        error = outcome.error
        if is_abort_error(error):
            logger.debug("Exchange aborted; suppressing %r", error)
            return Classification(ExchangeState.SILENTLY_ABORTED)
        if _carries_graphql_errors(error):
            logger.debug("Partial result alongside %r", error)
            return Classification(
                ExchangeState.ERRORED,
                (Signal("next", error.result), Signal("error", error)),
            )
        return Classification(ExchangeState.ERRORED, (Signal("error", error),))

    return Classification(ExchangeState.EMITTED, (Signal("next", outcome.result), Signal("complete")))
