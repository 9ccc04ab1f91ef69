"""Minimal push-based, cancellable result stream."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Protocol

logger = logging.getLogger(__name__)

Teardown = Callable[[], None]


class Observer(Protocol):
    def next(self, value: Any) -> None: ...

    def error(self, error: BaseException) -> None: ...

    def complete(self) -> None: ...


class _CallbackObserver:
    def __init__(
        self,
        on_next: Callable[[Any], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete

    def next(self, value: Any) -> None:
        if self._on_next is not None:
            self._on_next(value)

    def error(self, error: BaseException) -> None:
        if self._on_error is None:
            logger.warning("Unhandled error delivered to observer: %r", error)
            return
        self._on_error(error)

    def complete(self) -> None:
        if self._on_complete is not None:
            self._on_complete()


class SubscriptionObserver:
    """Observer handed to a subscriber; drops every signal once closed.

    An exception raised by the consumer is logged and never stops the
    terminal signal from being delivered.
    """

    def __init__(self, subscription: "Subscription") -> None:
        self._subscription = subscription

    @property
    def closed(self) -> bool:
        return self._subscription.closed

    def next(self, value: Any) -> None:
        if self.closed:
            return
        try:
            self._subscription._observer.next(value)
        except Exception:
            logger.exception("Observer raised while handling a value")

    def error(self, error: BaseException) -> None:
        if self.closed:
            return
        self._subscription._settle()
        try:
            self._subscription._observer.error(error)
        except Exception:
            logger.exception("Observer raised while handling an error")

    def complete(self) -> None:
        if self.closed:
            return
        self._subscription._settle()
        try:
            self._subscription._observer.complete()
        except Exception:
            logger.exception("Observer raised while handling completion")


class Subscription:
    def __init__(self, observer: Observer, subscriber: Callable[[SubscriptionObserver], Teardown | None]) -> None:
        self._observer = observer
        self._closed = False
        self._teardown: Teardown | None = None

        subscription_observer = SubscriptionObserver(self)
        try:
            teardown = subscriber(subscription_observer)
        except Exception as exc:
            subscription_observer.error(exc)
            return

        # settled synchronously; nothing left to tear down
        if not self._closed:
            self._teardown = teardown

    @property
    def closed(self) -> bool:
        return self._closed

    def _settle(self) -> None:
        self._closed = True
        self._teardown = None

    def unsubscribe(self) -> None:
        """Stop receiving signals and run the teardown, at most once."""
        if self._closed:
            return
        self._closed = True
        teardown, self._teardown = self._teardown, None
        if teardown is not None:
            teardown()


class Observable:
    """Lazy stream: ``subscriber`` runs once per ``subscribe()`` call."""

    def __init__(self, subscriber: Callable[[SubscriptionObserver], Teardown | None]) -> None:
        if not callable(subscriber):
            raise TypeError("Observable subscriber must be callable")
        self._subscriber = subscriber

    def subscribe(
        self,
        observer: Observer | None = None,
        *,
        on_next: Callable[[Any], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> Subscription:
        if observer is None:
            observer = _CallbackObserver(on_next, on_error, on_complete)
        return Subscription(observer, self._subscriber)

    async def __aiter__(self) -> AsyncIterator[Any]:
        """Iterate values until completion; a delivered error is raised.

        Leaving the loop early unsubscribes. A silently aborted exchange
        never ends this iteration, so only abandon it by cancelling.
        """
        queue: asyncio.Queue[tuple[str, Any]] = asyncio.Queue()
        subscription = self.subscribe(
            on_next=lambda value: queue.put_nowait(("next", value)),
            on_error=lambda error: queue.put_nowait(("error", error)),
            on_complete=lambda: queue.put_nowait(("complete", None)),
        )
        try:
            while True:
                kind, payload = await queue.get()
                if kind == "next":
                    yield payload
                elif kind == "error":
                    raise payload
                else:
                    return
        finally:
            subscription.unsubscribe()
