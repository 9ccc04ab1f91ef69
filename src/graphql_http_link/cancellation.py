"""Abort handles for in-flight exchanges."""

from __future__ import annotations

import asyncio
from typing import Any


class AbortSignal:
    """Token a fetcher watches to learn that its exchange was torn down."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Any = None

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        await self._event.wait()

    def _fire(self, reason: Any) -> None:
        self.reason = reason
        self._event.set()


class AbortController:
    def __init__(self) -> None:
        self.signal = AbortSignal()

    def abort(self, reason: Any = None) -> bool:
        """Signal the token. Returns ``False`` if it was already signalled."""
        if self.signal.aborted:
            return False
        self.signal._fire(reason if reason is not None else "aborted")
        return True


def create_signal_if_supported() -> tuple[AbortController | None, AbortSignal | None]:
    controller = AbortController()
    return controller, controller.signal
