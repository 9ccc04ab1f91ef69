from __future__ import annotations

import asyncio

from graphql_http_link.cancellation import AbortController, create_signal_if_supported


def test_abort_signals_once() -> None:
    controller = AbortController()
    assert not controller.signal.aborted
    assert controller.abort() is True
    assert controller.abort("again") is False
    assert controller.signal.aborted
    assert controller.signal.reason == "aborted"


def test_wait_returns_after_abort() -> None:
    async def run() -> bool:
        controller, signal = create_signal_if_supported()
        assert controller is not None and signal is not None
        waiter = asyncio.ensure_future(signal.wait())
        await asyncio.sleep(0)
        assert not waiter.done()
        controller.abort("teardown")
        await asyncio.wait_for(waiter, 1)
        return signal.reason == "teardown"

    assert asyncio.run(run())
