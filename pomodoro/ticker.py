"""Periodic tick sources for the Pomodoro timer."""
import asyncio
import typing as t


class Ticker(t.Protocol):
    """Anything that can call a function periodically and be stopped."""

    def start(self, callback: t.Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Calls ``callback`` every ``interval`` seconds on an asyncio event loop.

    Callbacks run on the loop thread, so everything the timer does stays on one
    logical sequence. ``cancel`` takes effect immediately: once it returns, no
    further callback runs until ``start`` is called again.

    Args:
        interval: Seconds between ticks.
        loop: Loop to schedule on. Defaults to the running loop at ``start``.
    """

    def __init__(self, interval: float = 1.0, loop: t.Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.interval = interval
        self._explicit_loop = loop
        self._loop: t.Optional[asyncio.AbstractEventLoop] = None
        self._callback: t.Optional[t.Callable[[], None]] = None
        self._handle: t.Optional[asyncio.TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, callback: t.Callable[[], None]) -> None:
        self.cancel()
        self._loop = self._explicit_loop or asyncio.get_running_loop()
        self._callback = callback
        self._handle = self._loop.call_later(self.interval, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    def _fire(self) -> None:
        callback = self._callback
        if callback is None:
            return
        # Schedule the next tick first so a callback that cancels or restarts wins
        self._handle = self._loop.call_later(self.interval, self._fire)
        callback()
