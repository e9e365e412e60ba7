"""
Tick sources for the interval timer.

A clock delivers one tick per elapsed second to a callback while it is
started.  Only one tick source may drive a machine at a time, so starting
an already-running clock is an error rather than a second stream of ticks.
"""

import time
from typing import Callable, Protocol

from .config import TICK_INTERVAL_SECONDS

TickHandler = Callable[[], None]


class Clock(Protocol):
    """Injectable tick source."""

    @property
    def running(self) -> bool: ...

    def start(self, on_tick: TickHandler) -> None: ...

    def stop(self) -> None: ...


class ManualClock:
    """
    Deterministic clock for tests and scripted hosts.

    start() only arms the clock; ticks are delivered by advance().
    """

    def __init__(self) -> None:
        self._on_tick: TickHandler | None = None
        self.ticks_delivered = 0

    @property
    def running(self) -> bool:
        return self._on_tick is not None

    def start(self, on_tick: TickHandler) -> None:
        if self._on_tick is not None:
            raise RuntimeError("Clock is already running")
        self._on_tick = on_tick

    def stop(self) -> None:
        self._on_tick = None

    def advance(self, ticks: int = 1) -> int:
        """
        Deliver up to ticks ticks, stopping early if the handler stops the clock.

        Returns:
            Number of ticks actually delivered
        """
        delivered = 0
        for _ in range(ticks):
            if self._on_tick is None:
                break
            self._on_tick()
            delivered += 1
        self.ticks_delivered += delivered
        return delivered


class IntervalClock:
    """
    Blocking wall-clock tick source.

    start() runs the tick loop on the calling thread and returns once the
    handler (or a signal handler) calls stop().  interval=0 delivers ticks
    back to back.
    """

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS):
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self.interval = interval
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, on_tick: TickHandler) -> None:
        if self._running:
            raise RuntimeError("Clock is already running")
        self._running = True
        try:
            next_at = time.monotonic() + self.interval
            while self._running:
                delay = next_at - time.monotonic()
                if delay > 0:
                    time.sleep(delay)
                if not self._running:
                    break
                on_tick()
                next_at += self.interval
        finally:
            self._running = False

    def stop(self) -> None:
        self._running = False
