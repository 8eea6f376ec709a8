"""Rate-limited hand-off of the most recent value from producers to a consumer.

Producers call :meth:`Limiter.send` as often as they like; the consumer
receives at most ``rate`` items per second.  When items arrive faster than
they are delivered, older ones are dropped in favour of the newest, and any
dropped item that is :class:`Cleanable` has its ``cleanup()`` method called.
"""

from __future__ import annotations

import queue
import threading
import time
from typing import Any, Generic, Iterator, Optional, Protocol, TypeVar, runtime_checkable

__all__ = ["Cleanable", "Limiter", "LimiterClosed"]

T = TypeVar("T")

_MIN_DEFAULT_BUFFER = 16
_MAX_DEFAULT_BUFFER = 1024

_CLOSE = object()


@runtime_checkable
class Cleanable(Protocol):
    """An item that holds resources to release when the limiter drops it."""

    def cleanup(self) -> None:
        """Release the resources held by this item."""


class LimiterClosed(Exception):
    """Raised when reading from a limiter that is stopped and fully drained."""


def _cleanup(item: Any) -> None:
    if isinstance(item, Cleanable):
        item.cleanup()


class _Outbox(Generic[T]):
    """A single-slot mailbox that can be closed."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: Any = _CLOSE
        self._full = False
        self._closed = False

    def offer(self, item: T) -> bool:
        with self._cond:
            if self._closed or self._full:
                return False
            self._item = item
            self._full = True
            self._cond.notify()
            return True

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def take(self, timeout: Optional[float]) -> T:
        with self._cond:
            ready = self._cond.wait_for(lambda: self._full or self._closed, timeout)
            if not ready:
                raise TimeoutError("no item available before the timeout")
            if self._full:
                item = self._item
                self._item = _CLOSE
                self._full = False
                return item
            raise LimiterClosed("limiter is stopped and drained")


class Limiter(Generic[T]):
    """Delivers the latest submitted item at a fixed rate per second.

    ``rate`` is the number of deliveries per second; values below 1 mean 1.
    ``buffer_size`` is the capacity of the input buffer; when omitted or below
    1 it defaults to ``rate`` clamped to the range 16..1024.
    """

    def __init__(self, rate: int = 1, buffer_size: Optional[int] = None) -> None:
        if rate <= 0:
            rate = 1
        size = min(max(rate, _MIN_DEFAULT_BUFFER), _MAX_DEFAULT_BUFFER)
        if buffer_size is not None and buffer_size >= 1:
            size = buffer_size

        self._interval = 1.0 / rate
        self._buffer_size = size
        self._inbox: queue.Queue[Any] = queue.Queue(maxsize=size)
        self._outbox: _Outbox[T] = _Outbox()

        self._mu = threading.Lock()
        self._latest: Any = None
        self._has_data = False

        self._send_lock = threading.Lock()
        self._closed = False
        self._stop_lock = threading.Lock()
        self._stopped = False
        self._stop_event = threading.Event()

        self._collector = threading.Thread(
            target=self._collect, name="chanlimiter-collector", daemon=True
        )
        self._ticker = threading.Thread(
            target=self._tick, name="chanlimiter-ticker", daemon=True
        )
        self._collector.start()
        self._ticker.start()

    @property
    def interval(self) -> float:
        """Seconds between deliveries."""
        return self._interval

    @property
    def buffer_size(self) -> int:
        """Capacity of the input buffer."""
        return self._buffer_size

    def _collect(self) -> None:
        while True:
            item = self._inbox.get()
            if item is _CLOSE:
                return
            with self._mu:
                if self._has_data:
                    _cleanup(self._latest)
                self._latest = item
                self._has_data = True

    def _deliver(self) -> None:
        with self._mu:
            if self._has_data and self._outbox.offer(self._latest):
                self._latest = None
                self._has_data = False

    def _tick(self) -> None:
        interval = self._interval
        next_tick = time.monotonic() + interval
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            self._deliver()
            next_tick += interval
            now = time.monotonic()
            if next_tick <= now:
                missed = int((now - next_tick) / interval) + 1
                next_tick += missed * interval

    def send(self, data: T) -> None:
        """Submit an item without blocking.

        If the input buffer is full the item is dropped and cleaned up.
        Items sent after :meth:`stop` are ignored.
        """
        with self._send_lock:
            if self._closed:
                return
            try:
                self._inbox.put_nowait(data)
            except queue.Full:
                _cleanup(data)

    def get(self, timeout: Optional[float] = None) -> T:
        """Return the next delivered item.

        Waits up to ``timeout`` seconds (forever when ``None``).  Raises
        :class:`TimeoutError` if nothing arrives in time and
        :class:`LimiterClosed` once the limiter is stopped and drained.
        """
        return self._outbox.take(timeout)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self._outbox.take(None)
            except LimiterClosed:
                return

    def stop(self) -> None:
        """Shut down, cleaning up every undelivered item; blocks until done."""
        with self._stop_lock:
            if self._stopped:
                return
            self._stop_event.set()
            with self._send_lock:
                self._closed = True
            self._inbox.put(_CLOSE)
            self._ticker.join()
            self._collector.join()
            with self._mu:
                if self._has_data:
                    _cleanup(self._latest)
                self._latest = None
                self._has_data = False
            self._outbox.close()
            self._stopped = True

    def __enter__(self) -> "Limiter[T]":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.stop()