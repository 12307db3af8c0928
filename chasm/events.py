"""Terminal and timer events feeding the application loop."""

from __future__ import annotations

import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

TICK_FPS = 20.0


class AppEvent(Enum):
    """Requests the application makes of itself."""

    INCREMENT = auto()
    DECREMENT = auto()
    QUIT = auto()
    LOAD_WEAPON = auto()
    SELECT_OPTION = auto()


@dataclass(frozen=True)
class Tick:
    """Emitted at a fixed rate to advance the game."""


@dataclass(frozen=True)
class KeyPress:
    """A key read from the terminal."""

    key: str
    ctrl: bool = False


Event = Union[Tick, KeyPress, AppEvent]
KeyReader = Callable[[float], Optional[KeyPress]]


@dataclass(frozen=True)
class _Failure:
    error: BaseException


class EventHandler:
    """Collects ticks, key presses and application events on one queue.

    A background thread emits a :class:`Tick` every ``1 / tick_fps`` seconds and,
    in between, asks ``read_key(timeout)`` for a key press.
    """

    def __init__(self, read_key: KeyReader | None = None, tick_fps: float = TICK_FPS) -> None:
        if tick_fps <= 0:
            raise ValueError(f"tick rate must be positive, got {tick_fps}")
        self._queue: queue.Queue[Event | _Failure] = queue.Queue()
        self._interval = 1.0 / tick_fps
        self._read_key = read_key
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="chasm-events", daemon=True)
        self._thread.start()

    @property
    def is_running(self) -> bool:
        """Whether the background thread is still producing events."""
        return self._thread.is_alive()

    def _run(self) -> None:
        last_tick = time.monotonic()
        try:
            while not self._stop.is_set():
                timeout = max(0.0, self._interval - (time.monotonic() - last_tick))
                if timeout == 0.0:
                    last_tick = time.monotonic()
                    self._queue.put(Tick())
                if self._read_key is None:
                    self._stop.wait(timeout)
                    continue
                key = self._read_key(timeout)
                if key is not None and not self._stop.is_set():
                    self._queue.put(key)
        except Exception as error:  # reported to the reader of the queue
            self._queue.put(_Failure(error))

    def next(self, timeout: float | None = None) -> Event:
        """Wait for the next event.

        Raises TimeoutError when ``timeout`` passes first, and RuntimeError when
        reading the terminal failed.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("no event arrived in time") from None
        if isinstance(item, _Failure):
            raise RuntimeError("failed to read terminal events") from item.error
        return item

    def send(self, app_event: AppEvent) -> None:
        """Queue an application event for the next turn of the loop."""
        self._queue.put(app_event)

    def close(self) -> None:
        """Stop the background thread."""
        self._stop.set()
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout=2.0)

    def __enter__(self) -> EventHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()