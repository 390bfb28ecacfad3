"""
Device position sources.

The stabilizer never talks to hardware directly; it subscribes to a
`PositionSource` that pushes fixes (and errors) on its own schedule. Platform
adapters implement the protocol; `ReplayPositionSource` replays a recorded track,
which is what the CLI and tests use.
"""

from __future__ import annotations

import itertools
import json
import threading
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Callable, Iterable, Protocol, Union

from pydantic import TypeAdapter

from trono.domain.models import Position


class PositionErrorCode(IntEnum):
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


@dataclass(frozen=True)
class PositionError:
    code: PositionErrorCode
    message: str = ""


@dataclass(frozen=True)
class WatchOptions:
    """Advisory settings forwarded to the underlying source."""

    enable_high_accuracy: bool = True
    maximum_age_ms: int = 5000
    timeout_ms: int = 10000


PositionCallback = Callable[[Position], None]
ErrorCallback = Callable[[PositionError], None]


class PositionSource(Protocol):
    @property
    def available(self) -> bool: ...

    def watch(self, on_position: PositionCallback, on_error: ErrorCallback, options: WatchOptions) -> int: ...

    def clear_watch(self, watch_id: int) -> None: ...


ReplayEvent = Union[Position, PositionError]

_POSITIONS_ADAPTER = TypeAdapter(list[Position])


def load_fixes(path: str | Path) -> list[Position]:
    """Load a recorded track: a JSON list of {latitude, longitude, accuracy?, timestamp?}."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return _POSITIONS_ADAPTER.validate_python(payload)


class ReplayPositionSource:
    """Replays a fixed sequence of fixes/errors to every watcher.

    With `interval_s=0` the replay runs synchronously inside `watch()`; otherwise
    each watch gets a daemon thread that emits one event per interval until the
    sequence is exhausted or the watch is cleared.
    """

    def __init__(self, events: Iterable[ReplayEvent], *, interval_s: float = 0.0, available: bool = True):
        self._events = list(events)
        self._interval_s = float(interval_s)
        self._available = available
        self._ids = itertools.count(1)
        self._stops: dict[int, threading.Event] = {}
        self._threads: dict[int, threading.Thread] = {}
        self._lock = threading.Lock()
        self.last_options: WatchOptions | None = None

    @property
    def available(self) -> bool:
        return self._available

    @property
    def active_watches(self) -> int:
        with self._lock:
            return sum(1 for stop in self._stops.values() if not stop.is_set())

    def watch(self, on_position: PositionCallback, on_error: ErrorCallback, options: WatchOptions) -> int:
        watch_id = next(self._ids)
        stop = threading.Event()
        with self._lock:
            self._stops[watch_id] = stop
        self.last_options = options

        if self._interval_s <= 0:
            self._run(stop, on_position, on_error)
            return watch_id

        t = threading.Thread(target=self._run, args=(stop, on_position, on_error), daemon=True)
        with self._lock:
            self._threads[watch_id] = t
        t.start()
        return watch_id

    def clear_watch(self, watch_id: int) -> None:
        with self._lock:
            stop = self._stops.get(watch_id)
        if stop is not None:
            stop.set()

    def join(self, timeout: float | None = None) -> None:
        """Wait for threaded replays to finish (no-op for synchronous replays)."""
        with self._lock:
            threads = list(self._threads.values())
        for t in threads:
            t.join(timeout)

    def _run(self, stop: threading.Event, on_position: PositionCallback, on_error: ErrorCallback) -> None:
        for event in self._events:
            if stop.is_set():
                return
            if isinstance(event, PositionError):
                on_error(event)
            else:
                on_position(event)
            if self._interval_s > 0 and stop.wait(self._interval_s):
                return
