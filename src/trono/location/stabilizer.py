"""
Location stabilizer.

Turns a noisy stream of raw device fixes into a stream of materially-changed
positions, and keeps the last accepted fix in a durable slot so the app can show
a "last known" position at startup before the first live fix arrives.

Acceptance rule (per raw fix):
- always accept when there is no previous accepted fix;
- accept when the fix moved at least `threshold_m` meters;
- accept a stationary fix when both fixes carry an accuracy and the new one is
  better than `prev.accuracy * accuracy_ratio` (default: at least 2x more precise).
Rejected fixes are dropped silently: no persistence, no callback.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Callable

from trono.core.geo import distance_m
from trono.core.store import KeyValueStore
from trono.domain.models import Position
from trono.location.sources import PositionError, PositionSource, WatchOptions

logger = logging.getLogger(__name__)

LOCATION_STORAGE_KEY = "trono_user_location"
MIN_MOVEMENT_THRESHOLD_M = 10.0
ACCURACY_IMPROVEMENT_RATIO = 0.5


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_significant_movement(
    prev: Position | None,
    new: Position,
    *,
    threshold_m: float = MIN_MOVEMENT_THRESHOLD_M,
    accuracy_ratio: float = ACCURACY_IMPROVEMENT_RATIO,
) -> bool:
    """Return True when `new` should replace `prev` as the accepted position."""
    if prev is None:
        return True

    moved = distance_m(prev.latitude, prev.longitude, new.latitude, new.longitude)
    # A zero/missing accuracy means "unknown", which cannot justify a rescue.
    accuracy_improved = bool(
        new.accuracy and prev.accuracy and new.accuracy < prev.accuracy * accuracy_ratio
    )
    return moved >= threshold_m or accuracy_improved


class LocationStabilizer:
    """Wraps a push-based `PositionSource` with a jitter filter and a durable cache."""

    def __init__(
        self,
        store: KeyValueStore,
        source: PositionSource | None = None,
        *,
        storage_key: str = LOCATION_STORAGE_KEY,
        threshold_m: float = MIN_MOVEMENT_THRESHOLD_M,
        accuracy_ratio: float = ACCURACY_IMPROVEMENT_RATIO,
        options: WatchOptions | None = None,
    ):
        self._store = store
        self._source = source
        self._storage_key = storage_key
        self._threshold_m = float(threshold_m)
        self._accuracy_ratio = float(accuracy_ratio)
        self._options = options or WatchOptions()
        self._lock = threading.RLock()
        self._last_accepted: Position | None = None

    @property
    def last_accepted(self) -> Position | None:
        """Most recent fix accepted by any watch on this stabilizer."""
        return self._last_accepted

    def get_cached_location(self) -> Position | None:
        """Return the persisted "last known" position, or None if absent/malformed."""
        try:
            raw = self._store.get(self._storage_key)
        except Exception:
            logger.debug("Location store read failed.", exc_info=True)
            return None
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        if not (_is_number(data.get("latitude")) and _is_number(data.get("longitude"))):
            return None

        accuracy = data.get("accuracy")
        timestamp = data.get("timestamp")
        return Position(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            accuracy=float(accuracy) if _is_number(accuracy) else None,
            timestamp=float(timestamp) if _is_number(timestamp) else None,
        )

    def set_cached_location(self, position: Position) -> None:
        """Persist `position` as the new "last known" value (best-effort)."""
        try:
            self._store.set(self._storage_key, position.model_dump_json(exclude_none=True))
        except Exception:
            logger.debug("Location store write failed; continuing without cache.", exc_info=True)

    def start_watching(self, on_update: Callable[[Position], None]) -> Callable[[], None] | None:
        """Subscribe to the position source and forward only significant fixes.

        Returns an idempotent cancel callable, or None if no position source is
        available on this platform (in which case `on_update` is never invoked).
        """
        source = self._source
        if source is None or not source.available:
            logger.info("No position source available; location watching disabled.")
            return None

        # Each watch judges fixes against its own last accepted fix.
        watch_state = {"last": self.get_cached_location()}
        cancelled = threading.Event()

        def handle_position(position: Position) -> None:
            with self._lock:
                if cancelled.is_set():
                    return
                if not is_significant_movement(
                    watch_state["last"],
                    position,
                    threshold_m=self._threshold_m,
                    accuracy_ratio=self._accuracy_ratio,
                ):
                    return
                watch_state["last"] = position
                self._last_accepted = position
                self.set_cached_location(position)
                on_update(position)

        def handle_error(error: PositionError) -> None:
            logger.warning("Geolocation error (%s): %s", error.code.name, error.message)

        watch_id = source.watch(handle_position, handle_error, self._options)

        def cancel() -> None:
            with self._lock:
                if cancelled.is_set():
                    return
                cancelled.set()
            source.clear_watch(watch_id)

        return cancel
