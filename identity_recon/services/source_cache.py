from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

"""Time-bounded cache for built source datasets / indices.

An explicit collaborator handed to long-lived callers (load_source_index);
there is no module-level cache. Expired or missing keys are rebuilt through
the loader passed to get().
"""

logger = logging.getLogger(__name__)

__all__ = [
    "SourceCache",
]

T = TypeVar("T")


@dataclass
class _CacheSlot(Generic[T]):
    value: T
    stored_at: float


class SourceCache(Generic[T]):
    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._slots: dict[Hashable, _CacheSlot[T]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value for `key`, rebuilding it when expired."""
        now = self._clock()
        with self._lock:
            slot = self._slots.get(key)
            if slot is not None and now - slot.stored_at < self.ttl_seconds:
                logger.debug("cache hit key=%s age=%.1fs", key, now - slot.stored_at)
                return slot.value
        # loader は重い可能性があるためロック外で実行
        value = loader()
        with self._lock:
            self._slots[key] = _CacheSlot(value=value, stored_at=self._clock())
        logger.debug("cache populated key=%s", key)
        return value

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._slots.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._slots.clear()

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._slots

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)
