"""Time-expiring cache of detected languages.

Entries are evicted in insertion order (FIFO) once the cache is full. Reads do
not refresh an entry's position, so this is not an LRU cache even though it
is often described as one. A miss only costs an extra detect call.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

DEFAULT_TTL = 60.0
DEFAULT_CAPACITY = 500


@dataclass
class DetectionCacheEntry:
    language: str
    timestamp: float


class DetectionCache:
    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            ttl: Seconds an entry stays valid.
            capacity: Maximum number of entries.
            clock: Time source, monotonic seconds by default.
        """
        self.ttl = ttl
        self.capacity = capacity
        self._clock = clock
        self._entries: OrderedDict[str, DetectionCacheEntry] = OrderedDict()

    @staticmethod
    def normalize(text: str) -> str:
        return text.strip().lower()

    def get(self, text: str) -> Optional[str]:
        key = self.normalize(text)
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.timestamp >= self.ttl:
            del self._entries[key]
            return None

        return entry.language

    def put(self, text: str, language: str) -> None:
        key = self.normalize(text)
        if key in self._entries:
            # Re-inserted keys move to the back of the eviction queue
            del self._entries[key]
        elif len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)

        self._entries[key] = DetectionCacheEntry(language=language, timestamp=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        return self.get(text) is not None
