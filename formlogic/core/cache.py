"""
In-memory cache of compiled logic indexes.

A LogicIndex is immutable once built, so one instance can be shared by
any number of concurrent evaluations of the same form version. Entries
are keyed by (form_id, version) and evicted least-recently-used.
"""

import logging
import threading
from collections import OrderedDict

from formlogic.core.grouping import LogicIndex, build_logic_index
from formlogic.core.schema import FormDefinition

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 256

CacheKey = tuple[str, str]


class LogicIndexCache:
    """Thread-safe LRU store for compiled logic indexes.

    Forms without a `form_id` cannot be keyed and are compiled on every
    call.

    Args:
        max_entries: Maximum number of cached indexes.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._entries: OrderedDict[CacheKey, LogicIndex] = OrderedDict()
        self._max_entries = max_entries
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _key(form: FormDefinition) -> CacheKey | None:
        if form.form_id is None:
            return None
        return form.form_id, str(form.version)

    def get_or_build(self, form: FormDefinition) -> LogicIndex:
        """Return the cached index for this form version, building it if needed."""
        key = self._key(form)
        if key is None:
            return build_logic_index(form)

        with self._lock:
            index = self._entries.get(key)
            if index is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return index
            self.misses += 1

        # Built outside the lock; concurrent misses for one key may both build
        index = build_logic_index(form)

        with self._lock:
            self._entries[key] = index
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted logic index for form %s (version %s)", *evicted)
        return index

    def invalidate(self, form_id: str) -> int:
        """Drop every cached version of a form. Returns the count removed."""
        with self._lock:
            stale = [key for key in self._entries if key[0] == form_id]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def count(self) -> int:
        """Return the number of cached indexes."""
        with self._lock:
            return len(self._entries)
