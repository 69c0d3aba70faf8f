"""
Memoized regex compilation keyed by pattern source.

Two grammar builds that produce the same pattern text share one compiled
object, regardless of which keyword list produced it. Lookups are lock-free
reads of a dict; compilation takes a lock so concurrent misses compile once.
"""

import logging
import re
import threading
from typing import Dict, Tuple

log = logging.getLogger(__name__)


class RegexCache:
    """Cache of compiled patterns keyed by (source, flags)."""

    def __init__(self):
        self._patterns: Dict[Tuple[str, int], re.Pattern[str]] = {}
        self._lock = threading.Lock()

    def get(self, source: str, flags: int = 0) -> re.Pattern[str]:
        """Return the compiled pattern for ``source``, compiling it on first use."""
        key = (source, flags)
        compiled = self._patterns.get(key)
        if compiled is not None:
            return compiled
        with self._lock:
            compiled = self._patterns.get(key)
            if compiled is None:
                compiled = re.compile(source, flags)
                self._patterns[key] = compiled
                log.debug("Compiled pattern (%d cached): %.80s", len(self._patterns), source)
        return compiled

    def has(self, source: str, flags: int = 0) -> bool:
        return (source, flags) in self._patterns

    def clear(self) -> None:
        with self._lock:
            self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)
