"""
Key Cache — session-scoped holder for the derived key.

Owned by a guard instance, never persisted. A miss runs the derivation
factory under a lock, so concurrent callers wait for one derivation
instead of racing their own.
"""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("credential_guard.vault")


class KeyCache:
    """In-memory, lock-guarded cache for a single derived key."""

    def __init__(self) -> None:
        self._key: Optional[bytes] = None
        self._lock = threading.Lock()
        self._derivations = 0

    @property
    def is_cached(self) -> bool:
        return self._key is not None

    @property
    def derivations(self) -> int:
        """Number of times the factory has run."""
        return self._derivations

    def get_or_derive(self, factory: Callable[[], bytes]) -> bytes:
        """Return the cached key, deriving it once on a miss.

        Exceptions from ``factory`` propagate and leave the cache empty.
        """
        key = self._key
        if key is not None:
            return key
        with self._lock:
            if self._key is None:
                self._derivations += 1
                self._key = factory()
                logger.debug("Key cache populated")
            return self._key

    def clear(self) -> None:
        """Drop the cached key (end of session)."""
        with self._lock:
            self._key = None
        logger.debug("Key cache cleared")
