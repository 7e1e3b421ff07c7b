"""result_cache.py
Holds ResultCache, an in-memory store of extraction results keyed by requester
and document fingerprint.
"""
import threading
import time
from typing import Any, Callable, Dict, Optional

from cv_autofill.config import EXTRACTION_DEFAULTS
from cv_autofill.logging import LoggerFactory
from cv_autofill.models import CacheEntry, CacheStats

cache_logger = LoggerFactory().get_logger(
    name="result_cache",
    logger_type="cache",
    console=False
)


def _wall_clock_ms() -> float:
    return time.time() * 1000


class ResultCache:
    """
    Content-addressed, per-requester cache of extraction results.

    Entries are keyed by ``"{requester_id}:{fingerprint}"`` so a cached result
    is only ever visible to the requester that produced it, even for
    byte-identical documents.

    Expiry is lazy. A ``get`` that finds an expired entry deletes it and
    reports a miss. In addition every ``get`` and ``put`` sweeps the whole table
    for expired entries once ``sweep_interval_ms`` has passed since the last
    sweep, which bounds memory under sustained traffic without a background
    thread.

    Writes to the same key replace the previous entry (last write wins). A
    single lock guards the mapping; nothing is persisted across restarts.

    Args:
        default_ttl_ms (int): TTL used by ``put`` when none is given.
        sweep_interval_ms (int): Minimum time between two full sweeps.
        clock (Callable[[], float] | None): Returns the current time in
            milliseconds. Defaults to wall-clock time; tests inject a fake.

    Example
    -------
    >>> cache = ResultCache()
    >>> cache.put(fp, "user-1", result)
    >>> cache.get(fp, "user-1") is result
    True
    """

    def __init__(
        self,
        default_ttl_ms: int = EXTRACTION_DEFAULTS.CACHE_TTL_MS,
        sweep_interval_ms: int = EXTRACTION_DEFAULTS.CACHE_SWEEP_INTERVAL_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.default_ttl_ms = default_ttl_ms
        self.sweep_interval_ms = sweep_interval_ms
        self._clock = clock or _wall_clock_ms
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_sweep = self._clock()

    @staticmethod
    def _make_key(fingerprint: str, requester_id: str) -> str:
        return f"{requester_id}:{fingerprint}"

    def get(self, fingerprint: str, requester_id: str) -> Optional[Any]:
        """
        Return the cached result for this requester and fingerprint.

        Returns:
            Any | None: The stored result, or None if absent or expired.
        """
        key = self._make_key(fingerprint, requester_id)
        with self._lock:
            now = self._clock()
            self._sweep_if_due(now)

            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.expires_at <= now:
                del self._entries[key]
                return None

            return entry.result

    def put(
        self,
        fingerprint: str,
        requester_id: str,
        result: Any,
        ttl_ms: Optional[int] = None,
    ) -> None:
        """
        Store `result` for this requester and fingerprint, replacing any
        existing entry.

        Args:
            ttl_ms (int | None): Lifetime of the entry. Defaults to
                ``self.default_ttl_ms``.
        """
        ttl_ms = self.default_ttl_ms if ttl_ms is None else ttl_ms
        key = self._make_key(fingerprint, requester_id)
        with self._lock:
            now = self._clock()
            self._sweep_if_due(now)
            self._entries[key] = CacheEntry(
                result=result,
                created_at=now,
                expires_at=now + ttl_ms,
            )

    def invalidate(self, fingerprint: str, requester_id: str) -> None:
        """Remove the entry for this requester and fingerprint if present."""
        key = self._make_key(fingerprint, requester_id)
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        """
        Return the number of stored entries and the age of the oldest one.

        Expired entries that have not been swept yet are still counted.
        """
        with self._lock:
            now = self._clock()
            oldest = min(
                (entry.created_at for entry in self._entries.values()),
                default=now,
            )
            return CacheStats(
                size=len(self._entries),
                oldest_entry_age_ms=now - oldest,
            )

    def _sweep_if_due(self, now: float) -> None:
        """Delete all expired entries if the sweep interval has elapsed. Caller holds the lock."""
        if now - self._last_sweep < self.sweep_interval_ms:
            return

        self._last_sweep = now
        expired_keys = [
            key for key, entry in self._entries.items()
            if entry.expires_at <= now
        ]
        for key in expired_keys:
            del self._entries[key]

        if expired_keys:
            cache_logger.info(
                f"Swept {len(expired_keys)} expired entries, {len(self._entries)} remaining."
            )
