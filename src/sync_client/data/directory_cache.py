"""TTL-keyed store of directory-listing snapshots."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sync_client.config.client import ClientConfig
from sync_client.data.models import DirectoryEntry
from sync_client.data.storage.kv_store import KeyValueStore

CacheKey = Tuple[str, str]


@dataclass(frozen=True)
class CacheRecord:
    """One listing snapshot for a ``(remote_id, path)`` key."""

    key: CacheKey
    entries: Tuple[DirectoryEntry, ...]
    fetched_at: float

    @property
    def remote_id(self) -> str:
        return self.key[0]

    @property
    def path(self) -> str:
        return self.key[1]


class DirectoryCache:
    """
    Cache of remote directory listings with stale-while-revalidate bookkeeping.

    A record is fresh while ``now - fetched_at < ttl``. Stale records read as
    absent through ``get`` but stay available through ``peek`` until they are
    replaced by ``put`` or dropped by ``evict_stale``/``invalidate_all``.

    All mutations are whole-record replacements, so a reader never observes a
    partially written listing. When a key-value store is supplied, the records
    survive restarts.
    """

    def __init__(
        self,
        ttl_seconds: float = ClientConfig.DIRECTORY_CACHE_TTL,
        clock: Callable[[], float] = time.time,
        store: Optional[KeyValueStore] = None,
        logger_obj: Optional[logging.Logger] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.store = store
        self.logger = logger_obj or logging.getLogger(__name__)
        self._records: Dict[CacheKey, CacheRecord] = {}
        self._load()

    def get(self, remote_id: str, path: str) -> Optional[CacheRecord]:
        """Return the fresh record for a key, or None if missing or stale."""
        record = self._records.get((remote_id, path))
        if record is None or not self.is_fresh(record):
            return None
        return record

    def peek(self, remote_id: str, path: str) -> Optional[CacheRecord]:
        """Return the record for a key regardless of its freshness."""
        return self._records.get((remote_id, path))

    def is_fresh(self, record: CacheRecord) -> bool:
        return self.clock() - record.fetched_at < self.ttl_seconds

    def put(self, remote_id: str, path: str, entries: Iterable[DirectoryEntry]) -> CacheRecord:
        """Create or replace the record for a key, stamped with the current time."""
        key = (remote_id, path)
        record = CacheRecord(key=key, entries=tuple(entries), fetched_at=self.clock())
        self._records[key] = record
        self.logger.debug(f"Cached {len(record.entries)} entries for {remote_id}:{path}")
        self._save()
        return record

    def invalidate_all(self, remote_id: Optional[str] = None) -> int:
        """Drop every record, or every record of one remote. Returns the number removed."""
        if remote_id is None:
            removed = len(self._records)
            self._records.clear()
        else:
            keys = [key for key in self._records if key[0] == remote_id]
            for key in keys:
                del self._records[key]
            removed = len(keys)

        if removed:
            self.logger.info(f"Invalidated {removed} cached listings" + (f" for {remote_id}" if remote_id else ""))
            self._save()
        return removed

    def evict_stale(self) -> int:
        """Drop all stale records. Returns the number removed."""
        stale_keys = [key for key, record in self._records.items() if not self.is_fresh(record)]
        for key in stale_keys:
            del self._records[key]
        if stale_keys:
            self._save()
        return len(stale_keys)

    def keys(self) -> List[CacheKey]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._records

    def _load(self) -> None:
        """Restore persisted records, ignoring anything malformed."""
        if self.store is None:
            return

        payload = self.store.get(ClientConfig.DIRECTORY_CACHE_STORE_KEY)
        if not payload:
            return

        try:
            for item in payload:
                key = (str(item["remote_id"]), str(item["path"]))
                entries = tuple(DirectoryEntry.from_dict(entry) for entry in item["entries"])
                self._records[key] = CacheRecord(key=key, entries=entries, fetched_at=float(item["fetched_at"]))
        except (KeyError, TypeError, ValueError) as e:
            self.logger.warning(f"Ignoring corrupt persisted directory cache: {e}")
            self._records.clear()
            return

        self.logger.debug(f"Restored {len(self._records)} cached listings")

    def _save(self) -> None:
        if self.store is None:
            return

        payload = [
            {
                "remote_id": record.remote_id,
                "path": record.path,
                "fetched_at": record.fetched_at,
                "entries": [entry.to_dict() for entry in record.entries],
            }
            for record in self._records.values()
        ]
        self.store.set(ClientConfig.DIRECTORY_CACHE_STORE_KEY, payload)
