"""
services/detail_cache.py – Write-once store of per-item detail records.

A name that is absent has not been attempted yet. Once a record (real or the
unavailable sentinel) is stored for a name it is never replaced or removed.
Writes may come from the hydration loop's thread while the GUI thread reads,
so every access goes through a lock.
"""

import threading
from typing import Dict, Optional

from models.item_entry import DetailRecord


class DetailCache:
    """Monotonic name → DetailRecord mapping."""

    def __init__(self) -> None:
        self._records: Dict[str, DetailRecord] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Optional[DetailRecord]:
        with self._lock:
            return self._records.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(self, name: str, record: DetailRecord) -> bool:
        """
        Store *record* under *name* unless a record is already present.

        Returns
        -------
        True if the record was stored, False if *name* was already cached.
        """
        with self._lock:
            if name in self._records:
                return False
            self._records[name] = record
            return True

    def snapshot(self) -> Dict[str, DetailRecord]:
        """Point-in-time copy, safe to iterate while hydration continues."""
        with self._lock:
            return dict(self._records)
