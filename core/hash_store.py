# core/hash_store.py

import bisect
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class HashRecord:
    """An image that has been accepted into the store"""
    path: str
    hash: bytes
    size_bytes: int
    created_at: float


class HashStore:
    """
    Ordered mapping of perceptual hash -> HashRecord

    Keys are kept in ascending byte order so that similarity scans visit
    entries in a stable order regardless of insertion order. The store lock
    must be held by callers for the whole classify/resolve/update sequence
    of a single candidate (see ``locked``).
    """

    def __init__(self):
        self._records: Dict[bytes, HashRecord] = {}
        self._keys: List[bytes] = []
        self._lock = threading.Lock()

    @contextmanager
    def locked(self):
        """Hold the store lock for one candidate's critical section"""
        with self._lock:
            yield self

    def lookup_exact(self, hash_value: bytes) -> Optional[HashRecord]:
        return self._records.get(hash_value)

    def iterate_ordered(self) -> Iterator[Tuple[bytes, HashRecord]]:
        """Yield (hash, record) pairs in ascending hash order"""
        for key in self._keys:
            yield key, self._records[key]

    def insert_or_replace(self, hash_value: bytes, record: HashRecord):
        if hash_value not in self._records:
            bisect.insort(self._keys, hash_value)
        self._records[hash_value] = record

    def remove(self, hash_value: bytes) -> HashRecord:
        record = self._records.pop(hash_value)
        index = bisect.bisect_left(self._keys, hash_value)
        del self._keys[index]
        return record

    def records(self) -> List[HashRecord]:
        return [self._records[key] for key in self._keys]

    def __contains__(self, hash_value: bytes) -> bool:
        return hash_value in self._records

    def __len__(self) -> int:
        return len(self._records)
