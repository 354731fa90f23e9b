# components/resolution_policy.py

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from core.hash_store import HashRecord, HashStore
from utils.file_utils import delete_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateInfo:
    """A freshly hashed image that has not been accepted yet"""
    path: str
    hash: bytes
    size_bytes: int
    created_at: float

    def to_record(self) -> HashRecord:
        return HashRecord(
            path=self.path,
            hash=self.hash,
            size_bytes=self.size_bytes,
            created_at=self.created_at
        )


@dataclass(frozen=True)
class Resolution:
    keep: str
    discard: Optional[str]
    replace_store_entry: bool


def resolve(candidate: CandidateInfo,
            matched: HashRecord,
            delete_enabled: bool) -> Resolution:
    """
    Decide which of two matched images survives.

    Selection rules when deleting:
    - the larger file is kept (larger usually means less compression)
    - on equal size the older file is kept (likely the original)
    - on equal size and equal creation time the stored image is kept
    """
    if not delete_enabled:
        return Resolution(keep=matched.path, discard=None, replace_store_entry=False)

    if candidate.size_bytes > matched.size_bytes:
        candidate_wins = True
    elif candidate.size_bytes < matched.size_bytes:
        candidate_wins = False
    else:
        candidate_wins = candidate.created_at < matched.created_at

    if candidate_wins:
        return Resolution(keep=candidate.path, discard=matched.path, replace_store_entry=True)
    return Resolution(keep=matched.path, discard=candidate.path, replace_store_entry=False)


class DuplicateResolver:
    """
    Applies resolution decisions to the filesystem and the hash store

    Callers must hold the store lock. Deletion always happens before the
    store is touched, so a failed delete leaves the store unchanged.
    """

    def __init__(self,
                 store: HashStore,
                 delete_enabled: bool = False,
                 delete_func: Callable[[str], None] = delete_file):
        self.store = store
        self.delete_enabled = delete_enabled
        self.delete_func = delete_func
        self.operation_log: List[Dict] = []
        self.space_reclaimed = 0

    def accept(self, candidate: CandidateInfo):
        """Store a candidate that matched nothing"""
        self.store.insert_or_replace(candidate.hash, candidate.to_record())

    def resolve_match(self, candidate: CandidateInfo, matched: HashRecord) -> Resolution:
        resolution = resolve(candidate, matched, self.delete_enabled)

        if resolution.discard is None:
            return resolution

        logger.debug(f"Keeping {resolution.keep}, discarding {resolution.discard}")
        self.delete_func(resolution.discard)
        discarded_size = (
            matched.size_bytes if resolution.replace_store_entry else candidate.size_bytes
        )
        self.space_reclaimed += discarded_size
        self.operation_log.append({
            'operation': 'delete',
            'source': resolution.discard,
            'kept': resolution.keep,
            'size_bytes': discarded_size,
            'timestamp': datetime.now().strftime("%Y%m%d_%H%M%S")
        })

        if resolution.replace_store_entry:
            self.store.remove(matched.hash)
            self.store.insert_or_replace(candidate.hash, candidate.to_record())

        return resolution
