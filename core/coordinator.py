# core/coordinator.py

import logging
import multiprocessing as mp
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence

from components.resolution_policy import CandidateInfo, DuplicateResolver, Resolution
from core.exceptions import HashComputationError
from core.hash_store import HashStore
from core.image_hasher import ImageHasher
from core.similarity import Classification, MatchResult, SimilarityMatcher
from utils.file_utils import FileMetadata, delete_file, get_file_metadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationEvent:
    """Outcome of processing one successfully hashed image"""
    index: int
    total: int
    path: str
    hash_hex: str
    classification: Classification
    matched_path: Optional[str] = None
    discarded_path: Optional[str] = None


@dataclass
class DedupSummary:
    total: int = 0
    duplicate: int = 0
    similar: int = 0
    unique: int = 0
    skipped: int = 0
    deleted: List[str] = field(default_factory=list)
    space_reclaimed: int = 0

    @property
    def processed(self) -> int:
        return self.duplicate + self.similar + self.unique

    def count(self, classification: Classification):
        if classification is Classification.DUPLICATE:
            self.duplicate += 1
        elif classification is Classification.SIMILAR:
            self.similar += 1
        else:
            self.unique += 1


@dataclass(frozen=True)
class _Outcome:
    index: int
    candidate: CandidateInfo
    match: MatchResult
    resolution: Optional[Resolution]


class DedupCoordinator:
    """
    Incremental duplicate classification over a batch of image files

    Decoding and hashing run on a thread pool. Each worker then enters the
    store's critical section and runs classify -> resolve -> update for its
    candidate while holding the lock, so no two candidates interleave.

    Which file of a matched pair ends up stored (and, with deletion enabled,
    which file survives on disk) depends on the order workers reach the
    critical section. Use ``n_workers=1`` for reproducible results.
    """

    def __init__(self,
                 hasher: ImageHasher,
                 hash_threshold: int = 5,
                 delete_enabled: bool = False,
                 n_workers: int = None,
                 store: HashStore = None,
                 metadata_func: Callable[[str], FileMetadata] = get_file_metadata,
                 delete_func: Callable[[str], None] = delete_file):
        self.hasher = hasher
        self.matcher = SimilarityMatcher(hash_threshold=hash_threshold)
        self.store = store if store is not None else HashStore()
        self.resolver = DuplicateResolver(
            self.store,
            delete_enabled=delete_enabled,
            delete_func=delete_func
        )
        self.n_workers = n_workers or mp.cpu_count()
        self.metadata_func = metadata_func
        self.listeners: List[Callable[[ClassificationEvent], None]] = []
        self.summary = DedupSummary()
        self._processed_count = 0

    @property
    def delete_enabled(self) -> bool:
        return self.resolver.delete_enabled

    def add_listener(self, callback: Callable[[ClassificationEvent], None]):
        """Register a callback invoked with every ClassificationEvent"""
        self.listeners.append(callback)

    def run(self, image_paths: Sequence[str]) -> DedupSummary:
        """Process every path and return the aggregated counts"""
        for _ in self.iter_events(image_paths):
            pass
        return self.summary

    def iter_events(self, image_paths: Sequence[str]) -> Iterator[ClassificationEvent]:
        """
        Process every path, yielding one event per hashed image

        Events are yielded in the order candidates passed through the
        store's critical section, so a match is never reported before the
        image it matched.

        Files that cannot be decoded are skipped and produce no event.
        Fatal errors (metadata or deletion failures) propagate and cancel
        the work that has not started yet.
        """
        total = len(image_paths)
        self.summary = DedupSummary(total=total)
        self._processed_count = 0
        logger.info(
            f"Processing {total} files with {self.n_workers} workers "
            f"(delete={'on' if self.delete_enabled else 'off'})"
        )

        executor = ThreadPoolExecutor(max_workers=self.n_workers)
        try:
            futures = [executor.submit(self._process_file, path) for path in image_paths]
            pending = {}
            next_index = 1

            for future in as_completed(futures):
                outcome = future.result()
                if outcome is None:
                    self.summary.skipped += 1
                    continue

                # Futures can complete out of critical-section order
                pending[outcome.index] = outcome
                while next_index in pending:
                    event = self._record(pending.pop(next_index), total)
                    next_index += 1
                    for callback in self.listeners:
                        callback(event)
                    yield event
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        self.summary.space_reclaimed = self.resolver.space_reclaimed
        logger.info(
            f"Finished: {self.summary.duplicate} duplicate, {self.summary.similar} similar, "
            f"{self.summary.unique} unique, {self.summary.skipped} skipped"
        )

    def _process_file(self, path: str) -> Optional[_Outcome]:
        try:
            hash_value = self.hasher.compute_hash(path)
        except HashComputationError as e:
            logger.debug(f"Skipping {path}: {e}")
            return None

        metadata = self.metadata_func(path)
        candidate = CandidateInfo(
            path=path,
            hash=hash_value,
            size_bytes=metadata.size_bytes,
            created_at=metadata.created_at
        )

        with self.store.locked():
            return self.process_candidate(candidate)

    def process_candidate(self, candidate: CandidateInfo) -> _Outcome:
        """
        Classify and resolve one candidate against the store.

        Must be called with the store lock held.
        """
        self._processed_count += 1
        index = self._processed_count
        match = self.matcher.classify(self.store, candidate.hash)

        if match.classification is Classification.UNIQUE:
            self.resolver.accept(candidate)
            return _Outcome(index, candidate, match, None)

        resolution = self.resolver.resolve_match(candidate, match.matched)
        return _Outcome(index, candidate, match, resolution)

    def _record(self, outcome: _Outcome, total: int) -> ClassificationEvent:
        classification = outcome.match.classification
        self.summary.count(classification)

        discarded = outcome.resolution.discard if outcome.resolution else None
        if discarded is not None:
            self.summary.deleted.append(discarded)

        return ClassificationEvent(
            index=outcome.index,
            total=total,
            path=outcome.candidate.path,
            hash_hex=outcome.candidate.hash.hex(),
            classification=classification,
            matched_path=outcome.match.matched.path if outcome.match.matched else None,
            discarded_path=discarded
        )
