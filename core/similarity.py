# core/similarity.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from core.exceptions import HashLengthMismatchError
from core.hash_store import HashRecord, HashStore


class Classification(str, Enum):
    DUPLICATE = "dup"
    SIMILAR = "sim"
    UNIQUE = "uniq"


@dataclass(frozen=True)
class MatchResult:
    classification: Classification
    matched: Optional[HashRecord] = None


def hamming_distance(a: bytes, b: bytes) -> int:
    """
    Count differing bits between two equal-length hashes

    Raises:
        HashLengthMismatchError: if the hashes differ in length
    """
    if len(a) != len(b):
        raise HashLengthMismatchError(
            f"Cannot compare hashes of length {len(a)} and {len(b)}"
        )

    xor = np.bitwise_xor(
        np.frombuffer(a, dtype=np.uint8),
        np.frombuffer(b, dtype=np.uint8)
    )
    return int(np.unpackbits(xor).sum())


class SimilarityMatcher:
    """
    Classifies a new hash against the current contents of a HashStore

    An exact key match wins. Otherwise the store is scanned in ascending
    hash order and the first entry within ``hash_threshold`` bits is
    reported, even if a closer entry appears later in the scan.
    """

    def __init__(self, hash_threshold: int = 5):
        self.hash_threshold = hash_threshold

    def classify(self, store: HashStore, candidate_hash: bytes) -> MatchResult:
        exact = store.lookup_exact(candidate_hash)
        if exact is not None:
            return MatchResult(Classification.DUPLICATE, exact)

        for other_hash, record in store.iterate_ordered():
            if hamming_distance(candidate_hash, other_hash) <= self.hash_threshold:
                return MatchResult(Classification.SIMILAR, record)

        return MatchResult(Classification.UNIQUE)
