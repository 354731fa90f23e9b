# core/exceptions.py


class DedupError(Exception):
    """Base class for errors raised while deduplicating a directory"""


class HashComputationError(DedupError):
    """Raised when an image cannot be decoded or hashed (file is skipped)"""


class DirectoryReadError(DedupError):
    """Raised when the target directory cannot be listed"""


class MetadataReadError(DedupError):
    """Raised when size or creation time of a file cannot be read"""


class FileDeletionError(DedupError):
    """Raised when a file selected for removal cannot be deleted"""


class HashLengthMismatchError(ValueError):
    """Raised when two hashes of different lengths are compared"""
