"""
File operation utilities
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from core.exceptions import DirectoryReadError, FileDeletionError, MetadataReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileMetadata:
    size_bytes: int
    created_at: float


def list_directory_files(directory: str) -> List[str]:
    """List regular files directly inside directory (non-recursive), sorted by name"""
    path = Path(directory)

    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name)
        return [str(entry) for entry in entries if entry.is_file()]
    except OSError as exc:
        raise DirectoryReadError(f"Cannot read directory {directory}: {exc}") from exc


def get_file_metadata(file_path: str) -> FileMetadata:
    """
    Get file size and creation time

    Creation time is the birth time where the platform records one,
    otherwise st_ctime.
    """
    try:
        stat = os.stat(file_path)
    except OSError as exc:
        raise MetadataReadError(f"Cannot read metadata of {file_path}: {exc}") from exc

    created_at = getattr(stat, 'st_birthtime', stat.st_ctime)
    return FileMetadata(size_bytes=stat.st_size, created_at=created_at)


def delete_file(file_path: str):
    """Permanently delete a file"""
    try:
        Path(file_path).unlink()
    except OSError as exc:
        raise FileDeletionError(f"Cannot delete {file_path}: {exc}") from exc

    logger.info(f"Deleted {file_path}")


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.2f} PB"
