"""Tests for directory listing and file operations."""

import pytest

from core.exceptions import DirectoryReadError, FileDeletionError, MetadataReadError
from utils.file_utils import delete_file, format_file_size, get_file_metadata, list_directory_files


def test_lists_regular_files_only_non_recursive(tmp_path):
    (tmp_path / "b.png").write_bytes(b"b")
    (tmp_path / "a.txt").write_bytes(b"a")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "c.png").write_bytes(b"c")

    files = list_directory_files(str(tmp_path))

    assert files == [str(tmp_path / "a.txt"), str(tmp_path / "b.png")]


def test_unreadable_directory(tmp_path):
    with pytest.raises(DirectoryReadError):
        list_directory_files(str(tmp_path / "missing"))


def test_metadata(tmp_path):
    path = tmp_path / "file.bin"
    path.write_bytes(b"x" * 123)

    metadata = get_file_metadata(str(path))

    assert metadata.size_bytes == 123
    assert metadata.created_at > 0


def test_metadata_of_missing_file(tmp_path):
    with pytest.raises(MetadataReadError):
        get_file_metadata(str(tmp_path / "missing.bin"))


def test_delete_file(tmp_path):
    path = tmp_path / "file.bin"
    path.write_bytes(b"x")

    delete_file(str(path))

    assert not path.exists()


def test_delete_missing_file(tmp_path):
    with pytest.raises(FileDeletionError):
        delete_file(str(tmp_path / "missing.bin"))


def test_format_file_size():
    assert format_file_size(512) == "512.00 B"
    assert format_file_size(1536) == "1.50 KB"
