# tests/conftest.py

import numpy as np
import pytest
from PIL import Image

from core.exceptions import HashComputationError
from utils.file_utils import FileMetadata


def make_block_image(seed: int, size: int = 128) -> Image.Image:
    """Random 8x8 color blocks scaled up; compresses well and hashes distinctly"""
    rng = np.random.default_rng(seed)
    blocks = rng.integers(0, 256, (8, 8, 3), dtype=np.uint8)
    return Image.fromarray(blocks, 'RGB').resize((size, size), Image.Resampling.NEAREST)


class StubHasher:
    """Returns predefined hashes; paths without one fail like undecodable files"""

    def __init__(self, hashes):
        self.hashes = hashes

    def compute_hash(self, image_path):
        try:
            return self.hashes[image_path]
        except KeyError:
            raise HashComputationError(f"Not an image: {image_path}")


class StubFilesystem:
    """In-memory metadata and deletion for coordinator tests"""

    def __init__(self, files):
        self.files = dict(files)
        self.deleted = []

    def metadata(self, path):
        size_bytes, created_at = self.files[path]
        return FileMetadata(size_bytes=size_bytes, created_at=created_at)

    def delete(self, path):
        del self.files[path]
        self.deleted.append(path)


@pytest.fixture
def image_dir(tmp_path):
    """Directory with an original, a larger exact copy, a different image and a text file"""
    directory = tmp_path / "images"
    directory.mkdir()

    original = make_block_image(seed=1)
    original.save(directory / "a_original.png", compress_level=9)
    original.save(directory / "b_copy_uncompressed.png", compress_level=0)
    make_block_image(seed=2).save(directory / "c_other.png", compress_level=9)
    (directory / "notes.txt").write_text("not an image")
    (directory / "subdir").mkdir()

    return directory
