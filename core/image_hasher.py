# core/image_hasher.py

import logging

import imagehash
import numpy as np
from PIL import Image

from core.exceptions import HashComputationError

logger = logging.getLogger(__name__)

HASH_FUNCTIONS = {
    'phash': imagehash.phash,
    'dhash': imagehash.dhash,
    'ahash': imagehash.average_hash,
    'whash': imagehash.whash,
}


def hash_to_bytes(image_hash: imagehash.ImageHash) -> bytes:
    """Pack an ImageHash bit matrix into bytes, most significant bit first"""
    return np.packbits(image_hash.hash.flatten()).tobytes()


class ImageHasher:
    """
    Decode image files and compute fixed-length perceptual hashes
    """

    def __init__(self,
                 algorithm: str = 'phash',
                 hash_size: int = 8,
                 max_image_pixels: int = 100_000_000):
        if algorithm not in HASH_FUNCTIONS:
            raise ValueError(
                f"Unknown hash algorithm '{algorithm}', "
                f"expected one of {sorted(HASH_FUNCTIONS)}"
            )
        self.algorithm = algorithm
        self.hash_size = hash_size
        self._hash_func = HASH_FUNCTIONS[algorithm]

        # Set PIL limits to prevent memory issues
        Image.MAX_IMAGE_PIXELS = max_image_pixels

    @property
    def hash_length(self) -> int:
        """Number of bytes produced per hash"""
        return (self.hash_size * self.hash_size + 7) // 8

    def compute_hash(self, image_path: str) -> bytes:
        """
        Load image from disk and compute its perceptual hash

        Raises:
            HashComputationError: If the file cannot be decoded as an image
        """
        try:
            with Image.open(image_path) as img:
                img = self._prepare(img)
                image_hash = self._hash_func(img, hash_size=self.hash_size)
        except Exception as exc:
            raise HashComputationError(
                f"Failed to compute hash for {image_path}: {exc}"
            ) from exc

        logger.debug(f"Computed {self.algorithm} for {image_path}: {image_hash}")
        return hash_to_bytes(image_hash)

    def _prepare(self, img: Image.Image) -> Image.Image:
        """Convert to RGB and shrink very large images for speed"""
        if img.mode != 'RGB':
            img = img.convert('RGB')
        else:
            img.load()

        if img.size[0] * img.size[1] > 2_000_000:  # 2MP limit
            img = img.copy()
            img.thumbnail((1000, 1000), Image.Resampling.LANCZOS)

        return img
