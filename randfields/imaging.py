"""Array helpers shared by the field generators: block maps, scaling and PNG output."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

IMAGE_SIZES: tuple[tuple[int, int], ...] = (
    (640, 480),
    (800, 600),
    (960, 540),
    (1024, 600),
    (1280, 720),
    (1280, 1024),
    (1600, 900),
    (1920, 1080),
    (2048, 1080),
)
"""Image sizes (width, height) that the batch generators pick from."""


def _check_size(size, what: str) -> tuple[int, int]:
    width, height = size
    if width <= 0 or height <= 0:
        raise ValueError(f"{what} must be positive, got {size!r}")
    return int(width), int(height)


def block_map_shape(image_size, block_size) -> tuple[int, int]:
    """Return the (rows, cols) of a block map covering an image.

    Both sizes are (width, height) pairs; a partial block at the right or
    bottom edge still takes a whole cell of the map.
    """
    width, height = _check_size(image_size, "image size")
    block_width, block_height = _check_size(block_size, "block size")
    return (-(-height // block_height), -(-width // block_width))


def expand_blocks(block_map, image_size, block_size) -> np.ndarray:
    """Blow a block map up to a full image, one value per block."""
    block_map = np.asarray(block_map)
    expected = block_map_shape(image_size, block_size)
    if block_map.shape != expected:
        raise ValueError(
            f"block map has shape {block_map.shape}, expected {expected}"
        )
    width, height = image_size
    block_width, block_height = block_size
    expanded = np.repeat(np.repeat(block_map, block_height, axis=0), block_width, axis=1)
    return np.ascontiguousarray(expanded[:height, :width])


def random_image_size(rng=None) -> tuple[int, int]:
    """Pick one of the standard image sizes uniformly at random."""
    rng = np.random.default_rng() if rng is None else rng
    return IMAGE_SIZES[int(rng.integers(len(IMAGE_SIZES)))]


def scale_classes(image, step) -> np.ndarray:
    """Multiply class labels by ``step``, wrapping into the 8-bit range."""
    scaled = np.asarray(image, dtype=np.int64) * int(step)
    return (scaled % 256).astype(np.uint8)


def normalize_minmax(image) -> np.ndarray:
    """Linearly map an image onto [0, 1]; a flat image becomes all zeros."""
    data = np.asarray(image, dtype=np.float64)
    if data.size == 0:
        raise ValueError("cannot normalize an empty image")
    low = data.min()
    span = data.max() - low
    if span <= np.finfo(np.float64).eps:
        return np.zeros(data.shape, dtype=np.float32)
    return ((data - low) / span).astype(np.float32)


def save_png(path, image) -> Path:
    """Write a grey-scale image as an 8-bit PNG and return its path.

    Non-byte images are rounded and saturated to 0..255 first.
    """
    data = np.asarray(image)
    if data.ndim != 2:
        raise ValueError(f"expected a two-dimensional image, got {data.ndim} dimensions")
    if data.dtype != np.uint8:
        data = np.clip(np.rint(data.astype(np.float64)), 0, 255).astype(np.uint8)
    path = Path(path)
    Image.fromarray(data).save(path, format="PNG")
    return path