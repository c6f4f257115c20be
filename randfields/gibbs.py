"""Gibbs sampling of class-label fields with a pairwise neighbour model."""

from __future__ import annotations

import operator
from bisect import bisect_right
from itertools import accumulate

import numpy as np

from randfields.imaging import block_map_shape, expand_blocks

_MAX_CLASSES = 256

STANDARD_FREQUENCY: tuple[int, ...] = (1, 1, 1, 1)
"""Initial class frequencies used when none are given."""

STANDARD_PROBABILITY_MAP: tuple[tuple[int, ...], ...] = (
    (5, 1, 1, 1),
    (1, 5, 1, 1),
    (1, 1, 5, 1),
    (1, 1, 1, 5),
)
"""Pairwise weights used when none are given: like classes attract."""


def _weights(values, what: str) -> list[int]:
    weights = [operator.index(value) for value in values]
    if not weights:
        raise ValueError(f"{what} must not be empty")
    if any(weight < 0 for weight in weights):
        raise ValueError(f"{what} must be non-negative, got {weights!r}")
    return weights


def _sweep_order(height: int, width: int):
    """Yield (row, col) in the order a sweep updates the pixels.

    Corners and borders go first, clockwise from the top-left corner, then the
    interior column by column.
    """
    yield 0, 0
    for x in range(1, width - 1):
        yield 0, x
    yield 0, width - 1
    for y in range(1, height - 1):
        yield y, width - 1
    yield height - 1, width - 1
    for x in range(1, width - 1):
        yield height - 1, x
    yield height - 1, 0
    for y in range(1, height - 1):
        yield y, 0
    for x in range(1, width - 1):
        for y in range(1, height - 1):
            yield y, x


class GibbsModel:
    """Field of class labels refined by repeated Gibbs sweeps.

    At each pixel the new label is drawn with weights that add, for every
    4-neighbour, the map entry for (current label, neighbour label) to the
    neighbour's label.
    """

    def __init__(self, image_size, rng=None):
        width, height = image_size
        if width < 2 or height < 2:
            raise ValueError(f"image size must be at least 2x2, got {image_size!r}")
        self._width = int(width)
        self._height = int(height)
        self._rng = np.random.default_rng() if rng is None else rng
        self._pixels: list[int] | None = None
        self._classes = 0
        self._probability_map: tuple[tuple[int, ...], ...] | None = None
        self._sites = [
            (y * self._width + x, self._neighbours(y, x))
            for y, x in _sweep_order(self._height, self._width)
        ]

    def _neighbours(self, y: int, x: int) -> tuple[int, ...]:
        candidates = ((y + 1, x), (y - 1, x), (y, x + 1), (y, x - 1))
        return tuple(
            ny * self._width + nx
            for ny, nx in candidates
            if 0 <= ny < self._height and 0 <= nx < self._width
        )

    def set_probability_map(self, probability_map) -> None:
        """Set the square table of pairwise class weights."""
        rows = tuple(tuple(_weights(row, "probability map row")) for row in probability_map)
        if not rows:
            raise ValueError("probability map must not be empty")
        if any(len(row) != len(rows) for row in rows):
            raise ValueError("probability map must be square")
        self._probability_map = rows

    def init_main_image(self, frequencies) -> None:
        """Fill the image with labels drawn independently by ``frequencies``."""
        weights = _weights(frequencies, "frequencies")
        if len(weights) > _MAX_CLASSES:
            raise ValueError(f"at most {_MAX_CLASSES} classes are supported")
        total = sum(weights)
        if total == 0:
            raise ValueError("frequencies must not all be zero")
        probabilities = np.asarray(weights, dtype=np.float64) / total
        self._classes = len(weights)
        self._pixels = self._rng.choice(
            self._classes, size=self._width * self._height, p=probabilities
        ).tolist()

    def generate_main_image(self, iterations=100) -> None:
        """Run ``iterations`` full sweeps over the image."""
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if self._pixels is None:
            raise RuntimeError("the image has not been initialised")
        if self._probability_map is None:
            raise RuntimeError("the probability map has not been set")
        if len(self._probability_map) != self._classes:
            raise ValueError(
                f"probability map has {len(self._probability_map)} classes, "
                f"the image has {self._classes}"
            )
        pixels = self._pixels
        probability_map = self._probability_map
        classes = self._classes
        for _ in range(iterations):
            draws = self._rng.random(len(self._sites)).tolist()
            for (index, neighbours), draw in zip(self._sites, draws):
                row = probability_map[pixels[index]]
                density = [0] * classes
                for neighbour in neighbours:
                    label = pixels[neighbour]
                    density[label] += row[label]
                cumulative = list(accumulate(density))
                total = cumulative[-1]
                if total <= 0:
                    raise ValueError("all neighbour weights are zero at a pixel")
                target = min(int(draw * total), total - 1)
                pixels[index] = bisect_right(cumulative, target)

    def generate_standard_main_image(
        self, start_frequency=None, probability_map=None, max_iter=1000
    ) -> np.ndarray:
        """Initialise, sample and return the label image.

        Missing arguments fall back to four equally likely, mutually
        attracting classes.
        """
        self.init_main_image(STANDARD_FREQUENCY if start_frequency is None else start_frequency)
        self.set_probability_map(
            STANDARD_PROBABILITY_MAP if probability_map is None else probability_map
        )
        self.generate_main_image(max_iter)
        return self.main_image

    @property
    def main_image(self) -> np.ndarray:
        """Copy of the current label image as a (height, width) byte array."""
        if self._pixels is None:
            raise RuntimeError("the image has not been initialised")
        return np.array(self._pixels, dtype=np.uint8).reshape(self._height, self._width)


class BlockGibbsModel:
    """Label image made of constant blocks whose labels form a Gibbs field."""

    def __init__(self, image_size, block_size, rng=None):
        rows, cols = block_map_shape(image_size, block_size)
        self._image_size = (int(image_size[0]), int(image_size[1]))
        self._block_size = (int(block_size[0]), int(block_size[1]))
        self._map_generator = GibbsModel((cols, rows), rng)

    def generate_standard_main_image(
        self, start_frequency=None, probability_map=None, max_iter=10
    ) -> np.ndarray:
        """Sample a block map and expand it to a (height, width) label image."""
        block_map = self._map_generator.generate_standard_main_image(
            start_frequency, probability_map, max_iter
        )
        return expand_blocks(block_map, self._image_size, self._block_size)