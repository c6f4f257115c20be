"""Markov-chain label fields built from a table of conditional transitions."""

from __future__ import annotations

import numbers
import operator
from bisect import bisect_right

import numpy as np

from randfields.imaging import block_map_shape, expand_blocks

_MAX_CLASSES = 256
_STANDARD_LEVELS = 255
_STANDARD_PEAK = 255


class MarkovField:
    """Label image in which every pixel is drawn given an already drawn neighbour.

    The top-left pixel is uniform over the classes. The rest of the first row
    follows its left neighbour, the rest of the first column its upper
    neighbour, and every interior pixel its upper neighbour. Row ``k`` of the
    transition table holds the weights of the next label given label ``k``.
    """

    def __init__(self, image_size, rng=None):
        width, height = image_size
        if width < 1 or height < 1:
            raise ValueError(f"image size must be positive, got {image_size!r}")
        self._width = int(width)
        self._height = int(height)
        self._rng = np.random.default_rng() if rng is None else rng
        self._transitions: tuple[tuple[int, ...], ...] | None = None
        self._cumulative: np.ndarray | None = None
        self._totals: np.ndarray | None = None
        self._cumulative_rows: list[list[int]] = []

    @property
    def conditional_transitions(self) -> tuple[tuple[int, ...], ...]:
        """The transition table currently in use."""
        if self._transitions is None:
            raise RuntimeError("conditional transitions have not been set")
        return self._transitions

    def init_conditional_transitions(self, transitions_step) -> None:
        """Build the standard 255-level table.

        Each row peaks at 255 on its own level and falls by ``transitions_step``
        per level of distance until it reaches zero.
        """
        step = operator.index(transitions_step)
        levels = np.arange(_STANDARD_LEVELS)
        distance = np.abs(np.subtract.outer(levels, levels))
        table = _STANDARD_PEAK - step * distance
        table = np.where(table > 0, table, 0)
        self._install(tuple(tuple(int(v) for v in row) for row in table))

    def set_conditional_transitions(self, conditional_transitions) -> None:
        """Use a table of non-negative integer weights, one row per class."""
        rows = tuple(
            tuple(operator.index(value) for value in row) for row in conditional_transitions
        )
        self._install(rows)

    def _install(self, rows: tuple[tuple[int, ...], ...]) -> None:
        if not rows:
            raise ValueError("transition table must not be empty")
        if len(rows) > _MAX_CLASSES:
            raise ValueError(f"at most {_MAX_CLASSES} classes are supported")
        for index, row in enumerate(rows):
            if not row:
                raise ValueError(f"transition row {index} is empty")
            if len(row) > len(rows):
                raise ValueError(
                    f"transition row {index} has {len(row)} entries for {len(rows)} classes"
                )
            if any(value < 0 for value in row):
                raise ValueError(f"transition row {index} has a negative weight")
            if sum(row) == 0:
                raise ValueError(f"transition row {index} has only zero weights")
        width = max(len(row) for row in rows)
        padded = np.zeros((len(rows), width), dtype=np.int64)
        for index, row in enumerate(rows):
            padded[index, : len(row)] = row
        self._transitions = rows
        self._cumulative = np.cumsum(padded, axis=1)
        self._totals = self._cumulative[:, -1].copy()
        self._cumulative_rows = self._cumulative.tolist()

    def _next_label(self, previous: int, draw: float) -> int:
        cumulative = self._cumulative_rows[previous]
        total = cumulative[-1]
        target = min(int(draw * total), total - 1)
        return bisect_right(cumulative, target)

    def generate_standard_main_image(self) -> np.ndarray:
        """Draw a new (height, width) label image."""
        if self._transitions is None:
            raise RuntimeError("conditional transitions have not been set")
        width, height = self._width, self._height
        image = np.empty((height, width), dtype=np.int64)
        image[0, 0] = int(self._rng.integers(len(self._transitions)))

        previous = int(image[0, 0])
        for col, draw in enumerate(self._rng.random(width - 1).tolist(), start=1):
            previous = self._next_label(previous, draw)
            image[0, col] = previous

        previous = int(image[0, 0])
        for row, draw in enumerate(self._rng.random(height - 1).tolist(), start=1):
            previous = self._next_label(previous, draw)
            image[row, 0] = previous

        if width > 1:
            for row in range(1, height):
                above = image[row - 1, 1:]
                totals = self._totals[above]
                targets = np.minimum(
                    (self._rng.random(width - 1) * totals).astype(np.int64), totals - 1
                )
                image[row, 1:] = (self._cumulative[above] <= targets[:, None]).sum(axis=1)

        return image.astype(np.uint8)


class BlockMarkovModel:
    """Label image made of constant blocks whose labels form a Markov field."""

    def __init__(self, image_size, block_size, rng=None):
        rows, cols = block_map_shape(image_size, block_size)
        self._image_size = (int(image_size[0]), int(image_size[1]))
        self._block_size = (int(block_size[0]), int(block_size[1]))
        self._map_generator = MarkovField((cols, rows), rng)

    def generate_standard_main_image(self, transitions=10) -> np.ndarray:
        """Sample a block map and expand it to a (height, width) label image.

        An integer builds the standard table with that step; anything else is
        taken as the transition table itself.
        """
        if isinstance(transitions, numbers.Integral):
            self._map_generator.init_conditional_transitions(transitions)
        else:
            self._map_generator.set_conditional_transitions(transitions)
        block_map = self._map_generator.generate_standard_main_image()
        return expand_blocks(block_map, self._image_size, self._block_size)