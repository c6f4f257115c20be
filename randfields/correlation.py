"""Correlation statistics of grey-scale images."""

from __future__ import annotations

import math

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view


def _as_2d(image) -> np.ndarray:
    data = np.asarray(image)
    if data.ndim != 2:
        raise ValueError(f"expected a two-dimensional image, got {data.ndim} dimensions")
    if data.size == 0:
        raise ValueError("image is empty")
    return data


def mean(image) -> float:
    """Mean pixel value of an image."""
    return float(_as_2d(image).astype(np.float64).mean())


def mean_range(start, end) -> float:
    """Mean of the integers in ``range(start, end)``."""
    if end <= start:
        raise ValueError(f"empty range [{start}, {end})")
    return sum(range(start, end)) / (end - start)


def square_of_difference(image) -> float:
    """Sum of squared deviations of the pixels from their mean."""
    data = _as_2d(image).astype(np.float64)
    return float(((data - data.mean()) ** 2).sum())


def square_of_difference_range(start, end) -> float:
    """Sum of squared deviations of ``range(start, end)`` from its mean."""
    centre = mean_range(start, end)
    return sum((value - centre) ** 2 for value in range(start, end))


def correlation_by_coordinate(image) -> float:
    """Correlation between pixel value and position along a single row or column.

    Images that are neither one row nor one column high give 0.
    """
    data = _as_2d(image)
    height, width = data.shape
    if height == 1:
        values = data[0]
    elif width == 1:
        values = data[:, 0]
    else:
        return 0.0
    count = values.size
    coords = np.arange(count, dtype=np.float64) - mean_range(0, count)
    total = float((coords * (values.astype(np.float64) - mean(data))).sum())
    if total == 0:
        return 0.0
    return total / math.sqrt(square_of_difference(data) * square_of_difference_range(0, count))


def medium_neighbor(image, filter_size) -> np.ndarray:
    """Mean of each filter window with one cell left out, as float32.

    ``filter_size`` is (width, height). The cell left out sits one step below
    and to the right of the window centre.
    """
    data = _as_2d(image).astype(np.int64)
    filter_width, filter_height = filter_size
    row_offset = filter_height // 2 + 1
    col_offset = filter_width // 2 + 1
    if filter_width <= 0 or filter_height <= 0 or row_offset >= filter_height or col_offset >= filter_width:
        raise ValueError(f"filter size {filter_size!r} is too small")
    out_height = data.shape[0] - filter_height + 1
    out_width = data.shape[1] - filter_width + 1
    if out_height <= 0 or out_width <= 0:
        raise ValueError(f"image is smaller than the filter {filter_size!r}")
    sums = sliding_window_view(data, (filter_height, filter_width)).sum(axis=(2, 3))
    excluded = data[row_offset:row_offset + out_height, col_offset:col_offset + out_width]
    return ((sums - excluded) / (filter_width * filter_height - 1)).astype(np.float32)


def correlation_by_neighbor(image, group_size) -> float:
    """Correlation between each pixel and the mean of its neighbourhood.

    ``group_size`` is an odd (width, height) window.
    """
    data = _as_2d(image)
    group_width, group_height = group_size
    if group_width % 2 == 0 or group_height % 2 == 0:
        raise ValueError(f"group size must be odd, got {group_size!r}")
    neighbours = medium_neighbor(data, group_size)
    dx = (group_width - 1) // 2
    dy = (group_height - 1) // 2
    height, width = data.shape
    cut = data[dy:height - dy, dx:width - dx]

    cut_dev = cut.astype(np.float64) - mean(cut)
    neighbour_dev = neighbours.astype(np.float64) - mean(neighbours)
    total = float((cut_dev * neighbour_dev).sum())
    if total == 0:
        return 0.0
    return total / math.sqrt(square_of_difference(cut) * square_of_difference(neighbours))