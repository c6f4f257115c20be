"""Metropolis exchange model of a smooth random field."""

from __future__ import annotations

import math

import numpy as np

from randfields.imaging import normalize_minmax

_SQRT_TWO_PI = math.sqrt(2 * math.pi)


def compute_probability(x, mean, sigma) -> float:
    """Normal probability density at ``x``."""
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma}")
    z = (x - mean) / sigma
    return math.exp(-0.5 * z * z) / (_SQRT_TWO_PI * sigma)


def _accept(p_new: float, p_old: float, draw: float) -> bool:
    if p_old == 0:
        return p_new > 0
    ratio = p_new / p_old
    return ratio > 1.0 or draw < ratio


def metropolis_exchange(
    image_size=(600, 400),
    iterations=1000,
    start_mean=0.5,
    start_sigma=0.01,
    rng=None,
) -> np.ndarray:
    """Run the exchange model and return the field normalised to [0, 1].

    Each sweep proposes, for every pixel but the last row and column, a value
    drawn around the mean of the pixel and its lower and right neighbours, and
    accepts it by the Metropolis rule; values are kept within [-1, 1].
    """
    width, height = image_size
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {image_size!r}")
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got {iterations}")
    if start_sigma <= 0:
        raise ValueError(f"sigma must be positive, got {start_sigma}")
    rng = np.random.default_rng() if rng is None else rng

    image = rng.normal(start_mean, start_sigma, size=(height, width)).astype(np.float32).tolist()
    previous = [[float(start_mean)] * width for _ in range(height)]

    for _ in range(iterations):
        steps = rng.standard_normal((height - 1, width - 1)).tolist()
        draws = rng.random((height - 1, width - 1)).tolist()
        for i, (step_row, draw_row) in enumerate(zip(steps, draws)):
            row, below, previous_row = image[i], image[i + 1], previous[i]
            for j, (step, draw) in enumerate(zip(step_row, draw_row)):
                current = row[j]
                proposal = (current + below[j] + row[j + 1]) / 3 + start_sigma * step
                p_new = compute_probability(proposal, current, start_sigma)
                p_old = compute_probability(current, previous_row[j], start_sigma)
                previous_row[j] = current
                if _accept(p_new, p_old, draw):
                    current = proposal
                row[j] = min(1.0, max(-1.0, current))

    return normalize_minmax(np.array(image, dtype=np.float32))