"""Wave model: decaying brightness plus Gaussian bumps at random centres."""

from __future__ import annotations

import math

import numpy as np

DELTA_T = 1
"""Time step of one update."""

INITIAL_BRIGHTNESS = 100
"""Brightness of every pixel before the first update."""


class WaveModel:
    """Byte image that evolves by decay and by waves started at random pixels.

    Every update each pixel becomes a wave centre with the given probability,
    with a normal radius and brightness; centres are kept for all later
    updates. A pixel's new value is its old value times ``exp(-attenuation)``
    plus ``amplification`` times the sum over centres of
    ``brightness * exp(-2 * (distance / radius) ** 2)``, saturated to 0..255.
    """

    def __init__(self, image_size, poisson_density=10, rng=None):
        width, height = image_size
        if width < 1 or height < 1:
            raise ValueError(f"image size must be positive, got {image_size!r}")
        self._width = int(width)
        self._height = int(height)
        self.poisson_density = int(poisson_density)
        self._rng = np.random.default_rng() if rng is None else rng
        self._image = np.full((self._height, self._width), INITIAL_BRIGHTNESS, dtype=np.uint8)
        self._xs = np.empty(0, dtype=np.int64)
        self._ys = np.empty(0, dtype=np.int64)
        self._radii = np.empty(0, dtype=np.float64)
        self._brightness = np.empty(0, dtype=np.float64)

    @property
    def main_image(self) -> np.ndarray:
        """Copy of the current (height, width) byte image."""
        return self._image.copy()

    @property
    def wave_count(self) -> int:
        """Number of wave centres created so far."""
        return int(self._xs.size)

    def _add_waves(self, threshold, mean_radius, sigma_radius, mean_brightness, sigma_brightness):
        hits = np.flatnonzero(self._rng.random(self._height * self._width) < threshold)
        ys, xs = np.divmod(hits, self._width)
        self._ys = np.concatenate([self._ys, ys])
        self._xs = np.concatenate([self._xs, xs])
        self._radii = np.concatenate(
            [self._radii, self._rng.normal(mean_radius, sigma_radius, size=hits.size)]
        )
        self._brightness = np.concatenate(
            [self._brightness, self._rng.normal(mean_brightness, sigma_brightness, size=hits.size)]
        )

    def _wave_field(self) -> np.ndarray:
        rows = np.arange(self._height, dtype=np.float64)[:, None]
        cols = np.arange(self._width, dtype=np.float64)[None, :]
        total = np.zeros((self._height, self._width), dtype=np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            for x, y, radius, brightness in zip(self._xs, self._ys, self._radii, self._brightness):
                distance2 = (cols - x) ** 2 + (rows - y) ** 2
                total += np.exp(-2.0 * distance2 / (radius * radius)) * brightness
        return total

    def generate_standard_main_image(
        self,
        probability_threshold=0.0001,
        mean_radius=50.0,
        sigma_radius=15.0,
        mean_brightness=100.0,
        sigma_brightness=30.0,
        iterations=10,
        attenuation=0.1,
        amplification=1.0,
    ) -> np.ndarray:
        """Run the updates and return a copy of the resulting image."""
        if sigma_radius < 0 or sigma_brightness < 0:
            raise ValueError("standard deviations must be non-negative")
        steps = max(0, math.ceil(iterations / DELTA_T))
        decay = math.exp(-attenuation * DELTA_T)
        for _ in range(steps):
            self._add_waves(
                probability_threshold, mean_radius, sigma_radius, mean_brightness, sigma_brightness
            )
            updated = self._image.astype(np.float64) * decay + amplification * self._wave_field()
            updated = np.nan_to_num(updated, nan=0.0, posinf=255.0, neginf=0.0)
            self._image = np.clip(updated, 0.0, 255.0).astype(np.uint8)
        return self.main_image