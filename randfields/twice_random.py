"""Twice-random fields: autoregressive images whose coefficients are random fields too."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

import numpy as np

from randfields.imaging import normalize_minmax

Quantizer = Callable[[float], float]


def _quantizer(gamma) -> Quantizer | None:
    """Return a function rounding to the nearest multiple of ``1 / gamma``.

    Halves are rounded away from zero. ``None`` means no quantisation.
    """
    if gamma is None:
        return None
    gamma = float(gamma)
    if gamma == 0 or not math.isfinite(gamma):
        raise ValueError(f"quantisation gamma must be finite and non-zero, got {gamma}")

    def quantize(value: float) -> float:
        scaled = value * gamma
        return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / gamma

    return quantize


def _recursive_field(a, b, drive, row_coef, col_coef, quantize: Quantizer | None = None) -> np.ndarray:
    """Run the two-dimensional first-order recursion over ``drive``.

    Interior pixels take ``a*left + b*up - a*b*up_left + drive``; the first
    row takes ``row_coef*left + drive``, the first column
    ``col_coef*up + drive`` and the corner ``drive`` alone. Every new value is
    quantised before it feeds the next one.
    """
    step = quantize if quantize is not None else (lambda value: value)
    height, width = drive.shape
    out = np.empty((height, width), dtype=np.float64)

    first_row_drive = drive[0].tolist()
    value = step(first_row_drive[0])
    row = [value]
    for coef, term in zip(row_coef[1:].tolist(), first_row_drive[1:]):
        value = step(coef * value + term)
        row.append(value)
    out[0] = row

    col_coefs = col_coef.tolist()
    for i in range(1, height):
        previous = out[i - 1]
        a_row = a[i, 1:]
        b_row = b[i, 1:]
        base = (b_row * previous[1:] - a_row * b_row * previous[:-1] + drive[i, 1:]).tolist()
        value = step(col_coefs[i] * previous[0] + drive[i, 0])
        row = [value]
        for coef, term in zip(a_row.tolist(), base):
            value = step(coef * value + term)
            row.append(value)
        out[i] = row
    return out


class SimpleTwiceRandomModel:
    """Image whose mean, deviation and correlation coefficients are random fields.

    Each auxiliary field is a first-order autoregressive field driven by
    Gaussian noise, with the fixed ``correlation_coefficients`` (along rows,
    along columns). The main image is then an autoregressive field whose
    coefficients, mean and deviation vary from pixel to pixel.
    """

    def __init__(self, image_size, correlation_coefficients, rng=None):
        width, height = image_size
        if width < 1 or height < 1:
            raise ValueError(f"image size must be positive, got {image_size!r}")
        coefficients = tuple(float(c) for c in correlation_coefficients)
        if len(coefficients) != 2:
            raise ValueError(
                f"expected two correlation coefficients, got {len(coefficients)}"
            )
        self._width = int(width)
        self._height = int(height)
        self._coefficients = coefficients
        self._rng = np.random.default_rng() if rng is None else rng
        self._gauss_fields: list[np.ndarray] = []
        self._coefficient_fields: list[np.ndarray] = []
        self._random_mean: np.ndarray | None = None
        self._random_std: np.ndarray | None = None

    @property
    def image_size(self) -> tuple[int, int]:
        """Image size as (width, height)."""
        return self._width, self._height

    @property
    def correlation_coefficients(self) -> tuple[float, float]:
        """Fixed correlation coefficients along rows and along columns."""
        return self._coefficients

    @property
    def gauss_random_fields(self) -> list[np.ndarray]:
        """Copies of the current Gaussian noise fields."""
        return [field.copy() for field in self._gauss_fields]

    @property
    def random_correlation_coefficients(self) -> list[np.ndarray]:
        """Copies of the random correlation-coefficient fields."""
        return [field.astype(np.float32) for field in self._coefficient_fields]

    @property
    def random_mean(self) -> np.ndarray:
        """Copy of the random mean field."""
        if self._random_mean is None:
            raise RuntimeError("the random mean has not been generated")
        return self._random_mean.astype(np.float32)

    @property
    def random_std_deviation(self) -> np.ndarray:
        """Copy of the random standard-deviation field."""
        if self._random_std is None:
            raise RuntimeError("the random standard deviation has not been generated")
        return self._random_std.astype(np.float32)

    def sigma_for_gauss(self, sigma) -> float:
        """Noise deviation that gives an autoregressive field deviation ``sigma``."""
        r0, r1 = self._coefficients
        variance = (1 - r0 * r0) * (1 - r1 * r1) * sigma * sigma
        if variance < 0:
            raise ValueError(
                f"correlation coefficients {self._coefficients!r} give a negative variance"
            )
        return math.sqrt(variance)

    def generate_gauss_random_fields(self, sigmas) -> None:
        """Replace the noise fields with one zero-mean field per deviation."""
        fields = []
        for sigma in sigmas:
            if sigma < 0:
                raise ValueError(f"sigma must be non-negative, got {sigma}")
            fields.append(
                self._rng.normal(0.0, float(sigma), size=(self._height, self._width)).astype(
                    np.float32
                )
            )
        self._gauss_fields = fields

    def _first_gauss_field(self) -> np.ndarray:
        if not self._gauss_fields:
            raise RuntimeError("Gaussian random fields have not been generated")
        return self._gauss_fields[0]

    def _simple_field(self, noise: np.ndarray, gamma=None) -> np.ndarray:
        r0, r1 = self._coefficients
        shape = noise.shape
        return _recursive_field(
            np.full(shape, r0),
            np.full(shape, r1),
            noise.astype(np.float64),
            np.full(shape[1], r0),
            np.full(shape[0], r1),
            _quantizer(gamma),
        )

    def _make_coefficient_fields(self, gamma=None) -> None:
        if not self._gauss_fields:
            raise RuntimeError("Gaussian random fields have not been generated")
        self._coefficient_fields = [self._simple_field(f, gamma) for f in self._gauss_fields]

    def _make_mean(self, gamma=None) -> None:
        self._random_mean = self._simple_field(self._first_gauss_field(), gamma)

    def _make_std(self, gamma=None) -> None:
        self._random_std = self._simple_field(self._first_gauss_field(), gamma)

    def generate_random_correlation_coefficients(self) -> None:
        """Build one coefficient field from each noise field."""
        self._make_coefficient_fields()

    def generate_random_mean(self) -> None:
        """Build the random mean field from the first noise field."""
        self._make_mean()

    def generate_random_std_deviation(self) -> None:
        """Build the random deviation field from the first noise field."""
        self._make_std()

    def change_mean_in_random_mean(self, new_mean) -> None:
        """Add ``new_mean`` to every value of the random mean field."""
        if self._random_mean is None:
            raise RuntimeError("the random mean has not been generated")
        self._random_mean = self._random_mean + float(new_mean)

    def change_mean_in_std_deviation(self, new_mean) -> None:
        """Add ``new_mean`` to every value of the random deviation field."""
        if self._random_std is None:
            raise RuntimeError("the random standard deviation has not been generated")
        self._random_std = self._random_std + float(new_mean)

    def _main_image(self, gamma=None) -> np.ndarray:
        if len(self._coefficient_fields) < 2:
            raise RuntimeError("two random correlation-coefficient fields are required")
        if self._random_mean is None:
            raise RuntimeError("the random mean has not been generated")
        if self._random_std is None:
            raise RuntimeError("the random standard deviation has not been generated")
        noise = self._first_gauss_field().astype(np.float64)
        a, b = self._coefficient_fields[0], self._coefficient_fields[1]
        ab = a * b
        drive = self._random_mean + self._random_std * noise
        image = _recursive_field(a, b, drive, (a - ab)[0], (b - ab)[:, 0], _quantizer(gamma))
        return image.astype(np.float32)

    def generate_main_image(self) -> np.ndarray:
        """Build the main image from the current auxiliary fields."""
        return self._main_image()

    def _standard_run(
        self,
        sigma_for_correlation,
        sigma_for_mean,
        sigma_for_std,
        mean_for_mean,
        mean_for_std,
        sigma_for_main_image,
        gamma_for_correlation,
        gamma_for_mean_and_std,
        gamma_for_main_image,
        normalize,
    ) -> np.ndarray:
        sigmas: Sequence[float] = list(sigma_for_correlation)
        if len(sigmas) < 2:
            raise ValueError("at least two deviations for the correlation fields are required")
        self.generate_gauss_random_fields([self.sigma_for_gauss(s) for s in sigmas])
        self._make_coefficient_fields(gamma_for_correlation)

        self.generate_gauss_random_fields([self.sigma_for_gauss(sigma_for_mean)])
        self._make_mean(gamma_for_mean_and_std)

        self.generate_gauss_random_fields([self.sigma_for_gauss(sigma_for_std)])
        self._make_std(gamma_for_mean_and_std)

        self.change_mean_in_random_mean(mean_for_mean)
        self.change_mean_in_std_deviation(mean_for_std)

        self.generate_gauss_random_fields([self.sigma_for_gauss(sigma_for_main_image)])
        image = self._main_image(gamma_for_main_image)
        return self.normalize_image(image) if normalize else image

    def generate_standard_main_image(
        self,
        sigma_for_correlation=(0.2, 0.2),
        sigma_for_mean=0.2,
        sigma_for_std=0.2,
        mean_for_mean=0.8,
        mean_for_std=0.8,
        sigma_for_main_image=0.2,
        normalize=True,
    ) -> np.ndarray:
        """Generate every auxiliary field and the main image from scratch."""
        return self._standard_run(
            sigma_for_correlation,
            sigma_for_mean,
            sigma_for_std,
            mean_for_mean,
            mean_for_std,
            sigma_for_main_image,
            None,
            None,
            None,
            normalize,
        )

    def normalize_image(self, image) -> np.ndarray:
        """Map an image linearly onto [0, 1]."""
        return normalize_minmax(image)


class HomogeneousAreasTwiceRandomModel(SimpleTwiceRandomModel):
    """Twice-random model whose fields are quantised into homogeneous areas.

    Every value is rounded to a multiple of ``1 / gamma`` as it is produced,
    so neighbouring pixels often share exactly the same value.
    """

    def generate_random_correlation_coefficients(self, gamma=None) -> None:
        """Build quantised coefficient fields, one per noise field."""
        self._make_coefficient_fields(gamma)

    def generate_random_mean(self, gamma=None) -> None:
        """Build the quantised random mean field."""
        self._make_mean(gamma)

    def generate_random_std_deviation(self, gamma=None) -> None:
        """Build the quantised random deviation field."""
        self._make_std(gamma)

    def generate_main_image(self, gamma=None) -> np.ndarray:
        """Build the quantised main image from the current auxiliary fields."""
        return self._main_image(gamma)

    def generate_standard_main_image(
        self,
        sigma_for_correlation=(0.2, 0.2),
        sigma_for_mean=1.0,
        sigma_for_std=1.0,
        mean_for_mean=0.9,
        mean_for_std=0.9,
        sigma_for_main_image=1.0,
        gamma_for_correlation=3.3,
        gamma_for_mean_and_std=30.0,
        gamma_for_main_image=0.5,
        normalize=True,
    ) -> np.ndarray:
        """Generate every quantised auxiliary field and the main image."""
        return self._standard_run(
            sigma_for_correlation,
            sigma_for_mean,
            sigma_for_std,
            mean_for_mean,
            mean_for_std,
            sigma_for_main_image,
            gamma_for_correlation,
            gamma_for_mean_and_std,
            gamma_for_main_image,
            normalize,
        )