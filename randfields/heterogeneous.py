"""Heterogeneous twice-random images: a smooth background plus a field of areas."""

from __future__ import annotations

import numpy as np

from randfields.imaging import normalize_minmax
from randfields.twice_random import (
    HomogeneousAreasTwiceRandomModel,
    SimpleTwiceRandomModel,
)


class HeterogeneousTwiceRandomModel:
    """Sum of a twice-random background and the first coefficient field of an area model.

    Both models share the image size, the fixed correlation coefficients and
    the random generator. The sum is normalised onto [0, 1].
    """

    def __init__(self, image_size, correlation_coefficients, rng=None):
        rng = np.random.default_rng() if rng is None else rng
        coefficients = tuple(correlation_coefficients)
        self.background = SimpleTwiceRandomModel(image_size, coefficients, rng)
        self.areas = HomogeneousAreasTwiceRandomModel(image_size, coefficients, rng)

    def generate_standard_main_image(
        self,
        sigma_for_correlation=None,
        sigma_for_mean=None,
        sigma_for_std=None,
        mean_for_mean=None,
        mean_for_std=None,
        sigma_for_main_image=None,
        gamma_for_correlation=None,
        gamma_for_mean_and_std=None,
        gamma_for_main_image=None,
    ) -> np.ndarray:
        """Generate both models and return their normalised sum.

        A parameter left as ``None`` takes each model's own default.
        """
        shared = {
            "sigma_for_correlation": sigma_for_correlation,
            "sigma_for_mean": sigma_for_mean,
            "sigma_for_std": sigma_for_std,
            "mean_for_mean": mean_for_mean,
            "mean_for_std": mean_for_std,
            "sigma_for_main_image": sigma_for_main_image,
        }
        quantization = {
            "gamma_for_correlation": gamma_for_correlation,
            "gamma_for_mean_and_std": gamma_for_mean_and_std,
            "gamma_for_main_image": gamma_for_main_image,
        }
        background_args = {k: v for k, v in shared.items() if v is not None}
        area_args = {
            k: v for k, v in {**shared, **quantization}.items() if v is not None
        }

        background = self.background.generate_standard_main_image(**background_args)
        self.areas.generate_standard_main_image(**area_args)
        area_field = self.areas.random_correlation_coefficients[0]
        combined = background.astype(np.float64) + area_field.astype(np.float64)
        return normalize_minmax(combined)