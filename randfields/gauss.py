"""Independent Gaussian-noise images and the image-model interface they implement."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np


@dataclass
class ModelParameters:
    """Parameters common to every image model."""

    image_width: int = 0
    image_height: int = 0


@dataclass
class GaussParameters(ModelParameters):
    """Mean and standard deviation of the Gaussian brightness."""

    mean: float = 0.0
    sigma: float = 0.0


def gaussian_image(width, height, mean, sigma, rng=None) -> np.ndarray:
    """Return a (height, width) byte image of independent N(mean, sigma) pixels.

    Samples are saturated to 0..255 and truncated to integers.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    if sigma < 0:
        raise ValueError(f"sigma must be non-negative, got {sigma}")
    rng = np.random.default_rng() if rng is None else rng
    values = rng.normal(mean, sigma, size=(int(height), int(width)))
    return np.clip(values, 0.0, 255.0).astype(np.uint8)


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return magnitude if value >= 0 else -magnitude


class ImageModel(ABC):
    """A background model that can also derive parameters for an object."""

    @abstractmethod
    def generate_image(self) -> np.ndarray:
        """Generate an image from the current parameters."""

    @abstractmethod
    def set_parameters(self, parameters: ModelParameters) -> None:
        """Attach the parameters used by later calls."""

    @abstractmethod
    def compute_object_parameters(self, parameters: ModelParameters, contrast: float):
        """Fill ``parameters`` for an object of the given contrast."""

    @abstractmethod
    def main_object_color(self, contrast: float) -> int:
        """Brightness of an object of the given contrast."""


class GaussModel(ImageModel):
    """Image model producing independent Gaussian noise."""

    def __init__(self, rng=None):
        self._rng = np.random.default_rng() if rng is None else rng
        self._parameters: GaussParameters | None = None

    def _require(self) -> GaussParameters:
        if self._parameters is None:
            raise RuntimeError("parameters have not been set")
        return self._parameters

    def generate_image(self) -> np.ndarray:
        params = self._require()
        return gaussian_image(
            params.image_width, params.image_height, params.mean, params.sigma, self._rng
        )

    def set_parameters(self, parameters: ModelParameters) -> None:
        if not isinstance(parameters, GaussParameters):
            raise TypeError(f"expected GaussParameters, got {type(parameters).__name__}")
        self._parameters = parameters

    def compute_object_parameters(self, parameters: ModelParameters, contrast: float):
        if not isinstance(parameters, GaussParameters):
            raise TypeError(f"expected GaussParameters, got {type(parameters).__name__}")
        params = self._require()
        parameters.mean = params.mean * contrast
        parameters.sigma = params.sigma
        return parameters

    def main_object_color(self, contrast: float) -> int:
        return _round_half_away(self._require().mean * contrast)