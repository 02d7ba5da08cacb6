"""Smoothing and sharpening treatments."""

from __future__ import annotations

import cv2
import numpy as np

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments.base import Treatment


class GaussianBlurTreatment(Treatment):
    """Gaussian smoothing with a square, odd-sized kernel."""

    name = "Gaussian Blur"
    description = "Applies Gaussian blur to smooth images and reduce noise"
    parameters = (
        ParameterSpec(
            name="kernel_size", kind=ParameterKind.INT, default=5, minimum=1, odd=True,
            description="Size of the Gaussian kernel",
        ),
        ParameterSpec(
            name="sigma_x", kind=ParameterKind.DOUBLE, default=0.0,
            description="Standard deviation in X direction (0 = auto)",
        ),
        ParameterSpec(
            name="sigma_y", kind=ParameterKind.DOUBLE, default=0.0,
            description="Standard deviation in Y direction (0 = auto)",
        ),
    )

    def __init__(self, kernel_size: int = 5, sigma_x: float = 0.0, sigma_y: float = 0.0) -> None:
        super().__init__(kernel_size=kernel_size, sigma_x=sigma_x, sigma_y=sigma_y)

    def process(self, image: np.ndarray) -> np.ndarray:
        k = self._values["kernel_size"]
        return cv2.GaussianBlur(
            image, (k, k), sigmaX=self._values["sigma_x"], sigmaY=self._values["sigma_y"]
        )


class MedianBlurTreatment(Treatment):
    """Median filter, good against salt-and-pepper noise."""

    name = "Median Blur"
    description = "Applies median filter to reduce salt-and-pepper noise"
    parameters = (
        ParameterSpec(
            name="kernel_size", kind=ParameterKind.INT, default=5, minimum=1, odd=True,
            description="Size of the median filter kernel",
        ),
    )

    def __init__(self, kernel_size: int = 5) -> None:
        super().__init__(kernel_size=kernel_size)

    def process(self, image: np.ndarray) -> np.ndarray:
        return cv2.medianBlur(image, self._values["kernel_size"])


class SharpenTreatment(Treatment):
    """Laplacian-style sharpening; strength 0 leaves the image unchanged."""

    name = "Sharpen"
    description = "Enhances edges and fine details in the image"
    parameters = (
        ParameterSpec(
            name="strength", kind=ParameterKind.DOUBLE, default=1.0, minimum=0.0,
            description="Sharpening strength (typical 0.5-2.0)",
        ),
    )

    def __init__(self, strength: float = 1.0) -> None:
        super().__init__(strength=strength)

    def process(self, image: np.ndarray) -> np.ndarray:
        s = self._values["strength"]
        kernel = np.array(
            [
                [0.0, -s, 0.0],
                [-s, 1.0 + 4.0 * s, -s],
                [0.0, -s, 0.0],
            ],
            dtype=np.float32,
        )
        return cv2.filter2D(image, -1, kernel)
